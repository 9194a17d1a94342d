# config/spectacular.py
"""drf-spectacular hooks."""


def custom_preprocessing_hook(endpoints):
    """Keep only the versioned API in the schema."""
    return [
        (path, path_regex, method, callback)
        for path, path_regex, method, callback in endpoints
        if path.startswith("/api/")
    ]
