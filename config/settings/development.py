#config/settings/development.py
from .base import *  # noqa

DEBUG = True

REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"] = [
    "rest_framework.renderers.JSONRenderer",
    "rest_framework.renderers.BrowsableAPIRenderer",
]
LOGGING["loggers"]["apps"]["level"] = "DEBUG"
