# config/logging_config.py
"""
JSON log formatting for log shippers.
RequestIDFilter copies request_id, path, method and user_id from the request
being served (see apps.core.middleware.RequestLogMiddleware).
"""

import json
import logging
from datetime import datetime, timezone

from apps.core.middleware import get_current_request

EXTRA_FIELDS = ("request_id", "user_id", "path", "method", "status_code")


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for name in EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        return json.dumps(log_data, ensure_ascii=False, default=str)


class RequestIDFilter(logging.Filter):
    def filter(self, record):
        request = get_current_request()
        if request is None:
            return True

        if getattr(record, "request_id", None) is None:
            record.request_id = getattr(request, "id", None)
        record.path = getattr(request, "path", None)
        record.method = getattr(request, "method", None)

        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            record.user_id = user.pk
        return True
