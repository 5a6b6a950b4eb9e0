import json
import logging
import os
from typing import Any

from flask import has_request_context, request

from .context import get_version_context


class JSONFormatter(logging.Formatter):
    """JSON log formatter that stamps the request's API version on each record."""

    def format(self, record: logging.LogRecord) -> str:
        log_record: dict[str, Any] = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        if has_request_context():
            log_record["path"] = request.path
            context = get_version_context()
            if context is not None:
                log_record["api_version"] = context.resolved_version
                log_record["raw_api_version"] = context.raw_token

        if record.exc_info:
            log_record["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log_record, default=str)


def setup_logging(level: int = logging.INFO, stream=None, use_json: bool = True) -> None:
    """Configure root logging for an application serving versioned routes."""
    level_name = os.environ.get("API_LOG_LEVEL")
    if level_name:
        level = getattr(logging, level_name.upper(), level)

    root_logger = logging.getLogger()
    for existing_handler in root_logger.handlers[:]:
        root_logger.removeHandler(existing_handler)

    handler = logging.StreamHandler(stream)
    if use_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s'))

    root_logger.addHandler(handler)
    root_logger.setLevel(level)
