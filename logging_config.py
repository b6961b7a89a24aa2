"""Logging configuration for the Cardoo back office."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from flask import has_request_context, request, session


HANDLER_NAME = "cardoo-console"
STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO", format_type: str = "standard") -> None:
    """Attach the stdout handler to the root logger.

    ``format_type`` is "standard" (human readable) or "json" (see
    :class:`JsonFormatter`). Calling it again, once per ``create_app``, swaps
    the handler instead of stacking a second one; handlers installed by
    others are left alone.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)

    if format_type == "json":
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=STANDARD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in [h for h in root_logger.handlers if h.get_name() == HANDLER_NAME]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(HANDLER_NAME)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Werkzeug request lines are noise outside of DEBUG
    logging.getLogger("werkzeug").setLevel(max(log_level, logging.WARNING))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """One JSON object per line; inside a request it also carries the method, path and account."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Flask-Login stores the account id in the session
        if has_request_context():
            log_data["method"] = request.method
            log_data["path"] = request.path
            account_id = session.get("_user_id")
            if account_id is not None:
                log_data["account_id"] = account_id

        return json.dumps(log_data, default=str)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (usually ``__name__``)."""
    return logging.getLogger(name)
