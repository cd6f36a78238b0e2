import logging
import logging.config
import os
from datetime import datetime

from flask import g, has_request_context, request
from pythonjsonlogger import jsonlogger


JSON_FORMAT = (
    "%(asctime)s "
    "%(levelname)s "
    "%(name)s "
    "%(message)s "
    "%(module)s "
    "%(funcName)s "
    "%(lineno)d"
)


class RequestIdFilter(logging.Filter):
    """
    Inject request_id into every log record if present.
    """

    def filter(self, record):
        record.request_id = getattr(g, "request_id", None) if has_request_context() else None
        return True


def setup_logging(app):
    """Configure logging for the application"""
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    app_log_level = app.config.get("LOG_LEVEL", log_level).upper()

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "request_id": {
                "()": RequestIdFilter,
            },
        },
        "formatters": {
            "json": {
                "()": jsonlogger.JsonFormatter,
                "fmt": JSON_FORMAT + " %(request_id)s",
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "filters": ["request_id"],
            },
        },
        "root": {
            "level": app_log_level,
            "handlers": ["default"],
        },
    }

    logging.config.dictConfig(logging_config)

    @app.before_request
    def log_request():
        g.request_id = request.headers.get("X-Request-ID")
        if app.config.get("DEBUG", False) or app.config.get("LOG_REQUESTS", False):
            g.start_time = datetime.now()
            app.logger.info(
                f"Request: {request.method} {request.path}",
                extra={"ip": request.remote_addr},
            )

    @app.after_request
    def log_response(response):
        if (app.config.get("DEBUG", False) or app.config.get("LOG_REQUESTS", False)) and hasattr(g, "start_time"):
            duration = (datetime.now() - g.start_time).total_seconds() * 1000
            app.logger.info(
                f"Response: {request.method} {request.path} - {response.status_code}",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": round(duration, 2),
                },
            )
        return response

    return app


def configure_logging_for_worker(log_level=None):
    """Configure logging for Celery workers and other non-request processes"""
    log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": jsonlogger.JsonFormatter,
                "fmt": JSON_FORMAT,
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {
            "level": log_level,
            "handlers": ["default"],
        },
    }

    logging.config.dictConfig(logging_config)
