"""
Logging configuration.

WHY: One dictConfig for the application and uvicorn loggers, so every line
has the same format and carries the current request id.
"""

import logging
import logging.config

from ticketdesk.middleware.request_context import get_request_context


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"


class RequestIdFilter(logging.Filter):
    """
    Attach the current request id to every log record.

    Records emitted outside a request get "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = get_request_context()
        record.request_id = ctx.request_id if ctx else "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Install the logging configuration.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ERROR)
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "request_id": {"()": RequestIdFilter},
            },
            "formatters": {
                "plain": {"format": LOG_FORMAT},
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                    "filters": ["request_id"],
                },
            },
            "loggers": {
                "": {"handlers": ["default"], "level": level.upper()},
                "uvicorn": {"handlers": ["default"], "level": level.upper(), "propagate": False},
                "uvicorn.error": {"handlers": ["default"], "level": level.upper(), "propagate": False},
                "uvicorn.access": {"handlers": ["default"], "level": level.upper(), "propagate": False},
            },
        }
    )
