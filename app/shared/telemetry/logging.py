"""Logging configuration for the application."""

import logging
import sys

from app.core.request_context import get_request_id, get_tenant_id

LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[tenant=%(tenant_id)s request=%(request_id)s] %(message)s"
)


class RequestContextFilter(logging.Filter):
    """Attach the current request's tenant ID and request ID to every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.tenant_id = get_tenant_id() or "-"
        record.request_id = get_request_id() or "-"
        return True


def setup_logging(debug: bool = False) -> None:
    """Configure application-wide logging.

    Level is DEBUG when debug is True, otherwise INFO.
    Output goes to stdout.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestContextFilter())
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[handler],
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
