"""Request-scoped logging.

Every record carries a ``request_id`` taken from a ContextVar, so a single
request can be traced across routes, services and the tool dispatcher.
"""

import logging
from contextvars import ContextVar

from booking_backend.core.config import Settings

_request_id: ContextVar[str] = ContextVar("request_id", default="-")

_DEV_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"
_JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"request_id": "%(request_id)s", "logger": "%(name)s", "message": "%(message)s"}'
)


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def get_request_id() -> str:
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def configure_logging(settings: Settings) -> None:
    if settings.is_production:
        logging.basicConfig(level=settings.log_level.upper(), format=_JSON_FORMAT)
    else:
        logging.basicConfig(level=logging.DEBUG, format=_DEV_FORMAT)
    # Filters on handlers, not loggers, so records from every module get the field
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())
