"""Shared logging utilities.

Every entrypoint calls `configure_logging` once so that all services emit the
same format and every record carries the id of the request that produced it.

- plain text or JSON lines on stdout
- `request_id` injected from a context variable set by the HTTP middleware
  (records logged outside a request get `-`)
"""

from contextvars import ContextVar
from datetime import datetime, timezone
import json
import logging
import sys

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"

# LogRecord attributes that are not user-supplied `extra=` fields.
_RESERVED_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
    "module", "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "exc_info", "exc_text",
    "stack_info", "taskName", "message", "asctime", "request_id",
}


class RequestIdFilter(logging.Filter):
    """Attach the current request id to every record passing the handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class JSONFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def __init__(self, service_name: str = "gateway"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "request_id": getattr(record, "request_id", request_id_var.get()),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                entry[key] = value

        return json.dumps(entry, default=str)


def configure_logging(level: str = "INFO", json_format: bool = False, service: str = "gateway") -> logging.Handler:
    """Install a single stdout handler on the root logger.

    Calling this again replaces the handler installed by the previous call, so
    entrypoints and tests can reconfigure without stacking duplicate output.

    Args:
        level: Root log level name (e.g. "INFO", "debug").
        json_format: Emit JSON lines instead of the plain text format.
        service: Service name stamped on JSON records.

    Returns:
        logging.Handler: The handler that was installed.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    if json_format:
        handler.setFormatter(JSONFormatter(service))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    handler._common_logging = True

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_common_logging", False):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())
    return handler
