"""
RajaOngkir Client Logging
-------------------------
Every API call runs in a request scope. Records logged inside it carry the
scope's request_id, so the DEBUG request line, the response line and any
failure for one call can be matched up in the JSON log.

Library code only calls get_logger(). Applications (and the CLI) call
configure_logging() to attach handlers:
- console: rich.logging.RichHandler on stderr
- file: JSON lines, rotated by size (rajaongkir.log, .log.1, .log.2, ...)

Usage:
    from rajaongkir.infra.logging import get_logger, request_scope

    logger = get_logger("api.client")

    with request_scope() as request_id:
        logger.debug("GET province")
"""

from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Optional, Union
import json
import logging
import uuid

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "rajaongkir"
LOG_FILE_NAME = "rajaongkir.log"

DEFAULT_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_BACKUP_COUNT = 3

# Fields the clients pass through `extra=` that belong in the JSON log
CALL_FIELDS = ("method", "path", "params", "status_code", "elapsed_ms")

_request_id: ContextVar[Optional[str]] = ContextVar("rajaongkir_request_id", default=None)


def generate_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


def get_request_id() -> Optional[str]:
    """ID of the API call in progress, or None outside one."""
    return _request_id.get()


@contextmanager
def request_scope(request_id: Optional[str] = None) -> Iterator[str]:
    """Run one API call under a request_id; nested scopes restore the outer id."""
    token = _request_id.set(request_id or generate_request_id())
    try:
        yield _request_id.get()
    finally:
        _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    """Stamp record.request_id ('-' outside a request scope)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id() or "-"
        return True


class CallRecordFormatter(logging.Formatter):
    """One JSON object per line: the message plus whatever call fields the record has."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "message": record.getMessage(),
        }
        entry.update(
            (name, getattr(record, name)) for name in CALL_FIELDS if hasattr(record, name)
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _console_handler(level: int) -> RichHandler:
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(request_id)s] %(message)s"))
    return handler


def _file_handler(path: Path, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(logging.DEBUG)  # File gets every call
    handler.setFormatter(CallRecordFormatter())
    return handler


def configure_logging(
    level: int = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
    console: bool = True,
    file: bool = False,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    force: bool = False,
) -> Optional[Path]:
    """
    Attach handlers to the rajaongkir logger tree.

    Args:
        level: Console level (the file always records DEBUG)
        log_dir: Directory for rajaongkir.log (default: ./logs)
        console: Log to stderr through rich
        file: Log JSON lines to log_dir/rajaongkir.log
        max_bytes: Rotate the log file once it would grow past this size
        backup_count: Rotated files to keep
        force: Replace handlers installed by an earlier call

    Returns:
        Path of the JSON log file, or None when file logging is off.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if root_logger.handlers and not force:
        return None

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    handlers = []
    log_file = None
    if console:
        handlers.append(_console_handler(level))
    if file:
        log_file = Path(log_dir or "logs") / LOG_FILE_NAME
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(_file_handler(log_file, max_bytes, backup_count))

    request_filter = RequestIdFilter()
    for handler in handlers:
        handler.addFilter(request_filter)
        root_logger.addHandler(handler)

    root_logger.setLevel(min([level] + [h.level for h in handlers]))
    return log_file


def get_logger(name: str) -> logging.Logger:
    """Logger under 'rajaongkir.' whose records carry request_id."""
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
