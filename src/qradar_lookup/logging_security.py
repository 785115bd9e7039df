"""Logging filter that keeps QRadar credentials out of log output.

Call install_filter() once at startup and register_secret() for every
password or token in use. Registered values are replaced with [REDACTED] in
log messages, their arguments and formatted tracebacks. Secrets registered
before installation are queued and applied when the filter is installed.
"""

import logging
import threading
from types import TracebackType
from typing import Final

REDACTED: Final[str] = "[REDACTED]"

_original_get_message = logging.LogRecord.getMessage
_original_format_exception = logging.Formatter.formatException


class SecretFilter(logging.Filter):
    """Replace registered secrets in log records with [REDACTED]."""

    def __init__(self) -> None:
        """Initialize the filter with no secrets."""
        super().__init__()
        self._secrets: set[str] = set()
        self._lock = threading.Lock()

    def register_secret(self, secret: str) -> None:
        """Add a value to redact. Empty strings are ignored."""
        if secret:
            with self._lock:
                self._secrets.add(secret)

    def filter(self, record: logging.LogRecord) -> bool:
        """Redact the record in place. Always lets the record through."""
        if record.msg:
            record.msg = self.redact(str(record.msg))

        if isinstance(record.args, dict):
            record.args = {
                key: self.redact(value) if isinstance(value, str) else value
                for key, value in record.args.items()
            }
        elif isinstance(record.args, tuple):
            record.args = tuple(
                self.redact(arg) if isinstance(arg, str) else arg for arg in record.args
            )

        if record.exc_text:
            record.exc_text = self.redact(record.exc_text)

        return True

    def redact(self, text: str) -> str:
        """Return ``text`` with every registered secret replaced."""
        with self._lock:
            secrets = sorted(self._secrets, key=len, reverse=True)

        for secret in secrets:
            text = text.replace(secret, REDACTED)
        return text


_filter: SecretFilter | None = None
_pending_secrets: set[str] = set()


def _redacting_get_message(self: logging.LogRecord) -> str:
    msg = _original_get_message(self)
    if _filter is not None:
        msg = _filter.redact(msg)
    return msg


def _redacting_format_exception(
    self: logging.Formatter,
    ei: tuple[type[BaseException], BaseException, TracebackType | None] | tuple[None, None, None],
) -> str:
    result = _original_format_exception(self, ei)
    if _filter is not None:
        result = _filter.redact(result)
    return result


def install_filter() -> SecretFilter:
    """Install the secret filter on the root logger, once.

    Also patches LogRecord.getMessage and Formatter.formatException so that
    values interpolated at format time and traceback text are redacted too.

    Returns:
        The installed SecretFilter instance.
    """
    global _filter
    if _filter is None:
        _filter = SecretFilter()
        logging.getLogger().addFilter(_filter)
        logging.LogRecord.getMessage = _redacting_get_message  # type: ignore[method-assign]
        logging.Formatter.formatException = _redacting_format_exception  # type: ignore[method-assign]

        for secret in _pending_secrets:
            _filter.register_secret(secret)
        _pending_secrets.clear()

    return _filter


def register_secret(secret: str) -> None:
    """Register a value to redact from all logs, before or after install_filter()."""
    if _filter is not None:
        _filter.register_secret(secret)
    elif secret:
        _pending_secrets.add(secret)
