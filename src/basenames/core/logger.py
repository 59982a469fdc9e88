"""
Structured logging with key=value and JSON output support.

Wraps the standard library ``logging`` module so every component of the
resolver can emit events as ``message key=value ...`` lines (default) or as
JSON objects. Nothing is printed unless the host application configures a
handler, which keeps the library silent by default.

Raw ``bytes`` values (call data, revert payloads, signatures) are rendered
as ``0x``-prefixed hex, and long values are truncated to a configurable
maximum length so a multi-kilobyte revert never floods the log.

Examples:
    ```python
    from basenames.core.logger import Logger

    logger = Logger("gateway")
    logger.debug("gateway_query_started", url="https://example.com", method="GET")
    # Output: gateway_query_started url=https://example.com method=GET

    scoped = logger.bind(name="jesse.base.eth")
    scoped.info("resolution_succeeded", address="0x8491...")
    # Output: resolution_succeeded name=jesse.base.eth address=0x8491...
    ```
"""

from __future__ import annotations

import datetime
import json
import logging
from typing import Any, ClassVar


LOGGER_NAMESPACE = "basenames"


def render_value(value: Any) -> Any:
    """Convert values that print badly into log-friendly equivalents.

    ``bytes`` and ``bytearray`` become ``0x``-prefixed lowercase hex; all
    other values are returned unchanged.
    """
    if isinstance(value, bytes | bytearray):
        return "0x" + bytes(value).hex()
    return value


def _truncate(s: str, max_value_length: int | None) -> str:
    if max_value_length and len(s) > max_value_length:
        return s[:max_value_length] + f"...<truncated {len(s) - max_value_length} chars>"
    return s


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = 1000,
    prefix: str = " ",
) -> str:
    """Format a dictionary as space-separated key=value pairs.

    Values are rendered with [render_value][basenames.core.logger.render_value],
    truncated to ``max_value_length`` characters, and quoted when they contain
    whitespace, equals signs, or quotes.

    Args:
        kwargs: Key-value pairs to format.
        max_value_length: Maximum characters per value before truncation.
            Pass None to disable truncation.
        prefix: String prepended to the output (default: single space).

    Returns:
        Formatted string, e.g. ' key1=value1 key2="value with spaces"'.
        Returns empty string if kwargs is empty.
    """
    if not kwargs:
        return ""

    parts = []
    for k, v in kwargs.items():
        s = _truncate(str(render_value(v)), max_value_length)
        if not s or " " in s or "=" in s or '"' in s or "'" in s:
            escaped = s.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'{k}="{escaped}"')
        else:
            parts.append(f"{k}={s}")

    return prefix + " ".join(parts)


class StructuredFormatter(logging.Formatter):
    """Formats log records as ``level name message key=value ...``.

    Reads structured data from the ``structured_kv`` extra field attached by
    [Logger][basenames.core.logger.Logger]. Records from plain
    ``logging.getLogger()`` calls are emitted with the same prefix.
    """

    def format(self, record: logging.LogRecord) -> str:
        base = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        extra: dict[str, Any] = getattr(record, "structured_kv", {})
        if extra:
            base += format_kv_pairs(extra, max_value_length=None)
        return base


class Logger:
    """Structured logger that appends keyword arguments as extra fields.

    Every resolver component accepts a ``Logger`` through its constructor so
    callers can redirect or silence it; the default instance logs under the
    ``basenames.<name>`` namespace.

    Examples:
        ```python
        logger = Logger("l1_resolver")
        logger.debug("l1_resolve_reverted", revert_data=b"\\x55\\x6f\\x18\\x30")
        # Output: l1_resolve_reverted revert_data=0x556f1830
        ```
    """

    _DEFAULT_MAX_VALUE_LENGTH: ClassVar[int] = 1000

    def __init__(
        self,
        name: str,
        *,
        json_output: bool = False,
        max_value_length: int | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize a structured logger.

        Args:
            name: Component name. Names outside the ``basenames`` namespace
                are prefixed with ``basenames.``.
            json_output: If True, emit JSON objects instead of key=value pairs.
            max_value_length: Maximum character length for individual values
                before truncation. Defaults to 1000.
            context: Fields attached to every record emitted by this logger.
        """
        if max_value_length is None:
            max_value_length = self._DEFAULT_MAX_VALUE_LENGTH
        if name != LOGGER_NAMESPACE and not name.startswith(LOGGER_NAMESPACE + "."):
            name = f"{LOGGER_NAMESPACE}.{name}"
        self._logger = logging.getLogger(name)
        self._json_output = json_output
        self._max_value_length = max_value_length
        self._context: dict[str, Any] = dict(context or {})

    @property
    def name(self) -> str:
        """Fully qualified name of the underlying stdlib logger."""
        return self._logger.name

    def bind(self, **context: Any) -> Logger:
        """Return a logger that adds *context* to every record."""
        return Logger(
            self._logger.name,
            json_output=self._json_output,
            max_value_length=self._max_value_length,
            context={**self._context, **context},
        )

    def _fields(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        """Merge bound context with call fields and pre-render their values."""
        merged = {**self._context, **kwargs}
        return {k: self._prepare(v) for k, v in merged.items()}

    def _prepare(self, value: Any) -> Any:
        value = render_value(value)
        if isinstance(value, int | float | bool) or value is None:
            return value
        return _truncate(str(value), self._max_value_length)

    def _format_json(self, msg: str, level: str, fields: dict[str, Any]) -> str:
        """Format message and fields as a JSON string for log aggregators."""
        record = {
            "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
            "level": level,
            "logger": self._logger.name,
            "message": msg,
            **fields,
        }
        return json.dumps(record, default=str)

    def _log(self, level: int, msg: str, kwargs: dict[str, Any], *, exc_info: bool = False) -> None:
        if not self._logger.isEnabledFor(level):
            return
        fields = self._fields(kwargs)
        if self._json_output:
            text = self._format_json(msg, logging.getLevelName(level).lower(), fields)
            self._logger.log(level, text, exc_info=exc_info)
        else:
            extra = {"structured_kv": fields} if fields else {}
            self._logger.log(level, msg, extra=extra, exc_info=exc_info)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log a DEBUG level message with optional key=value pairs."""
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log an INFO level message with optional key=value pairs."""
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log a WARNING level message with optional key=value pairs."""
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log an ERROR level message with optional key=value pairs."""
        self._log(logging.ERROR, msg, kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log an ERROR level message with exception traceback."""
        self._log(logging.ERROR, msg, kwargs, exc_info=True)
