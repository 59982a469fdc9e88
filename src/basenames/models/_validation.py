"""Shared validation helpers for frozen dataclass models.

Private module, not part of the public API. Used exclusively by
``__post_init__`` methods in sibling model modules to enforce runtime
type constraints on values decoded from untrusted contract and gateway
payloads.
"""

from __future__ import annotations

from typing import Any


_UINT64_MAX: int = 2**64 - 1


def validate_instance(value: Any, expected: type, name: str) -> None:
    """Raise ``TypeError`` if *value* is not an instance of *expected*."""
    if not isinstance(value, expected):
        article = "an" if expected.__name__[0] in "AEIOUaeiou" else "a"
        raise TypeError(f"{name} must be {article} {expected.__name__}, got {type(value).__name__}")


def validate_bytes(value: Any, name: str, *, length: int | None = None) -> None:
    """Raise if *value* is not ``bytes`` or, when given, not exactly *length* long."""
    validate_instance(value, bytes, name)
    if length is not None and len(value) != length:
        raise ValueError(f"{name} must be {length} bytes, got {len(value)}")


def validate_str_no_null(value: Any, name: str) -> None:
    """Raise if *value* is not a ``str`` or contains null bytes."""
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str, got {type(value).__name__}")
    if "\x00" in value:
        raise ValueError(f"{name} contains null bytes")


def validate_hex_address(value: Any, name: str) -> None:
    """Raise if *value* is not a ``0x``-prefixed 20-byte hex string."""
    validate_str_no_null(value, name)
    body = value[2:] if value[:2] in ("0x", "0X") else None
    if body is None or len(body) != 40:
        raise ValueError(f"{name} must be a 0x-prefixed 20-byte hex address")
    try:
        bytes.fromhex(body)
    except ValueError:
        raise ValueError(f"{name} contains non-hex characters") from None


def validate_uint64(value: Any, name: str) -> None:
    """Raise if *value* is not an ``int`` in the uint64 range (``bool`` excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= _UINT64_MAX:
        raise ValueError(f"{name} must fit in an unsigned 64-bit integer")
