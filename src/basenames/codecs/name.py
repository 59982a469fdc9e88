"""
Name validation, normalization, DNS wire encoding, and namehash.

Implements the name handling that precedes every resolver call:

* [validate_name][basenames.codecs.name.validate_name] checks label lengths;
* [normalize_name][basenames.codecs.name.normalize_name] lowercases and
  attaches the ``base.eth`` suffix;
* [encode_wire][basenames.codecs.name.encode_wire] /
  [decode_wire][basenames.codecs.name.decode_wire] convert to and from the
  DNS wire format expected by ``resolve(bytes,bytes)`` (ENSIP-10);
* [name_id][basenames.codecs.name.name_id] computes the ENS namehash
  (ENSIP-1) with keccak-256.

Note:
    Only label lengths are checked. No character-set rules (e.g. ENSIP-15
    normalization) are applied, and empty labels produced by consecutive
    dots are skipped by both ``encode_wire`` and ``name_id``.
"""

from __future__ import annotations

from typing import NewType

from eth_utils import keccak

from basenames.core.exceptions import LabelTooLongError, WrongSuffixError
from basenames.models.constants import BASE_SUFFIX, MAX_LABEL_LENGTH


WireName = NewType("WireName", bytes)
NameId = NewType("NameId", bytes)

EMPTY_NAME_ID = NameId(b"\x00" * 32)


def _label_size(label: str) -> int:
    return len(label.encode("utf-8"))


def validate_name(name: str) -> bool:
    """Check that *name* is non-empty and every label is 1..63 UTF-8 bytes."""
    if not name:
        return False
    return all(1 <= _label_size(label) <= MAX_LABEL_LENGTH for label in name.split("."))


def normalize_name(name: str, suffix: str = BASE_SUFFIX) -> str:
    """Lowercase *name* and make sure it lives under *suffix*.

    A bare label (``"jesse"``) gets the suffix appended; a name already
    ending in ``.<suffix>``, or equal to the suffix itself, is kept.

    Args:
        name: Raw user input.
        suffix: Parent name every resolvable name must end with.

    Returns:
        The canonical lowercase name.

    Raises:
        WrongSuffixError: If *name* has a dot but ends in a different suffix.

    Examples:
        ```python
        normalize_name("JESSE.BASE.ETH")  # 'jesse.base.eth'
        normalize_name("jesse")           # 'jesse.base.eth'
        normalize_name("jesse.eth")       # raises WrongSuffixError
        ```
    """
    lowered = name.strip().lower()
    suffix = suffix.lower()
    if lowered == suffix or lowered.endswith("." + suffix):
        return lowered
    if "." in lowered:
        raise WrongSuffixError(f"Name must be a .{suffix} domain: {name}")
    return f"{lowered}.{suffix}"


def encode_wire(name: str) -> WireName:
    """Encode *name* as length-prefixed labels followed by a zero byte.

    Example: ``"jesse.base.eth"`` becomes ``\\x05jesse\\x04base\\x03eth\\x00``.
    Empty labels (``"a..b"``) are skipped.

    Raises:
        LabelTooLongError: If a label exceeds 63 UTF-8 bytes.
    """
    out = bytearray()
    for label in name.split("."):
        if not label:
            continue
        raw = label.encode("utf-8")
        if len(raw) > MAX_LABEL_LENGTH:
            raise LabelTooLongError(f"Label too long ({len(raw)} bytes): {label}")
        out.append(len(raw))
        out += raw
    out.append(0)
    return WireName(bytes(out))


def decode_wire(data: bytes) -> str:
    """Decode a DNS wire-format name back to its dotted form.

    Reads length-prefixed labels until the zero terminator. Trailing bytes
    after the terminator are ignored.

    Raises:
        ValueError: If a label runs past the end of *data*, the terminator
            is missing, or a label is not valid UTF-8.
    """
    labels: list[str] = []
    i = 0
    while True:
        if i >= len(data):
            raise ValueError("Wire name is missing its zero terminator")
        length = data[i]
        if length == 0:
            break
        i += 1
        if i + length > len(data):
            raise ValueError(f"Wire label at offset {i - 1} overruns the buffer")
        labels.append(data[i : i + length].decode("utf-8"))
        i += length
    return ".".join(labels)


def name_id(name: str) -> NameId:
    """Compute the ENS namehash of *name*.

    ``namehash("") = 0x00..00`` and, for ``label.rest``,
    ``namehash = keccak256(namehash(rest) + keccak256(label))``, so labels
    are folded right to left starting with the top-level label.
    """
    node = EMPTY_NAME_ID
    for label in reversed(name.split(".")):
        if not label:
            continue
        node = NameId(keccak(node + keccak(label.encode("utf-8"))))
    return node
