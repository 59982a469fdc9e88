"""
ABI payloads for the L1 resolver and the CCIP-Read gateway.

Covers only the shapes this protocol needs, built on ``eth_abi``:

| Payload | ABI shape |
|---|---|
| ``resolve`` call | ``resolve(bytes name, bytes data)`` |
| ``resolveWithProof`` call | ``resolveWithProof(bytes response, bytes extraData)`` |
| inner ``addr`` call data | ``addr(bytes32 node)`` |
| both return values | ``(bytes)`` |
| ``OffchainLookup`` revert | ``0x556f1830`` + ``(address, string[], bytes, bytes4, bytes)`` |
| gateway answer | ``(bytes result, uint64 expires, bytes sig)`` |
| resolved record | ``(address)`` |

Every ``decode_*`` function returns ``None`` instead of raising when the
input does not match its shape, so callers can branch on the result.
"""

from __future__ import annotations

import logging

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from basenames.models.constants import (
    ADDR_SIGNATURE,
    OFFCHAIN_LOOKUP_SIGNATURE,
    RESOLVE_SIGNATURE,
    RESOLVE_WITH_PROOF_SIGNATURE,
    ZERO_ADDRESS,
)
from basenames.models.lookup import GatewaySignedResponse, OffchainLookup


logger = logging.getLogger("basenames.codecs.abi")

ADDR_SELECTOR: bytes = function_signature_to_4byte_selector(ADDR_SIGNATURE)
RESOLVE_SELECTOR: bytes = function_signature_to_4byte_selector(RESOLVE_SIGNATURE)
RESOLVE_WITH_PROOF_SELECTOR: bytes = function_signature_to_4byte_selector(
    RESOLVE_WITH_PROOF_SIGNATURE
)
OFFCHAIN_LOOKUP_SELECTOR: bytes = function_signature_to_4byte_selector(
    OFFCHAIN_LOOKUP_SIGNATURE
)

_OFFCHAIN_LOOKUP_TYPES = ("address", "string[]", "bytes", "bytes4", "bytes")
_GATEWAY_TUPLE_TYPES = ("bytes", "uint64", "bytes")


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_resolve_call(wire_name: bytes, inner_call_data: bytes) -> bytes:
    """Encode ``resolve(bytes name, bytes data)`` call data."""
    return RESOLVE_SELECTOR + encode(["bytes", "bytes"], [wire_name, inner_call_data])


def encode_addr_call_data(node: bytes) -> bytes:
    """Encode ``addr(bytes32 node)``.

    The result is never sent on its own; it is the ``data`` argument of
    [encode_resolve_call][basenames.codecs.abi.encode_resolve_call].

    Raises:
        ValueError: If *node* is not 32 bytes.
    """
    if len(node) != 32:
        raise ValueError(f"node must be 32 bytes, got {len(node)}")
    return ADDR_SELECTOR + encode(["bytes32"], [node])


def encode_resolve_with_proof_call(response: bytes, extra_data: bytes) -> bytes:
    """Encode ``resolveWithProof(bytes response, bytes extraData)`` call data."""
    return RESOLVE_WITH_PROOF_SELECTOR + encode(["bytes", "bytes"], [response, extra_data])


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _decode(types: tuple[str, ...], data: bytes) -> tuple | None:
    try:
        return tuple(decode(list(types), data))
    except (DecodingError, ValueError, TypeError) as e:
        logger.debug("abi_decode_failed types=%s error=%s", ",".join(types), e)
        return None


def decode_bytes_result(data: bytes) -> bytes | None:
    """Decode a ``(bytes)`` return value, as produced by both resolver entry points."""
    decoded = _decode(("bytes",), data)
    if decoded is None or len(decoded) != 1:
        return None
    return decoded[0]


def decode_offchain_lookup(revert_data: bytes) -> OffchainLookup | None:
    """Parse an ``OffchainLookup`` revert payload.

    Args:
        revert_data: Full revert payload, selector included.

    Returns:
        The decoded lookup, or ``None`` if the payload is shorter than four
        bytes, its selector is not ``0x556f1830``, or the remainder does not
        decode to the five expected fields.
    """
    if len(revert_data) < 4:
        return None
    if revert_data[:4] != OFFCHAIN_LOOKUP_SELECTOR:
        logger.debug("offchain_lookup_selector_mismatch selector=0x%s", revert_data[:4].hex())
        return None

    decoded = _decode(_OFFCHAIN_LOOKUP_TYPES, revert_data[4:])
    if decoded is None or len(decoded) != len(_OFFCHAIN_LOOKUP_TYPES):
        return None

    sender, urls, call_data, callback_function, extra_data = decoded
    try:
        return OffchainLookup(
            sender=to_checksum_address(sender),
            urls=tuple(urls),
            call_data=call_data,
            callback_function=callback_function,
            extra_data=extra_data,
        )
    except (TypeError, ValueError) as e:
        logger.debug("offchain_lookup_invalid error=%s", e)
        return None


def decode_gateway_tuple(data: bytes) -> GatewaySignedResponse | None:
    """Decode a gateway answer ``(bytes result, uint64 expires, bytes sig)``."""
    decoded = _decode(_GATEWAY_TUPLE_TYPES, data)
    if decoded is None or len(decoded) != len(_GATEWAY_TUPLE_TYPES):
        return None
    result, expires, signature = decoded
    return GatewaySignedResponse(result=result, expires=expires, signature=signature)


def decode_address(data: bytes) -> str | None:
    """Decode an ``(address)`` record.

    Returns:
        The EIP-55 checksum address, or ``None`` for the zero address
        ("no record set") and for payloads that are not an address.
    """
    decoded = _decode(("address",), data)
    if decoded is None or len(decoded) != 1:
        return None
    address = to_checksum_address(decoded[0])
    if address.lower() == ZERO_ADDRESS:
        return None
    return address
