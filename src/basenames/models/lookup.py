"""
Immutable values exchanged during an ERC-3668 offchain lookup.

[OffchainLookup][basenames.models.lookup.OffchainLookup] is the decoded
revert a resolver contract raises to request offchain data, and
[GatewaySignedResponse][basenames.models.lookup.GatewaySignedResponse] is
the signed tuple a gateway answers with. Both hold raw ``bytes`` and tuples
only, so equality and hashing compare contents rather than identity.

See Also:
    [basenames.codecs.abi.decode_offchain_lookup][basenames.codecs.abi.decode_offchain_lookup]:
        Produces ``OffchainLookup`` values from revert payloads.
    [basenames.codecs.abi.decode_gateway_tuple][basenames.codecs.abi.decode_gateway_tuple]:
        Produces ``GatewaySignedResponse`` values from gateway bytes.
"""

from __future__ import annotations

from dataclasses import dataclass

from ._validation import (
    validate_bytes,
    validate_hex_address,
    validate_instance,
    validate_str_no_null,
    validate_uint64,
)


@dataclass(frozen=True, slots=True)
class OffchainLookup:
    """Decoded ``OffchainLookup`` revert.

    Mirrors the Solidity error
    ``OffchainLookup(address sender, string[] urls, bytes callData,
    bytes4 callbackFunction, bytes extraData)``.

    Attributes:
        sender: Address of the contract that raised the lookup.
        urls: Gateway URL templates, in the order the contract listed them.
        call_data: Opaque payload to forward to the gateway.
        callback_function: 4-byte selector of the callback to invoke.
        extra_data: Opaque payload to hand back to the callback.

    Raises:
        TypeError: If a field has the wrong type.
        ValueError: If the sender is not a 20-byte hex address or the
            callback selector is not exactly 4 bytes.

    Examples:
        ```python
        lookup = OffchainLookup(
            sender="0xde9049636F4a1dfE0a64d1bFe3155C0A14C54F31",
            urls=("https://gateway.example/{sender}/{data}.json",),
            call_data=bytes.fromhex("9061b923"),
            callback_function=bytes.fromhex("f4d4d2f8"),
            extra_data=b"",
        )
        lookup.first_url  # 'https://gateway.example/{sender}/{data}.json'
        ```
    """

    sender: str
    urls: tuple[str, ...]
    call_data: bytes
    callback_function: bytes
    extra_data: bytes

    def __post_init__(self) -> None:
        validate_hex_address(self.sender, "sender")
        if isinstance(self.urls, list):
            object.__setattr__(self, "urls", tuple(self.urls))
        validate_instance(self.urls, tuple, "urls")
        for url in self.urls:
            validate_str_no_null(url, "urls")
        validate_bytes(self.call_data, "call_data")
        validate_bytes(self.callback_function, "callback_function", length=4)
        validate_bytes(self.extra_data, "extra_data")

    @property
    def first_url(self) -> str | None:
        """The first gateway URL template, or ``None`` when the list is empty."""
        return self.urls[0] if self.urls else None


@dataclass(frozen=True, slots=True)
class GatewaySignedResponse:
    """Signed gateway answer ``(bytes result, uint64 expires, bytes sig)``.

    Attributes:
        result: ABI-encoded answer to the original resolver call.
        expires: Unix timestamp (seconds) after which the signature is void.
        signature: Gateway signer's signature over the result.
    """

    result: bytes
    expires: int
    signature: bytes

    def __post_init__(self) -> None:
        validate_bytes(self.result, "result")
        validate_uint64(self.expires, "expires")
        validate_bytes(self.signature, "signature")

    def is_expired(self, now: float) -> bool:
        """Whether the signature has expired at the given Unix time."""
        return self.expires < now
