"""Pure encoders and decoders for names and ABI payloads.

No I/O happens here; the clients layer moves the bytes produced by these
functions over the network.

Attributes:
    name: Name validation, normalization, DNS wire format, and namehash.
        See [basenames.codecs.name][].
    abi: ``resolve`` / ``resolveWithProof`` call data, ``OffchainLookup``
        revert parsing, gateway tuple and address decoding.
        See [basenames.codecs.abi][].
"""

from .abi import (
    ADDR_SELECTOR,
    OFFCHAIN_LOOKUP_SELECTOR,
    RESOLVE_SELECTOR,
    RESOLVE_WITH_PROOF_SELECTOR,
    decode_address,
    decode_bytes_result,
    decode_gateway_tuple,
    decode_offchain_lookup,
    encode_addr_call_data,
    encode_resolve_call,
    encode_resolve_with_proof_call,
)
from .name import (
    EMPTY_NAME_ID,
    NameId,
    WireName,
    decode_wire,
    encode_wire,
    name_id,
    normalize_name,
    validate_name,
)


__all__ = [
    "ADDR_SELECTOR",
    "EMPTY_NAME_ID",
    "OFFCHAIN_LOOKUP_SELECTOR",
    "RESOLVE_SELECTOR",
    "RESOLVE_WITH_PROOF_SELECTOR",
    "NameId",
    "WireName",
    "decode_address",
    "decode_bytes_result",
    "decode_gateway_tuple",
    "decode_offchain_lookup",
    "decode_wire",
    "encode_addr_call_data",
    "encode_resolve_call",
    "encode_resolve_with_proof_call",
    "encode_wire",
    "name_id",
    "normalize_name",
    "validate_name",
]
