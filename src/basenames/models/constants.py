"""Shared constants for the models layer.

Defines the deployment addresses, name suffix, ABI signatures and the
enumerations shared by every layer of the resolver. Placing them here
keeps the codecs, clients and resolver layers free of circular imports.

See Also:
    [basenames.models.outcome][]: Uses [ErrorKind][basenames.models.constants.ErrorKind]
        and [ResolutionState][basenames.models.constants.ResolutionState]
        to describe the result of a resolution.
    [basenames.codecs.abi][]: Derives function selectors from the
        signatures defined here.
"""

from __future__ import annotations

from enum import StrEnum
from types import MappingProxyType


class Network(StrEnum):
    """Ethereum network hosting the L1 resolver contract.

    Attributes:
        MAINNET: Ethereum mainnet (production Basenames resolver).
        SEPOLIA: Sepolia test network.
    """

    MAINNET = "mainnet"
    SEPOLIA = "sepolia"


class ErrorKind(StrEnum):
    """Terminal failure categories of a resolution.

    Every failure surfaced to callers carries exactly one of these kinds.
    None of them is retried by the resolver; the caller owns retry policy.

    Attributes:
        INVALID_FORMAT: The name is empty or has a label outside 1..63 bytes.
        WRONG_SUFFIX: The name belongs to a namespace other than ``base.eth``.
        NETWORK_ERROR: The Ethereum RPC endpoint could not be reached.
        UNSUPPORTED_RESOLUTION: The resolver reverted with something other
            than an ``OffchainLookup`` error.
        NO_GATEWAY_URLS: The ``OffchainLookup`` carried an empty URL list.
        GATEWAY_ERROR: The gateway request failed (HTTP status or transport).
        GATEWAY_RESPONSE_MALFORMED: The gateway body held no usable payload.
        PROOF_VERIFICATION_FAILED: ``resolveWithProof`` rejected the response.
    """

    INVALID_FORMAT = "invalid_format"
    WRONG_SUFFIX = "wrong_suffix"
    NETWORK_ERROR = "network_error"
    UNSUPPORTED_RESOLUTION = "unsupported_resolution"
    NO_GATEWAY_URLS = "no_gateway_urls"
    GATEWAY_ERROR = "gateway_error"
    GATEWAY_RESPONSE_MALFORMED = "gateway_response_malformed"
    PROOF_VERIFICATION_FAILED = "proof_verification_failed"


class ResolutionState(StrEnum):
    """States of the CCIP-Read resolution state machine.

    A resolution walks ``START -> VALIDATED -> L1_CALLED`` and then either
    finishes (``RESOLVED``) or continues offchain through
    ``OFFCHAIN_DETECTED -> GATEWAY_QUERIED -> PROOF_VERIFIED -> RESOLVED``.
    Any state may move to ``FAILED``.
    """

    START = "start"
    VALIDATED = "validated"
    L1_CALLED = "l1_called"
    OFFCHAIN_DETECTED = "offchain_detected"
    GATEWAY_QUERIED = "gateway_queried"
    PROOF_VERIFIED = "proof_verified"
    RESOLVED = "resolved"
    FAILED = "failed"


TERMINAL_STATES: frozenset[ResolutionState] = frozenset(
    {ResolutionState.RESOLVED, ResolutionState.FAILED}
)

# L1Resolver deployments
DEFAULT_L1_RESOLVER_ADDRESS = "0xde9049636F4a1dfE0a64d1bFe3155C0A14C54F31"
SEPOLIA_L1_RESOLVER_ADDRESS = "0x084D10C07EfEecD9fFc73DEb38ecb72f9eEb65aB"

L1_RESOLVER_ADDRESSES: MappingProxyType[Network, str] = MappingProxyType(
    {
        Network.MAINNET: DEFAULT_L1_RESOLVER_ADDRESS,
        Network.SEPOLIA: SEPOLIA_L1_RESOLVER_ADDRESS,
    }
)

# Names
BASE_SUFFIX = "base.eth"
MAX_LABEL_LENGTH = 63

# ABI
OFFCHAIN_LOOKUP_SIGNATURE = "OffchainLookup(address,string[],bytes,bytes4,bytes)"
ADDR_SIGNATURE = "addr(bytes32)"
RESOLVE_SIGNATURE = "resolve(bytes,bytes)"
RESOLVE_WITH_PROOF_SIGNATURE = "resolveWithProof(bytes,bytes)"

ZERO_ADDRESS = "0x" + "00" * 20
