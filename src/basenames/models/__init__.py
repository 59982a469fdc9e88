"""Pure frozen dataclasses and enums with zero I/O.

Bottom of the diamond DAG: every other layer may import from here, while
this package imports nothing from the rest of ``basenames``.

Attributes:
    OffchainLookup: Decoded ERC-3668 ``OffchainLookup`` revert.
        See [OffchainLookup][basenames.models.lookup.OffchainLookup].
    GatewaySignedResponse: Decoded ``(result, expires, signature)`` gateway tuple.
        See [GatewaySignedResponse][basenames.models.lookup.GatewaySignedResponse].
    ResolutionOutcome: Caller-visible result of a resolution.
        See [ResolutionOutcome][basenames.models.outcome.ResolutionOutcome].
    ErrorKind, ResolutionState, Network: Shared enumerations.
"""

from .constants import (
    BASE_SUFFIX,
    DEFAULT_L1_RESOLVER_ADDRESS,
    L1_RESOLVER_ADDRESSES,
    MAX_LABEL_LENGTH,
    SEPOLIA_L1_RESOLVER_ADDRESS,
    TERMINAL_STATES,
    ZERO_ADDRESS,
    ErrorKind,
    Network,
    ResolutionState,
)
from .lookup import GatewaySignedResponse, OffchainLookup
from .outcome import ResolutionOutcome


__all__ = [
    "BASE_SUFFIX",
    "DEFAULT_L1_RESOLVER_ADDRESS",
    "L1_RESOLVER_ADDRESSES",
    "MAX_LABEL_LENGTH",
    "SEPOLIA_L1_RESOLVER_ADDRESS",
    "TERMINAL_STATES",
    "ZERO_ADDRESS",
    "ErrorKind",
    "GatewaySignedResponse",
    "Network",
    "OffchainLookup",
    "ResolutionOutcome",
    "ResolutionState",
]
