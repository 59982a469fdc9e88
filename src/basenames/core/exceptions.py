"""Basenames exception hierarchy.

Provides typed exceptions for every failure a resolution step can hit.
Each [ResolutionError][basenames.core.exceptions.ResolutionError] subclass
carries the [ErrorKind][basenames.models.constants.ErrorKind] it maps to, so
the resolver can turn any caught exception into a failed
[ResolutionOutcome][basenames.models.outcome.ResolutionOutcome] without a
lookup table, while ``CancelledError`` propagates untouched.

Exception hierarchy:

```text
BasenamesError (base -- never raised directly)
├── ConfigurationError                -- config validation, bad YAML
└── ResolutionError                   -- base for per-step failures
    ├── InvalidNameError              -- invalid_format
    │   ├── WrongSuffixError          -- wrong_suffix
    │   └── LabelTooLongError         -- invalid_format
    ├── RpcTransportError             -- network_error
    │   └── ClientClosedError         -- network_error
    ├── ContractRevertError           -- unsupported_resolution
    ├── UnsupportedResolutionError    -- unsupported_resolution
    ├── NoGatewayUrlsError            -- no_gateway_urls
    ├── GatewayError                  -- gateway_error
    ├── GatewayResponseMalformedError -- gateway_response_malformed
    └── ProofVerificationError        -- proof_verification_failed
```

See Also:
    [JsonRpcClient][basenames.utils.rpc.JsonRpcClient]: Raises
        [RpcTransportError][basenames.core.exceptions.RpcTransportError].
    [L1ResolverClient][basenames.clients.l1_resolver.L1ResolverClient]:
        Raises [ContractRevertError][basenames.core.exceptions.ContractRevertError]
        and [ProofVerificationError][basenames.core.exceptions.ProofVerificationError].
    [GatewayClient][basenames.clients.gateway.GatewayClient]: Raises
        [GatewayError][basenames.core.exceptions.GatewayError].
    [BaseNameResolver][basenames.resolver.service.BaseNameResolver]: Catches
        every ``ResolutionError`` and reports it as an outcome.
"""

from __future__ import annotations

from typing import ClassVar

from basenames.models.constants import ErrorKind


class BasenamesError(Exception):
    """Base exception for all basenames errors.

    Never raised directly -- always use a specific subclass.
    """


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(BasenamesError):
    """Invalid or missing configuration (YAML, env vars, CLI flags)."""


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class ResolutionError(BasenamesError):
    """Base for failures that terminate a resolution.

    Attributes:
        kind: The [ErrorKind][basenames.models.constants.ErrorKind] reported
            to callers when this exception ends a resolution.
    """

    kind: ClassVar[ErrorKind]


class InvalidNameError(ResolutionError, ValueError):
    """The name is empty or has a label outside the 1..63 byte range."""

    kind = ErrorKind.INVALID_FORMAT


class WrongSuffixError(InvalidNameError):
    """The name belongs to a namespace other than the configured suffix."""

    kind = ErrorKind.WRONG_SUFFIX


class LabelTooLongError(InvalidNameError):
    """A label exceeds 63 bytes and cannot be wire-encoded."""


class RpcTransportError(ResolutionError):
    """The Ethereum JSON-RPC endpoint could not be reached or answered garbage.

    Covers connection failures, timeouts, non-2xx HTTP statuses, and
    bodies that are not a JSON-RPC envelope.
    """

    kind = ErrorKind.NETWORK_ERROR


class ClientClosedError(RpcTransportError):
    """A call was attempted after the client was closed."""


class ContractRevertError(ResolutionError):
    """The resolver contract reverted.

    The revert payload is kept verbatim; interpreting it (e.g. as an
    ``OffchainLookup``) is the caller's job. When it does not parse, the
    resolution is unsupported.

    Attributes:
        revert_data: ``0x``-prefixed revert payload, or the node's error
            message when no hex payload was present anywhere.
    """

    kind = ErrorKind.UNSUPPORTED_RESOLUTION

    def __init__(self, revert_data: str) -> None:
        super().__init__(f"Contract reverted: {revert_data}")
        self.revert_data = revert_data


class UnsupportedResolutionError(ResolutionError):
    """The resolver answered in a shape this client does not understand."""

    kind = ErrorKind.UNSUPPORTED_RESOLUTION


class NoGatewayUrlsError(ResolutionError):
    """The ``OffchainLookup`` revert carried no gateway URL."""

    kind = ErrorKind.NO_GATEWAY_URLS


class GatewayError(ResolutionError):
    """The gateway request failed at the HTTP or transport level.

    Attributes:
        status: HTTP status code, or ``None`` for transport failures.
        message: Reason phrase or transport error description.
    """

    kind = ErrorKind.GATEWAY_ERROR

    def __init__(self, message: str, status: int | None = None) -> None:
        text = f"Gateway request failed with code {status}: {message}" if status else message
        super().__init__(text)
        self.status = status
        self.message = message


class GatewayResponseMalformedError(ResolutionError):
    """The gateway answered 2xx but the body held no usable hex payload."""

    kind = ErrorKind.GATEWAY_RESPONSE_MALFORMED


class ProofVerificationError(ResolutionError):
    """``resolveWithProof`` failed; the gateway answer was not accepted."""

    kind = ErrorKind.PROOF_VERIFICATION_FAILED
