"""Core layer: structured logging, the exception hierarchy, and YAML loading.

Sits directly above ``basenames.models`` in the diamond DAG and is shared
by the codecs, utils, clients and resolver layers.

Attributes:
    Logger: Structured logger supporting key=value and JSON output modes.
        See [Logger][basenames.core.logger.Logger].
    StructuredFormatter: ``logging.Formatter`` that renders the structured
        fields attached by ``Logger``.
    load_yaml: Safe YAML loading with ``yaml.safe_load()``.
        See [load_yaml()][basenames.core.yaml.load_yaml].
    exceptions: Typed errors, one per resolution failure kind.
        See [basenames.core.exceptions][].
"""

from .exceptions import (
    BasenamesError,
    ClientClosedError,
    ConfigurationError,
    ContractRevertError,
    GatewayError,
    GatewayResponseMalformedError,
    InvalidNameError,
    LabelTooLongError,
    NoGatewayUrlsError,
    ProofVerificationError,
    ResolutionError,
    RpcTransportError,
    UnsupportedResolutionError,
    WrongSuffixError,
)
from .logger import Logger, StructuredFormatter, format_kv_pairs, render_value
from .yaml import load_yaml


__all__ = [
    "BasenamesError",
    "ClientClosedError",
    "ConfigurationError",
    "ContractRevertError",
    "GatewayError",
    "GatewayResponseMalformedError",
    "InvalidNameError",
    "LabelTooLongError",
    "Logger",
    "NoGatewayUrlsError",
    "ProofVerificationError",
    "ResolutionError",
    "RpcTransportError",
    "StructuredFormatter",
    "UnsupportedResolutionError",
    "WrongSuffixError",
    "format_kv_pairs",
    "load_yaml",
    "render_value",
]
