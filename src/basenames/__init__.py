r"""Basenames -- CCIP-Read (ERC-3668) resolution of ``*.base.eth`` names.

Resolves Basenames to addresses by calling the ``L1Resolver`` contract on
Ethereum, following its ``OffchainLookup`` revert to the Base gateway, and
verifying the gateway's signed answer on chain.

Architecture follows a **diamond DAG** dependency structure where imports
flow strictly downward:

```text
                resolver        Orchestration, configuration
                   |
                clients         L1 resolver contract, CCIP-Read gateway
                /     \
           codecs     utils     ABI/name codecs, HTTP and RPC transports
                \     /
                  core          Exceptions, structured logging, YAML
                   |
                models          Pure frozen dataclasses (zero I/O)
```

Attributes:
    models: Constants, lookup values, resolution outcomes. Zero I/O.
    core: Exceptions, structured logging, YAML loading.
    codecs: Name normalization, wire format, namehash, ABI payloads.
    utils: Bounded HTTP reads and the JSON-RPC transport.
    clients: ``L1Resolver`` contract client and gateway client.
    resolver: [BaseNameResolver][basenames.resolver.service.BaseNameResolver].

Note:
    Top-level imports (``from basenames import BaseNameResolver``) use lazy
    loading and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("basenames")

__all__ = [
    "BaseNameResolver",
    "ErrorKind",
    "GatewayClient",
    "JsonRpcClient",
    "L1ResolverClient",
    "Logger",
    "Network",
    "OffchainLookup",
    "ResolutionOutcome",
    "ResolutionState",
    "ResolverConfig",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "ErrorKind": ("basenames.models", "ErrorKind"),
    "Network": ("basenames.models", "Network"),
    "OffchainLookup": ("basenames.models", "OffchainLookup"),
    "ResolutionOutcome": ("basenames.models", "ResolutionOutcome"),
    "ResolutionState": ("basenames.models", "ResolutionState"),
    "Logger": ("basenames.core", "Logger"),
    "JsonRpcClient": ("basenames.utils", "JsonRpcClient"),
    "GatewayClient": ("basenames.clients", "GatewayClient"),
    "L1ResolverClient": ("basenames.clients", "L1ResolverClient"),
    "BaseNameResolver": ("basenames.resolver", "BaseNameResolver"),
    "ResolverConfig": ("basenames.resolver", "ResolverConfig"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'basenames' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
