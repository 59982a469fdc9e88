"""HTTP and JSON-RPC transport helpers.

The utils layer depends only on ``basenames.models`` and
``basenames.core``. It provides the network primitives used by
[basenames.clients][basenames.clients].

Attributes:
    http: Bounded response reading and ``aiohttp`` timeout defaults.
    rpc: [JsonRpcClient][basenames.utils.rpc.JsonRpcClient], an ``eth_call``
        transport, and the [LedgerTransport][basenames.utils.rpc.LedgerTransport]
        protocol it satisfies.
"""

from .http import DEFAULT_MAX_RESPONSE_SIZE, DEFAULT_TIMEOUT, client_timeout, read_bounded
from .rpc import JsonRpcClient, LedgerTransport


__all__ = [
    "DEFAULT_MAX_RESPONSE_SIZE",
    "DEFAULT_TIMEOUT",
    "JsonRpcClient",
    "LedgerTransport",
    "client_timeout",
    "read_bounded",
]
