"""
Ethereum ledger transport on top of web3.py.

[JsonRpcClient][basenames.utils.rpc.JsonRpcClient] issues ``eth_call``
requests through an ``AsyncWeb3`` instance backed by an
``AsyncHTTPProvider`` and returns the raw JSON-RPC envelope. The provider
owns request framing, ids and the ``aiohttp`` session; this module only
maps transport failures to
[RpcTransportError][basenames.core.exceptions.RpcTransportError].

``error`` objects are not interpreted: a revert is a normal answer at this
layer and is handed back to the caller verbatim. Calls go through
``provider.make_request`` rather than ``w3.eth.call``, which raises on
reverts.

Any object with the same ``eth_call`` / ``close`` coroutines satisfies
[LedgerTransport][basenames.utils.rpc.LedgerTransport] and can be injected
into [L1ResolverClient][basenames.clients.l1_resolver.L1ResolverClient]
instead.

Examples:
    ```python
    async with JsonRpcClient("https://eth.example.com", timeout=5.0) as rpc:
        envelope = await rpc.eth_call(resolver_address, call_data)
        envelope.get("result")  # '0x...' on success
        envelope.get("error")   # {'code': 3, 'message': 'execution reverted', 'data': '0x...'}
    ```
"""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

import aiohttp
from eth_utils import encode_hex
from web3 import AsyncWeb3
from web3.exceptions import Web3Exception
from web3.providers import AsyncHTTPProvider
from web3.types import RPCEndpoint

from basenames.core.exceptions import ClientClosedError, RpcTransportError
from basenames.core.logger import Logger

from .http import client_timeout


class LedgerTransport(Protocol):
    """Read-only ledger access needed by the L1 resolver client."""

    async def eth_call(self, to: str, data: bytes, block: str = "latest") -> dict[str, Any]:
        """Execute a read-only call and return the JSON-RPC envelope."""
        ...

    async def close(self) -> None:
        """Release transport resources."""
        ...


class JsonRpcClient:
    """Async ``eth_call`` transport for a single Ethereum node.

    One provider session is shared by all in-flight calls, so a single
    client can serve many concurrent resolutions. Retries are disabled on
    the provider: every step is attempted exactly once. An injected
    provider belongs to the caller and is not disconnected by
    [close()][basenames.utils.rpc.JsonRpcClient.close].

    Attributes:
        url: JSON-RPC endpoint URL.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float | None = None,  # noqa: ASYNC109
        provider: AsyncHTTPProvider | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Initialize the client without opening any connection.

        Args:
            url: JSON-RPC endpoint URL.
            timeout: Total timeout per request in seconds (default: 10.0).
            provider: Optional externally managed ``AsyncHTTPProvider``.
            logger: Structured logger (default: ``basenames.rpc``).
        """
        self.url = url
        self._owns_provider = provider is None
        if provider is None:
            provider = AsyncHTTPProvider(
                url,
                request_kwargs={"timeout": client_timeout(timeout)},
                exception_retry_configuration=None,
            )
        self._w3 = AsyncWeb3(provider)
        self._closed = False
        self._logger = logger or Logger("rpc")

    @property
    def provider(self) -> AsyncHTTPProvider:
        return self._w3.provider

    @property
    def is_closed(self) -> bool:
        """Whether [close()][basenames.utils.rpc.JsonRpcClient.close] has been called."""
        return self._closed

    async def request(self, method: str, params: list[Any]) -> dict[str, Any]:
        """Send one JSON-RPC request and return its response envelope.

        Raises:
            ClientClosedError: If the client has been closed.
            RpcTransportError: On connection failure, timeout, HTTP error
                status, or a body that is not a JSON-RPC response.
        """
        if self._closed:
            raise ClientClosedError("JSON-RPC client is closed")

        self._logger.debug("rpc_request", method=method)
        try:
            envelope = await self._w3.provider.make_request(RPCEndpoint(method), params)
        except (asyncio.CancelledError, KeyboardInterrupt, SystemExit):
            raise
        except (OSError, TimeoutError, aiohttp.ClientError, ValueError, Web3Exception) as e:
            reason = str(e) or type(e).__name__
            self._logger.debug("rpc_transport_failed", method=method, error=reason)
            raise RpcTransportError(f"RPC request failed: {reason}") from e

        if not isinstance(envelope, dict) or ("result" not in envelope and "error" not in envelope):
            self._logger.debug("rpc_bad_response", method=method)
            raise RpcTransportError("RPC request failed: invalid JSON-RPC response")
        return dict(envelope)

    async def eth_call(self, to: str, data: bytes, block: str = "latest") -> dict[str, Any]:
        """Execute ``eth_call`` against *to* with *data* at *block*."""
        return await self.request("eth_call", [{"to": to, "data": encode_hex(data)}, block])

    async def close(self) -> None:
        """Disconnect the owned provider. Idempotent; later requests fail fast."""
        if self._closed:
            return
        self._closed = True
        if self._owns_provider:
            await self._w3.provider.disconnect()
            self._logger.debug("rpc_provider_disconnected")

    async def __aenter__(self) -> JsonRpcClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any | None,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"JsonRpcClient(url={self.url}, closed={self._closed})"
