"""
Unit tests for utils.rpc module.

Tests:
- JsonRpcClient.eth_call() request parameters
- Envelope passthrough for results and execution errors
- Transport failures mapped to RpcTransportError
- CancelledError propagation
- Lifecycle: provider construction, close(), injected vs owned providers
"""

import asyncio
from typing import Any
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest
from web3.exceptions import Web3Exception
from web3.providers import AsyncHTTPProvider

from basenames.core.exceptions import ClientClosedError, RpcTransportError
from basenames.utils.rpc import JsonRpcClient


URL = "https://eth.example.com"
TO = "0xde9049636F4a1dfE0a64d1bFe3155C0A14C54F31"


def _provider(response: Any = None, *, error: BaseException | None = None) -> AsyncHTTPProvider:
    """Real provider whose network calls are replaced with mocks."""
    provider = AsyncHTTPProvider(URL)
    provider.make_request = AsyncMock(return_value=response, side_effect=error)  # type: ignore[method-assign]
    provider.disconnect = AsyncMock()  # type: ignore[method-assign]
    return provider


# =============================================================================
# Request Tests
# =============================================================================


class TestEthCall:
    """eth_call() parameters and envelope passthrough."""

    async def test_sends_eth_call_params(self) -> None:
        provider = _provider({"jsonrpc": "2.0", "id": 1, "result": "0x"})
        client = JsonRpcClient(URL, provider=provider)

        await client.eth_call(TO, b"\x90\x61\xb9\x23")

        method, params = provider.make_request.call_args.args
        assert method == "eth_call"
        assert params == [{"to": TO, "data": "0x9061b923"}, "latest"]

    async def test_explicit_block(self) -> None:
        provider = _provider({"id": 1, "result": "0x"})
        client = JsonRpcClient(URL, provider=provider)

        await client.eth_call(TO, b"", block="0x10")

        assert provider.make_request.call_args.args[1][1] == "0x10"

    async def test_returns_result_envelope(self) -> None:
        envelope = {"jsonrpc": "2.0", "id": 1, "result": "0x1234"}
        client = JsonRpcClient(URL, provider=_provider(envelope))

        assert await client.eth_call(TO, b"") == envelope

    async def test_returns_error_envelope_without_raising(self) -> None:
        envelope = {
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": 3, "message": "execution reverted", "data": "0x556f1830"},
        }
        client = JsonRpcClient(URL, provider=_provider(envelope))

        assert await client.eth_call(TO, b"") == envelope


# =============================================================================
# Failure Tests
# =============================================================================


class TestTransportFailures:
    """Transport-level failures raise RpcTransportError."""

    @pytest.mark.parametrize("envelope", [{"id": 1}, None, "0x1234"])
    async def test_not_a_json_rpc_response(self, envelope: Any) -> None:
        client = JsonRpcClient(URL, provider=_provider(envelope))

        with pytest.raises(RpcTransportError, match="invalid JSON-RPC response"):
            await client.eth_call(TO, b"")

    @pytest.mark.parametrize(
        "error",
        [
            aiohttp.ClientConnectionError("refused"),
            TimeoutError(),
            OSError("network unreachable"),
            ValueError("Expecting value: line 1 column 1"),
            Web3Exception("provider failure"),
        ],
    )
    async def test_connection_failures(self, error: Exception) -> None:
        client = JsonRpcClient(URL, provider=_provider(error=error))

        with pytest.raises(RpcTransportError, match="RPC request failed") as exc_info:
            await client.eth_call(TO, b"")
        assert exc_info.value.__cause__ is error

    async def test_cancelled_error_propagates(self) -> None:
        client = JsonRpcClient(URL, provider=_provider(error=asyncio.CancelledError()))

        with pytest.raises(asyncio.CancelledError):
            await client.eth_call(TO, b"")


# =============================================================================
# Lifecycle Tests
# =============================================================================


class TestLifecycle:
    """Provider construction and close()."""

    async def test_closed_client_fails_fast(self) -> None:
        provider = _provider({"id": 1, "result": "0x"})
        client = JsonRpcClient(URL, provider=provider)
        await client.close()

        with pytest.raises(ClientClosedError):
            await client.eth_call(TO, b"")
        provider.make_request.assert_not_called()

    async def test_closed_error_is_transport_error(self) -> None:
        client = JsonRpcClient(URL, provider=_provider())
        await client.close()

        with pytest.raises(RpcTransportError):
            await client.eth_call(TO, b"")

    async def test_injected_provider_not_disconnected(self) -> None:
        provider = _provider()
        client = JsonRpcClient(URL, provider=provider)

        await client.close()

        provider.disconnect.assert_not_called()
        assert client.is_closed is True
        assert client.provider is provider

    async def test_owned_provider_built_and_disconnected_once(self) -> None:
        with (
            patch("basenames.utils.rpc.AsyncHTTPProvider", wraps=AsyncHTTPProvider) as cls,
            patch.object(AsyncHTTPProvider, "disconnect", new_callable=AsyncMock) as disconnect,
        ):
            client = JsonRpcClient(URL, timeout=3.0)
            await client.close()
            await client.close()

        args, kwargs = cls.call_args
        assert args == (URL,)
        assert kwargs["request_kwargs"]["timeout"].total == 3.0
        assert kwargs["exception_retry_configuration"] is None
        assert isinstance(client.provider, AsyncHTTPProvider)
        disconnect.assert_awaited_once()

    async def test_async_context_manager(self) -> None:
        async with JsonRpcClient(URL, provider=_provider()) as client:
            assert client.is_closed is False
        assert client.is_closed is True

    def test_repr(self) -> None:
        client = JsonRpcClient(URL, provider=_provider())
        assert repr(client) == f"JsonRpcClient(url={URL}, closed=False)"
