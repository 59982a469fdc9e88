"""
Unit tests for clients.l1_resolver module.

Tests:
- extract_revert_data() strategy order and fallbacks
- L1ResolverClient.resolve() success, revert, transport and decode failures
- L1ResolverClient.resolve_with_proof() failure mapping
- L1ResolverClient.parse_offchain_lookup() with hex strings and bytes
"""

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest
from eth_abi import decode

from basenames.clients.l1_resolver import (
    REVERT_DATA_STRATEGIES,
    L1ResolverClient,
    extract_revert_data,
)
from basenames.codecs.abi import RESOLVE_SELECTOR, RESOLVE_WITH_PROOF_SELECTOR
from basenames.core.exceptions import (
    ContractRevertError,
    ProofVerificationError,
    RpcTransportError,
    UnsupportedResolutionError,
)
from basenames.models import OffchainLookup


WIRE = b"\x05jesse\x04base\x03eth\x00"
INNER = b"\x3b\x3b\x57\xde" + b"\x11" * 32


# =============================================================================
# extract_revert_data() Tests
# =============================================================================


class TestRevertDataStrategies:
    """Ordered extraction of the revert payload."""

    def test_strategy_order(self) -> None:
        assert [name for name, _ in REVERT_DATA_STRATEGIES] == [
            "error_data",
            "revert_reason",
            "result_value",
        ]

    def test_error_data_string(self) -> None:
        envelope = {"error": {"message": "execution reverted", "data": "0x556f1830aa"}}
        assert extract_revert_data(envelope) == ("error_data", "0x556f1830aa")

    def test_error_data_nested(self) -> None:
        envelope = {"error": {"message": "reverted", "data": {"data": "0x556f1830bb"}}}
        assert extract_revert_data(envelope) == ("error_data", "0x556f1830bb")

    def test_error_data_trimmed_and_unquoted(self) -> None:
        envelope = {"error": {"message": "reverted", "data": '  "0x556f1830cc"  '}}
        assert extract_revert_data(envelope) == ("error_data", "0x556f1830cc")

    def test_error_data_wins_over_message(self) -> None:
        envelope = {
            "error": {"message": "reverted with 0xdeadbeefdead", "data": "0x556f1830dd"},
        }
        assert extract_revert_data(envelope)[1] == "0x556f1830dd"

    def test_hex_in_message(self) -> None:
        envelope = {"error": {"message": "execution reverted: 0x556f1830deadbeef"}}
        assert extract_revert_data(envelope) == ("revert_reason", "0x556f1830deadbeef")

    def test_short_hex_in_message_ignored(self) -> None:
        envelope = {"error": {"message": "code 0x12"}, "result": "0x556f1830ee"}
        assert extract_revert_data(envelope) == ("result_value", "0x556f1830ee")

    @pytest.mark.parametrize("data", ["0x", "", "not hex", None, 42])
    def test_unusable_error_data_skipped(self, data: Any) -> None:
        envelope = {"error": {"message": "execution reverted", "data": data}}
        assert extract_revert_data(envelope) == ("error_message", "execution reverted")

    def test_falls_back_to_message(self) -> None:
        envelope = {"error": {"code": -32000, "message": "header not found"}}
        assert extract_revert_data(envelope) == ("error_message", "header not found")

    def test_error_not_a_dict(self) -> None:
        envelope = {"error": "boom"}
        assert extract_revert_data(envelope) == ("error_message", "execution reverted")


# =============================================================================
# resolve() Tests
# =============================================================================


class TestResolve:
    """L1ResolverClient.resolve()."""

    async def test_returns_decoded_bytes(
        self,
        mock_transport: MagicMock,
        resolver_address: str,
        result_envelope: Callable[[bytes], dict[str, Any]],
    ) -> None:
        mock_transport.eth_call.return_value = result_envelope(b"\x01" * 32)
        client = L1ResolverClient(mock_transport, resolver_address)

        assert await client.resolve(WIRE, INNER) == b"\x01" * 32

    async def test_sends_resolve_call(
        self,
        mock_transport: MagicMock,
        resolver_address: str,
        result_envelope: Callable[[bytes], dict[str, Any]],
    ) -> None:
        mock_transport.eth_call.return_value = result_envelope(b"")
        client = L1ResolverClient(mock_transport, resolver_address.lower())

        await client.resolve(WIRE, INNER)

        to, data = mock_transport.eth_call.call_args.args
        assert to == resolver_address
        assert data[:4] == RESOLVE_SELECTOR
        assert decode(["bytes", "bytes"], data[4:]) == (WIRE, INNER)

    async def test_revert_raises_with_payload(
        self,
        mock_transport: MagicMock,
        resolver_address: str,
        revert_envelope: Callable[..., dict[str, Any]],
        build_offchain_lookup: Callable[..., bytes],
    ) -> None:
        payload = build_offchain_lookup()
        mock_transport.eth_call.return_value = revert_envelope(payload)
        client = L1ResolverClient(mock_transport, resolver_address)

        with pytest.raises(ContractRevertError) as exc_info:
            await client.resolve(WIRE, INNER)
        assert exc_info.value.revert_data == "0x" + payload.hex()

    async def test_revert_without_data_uses_message(
        self, mock_transport: MagicMock, resolver_address: str
    ) -> None:
        mock_transport.eth_call.return_value = {"error": {"code": 3, "message": "nope"}}
        client = L1ResolverClient(mock_transport, resolver_address)

        with pytest.raises(ContractRevertError, match="nope"):
            await client.resolve(WIRE, INNER)

    async def test_transport_error_propagates(
        self, mock_transport: MagicMock, resolver_address: str
    ) -> None:
        mock_transport.eth_call.side_effect = RpcTransportError("RPC request failed: refused")
        client = L1ResolverClient(mock_transport, resolver_address)

        with pytest.raises(RpcTransportError):
            await client.resolve(WIRE, INNER)

    @pytest.mark.parametrize("result", ["0x", "0x1234", None, "garbage"])
    async def test_undecodable_result(
        self, mock_transport: MagicMock, resolver_address: str, result: Any
    ) -> None:
        mock_transport.eth_call.return_value = {"jsonrpc": "2.0", "id": 1, "result": result}
        client = L1ResolverClient(mock_transport, resolver_address)

        with pytest.raises(UnsupportedResolutionError):
            await client.resolve(WIRE, INNER)


# =============================================================================
# resolve_with_proof() Tests
# =============================================================================


class TestResolveWithProof:
    """L1ResolverClient.resolve_with_proof()."""

    async def test_success(
        self,
        mock_transport: MagicMock,
        resolver_address: str,
        result_envelope: Callable[[bytes], dict[str, Any]],
    ) -> None:
        mock_transport.eth_call.return_value = result_envelope(b"\x02" * 32)
        client = L1ResolverClient(mock_transport, resolver_address)

        assert await client.resolve_with_proof(b"response", b"extra") == b"\x02" * 32

        _, data = mock_transport.eth_call.call_args.args
        assert data[:4] == RESOLVE_WITH_PROOF_SELECTOR
        assert decode(["bytes", "bytes"], data[4:]) == (b"response", b"extra")

    async def test_revert(
        self,
        mock_transport: MagicMock,
        resolver_address: str,
        revert_envelope: Callable[..., dict[str, Any]],
    ) -> None:
        mock_transport.eth_call.return_value = revert_envelope(b"\x01\x02", "invalid signature")
        client = L1ResolverClient(mock_transport, resolver_address)

        with pytest.raises(ProofVerificationError, match="invalid signature"):
            await client.resolve_with_proof(b"response", b"extra")

    async def test_transport_error_becomes_proof_error(
        self, mock_transport: MagicMock, resolver_address: str
    ) -> None:
        mock_transport.eth_call.side_effect = RpcTransportError("RPC request failed: timeout")
        client = L1ResolverClient(mock_transport, resolver_address)

        with pytest.raises(ProofVerificationError) as exc_info:
            await client.resolve_with_proof(b"response", b"extra")
        assert isinstance(exc_info.value.__cause__, RpcTransportError)

    async def test_empty_result(self, mock_transport: MagicMock, resolver_address: str) -> None:
        mock_transport.eth_call.return_value = {"result": "0x"}
        client = L1ResolverClient(mock_transport, resolver_address)

        with pytest.raises(ProofVerificationError, match="no result"):
            await client.resolve_with_proof(b"response", b"extra")


# =============================================================================
# parse_offchain_lookup() Tests
# =============================================================================


class TestParseOffchainLookup:
    """L1ResolverClient.parse_offchain_lookup() never raises."""

    def test_hex_string(
        self,
        mock_transport: MagicMock,
        resolver_address: str,
        build_offchain_lookup: Callable[..., bytes],
    ) -> None:
        client = L1ResolverClient(mock_transport, resolver_address)
        lookup = client.parse_offchain_lookup("0x" + build_offchain_lookup(extra_data=b"x").hex())

        assert isinstance(lookup, OffchainLookup)
        assert lookup.extra_data == b"x"

    def test_raw_bytes(
        self,
        mock_transport: MagicMock,
        resolver_address: str,
        build_offchain_lookup: Callable[..., bytes],
    ) -> None:
        client = L1ResolverClient(mock_transport, resolver_address)
        assert client.parse_offchain_lookup(build_offchain_lookup()) is not None

    @pytest.mark.parametrize(
        "revert_data",
        ["execution reverted", "", "0x", "0x556f", "0x08c379a0" + "00" * 64, "0xzz", b"\x55"],
    )
    def test_not_a_lookup(
        self, mock_transport: MagicMock, resolver_address: str, revert_data: str | bytes
    ) -> None:
        client = L1ResolverClient(mock_transport, resolver_address)
        assert client.parse_offchain_lookup(revert_data) is None

    def test_odd_length_hex(self, mock_transport: MagicMock, resolver_address: str) -> None:
        client = L1ResolverClient(mock_transport, resolver_address)
        assert client.parse_offchain_lookup("0x556f1830a") is None
