"""
Pytest configuration and shared fixtures for basenames tests.

Provides:
- ABI payload builders (``OffchainLookup`` reverts, gateway tuples, records)
- JSON-RPC envelope builders for successful and reverted ``eth_call``
- Mock ledger transport and aiohttp session/response factories
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_abi import encode
from eth_utils import to_checksum_address

from basenames.codecs.abi import OFFCHAIN_LOOKUP_SELECTOR, RESOLVE_WITH_PROOF_SELECTOR
from basenames.models.constants import DEFAULT_L1_RESOLVER_ADDRESS


# ============================================================================
# Logging Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Constants
# ============================================================================


@pytest.fixture
def resolver_address() -> str:
    """Mainnet L1Resolver address in checksum form."""
    return to_checksum_address(DEFAULT_L1_RESOLVER_ADDRESS)


@pytest.fixture
def gateway_template() -> str:
    """ERC-3668 GET-style gateway URL template."""
    return "https://api.example.com/gateway/{sender}/{data}.json"


@pytest.fixture
def resolved_address() -> str:
    """A non-zero checksummed address used as the resolved record."""
    return to_checksum_address("0x849151d7d0bf1f34b70d5cad5149d28cc2308bf1")


# ============================================================================
# ABI Payload Builders
# ============================================================================


@pytest.fixture
def build_offchain_lookup(
    resolver_address: str, gateway_template: str
) -> Callable[..., bytes]:
    """Factory for ``OffchainLookup`` revert payloads (selector included)."""

    def _build(
        *,
        sender: str | None = None,
        urls: Sequence[str] | None = None,
        call_data: bytes = b"\xca\xfe",
        callback: bytes = RESOLVE_WITH_PROOF_SELECTOR,
        extra_data: bytes = b"extra-data",
    ) -> bytes:
        return OFFCHAIN_LOOKUP_SELECTOR + encode(
            ["address", "string[]", "bytes", "bytes4", "bytes"],
            [
                sender or resolver_address,
                list(urls) if urls is not None else [gateway_template],
                call_data,
                callback,
                extra_data,
            ],
        )

    return _build


@pytest.fixture
def build_gateway_tuple() -> Callable[..., bytes]:
    """Factory for gateway answers ``(bytes result, uint64 expires, bytes sig)``."""

    def _build(
        *,
        result: bytes = b"\x00" * 32,
        expires: int = 1_900_000_000,
        signature: bytes = b"\x1b" * 65,
    ) -> bytes:
        return encode(["bytes", "uint64", "bytes"], [result, expires, signature])

    return _build


@pytest.fixture
def encode_record() -> Callable[[str], bytes]:
    """Factory for ABI-encoded ``(address)`` records."""

    def _encode(address: str) -> bytes:
        return encode(["address"], [address])

    return _encode


# ============================================================================
# JSON-RPC Envelope Builders
# ============================================================================


@pytest.fixture
def result_envelope() -> Callable[[bytes], dict[str, Any]]:
    """Factory for a successful ``eth_call`` envelope returning ``(bytes)``."""

    def _build(payload: bytes) -> dict[str, Any]:
        return {"jsonrpc": "2.0", "id": 1, "result": "0x" + encode(["bytes"], [payload]).hex()}

    return _build


@pytest.fixture
def revert_envelope() -> Callable[[bytes], dict[str, Any]]:
    """Factory for a reverted ``eth_call`` envelope carrying ``error.data``."""

    def _build(data: bytes, message: str = "execution reverted") -> dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": 3, "message": message, "data": "0x" + data.hex()},
        }

    return _build


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def mock_transport() -> MagicMock:
    """Mock ledger transport; set ``eth_call`` return values per test."""
    transport = MagicMock()
    transport.eth_call = AsyncMock()
    transport.close = AsyncMock()
    return transport


def make_response(*chunks: bytes, status: int = 200, reason: str = "OK") -> MagicMock:
    """Build a mock aiohttp response yielding *chunks* then EOF."""
    resp = MagicMock()
    resp.status = status
    resp.reason = reason
    resp.content = MagicMock()
    resp.content.read = AsyncMock(side_effect=[*chunks, b""])
    return resp


def make_session(response: MagicMock | None = None, *, error: Exception | None = None) -> MagicMock:
    """Build a mock aiohttp session whose ``get``/``post`` yield *response*.

    When *error* is given, entering the request context raises it instead.
    """
    context = MagicMock()
    if error is not None:
        context.__aenter__ = AsyncMock(side_effect=error)
    else:
        context.__aenter__ = AsyncMock(return_value=response)
    context.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.get = MagicMock(return_value=context)
    session.post = MagicMock(return_value=context)
    session.close = AsyncMock()
    return session


@pytest.fixture
def response_factory() -> Callable[..., MagicMock]:
    """Expose [make_response][] to tests."""
    return make_response


@pytest.fixture
def session_factory() -> Callable[..., MagicMock]:
    """Expose [make_session][] to tests."""
    return make_session
