"""
Client for the Basenames ``L1Resolver`` contract on Ethereum.

Issues the two read-only calls of the CCIP-Read flow:

1. ``resolve(bytes name, bytes data)`` -- answers directly or reverts with
   ``OffchainLookup``;
2. ``resolveWithProof(bytes response, bytes extraData)`` -- verifies the
   gateway's signed answer and returns the record.

Node implementations disagree on where they put revert data in a JSON-RPC
error, so extraction walks an ordered list of strategies
([REVERT_DATA_STRATEGIES][basenames.clients.l1_resolver.REVERT_DATA_STRATEGIES])
and takes the first hex payload found.

See Also:
    [basenames.codecs.abi][]: Encodes the calls and decodes their results.
    [JsonRpcClient][basenames.utils.rpc.JsonRpcClient]: Default ledger transport.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from eth_utils import decode_hex, to_checksum_address

from basenames.codecs.abi import (
    decode_bytes_result,
    decode_offchain_lookup,
    encode_resolve_call,
    encode_resolve_with_proof_call,
)
from basenames.core.exceptions import (
    ContractRevertError,
    ProofVerificationError,
    RpcTransportError,
    UnsupportedResolutionError,
)
from basenames.core.logger import Logger
from basenames.models.lookup import OffchainLookup
from basenames.utils.rpc import LedgerTransport


_HEX_PAYLOAD = re.compile(r"0x[0-9a-fA-F]{8,}")
_HEX_STRING = re.compile(r"0x[0-9a-fA-F]*")

RevertDataStrategy = Callable[[dict[str, Any]], str | None]


def _clean(value: Any) -> str | None:
    """Trim whitespace and one pair of surrounding quotes from a string value."""
    if not isinstance(value, str):
        return None
    text = value.strip().removeprefix('"').removesuffix('"')
    return text or None


def _as_hex(value: Any) -> str | None:
    """Return *value* if it is a non-empty ``0x`` hex string, else ``None``."""
    text = _clean(value)
    if text is None or text == "0x" or not _HEX_STRING.fullmatch(text):
        return None
    return text


def _error_object(envelope: dict[str, Any]) -> dict[str, Any]:
    error = envelope.get("error")
    return error if isinstance(error, dict) else {}


def _from_error_data(envelope: dict[str, Any]) -> str | None:
    """``error.data`` as a string, or nested as ``error.data.data``."""
    data = _error_object(envelope).get("data")
    if isinstance(data, dict):
        data = data.get("data")
    return _as_hex(data)


def _from_revert_reason(envelope: dict[str, Any]) -> str | None:
    """A hex payload embedded in the textual ``error.message``."""
    message = _clean(_error_object(envelope).get("message"))
    if message is None:
        return None
    match = _HEX_PAYLOAD.search(message)
    return match.group(0) if match else None


def _from_result_value(envelope: dict[str, Any]) -> str | None:
    """A non-empty raw ``result`` value returned alongside the failure."""
    return _as_hex(envelope.get("result"))


REVERT_DATA_STRATEGIES: tuple[tuple[str, RevertDataStrategy], ...] = (
    ("error_data", _from_error_data),
    ("revert_reason", _from_revert_reason),
    ("result_value", _from_result_value),
)


def extract_revert_data(envelope: dict[str, Any]) -> tuple[str, str]:
    """Pull the revert payload out of a failed ``eth_call`` envelope.

    Tries each of [REVERT_DATA_STRATEGIES][basenames.clients.l1_resolver.REVERT_DATA_STRATEGIES]
    in order. When none yields a hex payload, the node's error message is
    returned instead.

    Returns:
        ``(source, revert_data)`` where *source* names the strategy that
        matched, or ``"error_message"`` for the fallback.
    """
    for source, strategy in REVERT_DATA_STRATEGIES:
        candidate = strategy(envelope)
        if candidate is not None:
            return source, candidate
    message = _clean(_error_object(envelope).get("message")) or "execution reverted"
    return "error_message", message


def _failed(envelope: dict[str, Any]) -> bool:
    return envelope.get("error") is not None


def _decode_result(envelope: dict[str, Any]) -> bytes | None:
    raw = _as_hex(envelope.get("result"))
    if raw is None:
        return None
    try:
        return decode_bytes_result(decode_hex(raw))
    except ValueError:
        return None


class L1ResolverClient:
    """Read-only client for the ``L1Resolver`` contract.

    Attributes:
        contract_address: EIP-55 address of the resolver contract.

    Examples:
        ```python
        client = L1ResolverClient(JsonRpcClient(rpc_url), DEFAULT_L1_RESOLVER_ADDRESS)
        try:
            record = await client.resolve(encode_wire(name), encode_addr_call_data(name_id(name)))
        except ContractRevertError as e:
            lookup = client.parse_offchain_lookup(e.revert_data)
        ```
    """

    def __init__(
        self,
        transport: LedgerTransport,
        contract_address: str,
        *,
        logger: Logger | None = None,
    ) -> None:
        self._transport = transport
        self.contract_address = to_checksum_address(contract_address)
        self._logger = logger or Logger("l1_resolver")

    async def resolve(self, wire_name: bytes, addr_call_data: bytes) -> bytes:
        """Call ``resolve(name, data)`` and return the ``bytes`` result.

        Args:
            wire_name: DNS wire-encoded name.
            addr_call_data: Inner ``addr(bytes32)`` call data.

        Returns:
            The ABI-encoded record returned by the resolver.

        Raises:
            ContractRevertError: If the call reverted. The payload is
                surfaced verbatim and not interpreted here.
            RpcTransportError: If the node could not be reached.
            UnsupportedResolutionError: If the call succeeded but its return
                value is not a ``(bytes)`` tuple.
        """
        call_data = encode_resolve_call(wire_name, addr_call_data)
        envelope = await self._transport.eth_call(self.contract_address, call_data)

        if _failed(envelope):
            source, revert_data = extract_revert_data(envelope)
            self._logger.debug("l1_resolve_reverted", source=source, revert_data=revert_data)
            raise ContractRevertError(revert_data)

        result = _decode_result(envelope)
        if result is None:
            self._logger.debug("l1_resolve_undecodable", result=envelope.get("result"))
            raise UnsupportedResolutionError("resolve() returned no decodable result")

        self._logger.debug("l1_resolve_returned", size=len(result))
        return result

    async def resolve_with_proof(self, response: bytes, extra_data: bytes) -> bytes:
        """Call ``resolveWithProof(response, extraData)`` and return the record.

        Any failure is terminal: the gateway answer is never retried.

        Raises:
            ProofVerificationError: If the call reverted, the node was
                unreachable, or the return value could not be decoded.
        """
        call_data = encode_resolve_with_proof_call(response, extra_data)
        try:
            envelope = await self._transport.eth_call(self.contract_address, call_data)
        except RpcTransportError as e:
            raise ProofVerificationError(f"Proof verification failed: {e}") from e

        if _failed(envelope):
            message = _clean(_error_object(envelope).get("message")) or "execution reverted"
            self._logger.debug("l1_proof_rejected", error=message)
            raise ProofVerificationError(f"Proof verification failed: {message}")

        result = _decode_result(envelope)
        if result is None:
            raise ProofVerificationError("Proof verification failed: no result returned")

        self._logger.debug("l1_proof_accepted", size=len(result))
        return result

    def parse_offchain_lookup(self, revert_data: str | bytes) -> OffchainLookup | None:
        """Decode an ``OffchainLookup`` from a revert payload.

        Accepts the raw bytes or the ``0x`` hex string carried by
        [ContractRevertError][basenames.core.exceptions.ContractRevertError].
        Never raises: anything that is not a well-formed lookup yields ``None``.
        """
        if isinstance(revert_data, str):
            text = _as_hex(revert_data)
            if text is None:
                return None
            try:
                raw = decode_hex(text)
            except ValueError:
                return None
        else:
            raw = bytes(revert_data)

        lookup = decode_offchain_lookup(raw)
        if lookup is None:
            self._logger.debug("offchain_lookup_unparsed", revert_data=raw[:4])
        return lookup

    def __repr__(self) -> str:
        return f"L1ResolverClient(contract_address={self.contract_address})"
