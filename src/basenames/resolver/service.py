"""
Basenames resolution service.

[BaseNameResolver][basenames.resolver.service.BaseNameResolver] is the
public entry point. It drives one CCIP-Read resolution per name through
the state machine:

```text
START -> VALIDATED -> L1_CALLED -> RESOLVED
                          |
                          +-> OFFCHAIN_DETECTED -> GATEWAY_QUERIED
                                                -> PROOF_VERIFIED -> RESOLVED
(any state) -> FAILED(kind)
```

Steps of one resolution run strictly in order; independent resolutions
share the two transports and may run concurrently
([resolve_many()][basenames.resolver.service.BaseNameResolver.resolve_many]).
Every failure is returned as a
[ResolutionOutcome][basenames.models.outcome.ResolutionOutcome]; only
``asyncio.CancelledError`` propagates.

Examples:
    ```python
    async with BaseNameResolver("https://eth.example.com") as resolver:
        outcome = await resolver.resolve("jesse")
        outcome.name     # 'jesse.base.eth'
        outcome.address  # '0x849151d7D0bF1F34b70d5caD5149D28CC2308bf1' or None
    ```

See Also:
    [ResolverConfig][basenames.resolver.configs.ResolverConfig]: Configuration
        model accepted by the constructor and factories.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from basenames.clients.gateway import GatewayClient
from basenames.clients.l1_resolver import L1ResolverClient
from basenames.codecs.abi import decode_address, decode_gateway_tuple, encode_addr_call_data
from basenames.codecs.name import encode_wire, name_id, normalize_name, validate_name
from basenames.core.exceptions import (
    ClientClosedError,
    ConfigurationError,
    ContractRevertError,
    GatewayResponseMalformedError,
    InvalidNameError,
    NoGatewayUrlsError,
    ResolutionError,
)
from basenames.core.logger import Logger
from basenames.core.yaml import load_yaml
from basenames.models.constants import L1_RESOLVER_ADDRESSES, ErrorKind, ResolutionState
from basenames.models.lookup import OffchainLookup
from basenames.models.outcome import ResolutionOutcome
from basenames.utils.rpc import JsonRpcClient, LedgerTransport

from .configs import ResolverConfig


class BaseNameResolver:
    """Resolve Basenames (``*.base.eth``) to addresses via CCIP-Read.

    The resolver owns a [JsonRpcClient][basenames.utils.rpc.JsonRpcClient]
    and a [GatewayClient][basenames.clients.gateway.GatewayClient] unless
    they are injected; injected transports are left open by
    [close()][basenames.resolver.service.BaseNameResolver.close].

    Examples:
        ```python
        resolver = BaseNameResolver.from_yaml("config/resolver.yaml")
        try:
            outcomes = await resolver.resolve_many(["jesse", "vitalik.base.eth"])
        finally:
            await resolver.close()
        ```
    """

    def __init__(
        self,
        rpc_url: str | None = None,
        contract_address: str | None = None,
        *,
        config: ResolverConfig | None = None,
        transport: LedgerTransport | None = None,
        gateway: GatewayClient | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Build a resolver. No connection is opened until the first call.

        Args:
            rpc_url: JSON-RPC endpoint; overrides ``config.rpc.url``.
            contract_address: ``L1Resolver`` address; overrides
                ``config.contract_address``.
            config: Full configuration (default: mainnet defaults).
            transport: Ledger transport to use instead of a ``JsonRpcClient``.
            gateway: Gateway client to use instead of a default one.
            logger: Structured logger shared with the owned clients.

        Raises:
            ConfigurationError: If the configuration is invalid, or no RPC
                URL is available and no transport was injected.
        """
        self._config = self._merge_config(config, rpc_url, contract_address)
        self._logger = logger or Logger("resolver")

        if transport is None:
            if self._config.rpc.url is None:
                raise ConfigurationError(
                    f"No RPC URL: pass rpc_url or set {self._config.rpc.url_env}"
                )
            transport = JsonRpcClient(
                self._config.rpc.url, timeout=self._config.timeouts.rpc, logger=logger
            )
            self._owns_transport = True
        else:
            self._owns_transport = False

        if gateway is None:
            gateway = GatewayClient(
                timeout=self._config.timeouts.gateway,
                max_response_size=self._config.gateway.max_response_size,
                logger=logger,
            )
            self._owns_gateway = True
        else:
            self._owns_gateway = False

        self._transport = transport
        self._gateway = gateway
        self._l1 = L1ResolverClient(transport, self.contract_address, logger=logger)
        self._closed = False

    @staticmethod
    def _merge_config(
        config: ResolverConfig | None,
        rpc_url: str | None,
        contract_address: str | None,
    ) -> ResolverConfig:
        if config is not None and rpc_url is None and contract_address is None:
            return config

        data: dict[str, Any] = config.model_dump() if config is not None else {}
        if rpc_url is not None:
            data["rpc"] = {**data.get("rpc", {}), "url": rpc_url}
        if contract_address is not None:
            data["contract_address"] = contract_address

        try:
            return ResolverConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid resolver configuration: {e}") from e

    @classmethod
    def from_yaml(cls, config_path: str | Path, **kwargs: Any) -> BaseNameResolver:
        """Create a resolver from a YAML configuration file.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ConfigurationError: If the file or its contents are invalid.
        """
        return cls.from_dict(load_yaml(config_path), **kwargs)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any], **kwargs: Any) -> BaseNameResolver:
        """Create a resolver from a configuration dictionary.

        Args:
            config_dict: Settings matching
                [ResolverConfig][basenames.resolver.configs.ResolverConfig].
            **kwargs: Forwarded to the constructor (``transport``,
                ``gateway``, ``logger``).
        """
        try:
            config = ResolverConfig.model_validate(config_dict)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid resolver configuration: {e}") from e
        return cls(config=config, **kwargs)

    # -- Properties ---------------------------------------------------------

    @property
    def config(self) -> ResolverConfig:
        return self._config

    @property
    def contract_address(self) -> str:
        """Checksummed ``L1Resolver`` address the resolver calls."""
        return self._config.contract_address or L1_RESOLVER_ADDRESSES[self._config.network]

    @property
    def is_closed(self) -> bool:
        return self._closed

    # -- Resolution ---------------------------------------------------------

    async def resolve(self, name: str) -> ResolutionOutcome:
        """Resolve *name* to an address.

        A bare label gets the configured suffix appended and the name is
        lowercased before hashing.

        Returns:
            A resolved outcome (``address`` is ``None`` when no record is
            set) or a failed outcome carrying the
            [ErrorKind][basenames.models.constants.ErrorKind] of the step
            that failed.
        """
        trace: list[ResolutionState] = [ResolutionState.START]
        canonical = name.strip() if isinstance(name, str) else repr(name)

        try:
            if self._closed:
                raise ClientClosedError("Resolver is closed")
            canonical = self._validate(name)
            trace.append(ResolutionState.VALIDATED)
            self._logger.debug("resolution_started", name=canonical)
            address = await self._resolve_validated(canonical, trace)
        except ResolutionError as e:
            self._logger.info(
                "resolution_failed", name=canonical, kind=e.kind.value, error=str(e)
            )
            return ResolutionOutcome.failed(canonical, e.kind, str(e), tuple(trace))
        except Exception as e:  # resolution error boundary
            self._logger.exception("resolution_crashed", name=canonical, error=str(e))
            return ResolutionOutcome.failed(
                canonical, ErrorKind.NETWORK_ERROR, f"Unexpected error: {e}", tuple(trace)
            )

        self._logger.info("resolution_succeeded", name=canonical, address=address)
        return ResolutionOutcome.resolved(canonical, address, tuple(trace))

    async def resolve_many(self, names: Iterable[str]) -> list[ResolutionOutcome]:
        """Resolve several names concurrently, preserving input order.

        At most ``config.max_concurrency`` resolutions are in flight at once.
        """
        semaphore = asyncio.Semaphore(self._config.max_concurrency)

        async def _bounded(name: str) -> ResolutionOutcome:
            async with semaphore:
                return await self.resolve(name)

        return list(await asyncio.gather(*(_bounded(name) for name in names)))

    def _validate(self, name: str) -> str:
        if not isinstance(name, str):
            raise InvalidNameError(f"Name must be a string, got {type(name).__name__}")
        stripped = name.strip()
        if not validate_name(stripped):
            raise InvalidNameError(f"Invalid name format: {name!r}")
        return normalize_name(stripped, self._config.suffix)

    async def _resolve_validated(self, name: str, trace: list[ResolutionState]) -> str | None:
        wire_name = encode_wire(name)
        addr_call_data = encode_addr_call_data(name_id(name))

        trace.append(ResolutionState.L1_CALLED)
        try:
            record = await self._l1.resolve(wire_name, addr_call_data)
        except ContractRevertError as e:
            lookup = self._l1.parse_offchain_lookup(e.revert_data)
            if lookup is None:
                raise
            trace.append(ResolutionState.OFFCHAIN_DETECTED)
            record = await self._resolve_offchain(name, lookup, trace)

        return decode_address(record)

    async def _resolve_offchain(
        self,
        name: str,
        lookup: OffchainLookup,
        trace: list[ResolutionState],
    ) -> bytes:
        url = lookup.first_url
        if url is None:
            raise NoGatewayUrlsError("No gateway URLs in OffchainLookup")
        self._logger.debug(
            "offchain_lookup_detected", name=name, sender=lookup.sender, urls=len(lookup.urls)
        )

        response = await self._gateway.query(url, lookup.sender, lookup.call_data)
        trace.append(ResolutionState.GATEWAY_QUERIED)

        signed = decode_gateway_tuple(response)
        if signed is None:
            raise GatewayResponseMalformedError(
                "Gateway response is not a (bytes, uint64, bytes) tuple"
            )
        self._logger.debug(
            "gateway_response_decoded",
            name=name,
            expires=signed.expires,
            expired=signed.is_expired(time.time()),
        )

        record = await self._l1.resolve_with_proof(response, lookup.extra_data)
        trace.append(ResolutionState.PROOF_VERIFIED)
        return record

    # -- Lifecycle ----------------------------------------------------------

    async def close(self) -> None:
        """Release owned transports. Idempotent; later resolutions fail fast."""
        if self._closed:
            return
        self._closed = True
        if self._owns_transport:
            await self._transport.close()
        if self._owns_gateway:
            await self._gateway.close()
        self._logger.debug("resolver_closed")

    async def __aenter__(self) -> BaseNameResolver:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any | None,
    ) -> None:
        await self.close()

    def __repr__(self) -> str:
        return (
            f"BaseNameResolver(network={self._config.network.value}, "
            f"contract_address={self.contract_address}, closed={self._closed})"
        )
