"""
Resolver configuration models.

Loaded from YAML through
[BaseNameResolver.from_yaml()][basenames.resolver.service.BaseNameResolver.from_yaml]
or built in code. Every field has a default, so an empty mapping is a valid
mainnet configuration as long as the RPC URL is available from the
environment.

Examples:
    ```yaml
    network: sepolia
    rpc:
      url_env: SEPOLIA_RPC_URL
    timeouts:
      gateway: 5.0
    ```

See Also:
    [L1_RESOLVER_ADDRESSES][basenames.models.constants.L1_RESOLVER_ADDRESSES]:
        Per-network default contract addresses.
"""

from __future__ import annotations

import os
from typing import Any

from eth_utils import is_address, to_checksum_address
from pydantic import BaseModel, Field, field_validator, model_validator
from rfc3986 import uri_reference
from rfc3986.exceptions import UnpermittedComponentError, ValidationError
from rfc3986.validators import Validator

from basenames.models.constants import BASE_SUFFIX, L1_RESOLVER_ADDRESSES, Network
from basenames.utils.http import DEFAULT_MAX_RESPONSE_SIZE, DEFAULT_TIMEOUT


class RpcConfig(BaseModel):
    """Ethereum JSON-RPC endpoint.

    When ``url`` is not set it is read from the environment variable named
    by ``url_env`` (default: ``ETH_RPC_URL``). It may still be ``None``
    afterwards; the resolver only requires it when it has to build its own
    transport.
    """

    url: str | None = Field(default=None, description="JSON-RPC endpoint URL")
    url_env: str = Field(
        default="ETH_RPC_URL",
        min_length=1,
        description="Environment variable name for the endpoint URL",
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_url(cls, data: Any) -> Any:
        """Resolve the endpoint URL from the environment variable."""
        if isinstance(data, dict) and not data.get("url"):
            value = os.getenv(data.get("url_env") or "ETH_RPC_URL")
            if value:
                data = {**data, "url": value.strip()}
        return data

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        """Require an absolute http(s) URL."""
        if v is None:
            return None
        validator = (
            Validator()
            .require_presence_of("scheme", "host")
            .allow_schemes("http", "https")
            .check_validity_of("scheme", "host", "port", "path")
        )
        try:
            validator.validate(uri_reference(v.strip()).normalize())
        except UnpermittedComponentError:
            raise ValueError("Invalid scheme: must be http or https") from None
        except ValidationError as e:
            raise ValueError(f"Invalid URL: {e}") from None
        return v.strip()


class TimeoutsConfig(BaseModel):
    """Per-request timeouts (in seconds)."""

    rpc: float = Field(default=DEFAULT_TIMEOUT, ge=0.1, le=300.0, description="eth_call timeout")
    gateway: float = Field(
        default=DEFAULT_TIMEOUT, ge=0.1, le=300.0, description="Gateway HTTP timeout"
    )


class GatewayConfig(BaseModel):
    """Gateway response limits."""

    max_response_size: int = Field(
        default=DEFAULT_MAX_RESPONSE_SIZE,
        ge=1024,
        le=64 * 1_048_576,
        description="Maximum gateway response body size in bytes",
    )


class ResolverConfig(BaseModel):
    """Aggregate configuration for [BaseNameResolver][basenames.resolver.service.BaseNameResolver].

    Note:
        ``contract_address`` is stored in EIP-55 checksum form. Left unset,
        it takes the published ``L1Resolver`` address of ``network``.
    """

    network: Network = Field(default=Network.MAINNET, description="Ethereum network")
    contract_address: str | None = Field(default=None, description="L1Resolver contract address")
    suffix: str = Field(default=BASE_SUFFIX, min_length=1, description="Parent name")
    max_concurrency: int = Field(
        default=8, ge=1, le=256, description="Parallel resolutions in resolve_many()"
    )
    rpc: RpcConfig = Field(default_factory=lambda: RpcConfig.model_validate({}))
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)

    @field_validator("contract_address")
    @classmethod
    def validate_contract_address(cls, v: str | None) -> str | None:
        """Accept any 20-byte hex address and normalize it to checksum form."""
        if v is None:
            return None
        if not is_address(v):
            raise ValueError(f"Invalid contract address: {v}")
        return to_checksum_address(v)

    @field_validator("suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        """Normalize the suffix to lowercase without surrounding dots."""
        suffix = v.strip().strip(".").lower()
        if not suffix or "" in suffix.split("."):
            raise ValueError(f"Invalid suffix: {v!r}")
        return suffix

    @model_validator(mode="after")
    def default_contract_address(self) -> ResolverConfig:
        """Fill the contract address from the network when unset."""
        if self.contract_address is None:
            self.contract_address = to_checksum_address(L1_RESOLVER_ADDRESSES[self.network])
        return self
