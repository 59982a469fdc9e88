"""Resolution orchestration and its configuration.

Attributes:
    service: [BaseNameResolver][basenames.resolver.service.BaseNameResolver],
        the public entry point driving the CCIP-Read state machine.
    configs: [ResolverConfig][basenames.resolver.configs.ResolverConfig] and
        its nested pydantic models.
"""

from .configs import GatewayConfig, ResolverConfig, RpcConfig, TimeoutsConfig
from .service import BaseNameResolver


__all__ = [
    "BaseNameResolver",
    "GatewayConfig",
    "ResolverConfig",
    "RpcConfig",
    "TimeoutsConfig",
]
