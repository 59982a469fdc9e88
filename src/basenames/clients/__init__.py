"""Network clients for the two remote parties of a CCIP-Read resolution.

Attributes:
    l1_resolver: [L1ResolverClient][basenames.clients.l1_resolver.L1ResolverClient],
        the ``resolve`` / ``resolveWithProof`` calls and revert-data extraction.
    gateway: [GatewayClient][basenames.clients.gateway.GatewayClient],
        URL template expansion and gateway HTTP queries.
"""

from .gateway import GatewayClient, expand_url, parse_gateway_body, select_method
from .l1_resolver import REVERT_DATA_STRATEGIES, L1ResolverClient, extract_revert_data


__all__ = [
    "REVERT_DATA_STRATEGIES",
    "GatewayClient",
    "L1ResolverClient",
    "expand_url",
    "extract_revert_data",
    "parse_gateway_body",
    "select_method",
]
