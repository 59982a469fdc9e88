"""CLI entry point for Basenames resolution.

Resolves one or more names and prints one line per name, or a JSON array
with ``--json``.

Examples:
    ```bash
    python -m basenames jesse --rpc-url https://eth.example.com
    python -m basenames jesse.base.eth vitalik --network sepolia --json
    python -m basenames jesse --config config/resolver.yaml --log-level DEBUG
    ```

Exit codes: ``0`` when every name resolved (with or without a record),
``1`` when any resolution failed, ``2`` on configuration errors.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from basenames.core.exceptions import ConfigurationError
from basenames.core.logger import Logger, StructuredFormatter
from basenames.core.yaml import load_yaml
from basenames.models.constants import Network
from basenames.models.outcome import ResolutionOutcome
from basenames.resolver.service import BaseNameResolver


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2

logger = Logger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="basenames",
        description="Resolve Basenames (*.base.eth) to addresses via CCIP-Read",
    )

    parser.add_argument(
        "names",
        nargs="+",
        metavar="NAME",
        help="Name to resolve (bare labels get .base.eth appended)",
    )

    parser.add_argument(
        "--rpc-url",
        help="Ethereum JSON-RPC endpoint (default: $ETH_RPC_URL)",
    )

    parser.add_argument(
        "--network",
        choices=[n.value for n in Network],
        help="Network whose L1Resolver deployment to use (default: mainnet)",
    )

    parser.add_argument(
        "--contract",
        help="L1Resolver contract address (overrides --network)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Resolver config path (YAML)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print outcomes as a JSON array",
    )

    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Configure the root logger with structured formatting."""
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def build_config(args: argparse.Namespace) -> dict[str, Any]:
    """Merge the YAML config (if any) with command-line overrides."""
    config_dict = load_yaml(args.config) if args.config else {}
    if args.network:
        config_dict["network"] = args.network
    if args.contract:
        config_dict["contract_address"] = args.contract
    if args.rpc_url:
        config_dict["rpc"] = {**(config_dict.get("rpc") or {}), "url": args.rpc_url}
    return config_dict


def format_outcome(outcome: ResolutionOutcome) -> str:
    """Render one outcome as a single human-readable line."""
    if not outcome.ok:
        kind = outcome.error_kind.value if outcome.error_kind else "error"
        return f"{outcome.name} !! {kind}: {outcome.error}"
    if outcome.address is None:
        return f"{outcome.name} -> (no record)"
    return f"{outcome.name} -> {outcome.address}"


async def main(argv: list[str] | None = None) -> int:
    """Main entry point: parse args, build the resolver, and resolve every name."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        resolver = BaseNameResolver.from_dict(build_config(args))
    except (ConfigurationError, FileNotFoundError) as e:
        logger.error("configuration_failed", error=str(e))
        return EXIT_CONFIG

    try:
        async with resolver:
            outcomes = await resolver.resolve_many(args.names)
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 130

    if args.json:
        print(json.dumps([o.to_dict() for o in outcomes], indent=2))
    else:
        for outcome in outcomes:
            print(format_outcome(outcome))

    return EXIT_OK if all(o.ok for o in outcomes) else EXIT_FAILED


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
