"""CLI commands for gifter-tiers."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.logging import RichHandler

from gifter_tiers.config import load_tier_table
from gifter_tiers.display import console, print_error, print_levels, print_status, print_tier_table
from gifter_tiers.levels import boundaries_for_tier, diamond_thresholds
from gifter_tiers.status import ViewerContext, compute_gifter_status
from gifter_tiers.tiers import TierDefinition, get_tier_by_key

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gifter-tiers",
        description="Gifter tier and level progression from lifetime coins gifted",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to config.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    status_p = subparsers.add_parser("status", help="Show tier, level and progress for a spend")
    status_p.add_argument("coins", help="Lifetime coins gifted")
    status_p.add_argument("--admin", action="store_true", help="View as an admin")
    status_p.add_argument("--json", action="store_true", help="Print raw JSON")

    tiers_p = subparsers.add_parser("tiers", help="Show the tier ladder")
    tiers_p.add_argument("--coins", default="0", help="Lifetime coins of the viewer")
    tiers_p.add_argument("--admin", action="store_true", help="View as an admin")

    levels_p = subparsers.add_parser("levels", help="Show level thresholds of a tier")
    levels_p.add_argument("tier_key", help="Tier key, e.g. starter or diamond")
    levels_p.add_argument("--count", "-n", type=int, default=10, help="Diamond levels to list")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def do_status(tiers: tuple[TierDefinition, ...], coins: str, admin: bool = False, as_json: bool = False) -> dict:
    """Compute and print a gifter status. Returns the status dict (useful for testing)."""
    status = compute_gifter_status(coins, ViewerContext(is_admin=admin), tiers)
    logger.debug("status for %r: %s L%d", coins, status.tier_key, status.level_in_tier)
    data = status.to_dict()
    if as_json:
        console.print_json(json.dumps(data))
    else:
        print_status(status)
    return data


def do_tiers(tiers: tuple[TierDefinition, ...], coins: str = "0", admin: bool = False) -> None:
    status = compute_gifter_status(coins, ViewerContext(is_admin=admin), tiers)
    print_tier_table(tiers, status)


def do_levels(tiers: tuple[TierDefinition, ...], tier_key: str, count: int = 10) -> list[tuple[int, int]]:
    """Print level start thresholds of a tier.

    Bounded tiers list every level; the unbounded tier lists its first `count` levels.
    Raises KeyError for an unknown tier key.
    """
    tier = get_tier_by_key(tier_key, tiers)
    if tier is None:
        raise KeyError(tier_key)
    if tier.is_unbounded:
        rows = diamond_thresholds(tier, max(1, count))
    else:
        boundaries = boundaries_for_tier(tier)
        rows = [(i + 1, b) for i, b in enumerate(boundaries[:-1])]
    print_levels(tier, rows)
    return rows


def main(argv: list[str] | None = None) -> None:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or "tiers"
    _configure_logging(args.verbose)

    tiers = load_tier_table(Path(args.config) if args.config else None)

    if command == "status":
        do_status(tiers, args.coins, admin=args.admin, as_json=args.json)
    elif command == "tiers":
        do_tiers(tiers, getattr(args, "coins", "0"), admin=getattr(args, "admin", False))
    elif command == "levels":
        try:
            do_levels(tiers, args.tier_key, count=args.count)
        except KeyError:
            known = ", ".join(t.key for t in tiers)
            print_error(f"Unknown tier '{args.tier_key}'. Known tiers: {known}")
            sys.exit(1)


if __name__ == "__main__":
    main()
