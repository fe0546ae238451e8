"""Configuration file management for gifter-tiers.

Reads and writes ~/.gifter-tiers/config.json. The only setting today is an
optional replacement tier table under the "tiers" key; anything unreadable or
invalid falls back to the built-in table.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from gifter_tiers.tiers import GIFTER_TIERS, TierDefinition, TierTableError, validate_tier_table

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH: Path = Path.home() / ".gifter-tiers" / "config.json"


def load_config(config_path: Path | None = None) -> dict:
    """Load config from JSON file. Returns {} if file missing or invalid."""
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        logger.warning("Ignoring unreadable config file %s", path)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict, config_path: Path | None = None) -> None:
    """Write config dict to JSON file. Creates parent dirs if needed."""
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def tier_to_dict(tier: TierDefinition) -> dict[str, Any]:
    return {
        "key": tier.key,
        "name": tier.name,
        "order": tier.order,
        "start": tier.start,
        "end": tier.end,
        "growth_factor": tier.growth_factor,
        "level_count": tier.level_count,
        "color": tier.color,
        "icon": tier.icon,
        "base_cost": tier.base_cost,
    }


def tier_from_dict(raw: dict[str, Any]) -> TierDefinition:
    """Build a TierDefinition from its JSON form.

    Raises TierTableError if a required field is missing or has the wrong type.
    """
    try:
        end = raw.get("end")
        level_count = raw.get("level_count")
        base_cost = raw.get("base_cost")
        return TierDefinition(
            key=str(raw["key"]),
            name=str(raw["name"]),
            order=int(raw["order"]),
            start=int(raw["start"]),
            end=None if end is None else int(end),
            growth_factor=float(raw["growth_factor"]),
            level_count=None if level_count is None else int(level_count),
            color=str(raw.get("color", "#9CA3AF")),
            icon=str(raw.get("icon", "")),
            base_cost=None if base_cost is None else int(base_cost),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise TierTableError(f"invalid tier entry {raw!r}: {exc}") from exc


def load_tier_table(config_path: Path | None = None) -> tuple[TierDefinition, ...]:
    """Return the configured tier table, or the built-in one if unset or invalid."""
    raw_tiers = load_config(config_path).get("tiers")
    if not raw_tiers:
        return GIFTER_TIERS
    try:
        if not isinstance(raw_tiers, list):
            raise TierTableError("'tiers' must be a list")
        tiers = tuple(tier_from_dict(t) for t in raw_tiers)
        validate_tier_table(tiers)
    except TierTableError as exc:
        logger.warning("Using built-in tier table, configured one is invalid: %s", exc)
        return GIFTER_TIERS
    return tiers


def set_tier_table(tiers: tuple[TierDefinition, ...], config_path: Path | None = None) -> None:
    """Validate and persist a tier table to config. Raises TierTableError if invalid."""
    validate_tier_table(tiers)
    config = load_config(config_path)
    config["tiers"] = [tier_to_dict(t) for t in tiers]
    save_config(config, config_path)
