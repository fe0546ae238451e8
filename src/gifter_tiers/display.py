"""Rich terminal display for gifter-tiers."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from gifter_tiers.status import GifterStatus
from gifter_tiers.tiers import (
    TierDefinition,
    format_coin_amount,
    get_visible_tiers,
    tier_coin_range,
    tier_level_range,
)

console = Console()

_LOCKED = "???"


def _progress_bar(fraction: float, width: int = 20) -> str:
    """Render a progress bar as text: [████████░░░░░░░░░░░░]."""
    ratio = max(0.0, min(fraction, 1.0))
    filled = int(ratio * width)
    empty = width - filled
    return "[" + "\u2588" * filled + "\u2591" * empty + "]"


def print_status(status: GifterStatus) -> None:
    """Print the gifter status panel: tier, level, progress to next level."""
    color = status.tier_color
    level_max = "\u221e" if status.tier_level_max is None else str(status.tier_level_max)

    lines: list[str] = []
    lines.append("")
    lines.append(f"  [bold {color}]{status.tier_icon} {status.tier_name} - Level {status.level_in_tier}/{level_max}[/]")
    lines.append(f"  Overall level: {status.level}")

    bar = _progress_bar(status.progress_pct)
    pct = int(status.progress_pct * 100)
    lines.append(f"  {bar} {pct}%")
    if status.next_level_coins is not None:
        lines.append(
            f"  {format_coin_amount(status.coins_to_next_level)} coins to level {status.level_in_tier + 1}"
        )
    lines.append(f"  Lifetime: [bold]{status.lifetime_coins:,}[/] coins")

    if not status.show_locked_tiers:
        lines.append("")
        lines.append(f"  [dim]{status.locked_reason}[/]")
    lines.append("")

    panel = Panel(
        "\n".join(lines),
        title="[bold]GIFTER STATUS[/]",
        box=box.ROUNDED,
        border_style=color,
        width=50,
    )
    console.print(panel)


def print_tier_table(tiers: tuple[TierDefinition, ...], status: GifterStatus) -> None:
    """Print the tier ladder. Tiers past the viewer's preview are hidden entirely."""
    visible = get_visible_tiers(status.tier_key, status.show_locked_tiers, tiers)

    table = Table(
        title="Gifter Tiers",
        box=box.ROUNDED,
        border_style=status.tier_color,
        show_header=True,
        header_style="bold",
    )
    table.add_column("Tier", style="bold")
    table.add_column("Levels", justify="center")
    table.add_column("Unlock At", justify="right")

    for tier in visible:
        locked = tier.order > status.tier_order
        if locked and not status.show_locked_tiers:
            table.add_row(f"\U0001f512 {_LOCKED}", _LOCKED, _LOCKED)
            continue
        marker = " \u25c0" if tier.key == status.tier_key else ""
        table.add_row(
            f"[{tier.color}]{tier.icon} {tier.name}[/]{marker}",
            tier_level_range(tier),
            tier_coin_range(tier),
        )

    console.print(table)
    if not status.show_locked_tiers:
        console.print("  [dim]Some tiers are hidden. Keep gifting to reveal more![/]")


def print_levels(tier: TierDefinition, rows: list[tuple[int, int]]) -> None:
    """Print (level, start_coins) rows for a single tier."""
    table = Table(
        title=f"{tier.icon} {tier.name} Levels",
        box=box.ROUNDED,
        border_style=tier.color,
        show_header=True,
        header_style="bold",
    )
    table.add_column("Level", justify="right")
    table.add_column("Starts At", justify="right")
    table.add_column("Cost", justify="right")

    for i, (level, start) in enumerate(rows):
        if i + 1 < len(rows):
            cost = format_coin_amount(rows[i + 1][1] - start)
        elif tier.end is not None:
            cost = format_coin_amount(tier.end - start)
        else:
            cost = ""
        table.add_row(str(level), f"{start:,}", cost)

    console.print(table)


def print_error(message: str) -> None:
    console.print(f"[bold red]Error:[/] {message}")
