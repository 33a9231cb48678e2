from __future__ import annotations

from rich.console import Console
from rich.table import Table

from .anomalies import SeasonAnomalies
from .breakdown import TeamBreakdownRow
from .chips import CHIP_DISPLAY_NAMES, ChipRoiEvent
from .insights import ManagerLeagueInsight
from .models import Manager


def _fmt(value: float | None, digits: int = 1) -> str:
    if value is None:
        return "-"
    return f"{value:.{digits}f}"


def _fmt_move(rank_change: int) -> str:
    if rank_change > 0:
        return f"[green]+{rank_change}[/green]"
    if rank_change < 0:
        return f"[red]{rank_change}[/red]"
    return "="


def _insights_table(
    insights: list[ManagerLeagueInsight],
    managers: dict[int, Manager],
    gameweek: int | None,
) -> Table:
    table = Table(title="League Insights", show_lines=False)
    table.add_column("#", justify="right", width=3)
    table.add_column("Move", justify="right", width=4)
    table.add_column("Team", style="bold white", min_width=14)
    table.add_column("Chip", style="cyan")
    table.add_column("All-play", justify="right")
    table.add_column("Win %", justify="right")
    table.add_column("Capt %", justify="right")
    table.add_column("Bench loss", justify="right")
    table.add_column("Xfer ROI", justify="right")
    table.add_column("Chip ROI", justify="right")
    table.add_column("Consist.", justify="right")
    table.add_column("Template %", justify="right")
    table.add_column("Diff %", justify="right", style="bold green")

    for i in insights:
        manager = managers.get(i.entry)
        chip = manager.chip_for(gameweek) if manager and gameweek is not None else None
        table.add_row(
            str(i.league_rank),
            _fmt_move(manager.rank_change) if manager else "-",
            i.team_name,
            CHIP_DISPLAY_NAMES.get(chip, chip) if chip else "",
            f"{i.all_play_points}/{i.all_play_possible_points}",
            _fmt(i.all_play_win_rate_pct),
            _fmt(i.captaincy_efficiency_pct),
            str(i.bench_optimization_loss),
            "-" if i.transfer_roi is None else f"{i.transfer_roi:+d}",
            f"{i.chip_roi_total:+.1f}",
            _fmt(i.consistency_index),
            _fmt(i.template_similarity_pct),
            _fmt(i.differential_points_pct),
        )
    return table


def _chips_table(chip_events: list[ChipRoiEvent]) -> Table:
    table = Table(title="Chip ROI", show_lines=False)
    table.add_column("GW", justify="right", width=3)
    table.add_column("Team", style="bold white", min_width=14)
    table.add_column("Chip", style="cyan")
    table.add_column("Gain", justify="right", style="bold green")
    table.add_column("vs Mean", justify="right")
    table.add_column("Baseline", justify="right")

    for c in chip_events:
        table.add_row(
            str(c.event),
            c.team_name,
            c.display_name,
            f"{c.estimated_gain:+.1f}",
            _fmt(c.versus_league_mean),
            _fmt(c.baseline),
        )
    return table


def _breakdown_table(
    title: str,
    rows: list[TeamBreakdownRow],
    peers: dict[int, list[tuple[int, str, TeamBreakdownRow]]],
) -> Table:
    table = Table(title=title, show_lines=False)
    table.add_column("Player", style="bold white", min_width=14)
    table.add_column("Team", width=5)
    table.add_column("Owned", justify="right", width=5)
    table.add_column("Started", justify="right", width=7)
    table.add_column("Capt", justify="right", width=4)
    table.add_column("Earned", justify="right", style="bold green", width=6)
    table.add_column("Capt +", justify="right", width=6)
    table.add_column("Avg XI", justify="right", width=6)
    table.add_column("Also owned by")

    for r in rows:
        others = ", ".join(
            f"{name} ({row.total_points_earned})" for _, name, row in peers.get(r.element, [])
        )
        table.add_row(
            r.player_name,
            r.team_short_name,
            str(r.weeks_owned),
            str(r.weeks_started),
            str(r.times_captained),
            str(r.total_points_earned),
            str(r.captain_bonus_points),
            _fmt(r.avg_points_when_started),
            others,
        )
    return table


def print_breakdown(
    manager: Manager,
    rows: list[TeamBreakdownRow],
    peers: dict[int, list[tuple[int, str, TeamBreakdownRow]]] | None = None,
) -> None:
    console = Console()
    console.print()
    title = f"{manager.entry_name} ({manager.player_name}) - Player Breakdown"
    console.print(_breakdown_table(title, rows, peers or {}))
    console.print(
        f"[bold]Points earned:[/bold] {sum(r.total_points_earned for r in rows)}"
        f" ([bold]captain bonus:[/bold] {sum(r.captain_bonus_points for r in rows)})"
    )
    console.print()


def print_report(
    insights: list[ManagerLeagueInsight],
    chip_events: list[ChipRoiEvent],
    anomalies: SeasonAnomalies | None = None,
    top_chips: int = 10,
    managers: list[Manager] | None = None,
    gameweek: int | None = None,
) -> None:
    console = Console()
    by_entry = {m.entry: m for m in managers or []}

    console.print()
    console.rule("[bold blue]FPL League Insights[/bold blue]")
    console.print()

    console.print(_insights_table(insights, by_entry, gameweek))
    console.print()

    if chip_events:
        console.print(_chips_table(chip_events[:top_chips]))
        console.print()

    if anomalies:
        best = anomalies.best_gameweek_score
        if best:
            console.print(
                f"[bold]Best gameweek:[/bold] {best.points} pts by {best.team_name} (GW{best.event})"
            )
        bench = anomalies.biggest_bench_waste
        if bench:
            console.print(
                f"[bold]Biggest bench waste:[/bold] {bench.points} pts by {bench.team_name} (GW{bench.event})"
            )
        if anomalies.differential_top_five:
            names = ", ".join(
                f"{d.player_name} ({d.team_short_name}) {d.points}"
                for d in anomalies.differential_top_five
            )
            console.print(f"[bold]Top differentials:[/bold] {names}")
        console.print()
