"""Per-gameweek score derivation and analysis window selection.

Authoritative history points always win; the pick-derived values are only a
fallback for gameweeks where history is missing.
"""

from __future__ import annotations

from .models import Gameweek, GameweekHistory, Manager, Pick

STARTER_COUNT = 11


def derive_gameweek_points(picks: list[Pick] | None) -> int | None:
    if not picks:
        return None
    return sum((p.points or 0) * max(p.multiplier, 0) for p in picks)


def derive_bench_waste(picks: list[Pick] | None) -> int | None:
    """Points left on the bench: slots > 11 that were never multiplied in."""
    if not picks:
        return None
    return sum(
        p.points or 0
        for p in picks
        if p.position > STARTER_COUNT and p.multiplier == 0
    )


def resolve_points(history: GameweekHistory | None, picks: list[Pick] | None) -> int | None:
    if history is not None and history.points is not None:
        return history.points
    return derive_gameweek_points(picks)


def resolve_bench_waste(history: GameweekHistory | None, picks: list[Pick] | None) -> int | None:
    if history is not None and history.points_on_bench is not None:
        return history.points_on_bench
    return derive_bench_waste(picks)


def analysis_events(
    managers: list[Manager],
    gameweeks: list[Gameweek] | None,
    current_gameweek: int,
) -> list[int]:
    """Finished gameweeks from the calendar, else history events up to the current one."""
    if gameweeks:
        finished = sorted(gw.id for gw in gameweeks if gw.finished)
        if finished:
            return finished

    events = {
        gw.event
        for m in managers
        for gw in m.history
        if gw.event <= current_gameweek
    }
    return sorted(events)


def manager_points_by_event(manager: Manager, events: list[int]) -> dict[int, int]:
    """Resolved gameweek points for every event in ``events`` that has data."""
    history = manager.history_by_event()
    points: dict[int, int] = {}
    for event in events:
        value = resolve_points(history.get(event), manager.picks_for(event))
        if value is not None:
            points[event] = value
    return points
