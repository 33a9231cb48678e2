from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field

from .gameweek import resolve_bench_waste, resolve_points
from .models import Manager, Player, Team

logger = logging.getLogger(__name__)

DIFFERENTIAL_MAX_OWNERSHIP = 2
TOP_DIFFERENTIALS = 5


@dataclass
class SeasonHighScore:
    points: int
    event: int
    manager_entry: int
    manager_name: str
    team_name: str


@dataclass
class DifferentialPlayerScore:
    element: int
    player_name: str
    team_short_name: str
    points: int


@dataclass
class SeasonAnomalies:
    best_gameweek_score: SeasonHighScore | None = None
    biggest_bench_waste: SeasonHighScore | None = None
    differential_top_five: list[DifferentialPlayerScore] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def _high_score(manager: Manager, event: int, points: int) -> SeasonHighScore:
    return SeasonHighScore(
        points=points,
        event=event,
        manager_entry=manager.entry,
        manager_name=manager.player_name,
        team_name=manager.entry_name,
    )


def _top_differentials(
    managers: list[Manager],
    players: list[Player],
    teams: dict[int, Team],
) -> list[DifferentialPlayerScore]:
    ownership: dict[int, dict[int, int]] = {}
    points: dict[tuple[int, int], int] = {}

    for m in managers:
        for event, picks in (m.picks_by_event or {}).items():
            owned = ownership.setdefault(event, {})
            for p in picks:
                owned[p.element] = owned.get(p.element, 0) + 1
                if p.points is not None:
                    points.setdefault((event, p.element), p.points)

    totals: dict[int, int] = {}
    for event, owned in ownership.items():
        for element, count in owned.items():
            if count > DIFFERENTIAL_MAX_OWNERSHIP:
                continue
            totals[element] = totals.get(element, 0) + points.get((event, element), 0)

    player_map = {p.id: p for p in players}
    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:TOP_DIFFERENTIALS]

    top = []
    for element, total in ranked:
        player = player_map.get(element)
        team = teams.get(player.team) if player else None
        top.append(
            DifferentialPlayerScore(
                element=element,
                player_name=player.name if player else f"Player #{element}",
                team_short_name=team.short_name if team else "UNK",
                points=total,
            )
        )
    return top


def compute_season_anomalies(
    managers: list[Manager],
    players: list[Player] | None,
    teams: dict[int, Team] | None,
    current_gameweek: int,
) -> SeasonAnomalies:
    """Season-wide record holders: best gameweek, worst bench, top differentials."""
    result = SeasonAnomalies()

    for m in managers:
        history = m.history_by_event()
        events = set(history) | set(m.picks_by_event or {})
        if current_gameweek > 0:
            events.add(current_gameweek)

        for event in sorted(events):
            picks = m.picks_for(event)

            points = resolve_points(history.get(event), picks)
            if points is not None:
                best = result.best_gameweek_score
                if best is None or points > best.points:
                    result.best_gameweek_score = _high_score(m, event, points)

            waste = resolve_bench_waste(history.get(event), picks)
            if waste is not None:
                worst = result.biggest_bench_waste
                if worst is None or waste > worst.points:
                    result.biggest_bench_waste = _high_score(m, event, waste)

    result.differential_top_five = _top_differentials(managers, players or [], teams or {})
    logger.debug(
        "Season anomalies: best=%s bench=%s differentials=%d",
        result.best_gameweek_score,
        result.biggest_bench_waste,
        len(result.differential_top_five),
    )
    return result
