"""Chip return-on-investment estimates.

Each chip gets a rough "points gained" figure:

- Triple Captain: the captain's raw score (the extra multiplier's worth).
- Bench Boost: points scored by the bench slots.
- Free Hit: gameweek points minus the trailing three-gameweek average.
- Wildcard: points over the chip gameweek and the next two, minus the
  trailing average for each of those gameweeks that has data.

The trailing baseline always looks back from the chip gameweek, while the
wildcard window looks forward from it (inclusive).
"""

from __future__ import annotations

from dataclasses import dataclass

from .gameweek import STARTER_COUNT
from .models import ChipUsage, Pick
from .stats import average

WILDCARD = "wildcard"
TRIPLE_CAPTAIN = "3xc"
BENCH_BOOST = "bboost"
FREE_HIT = "freehit"

CHIP_NAMES = (WILDCARD, TRIPLE_CAPTAIN, BENCH_BOOST, FREE_HIT)

CHIP_DISPLAY_NAMES = {
    WILDCARD: "Wildcard",
    TRIPLE_CAPTAIN: "Triple Captain",
    BENCH_BOOST: "Bench Boost",
    FREE_HIT: "Free Hit",
}

BASELINE_LOOKBACK = 3
WILDCARD_WINDOW = 3


@dataclass
class ChipEstimate:
    estimated_gain: float = 0.0
    versus_league_mean: float | None = None
    baseline: float | None = None
    window_size: int = 1


@dataclass
class ChipRoiEvent:
    entry: int
    team_name: str
    manager_name: str
    chip: str
    event: int
    estimated_gain: float
    versus_league_mean: float | None
    baseline: float | None
    window_size: int

    @property
    def display_name(self) -> str:
        return CHIP_DISPLAY_NAMES.get(self.chip, self.chip)

    def to_dict(self) -> dict:
        return {
            "entry": self.entry,
            "team_name": self.team_name,
            "manager_name": self.manager_name,
            "chip": self.chip,
            "chip_display_name": self.display_name,
            "event": self.event,
            "estimated_gain": self.estimated_gain,
            "versus_league_mean": self.versus_league_mean,
            "baseline": self.baseline,
            "window_size": self.window_size,
        }


def trailing_baseline(
    events: list[int],
    points_by_event: dict[int, int],
    target: int,
    lookback: int = BASELINE_LOOKBACK,
) -> float | None:
    """Average points over up to ``lookback`` analysis gameweeks before ``target``."""
    prior = [e for e in events if e < target]
    window = prior[max(0, len(prior) - lookback):]
    values = [points_by_event[e] for e in window if e in points_by_event]
    return average(values)


def _captain_raw_points(picks: list[Pick] | None) -> int:
    captain = next((p for p in picks or [] if p.is_captain), None)
    if captain is None or captain.points is None:
        return 0
    return captain.points


def _bench_points(picks: list[Pick] | None) -> int:
    return sum(
        p.points or 0
        for p in picks or []
        if p.position > STARTER_COUNT and p.multiplier == 0
    )


def estimate_chip(
    chip: ChipUsage,
    picks: list[Pick] | None,
    events: list[int],
    points_by_event: dict[int, int],
    league_mean_by_event: dict[int, float],
) -> ChipEstimate:
    event_points = points_by_event.get(chip.event)
    league_mean = league_mean_by_event.get(chip.event)
    est = ChipEstimate(baseline=trailing_baseline(events, points_by_event, chip.event))

    single_week = chip.name in (TRIPLE_CAPTAIN, BENCH_BOOST, FREE_HIT)
    if single_week and event_points is not None and league_mean is not None:
        est.versus_league_mean = event_points - league_mean

    if chip.name == TRIPLE_CAPTAIN:
        est.estimated_gain = _captain_raw_points(picks)

    elif chip.name == BENCH_BOOST:
        est.estimated_gain = _bench_points(picks)

    elif chip.name == FREE_HIT:
        if est.baseline is not None and event_points is not None:
            est.estimated_gain = event_points - est.baseline

    elif chip.name == WILDCARD:
        window = [e for e in events if chip.event <= e < chip.event + WILDCARD_WINDOW]
        window_points = [points_by_event[e] for e in window if e in points_by_event]
        est.window_size = len(window_points)

        if est.baseline is not None and est.window_size > 0:
            est.estimated_gain = sum(window_points) - est.baseline * est.window_size

        if est.window_size > 0:
            est.versus_league_mean = sum(
                points_by_event[e] - league_mean_by_event[e]
                for e in window
                if e in points_by_event and e in league_mean_by_event
            )

    return est
