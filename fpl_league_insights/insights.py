"""League-wide insight aggregation.

Runs in two passes. The accumulation pass walks every analysis gameweek
(league snapshot: scores, ownership, template squad, all-play) and then every
manager (captaincy, bench, template overlap, differentials, transfers,
chips). The finalization pass fills in ratios that need totals or the
league-wide maximum standard deviation.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field

from .all_play import AllPlayRecord, play_gameweek
from .chips import CHIP_NAMES, ChipRoiEvent, estimate_chip
from .gameweek import analysis_events, manager_points_by_event
from .models import Gameweek, Manager, Player
from .optimizer import bench_loss, captain_points
from .stats import average, standard_deviation, to_percent
from .template import (
    PositionContribution,
    count_ownership,
    low_ownership_threshold,
    score_active_picks,
    template_similarity,
    template_squad,
)
from .transfers import summarize_transfers

logger = logging.getLogger(__name__)


@dataclass
class ManagerLeagueInsight:
    entry: int
    team_name: str
    manager_name: str
    league_rank: int

    all_play_points: int = 0
    all_play_possible_points: int = 0
    all_play_wins: int = 0
    all_play_draws: int = 0
    all_play_losses: int = 0
    all_play_win_rate_pct: float | None = None
    all_play_point_rate_pct: float | None = None

    captaincy_efficiency_pct: float | None = None
    captaincy_actual_points: int = 0
    captaincy_optimal_points: int = 0
    captaincy_missed_points: int = 0

    bench_optimization_loss: int = 0

    transfer_roi: int | None = None
    transfer_in_points: int = 0
    transfer_hit_cost: int = 0
    transfer_count: int = 0

    chip_roi_total: float = 0.0
    chip_roi_by_type: dict[str, float] = field(
        default_factory=lambda: {name: 0.0 for name in CHIP_NAMES}
    )

    consistency_std_dev: float | None = None
    consistency_index: float | None = None
    top_three_gameweeks: int = 0
    bottom_three_gameweeks: int = 0

    template_similarity_pct: float | None = None
    differential_points: int = 0
    differential_points_pct: float | None = None

    position_contribution: PositionContribution = field(default_factory=PositionContribution)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["position_contribution"] = self.position_contribution.to_dict()
        return d


@dataclass
class LeagueInsights:
    managers: list[ManagerLeagueInsight]
    chip_events: list[ChipRoiEvent]

    def to_dict(self) -> dict:
        return {
            "managers": [m.to_dict() for m in self.managers],
            "chip_events": [c.to_dict() for c in self.chip_events],
        }


@dataclass
class _GameweekSnapshot:
    league_mean: float | None = None
    ownership: dict[int, int] = field(default_factory=dict)
    participants: int = 0
    template: set[int] | None = None


def _snapshot_gameweek(
    event: int,
    managers: list[Manager],
    points_by_manager: dict[int, dict[int, int]],
    records: dict[int, AllPlayRecord],
) -> _GameweekSnapshot:
    snap = _GameweekSnapshot()
    scores = [
        (m.entry, points_by_manager[m.entry][event])
        for m in managers
        if event in points_by_manager[m.entry]
    ]
    squads = [m.picks_for(event) for m in managers if m.picks_for(event)]

    if scores:
        snap.league_mean = average([points for _, points in scores])
        play_gameweek(scores, records)

    snap.ownership = count_ownership(squads)
    snap.participants = len(squads)
    if snap.ownership:
        snap.template = template_squad(snap.ownership)
    return snap


def _accumulate_manager(
    insight: ManagerLeagueInsight,
    manager: Manager,
    events: list[int],
    points: dict[int, int],
    snapshots: dict[int, _GameweekSnapshot],
    position_by_id: dict[int, int],
    league_size: int,
    template_scores: list[float],
) -> list[ChipRoiEvent]:
    for event in events:
        picks = manager.picks_for(event)
        if not picks:
            continue

        captaincy = captain_points(picks)
        if captaincy is not None:
            insight.captaincy_actual_points += captaincy[0]
            insight.captaincy_optimal_points += captaincy[1]

        loss = bench_loss(picks, position_by_id)
        if loss is not None:
            insight.bench_optimization_loss += loss

        snap = snapshots[event]
        if snap.template is not None:
            score = template_similarity(picks, snap.template)
            if score is not None:
                template_scores.append(score)

        if snap.ownership:
            threshold = low_ownership_threshold(snap.participants or league_size)
            insight.differential_points += score_active_picks(
                picks, snap.ownership, threshold, position_by_id, insight.position_contribution
            )

    transfers = summarize_transfers(manager)
    for key, value in transfers.to_dict().items():
        setattr(insight, key, value)

    event_set = set(events)
    league_means = {e: s.league_mean for e, s in snapshots.items() if s.league_mean is not None}
    chip_events = []
    for chip in manager.chips:
        if chip.event not in event_set:
            continue

        est = estimate_chip(chip, manager.picks_for(chip.event), events, points, league_means)
        insight.chip_roi_total += est.estimated_gain
        if chip.name in insight.chip_roi_by_type:
            insight.chip_roi_by_type[chip.name] += est.estimated_gain

        chip_events.append(
            ChipRoiEvent(
                entry=manager.entry,
                team_name=manager.entry_name,
                manager_name=manager.player_name,
                chip=chip.name,
                event=chip.event,
                estimated_gain=est.estimated_gain,
                versus_league_mean=est.versus_league_mean,
                baseline=est.baseline,
                window_size=est.window_size,
            )
        )
    return chip_events


def _finalize(
    insights: list[ManagerLeagueInsight],
    records: dict[int, AllPlayRecord],
    points_by_manager: dict[int, dict[int, int]],
    template_scores: dict[int, list[float]],
) -> None:
    max_std_dev = 0.0
    for insight in insights:
        record = records.get(insight.entry, AllPlayRecord())
        insight.all_play_points = record.points
        insight.all_play_possible_points = record.possible_points
        insight.all_play_wins = record.wins
        insight.all_play_draws = record.draws
        insight.all_play_losses = record.losses
        insight.all_play_win_rate_pct = record.win_rate_pct
        insight.all_play_point_rate_pct = record.point_rate_pct
        insight.top_three_gameweeks = record.top_three
        insight.bottom_three_gameweeks = record.bottom_three

        insight.captaincy_missed_points = max(
            0, insight.captaincy_optimal_points - insight.captaincy_actual_points
        )
        insight.captaincy_efficiency_pct = to_percent(
            insight.captaincy_actual_points, insight.captaincy_optimal_points
        )

        template_avg = average(template_scores[insight.entry])
        insight.template_similarity_pct = None if template_avg is None else template_avg * 100
        insight.differential_points_pct = to_percent(
            insight.differential_points, insight.position_contribution.total
        )

        insight.consistency_std_dev = standard_deviation(
            list(points_by_manager[insight.entry].values())
        )
        if insight.consistency_std_dev is not None:
            max_std_dev = max(max_std_dev, insight.consistency_std_dev)

    for insight in insights:
        if insight.consistency_std_dev is None:
            insight.consistency_index = None
        elif max_std_dev <= 0:
            insight.consistency_index = 100.0
        else:
            insight.consistency_index = (1 - insight.consistency_std_dev / max_std_dev) * 100


def compute_league_insights(
    managers: list[Manager],
    players: list[Player] | None,
    gameweeks: list[Gameweek] | None,
    current_gameweek: int,
) -> LeagueInsights:
    """Compute every manager's league insight record and the league's chip events.

    Managers come back ordered by league rank; chip events by estimated gain,
    highest first. Inputs are never mutated.
    """
    position_by_id = {p.id: p.position for p in players or []}
    events = analysis_events(managers, gameweeks, current_gameweek)
    points_by_manager = {m.entry: manager_points_by_event(m, events) for m in managers}
    logger.debug("Analysing %d managers over %d gameweeks", len(managers), len(events))

    # Accumulation pass
    records: dict[int, AllPlayRecord] = {}
    snapshots = {
        event: _snapshot_gameweek(event, managers, points_by_manager, records)
        for event in events
    }

    insights = []
    template_scores: dict[int, list[float]] = {}
    chip_events: list[ChipRoiEvent] = []
    for m in managers:
        insight = ManagerLeagueInsight(
            entry=m.entry,
            team_name=m.entry_name,
            manager_name=m.player_name,
            league_rank=m.rank,
        )
        template_scores[m.entry] = []
        chip_events.extend(
            _accumulate_manager(
                insight,
                m,
                events,
                points_by_manager[m.entry],
                snapshots,
                position_by_id,
                len(managers),
                template_scores[m.entry],
            )
        )
        insights.append(insight)

    # Finalization pass
    _finalize(insights, records, points_by_manager, template_scores)

    insights.sort(key=lambda i: i.league_rank)
    chip_events.sort(key=lambda c: c.estimated_gain, reverse=True)
    logger.debug("Computed %d chip events", len(chip_events))
    return LeagueInsights(managers=insights, chip_events=chip_events)
