from __future__ import annotations

from dataclasses import dataclass

from .models import Pick
from .stats import jaccard_similarity

TEMPLATE_SQUAD_SIZE = 15
LOW_OWNERSHIP_SHARE = 0.2
LOW_OWNERSHIP_FLOOR = 2


@dataclass
class PositionContribution:
    gk: int = 0
    def_: int = 0
    mid: int = 0
    fwd: int = 0
    captain_bonus: int = 0
    total: int = 0

    def add(self, position: int | None, weighted_points: int) -> None:
        self.total += weighted_points
        if position == 1:
            self.gk += weighted_points
        elif position == 2:
            self.def_ += weighted_points
        elif position == 3:
            self.mid += weighted_points
        elif position == 4:
            self.fwd += weighted_points

    def to_dict(self) -> dict:
        return {
            "gk": self.gk,
            "def": self.def_,
            "mid": self.mid,
            "fwd": self.fwd,
            "captain_bonus": self.captain_bonus,
            "total": self.total,
        }


def count_ownership(pick_lists: list[list[Pick]]) -> dict[int, int]:
    """How many squads contain each element (a player counts once per squad)."""
    ownership: dict[int, int] = {}
    for picks in pick_lists:
        for element in {p.element for p in picks}:
            ownership[element] = ownership.get(element, 0) + 1
    return ownership


def template_squad(ownership: dict[int, int], size: int = TEMPLATE_SQUAD_SIZE) -> set[int]:
    """Most-owned elements, ties broken by lower element id."""
    ranked = sorted(ownership.items(), key=lambda kv: (-kv[1], kv[0]))
    return {element for element, _ in ranked[:size]}


def template_similarity(picks: list[Pick], template: set[int]) -> float | None:
    return jaccard_similarity({p.element for p in picks}, template)


def low_ownership_threshold(participants: int) -> int:
    return max(LOW_OWNERSHIP_FLOOR, int(participants * LOW_OWNERSHIP_SHARE))


def score_active_picks(
    picks: list[Pick],
    ownership: dict[int, int],
    threshold: int,
    position_by_id: dict[int, int],
    contribution: PositionContribution,
) -> int:
    """Add one gameweek's active picks to ``contribution``; return differential points."""
    differential = 0
    for p in picks:
        if p.multiplier <= 0:
            continue

        weighted = (p.points or 0) * p.multiplier
        contribution.add(position_by_id.get(p.element), weighted)

        if p.is_captain and p.points is not None:
            contribution.captain_bonus += max(0, p.multiplier - 1) * p.points

        owned = ownership.get(p.element, 0)
        if 0 < owned <= threshold:
            differential += weighted

    return differential
