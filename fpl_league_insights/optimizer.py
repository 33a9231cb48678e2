from __future__ import annotations

from itertools import product

from .gameweek import STARTER_COUNT
from .models import Pick

# Starting XI formation constraints
STARTING_MIN = {1: 1, 2: 3, 3: 2, 4: 1}
STARTING_MAX = {1: 1, 2: 5, 3: 5, 4: 3}


def captain_points(picks: list[Pick]) -> tuple[int, int] | None:
    """Return (actual, optimal) captain points for one gameweek.

    Optimal assumes the highest raw scorer in the squad had worn the armband
    with the same multiplier. None when there is no captain or their points
    are unknown.
    """
    captain = next((p for p in picks if p.is_captain), None)
    if captain is None or captain.points is None:
        return None

    multiplier = max(1, captain.multiplier)
    best_raw = max([0, *(p.points or 0 for p in picks)])
    return captain.points * multiplier, best_raw * multiplier


def actual_starter_points(picks: list[Pick]) -> int:
    return sum(p.points or 0 for p in picks if p.position <= STARTER_COUNT)


def optimal_starter_points(picks: list[Pick], position_by_id: dict[int, int]) -> int | None:
    """Best legal XI base points from the whole squad, or None if no XI is possible."""
    by_pos: dict[int, list[int]] = {1: [], 2: [], 3: [], 4: []}
    for p in picks:
        pos = position_by_id.get(p.element)
        if pos in by_pos:
            by_pos[pos].append(p.points or 0)

    for points in by_pos.values():
        points.sort(reverse=True)

    if not by_pos[1]:
        return None

    outfield = STARTER_COUNT - STARTING_MAX[1]
    best = None
    for d, m, f in product(
        range(STARTING_MIN[2], STARTING_MAX[2] + 1),
        range(STARTING_MIN[3], STARTING_MAX[3] + 1),
        range(STARTING_MIN[4], STARTING_MAX[4] + 1),
    ):
        if d + m + f != outfield:
            continue
        if len(by_pos[2]) < d or len(by_pos[3]) < m or len(by_pos[4]) < f:
            continue

        total = by_pos[1][0] + sum(by_pos[2][:d]) + sum(by_pos[3][:m]) + sum(by_pos[4][:f])
        if best is None or total > best:
            best = total

    return best


def bench_loss(picks: list[Pick], position_by_id: dict[int, int]) -> int | None:
    """Points lost to team selection this gameweek (never negative)."""
    optimal = optimal_starter_points(picks, position_by_id)
    if optimal is None:
        return None
    return max(0, optimal - actual_starter_points(picks))
