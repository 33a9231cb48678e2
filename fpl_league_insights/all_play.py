"""All-play standings: every manager plays every other manager each gameweek.

Win = 3 points, draw = 1 each, loss = 0. Top/bottom-three finishes are
bucketed by position in the sorted score list, so tied managers are split by
their original iteration order (stable sort).
"""

from __future__ import annotations

from dataclasses import dataclass

from .stats import to_percent

WIN_POINTS = 3
DRAW_POINTS = 1
FINISH_BUCKET = 3


@dataclass
class AllPlayRecord:
    points: int = 0
    possible_points: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    top_three: int = 0
    bottom_three: int = 0

    @property
    def matches(self) -> int:
        return self.wins + self.draws + self.losses

    @property
    def win_rate_pct(self) -> float | None:
        return to_percent(self.wins + self.draws * 0.5, self.matches)

    @property
    def point_rate_pct(self) -> float | None:
        return to_percent(self.points, self.possible_points)


def play_gameweek(
    scores: list[tuple[int, int]],
    records: dict[int, AllPlayRecord],
) -> None:
    """Apply one gameweek's round robin to ``records``.

    ``scores`` is a list of (entry, points) for every manager with a defined
    score that gameweek. Records are created on demand.
    """
    ranked = sorted(scores, key=lambda row: row[1], reverse=True)
    n = len(ranked)

    for index, (entry, _) in enumerate(ranked):
        record = records.setdefault(entry, AllPlayRecord())
        if index < FINISH_BUCKET:
            record.top_three += 1
        if index >= max(0, n - FINISH_BUCKET):
            record.bottom_three += 1

    for i in range(n):
        left_entry, left_points = ranked[i]
        left = records[left_entry]
        for j in range(i + 1, n):
            right_entry, right_points = ranked[j]
            right = records[right_entry]

            left.possible_points += WIN_POINTS
            right.possible_points += WIN_POINTS

            if left_points > right_points:
                left.points += WIN_POINTS
                left.wins += 1
                right.losses += 1
            elif left_points < right_points:
                right.points += WIN_POINTS
                right.wins += 1
                left.losses += 1
            else:
                left.points += DRAW_POINTS
                right.points += DRAW_POINTS
                left.draws += 1
                right.draws += 1


def compute_all_play(scores_by_event: dict[int, list[tuple[int, int]]]) -> dict[int, AllPlayRecord]:
    records: dict[int, AllPlayRecord] = {}
    for event in sorted(scores_by_event):
        play_gameweek(scores_by_event[event], records)
    return records
