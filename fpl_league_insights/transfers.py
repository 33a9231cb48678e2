from __future__ import annotations

from dataclasses import dataclass

from .models import Manager, Pick, Transfer


@dataclass
class TransferSummary:
    roi: int | None = None  # None = no transfers made
    in_points: int = 0
    hit_cost: int = 0
    count: int = 0

    def to_dict(self) -> dict:
        return {
            "transfer_roi": self.roi,
            "transfer_in_points": self.in_points,
            "transfer_hit_cost": self.hit_cost,
            "transfer_count": self.count,
        }


def group_transfers_by_event(transfers: list[Transfer]) -> dict[int, list[Transfer]]:
    grouped: dict[int, list[Transfer]] = {}
    for t in transfers:
        grouped.setdefault(t.event, []).append(t)
    return grouped


def pick_points(picks: list[Pick] | None, element: int) -> int:
    if not picks:
        return 0
    pick = next((p for p in picks if p.element == element), None)
    if pick is None or pick.points is None:
        return 0
    return pick.points


def summarize_transfers(manager: Manager) -> TransferSummary:
    """Net return of a manager's transfers: incoming players' gameweek points minus hits."""
    summary = TransferSummary()
    if not manager.transfers:
        return summary

    history = manager.history_by_event()
    summary.roi = 0
    for event, rows in group_transfers_by_event(manager.transfers).items():
        picks = manager.picks_for(event)
        in_points = sum(pick_points(picks, t.element_in) for t in rows)
        gw = history.get(event)
        hit_cost = gw.event_transfers_cost if gw else 0

        summary.in_points += in_points
        summary.hit_cost += hit_cost
        summary.count += len(rows)
        summary.roi += in_points - hit_cost

    return summary
