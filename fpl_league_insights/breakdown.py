"""Per-manager player breakdown: what each player in a manager's squads earned them."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from .models import Pick, Player, Team


@dataclass
class TeamBreakdownRow:
    element: int
    player_name: str
    team_short_name: str
    total_player_points: int = 0
    earned_points_ignore_captaincy: int = 0
    total_points_earned: int = 0
    weeks_owned: int = 0
    weeks_started: int = 0
    times_captained: int = 0
    captain_bonus_points: int = 0
    starter_points_total: int = 0
    starter_points_count: int = 0

    @property
    def avg_points_when_started(self) -> float | None:
        if self.starter_points_count == 0:
            return None
        return self.starter_points_total / self.starter_points_count

    def add_pick(self, pick: Pick) -> None:
        self.weeks_owned += 1

        if pick.is_starter:
            self.weeks_started += 1
            if pick.points is not None:
                self.earned_points_ignore_captaincy += pick.points
                self.total_points_earned += pick.points
                self.starter_points_total += pick.points
                self.starter_points_count += 1

        if pick.is_captain:
            self.times_captained += 1
            if pick.points is not None and pick.is_starter:
                bonus = max(0, pick.multiplier - 1) * pick.points
                self.captain_bonus_points += bonus
                self.total_points_earned += bonus

    def to_dict(self) -> dict:
        d = asdict(self)
        d["avg_points_when_started"] = self.avg_points_when_started
        return d


def _row_order(row: TeamBreakdownRow) -> tuple:
    return (-row.total_points_earned, -row.weeks_owned, row.player_name)


def build_team_breakdown(
    picks_by_event: dict[int, list[Pick]] | None,
    players: list[Player],
    teams: dict[int, Team],
) -> list[TeamBreakdownRow]:
    if not picks_by_event:
        return []

    player_map = {p.id: p for p in players}
    rows: dict[int, TeamBreakdownRow] = {}

    for picks in picks_by_event.values():
        for pick in picks:
            row = rows.get(pick.element)
            if row is None:
                player = player_map.get(pick.element)
                team = teams.get(player.team) if player else None
                row = TeamBreakdownRow(
                    element=pick.element,
                    player_name=player.name if player else f"Player #{pick.element}",
                    team_short_name=team.short_name if team else "-",
                    total_player_points=player.total_points if player else 0,
                )
                rows[pick.element] = row
            row.add_pick(pick)

    return sorted(rows.values(), key=_row_order)


def other_manager_rows(
    rows_by_manager: dict[int, list[TeamBreakdownRow]],
    manager_id: int,
    manager_names: dict[int, str],
) -> dict[int, list[tuple[int, str, TeamBreakdownRow]]]:
    """For each player in ``manager_id``'s breakdown, the same player's rows for other managers.

    Values are (manager id, manager display name, row) sorted by points earned,
    then weeks owned, then manager name.
    """
    by_element: dict[int, list[tuple[int, str, TeamBreakdownRow]]] = {}
    for other_id, rows in rows_by_manager.items():
        if other_id == manager_id:
            continue
        name = manager_names.get(other_id, f"Manager {other_id}")
        for row in rows:
            by_element.setdefault(row.element, []).append((other_id, name, row))

    result = {}
    for row in rows_by_manager.get(manager_id, []):
        peers = by_element.get(row.element, [])
        result[row.element] = sorted(
            peers,
            key=lambda peer: (-peer[2].total_points_earned, -peer[2].weeks_owned, peer[1]),
        )
    return result
