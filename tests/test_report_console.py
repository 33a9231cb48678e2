from __future__ import annotations

from conftest import make_manager
from rich.console import Console

from fpl_league_insights.breakdown import TeamBreakdownRow
from fpl_league_insights.insights import ManagerLeagueInsight
from fpl_league_insights.report_console import _breakdown_table, _insights_table


def _render(table) -> str:
    console = Console(width=240, record=True)
    console.print(table)
    return console.export_text()


def test_insights_table_shows_move_and_current_chip():
    manager = make_manager(101, 1, chips=[("3xc", 5)])
    manager.last_rank = 3
    insight = ManagerLeagueInsight(entry=101, team_name="Team 101", manager_name="Manager 101", league_rank=1)

    text = _render(_insights_table([insight], {101: manager}, 5))
    assert "+2" in text
    assert "Triple Captain" in text

    text = _render(_insights_table([insight], {101: manager}, 6))
    assert "Triple Captain" not in text


def test_insights_table_without_managers():
    insight = ManagerLeagueInsight(entry=101, team_name="Team 101", manager_name="Manager 101", league_rank=1)
    assert "Team 101" in _render(_insights_table([insight], {}, None))


def test_breakdown_table_lists_other_owners():
    row = TeamBreakdownRow(element=7, player_name="Saka", team_short_name="ARS", total_points_earned=16)
    peer = TeamBreakdownRow(element=7, player_name="Saka", team_short_name="ARS", total_points_earned=8)

    text = _render(_breakdown_table("Breakdown", [row], {7: [(102, "Manager 102", peer)]}))
    assert "Saka" in text
    assert "Manager 102 (8)" in text
