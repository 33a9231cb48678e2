from __future__ import annotations

import pytest

from fpl_league_insights.models import (
    ChipUsage,
    Gameweek,
    GameweekHistory,
    Manager,
    Pick,
    Player,
    Team,
    Transfer,
)

# Squad slot order for elements 1..15: 4-4-2 starting, bench = GK2, DEF5, MID5, FWD3
SLOT_ORDER = [1, 3, 4, 5, 6, 8, 9, 10, 11, 13, 14, 2, 7, 12, 15]


def position_for(element: int) -> int:
    """Catalog position for an element: each block of 15 ids is 2 GK, 5 DEF, 5 MID, 3 FWD."""
    idx = (element - 1) % 15 + 1
    if idx <= 2:
        return 1
    if idx <= 7:
        return 2
    if idx <= 12:
        return 3
    return 4


def make_squad(
    points: dict[int, int | None],
    captain: int | None = None,
    multiplier: int = 2,
    offset: int = 0,
) -> list[Pick]:
    """15 picks for elements ``offset+1 .. offset+15`` in the standard slot order.

    ``points`` is keyed by the un-offset element id (1..15); missing keys score 0.
    """
    picks = []
    for slot, el in enumerate(SLOT_ORDER, 1):
        is_captain = el == captain
        if slot > 11:
            mult = 0
        elif is_captain:
            mult = multiplier
        else:
            mult = 1
        picks.append(
            Pick(
                element=el + offset,
                position=slot,
                multiplier=mult,
                is_captain=is_captain,
                points=points.get(el, 0),
            )
        )
    return picks


def make_manager(
    entry: int,
    rank: int,
    points_by_event: dict[int, int | None] | None = None,
    picks_by_event: dict[int, list[Pick]] | None = None,
    chips: list[tuple[str, int]] = (),
    transfers: list[Transfer] = (),
    costs: dict[int, int] | None = None,
    bench: dict[int, int] | None = None,
) -> Manager:
    costs = costs or {}
    bench = bench or {}
    history = [
        GameweekHistory(
            event=event,
            points=pts,
            event_transfers_cost=costs.get(event, 0),
            points_on_bench=bench.get(event),
        )
        for event, pts in sorted((points_by_event or {}).items())
    ]
    return Manager(
        entry=entry,
        player_name=f"Manager {entry}",
        entry_name=f"Team {entry}",
        rank=rank,
        history=history,
        chips=[ChipUsage(name=name, event=event) for name, event in chips],
        picks_by_event=picks_by_event,
        transfers=list(transfers),
    )


def finished_gameweeks(*ids: int, current: int | None = None) -> list[Gameweek]:
    current = current if current is not None else max(ids)
    return [
        Gameweek(id=i, name=f"Gameweek {i}", finished=True, is_current=i == current)
        for i in ids
    ]


@pytest.fixture
def mock_teams() -> dict[int, Team]:
    return {
        1: Team(id=1, name="Arsenal", short_name="ARS"),
        2: Team(id=2, name="Chelsea", short_name="CHE"),
        3: Team(id=3, name="Liverpool", short_name="LIV"),
    }


@pytest.fixture
def mock_players() -> list[Player]:
    """Catalog for elements 1..60 (four blocks of 15)."""
    return [
        Player(
            id=el,
            name=f"P{el}",
            team=(el - 1) % 3 + 1,
            position=position_for(el),
            total_points=el * 2,
        )
        for el in range(1, 61)
    ]


@pytest.fixture
def position_by_id(mock_players) -> dict[int, int]:
    return {p.id: p.position for p in mock_players}


@pytest.fixture
def mock_league() -> list[Manager]:
    """Three managers over two finished gameweeks.

    101 and 102 field the same squad; 103 fields a completely different one.
    """
    a_gw1 = make_squad({1: 6, 3: 8, 8: 10, 13: 12, 2: 3}, captain=8)
    a_gw2 = make_squad({1: 2, 3: 2, 8: 5, 13: 20}, captain=8)
    b_gw1 = make_squad({1: 6, 3: 8, 8: 10, 13: 12, 2: 3}, captain=13)
    b_gw2 = make_squad({1: 2, 3: 2, 8: 5, 13: 20}, captain=13)
    c_gw1 = make_squad({1: 4, 4: 9}, captain=4, offset=15)
    c_gw2 = make_squad({1: 4, 4: 2}, captain=4, offset=15)
    return [
        make_manager(
            101, 1, {1: 70, 2: 60}, {1: a_gw1, 2: a_gw2},
            chips=[("3xc", 2)],
            transfers=[Transfer(event=2, element_in=13, element_out=14)],
            costs={2: 4},
        ),
        make_manager(102, 2, {1: 60, 2: 60}, {1: b_gw1, 2: b_gw2}, chips=[("bboost", 1)]),
        make_manager(103, 3, {1: 40, 2: 80}, {1: c_gw1, 2: c_gw2}, chips=[("freehit", 2)]),
    ]
