from __future__ import annotations

import logging
import time

import httpx

from .models import ChipUsage, Gameweek, GameweekHistory, Manager, Pick, Player, Team, Transfer

logger = logging.getLogger(__name__)

BASE_URL = "https://fantasy.premierleague.com/api"
TIMEOUT = 30
RETRIES = 3
RETRY_DELAY = 1.0
REQUEST_DELAY = 0.25  # pause between managers


def _get_json(client: httpx.Client, path: str, retries: int = RETRIES):
    for attempt in range(1, retries + 1):
        try:
            resp = client.get(f"{BASE_URL}{path}")
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPError as e:
            if attempt == retries:
                raise
            logger.info("Request %s failed (%s), retrying (attempt %d/%d)", path, e, attempt, retries)
            time.sleep(RETRY_DELAY)


def fetch_bootstrap(client: httpx.Client) -> dict:
    return _get_json(client, "/bootstrap-static/")


def fetch_league_standings(client: httpx.Client, league_id: int) -> dict:
    """Fetch every standings page and merge the results into the first page."""
    page = 1
    league = _get_json(client, f"/leagues-classic/{league_id}/standings/")
    results = list(league["standings"]["results"])
    has_next = league["standings"].get("has_next", False)

    while has_next:
        page += 1
        data = _get_json(client, f"/leagues-classic/{league_id}/standings/?page_standings={page}")
        results.extend(data["standings"]["results"])
        has_next = data["standings"].get("has_next", False)

    league["standings"]["results"] = results
    league["standings"]["has_next"] = False
    return league


def fetch_entry_history(client: httpx.Client, entry: int) -> dict:
    return _get_json(client, f"/entry/{entry}/history/")


def fetch_entry_transfers(client: httpx.Client, entry: int) -> list[dict]:
    return _get_json(client, f"/entry/{entry}/transfers/")


def fetch_entry_picks(client: httpx.Client, entry: int, gameweek: int) -> list[dict]:
    return _get_json(client, f"/entry/{entry}/event/{gameweek}/picks/")["picks"]


def fetch_live_points(client: httpx.Client, gameweek: int) -> dict[int, int]:
    data = _get_json(client, f"/event/{gameweek}/live/")
    return {e["id"]: e["stats"]["total_points"] for e in data["elements"]}


def parse_teams(data: dict) -> dict[int, Team]:
    return {
        t["id"]: Team(id=t["id"], name=t["name"], short_name=t["short_name"])
        for t in data.get("teams", [])
    }


def parse_gameweeks(data: dict) -> list[Gameweek]:
    return [
        Gameweek(
            id=gw["id"],
            name=gw.get("name", f"Gameweek {gw['id']}"),
            finished=gw.get("finished", False),
            is_current=gw.get("is_current", False),
            is_next=gw.get("is_next", False),
        )
        for gw in data.get("events", [])
    ]


def parse_players(data: dict) -> list[Player]:
    return [
        Player(
            id=e["id"],
            name=e.get("web_name", "Unknown"),
            team=e["team"],
            position=e["element_type"],
            total_points=e.get("total_points", 0),
        )
        for e in data.get("elements", [])
    ]


def parse_history(raw: list[dict]) -> list[GameweekHistory]:
    return [
        GameweekHistory(
            event=gw["event"],
            points=gw.get("points"),
            total_points=gw.get("total_points", 0),
            overall_rank=gw.get("overall_rank"),
            bank=gw.get("bank", 0),
            value=gw.get("value", 0),
            event_transfers=gw.get("event_transfers", 0),
            event_transfers_cost=gw.get("event_transfers_cost", 0),
            points_on_bench=gw.get("points_on_bench"),
        )
        for gw in raw
    ]


def parse_chips(raw: list[dict]) -> list[ChipUsage]:
    return [ChipUsage(name=c["name"], event=c["event"], time=c.get("time", "")) for c in raw]


def parse_picks(raw: list[dict], live_points: dict[int, int] | None = None) -> list[Pick]:
    """Parse picks; ``points`` comes from the pick itself, else from ``live_points``."""
    live_points = live_points or {}
    return [
        Pick(
            element=p["element"],
            position=p["position"],
            multiplier=p.get("multiplier", 1),
            is_captain=p.get("is_captain", False),
            is_vice_captain=p.get("is_vice_captain", False),
            points=p["points"] if p.get("points") is not None else live_points.get(p["element"]),
        )
        for p in raw
    ]


def parse_transfers(raw: list[dict]) -> list[Transfer]:
    return [
        Transfer(
            event=t["event"],
            element_in=t["element_in"],
            element_out=t["element_out"],
            element_in_cost=t.get("element_in_cost", 0),
            element_out_cost=t.get("element_out_cost", 0),
        )
        for t in raw
    ]


def parse_manager(standing: dict, manager_data: dict | None) -> Manager:
    manager_data = manager_data or {}
    raw_picks = manager_data.get("picks_by_event")
    picks_by_event = None
    if raw_picks is not None:
        # JSON object keys arrive as strings
        picks_by_event = {int(event): parse_picks(picks) for event, picks in raw_picks.items()}

    return Manager(
        entry=standing["entry"],
        player_name=standing.get("player_name", ""),
        entry_name=standing.get("entry_name", ""),
        rank=standing.get("rank", 0),
        last_rank=standing.get("last_rank", 0),
        total=standing.get("total", 0),
        event_total=standing.get("event_total", 0),
        history=parse_history(manager_data.get("current", [])),
        chips=parse_chips(manager_data.get("chips", [])),
        picks_by_event=picks_by_event,
        transfers=parse_transfers(manager_data.get("transfers") or []),
    )


def fetch_manager_data(
    client: httpx.Client,
    entry: int,
    current_gw: int | None,
    live_cache: dict[int, dict[int, int]],
) -> dict:
    """Fetch history, transfers and per-gameweek picks (with live points) for one entry."""
    history = fetch_entry_history(client, entry)
    try:
        transfers = fetch_entry_transfers(client, entry)
    except httpx.HTTPError as e:
        logger.warning("Could not fetch transfers for manager %d, continuing without: %s", entry, e)
        transfers = []

    gameweeks = {gw["event"] for gw in history.get("current", [])}
    if current_gw is not None:
        gameweeks.add(current_gw)

    picks_by_event = {}
    for gw in sorted(gameweeks):
        if gw not in live_cache:
            try:
                live_cache[gw] = fetch_live_points(client, gw)
            except httpx.HTTPError as e:
                logger.warning("Could not fetch live points for GW%d, points will be null: %s", gw, e)
                live_cache[gw] = {}
        try:
            raw = fetch_entry_picks(client, entry, gw)
        except httpx.HTTPError as e:
            logger.warning("Could not fetch picks for manager %d in GW%d: %s", entry, gw, e)
            continue
        picks_by_event[str(gw)] = [
            {**p, "points": live_cache[gw].get(p["element"])} for p in raw
        ]

    return {**history, "picks_by_event": picks_by_event, "transfers": transfers}


def fetch_league(league_id: int) -> tuple[dict, dict, dict[int, dict]]:
    """Fetch the raw bootstrap, league standings and per-manager payloads."""
    with httpx.Client(timeout=TIMEOUT) as client:
        bootstrap = fetch_bootstrap(client)
        current = next((e for e in bootstrap.get("events", []) if e.get("is_current")), None)
        current_gw = current["id"] if current else None
        if current_gw is not None:
            logger.info("Current gameweek: %d", current_gw)

        league = fetch_league_standings(client, league_id)
        standings = league["standings"]["results"]
        logger.info("Fetched league standings: %d managers", len(standings))

        live_cache: dict[int, dict[int, int]] = {}
        managers = {}
        for standing in standings:
            time.sleep(REQUEST_DELAY)
            managers[standing["entry"]] = fetch_manager_data(
                client, standing["entry"], current_gw, live_cache
            )

    return bootstrap, league, managers


def build_league(
    bootstrap: dict | None,
    league: dict,
    manager_data: dict[int, dict],
) -> tuple[list[Manager], list[Player], dict[int, Team], list[Gameweek]]:
    bootstrap = bootstrap or {}
    managers = [
        parse_manager(standing, manager_data.get(standing["entry"]))
        for standing in league["standings"]["results"]
    ]
    managers.sort(key=lambda m: m.rank)
    return managers, parse_players(bootstrap), parse_teams(bootstrap), parse_gameweeks(bootstrap)
