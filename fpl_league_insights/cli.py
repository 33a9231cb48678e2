from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from .anomalies import compute_season_anomalies
from .api import build_league, fetch_league
from .breakdown import build_team_breakdown, other_manager_rows
from .insights import compute_league_insights
from .models import current_gameweek
from .report_console import print_breakdown, print_report
from .store import default_data_dir, load_snapshot, save_snapshot

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="FPL League Insights - season analytics for a classic mini-league"
    )
    parser.add_argument(
        "--fetch",
        action="store_true",
        help="Fetch fresh data from the FPL API (and save it to --data-dir)",
    )
    parser.add_argument(
        "--league-id",
        type=int,
        default=os.environ.get("FPL_LEAGUE_ID"),
        help="Classic league id to fetch (default: $FPL_LEAGUE_ID)",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Snapshot directory (default: $FPL_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--json",
        type=str,
        default=None,
        metavar="FILE",
        help="Write insights, chip events and anomalies as JSON to FILE",
    )
    parser.add_argument(
        "--top-chips",
        type=int,
        default=10,
        help="Number of chip events to show (default: 10)",
    )
    parser.add_argument(
        "--manager",
        type=int,
        default=None,
        metavar="ENTRY",
        help="Also show the player breakdown for this manager entry id",
    )
    parser.add_argument(
        "--no-console",
        action="store_true",
        help="Suppress console output",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)
    data_dir = args.data_dir or default_data_dir()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.fetch:
            if args.league_id is None:
                parser.error("--league-id (or FPL_LEAGUE_ID) is required with --fetch")
            bootstrap, league, manager_data = fetch_league(args.league_id)
            save_snapshot(data_dir, bootstrap, league, manager_data)
            managers, players, teams, gameweeks = build_league(bootstrap, league, manager_data)
        else:
            managers, players, teams, gameweeks = load_snapshot(data_dir)
    except Exception as e:
        print(f"Error loading league data: {e}", file=sys.stderr)
        sys.exit(1)

    gw = current_gameweek(gameweeks)
    logger.info("Loaded %d managers, %d players (current GW%d)", len(managers), len(players), gw)

    insights = compute_league_insights(managers, players, gameweeks, gw)
    anomalies = compute_season_anomalies(managers, players, teams, gw)

    if not args.no_console:
        print_report(
            insights.managers,
            insights.chip_events,
            anomalies,
            top_chips=args.top_chips,
            managers=managers,
            gameweek=gw,
        )

    breakdown = None
    if args.manager is not None:
        manager = next((m for m in managers if m.entry == args.manager), None)
        if manager is None:
            print(f"Manager {args.manager} is not in the league", file=sys.stderr)
            sys.exit(1)
        rows_by_manager = {
            m.entry: build_team_breakdown(m.picks_by_event, players, teams) for m in managers
        }
        names = {m.entry: m.player_name for m in managers}
        peers = other_manager_rows(rows_by_manager, manager.entry, names)
        breakdown = rows_by_manager[manager.entry]
        if not args.no_console:
            print_breakdown(manager, breakdown, peers)

    if args.json:
        payload = {**insights.to_dict(), "anomalies": anomalies.to_dict()}
        if breakdown is not None:
            payload["breakdown"] = {
                "entry": args.manager,
                "rows": [r.to_dict() for r in breakdown],
            }
        Path(args.json).write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.info("JSON report saved to %s", args.json)


if __name__ == "__main__":
    main()
