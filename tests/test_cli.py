from __future__ import annotations

import json

import pytest

from fpl_league_insights.cli import main
from fpl_league_insights.store import save_snapshot

LEAGUE = {
    "league": {"id": 9, "name": "Test League"},
    "standings": {
        "has_next": False,
        "results": [
            {"entry": 10, "player_name": "A", "entry_name": "A FC", "rank": 1},
            {"entry": 11, "player_name": "B", "entry_name": "B FC", "rank": 2},
        ],
    },
}
BOOTSTRAP = {
    "events": [
        {"id": 1, "name": "Gameweek 1", "finished": True, "is_current": False},
        {"id": 2, "name": "Gameweek 2", "finished": True, "is_current": True},
    ],
    "teams": [],
    "elements": [],
}


def _manager(points: list[int], chips: list[dict]) -> dict:
    return {
        "current": [{"event": i, "points": p, "points_on_bench": 2} for i, p in enumerate(points, 1)],
        "chips": chips,
        "picks_by_event": {},
        "transfers": [],
    }


@pytest.fixture
def snapshot(tmp_path):
    save_snapshot(
        tmp_path,
        BOOTSTRAP,
        LEAGUE,
        {
            10: _manager([60, 70], [{"name": "freehit", "event": 2}]),
            11: _manager([50, 40], []),
        },
    )
    return tmp_path


def test_json_report(snapshot, tmp_path):
    out = tmp_path / "report.json"
    main(["--data-dir", str(snapshot), "--json", str(out), "--no-console"])

    report = json.loads(out.read_text())
    assert [m["entry"] for m in report["managers"]] == [10, 11]
    assert report["managers"][0]["all_play_points"] == 6
    assert report["chip_events"][0]["estimated_gain"] == 10
    assert report["anomalies"]["best_gameweek_score"]["points"] == 70


def test_console_report(snapshot, capsys):
    main(["--data-dir", str(snapshot)])
    assert "League Insights" in capsys.readouterr().out


def test_missing_data_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["--data-dir", str(tmp_path / "nope"), "--no-console"])
    assert exc.value.code == 1


def test_fetch_requires_league_id(monkeypatch, tmp_path):
    monkeypatch.delenv("FPL_LEAGUE_ID", raising=False)
    with pytest.raises(SystemExit) as exc:
        main(["--fetch", "--data-dir", str(tmp_path)])
    assert exc.value.code == 2


@pytest.fixture
def snapshot_with_picks(tmp_path):
    bootstrap = {
        **BOOTSTRAP,
        "teams": [{"id": 1, "name": "Arsenal", "short_name": "ARS"}],
        "elements": [{"id": 7, "web_name": "Saka", "team": 1, "element_type": 3}],
    }
    a = _manager([60, 70], [])
    a["picks_by_event"] = {
        "1": [{"element": 7, "position": 1, "multiplier": 2, "is_captain": True, "points": 8}]
    }
    b = _manager([50, 40], [])
    b["picks_by_event"] = {"1": [{"element": 7, "position": 2, "multiplier": 1, "points": 8}]}
    save_snapshot(tmp_path, bootstrap, LEAGUE, {10: a, 11: b})
    return tmp_path


def test_manager_breakdown_in_json(snapshot_with_picks, tmp_path):
    out = tmp_path / "report.json"
    main(["--data-dir", str(snapshot_with_picks), "--manager", "10", "--json", str(out), "--no-console"])

    breakdown = json.loads(out.read_text())["breakdown"]
    assert breakdown["entry"] == 10
    row = breakdown["rows"][0]
    assert row["player_name"] == "Saka"
    assert row["team_short_name"] == "ARS"
    assert row["total_points_earned"] == 16
    assert row["captain_bonus_points"] == 8


def test_manager_breakdown_console(snapshot_with_picks, capsys):
    main(["--data-dir", str(snapshot_with_picks), "--manager", "10"])
    assert "Player Breakdown" in capsys.readouterr().out


def test_unknown_manager_exits(snapshot_with_picks):
    with pytest.raises(SystemExit) as exc:
        main(["--data-dir", str(snapshot_with_picks), "--manager", "99", "--no-console"])
    assert exc.value.code == 1


def test_data_dir_from_env(snapshot, tmp_path, monkeypatch):
    monkeypatch.setenv("FPL_DATA_DIR", str(snapshot))
    out = tmp_path / "report.json"
    main(["--json", str(out), "--no-console"])
    assert [m["entry"] for m in json.loads(out.read_text())["managers"]] == [10, 11]
