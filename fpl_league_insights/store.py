"""Snapshot directory in the upstream JSON shape.

    <data_dir>/bootstrap.json
    <data_dir>/league.json
    <data_dir>/managers/<entry>.json   (history + picks_by_event + transfers)
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from .api import build_league
from .models import Gameweek, Manager, Player, Team

logger = logging.getLogger(__name__)


def default_data_dir() -> Path:
    return Path(os.environ.get("FPL_DATA_DIR", "data"))


def _read_json(path: Path):
    if not path.exists():
        logger.debug("Snapshot file %s not found", path)
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def _write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def save_snapshot(
    data_dir: Path,
    bootstrap: dict,
    league: dict,
    manager_data: dict[int, dict],
) -> None:
    data_dir = Path(data_dir)
    _write_json(data_dir / "bootstrap.json", bootstrap)
    _write_json(data_dir / "league.json", league)
    for entry, data in manager_data.items():
        _write_json(data_dir / "managers" / f"{entry}.json", data)
    logger.info("Saved snapshot for %d managers to %s", len(manager_data), data_dir)


def load_snapshot(
    data_dir: Path | None = None,
) -> tuple[list[Manager], list[Player], dict[int, Team], list[Gameweek]]:
    data_dir = Path(data_dir) if data_dir is not None else default_data_dir()
    league = _read_json(data_dir / "league.json")
    if league is None:
        raise FileNotFoundError(f"No league.json in {data_dir}")

    bootstrap = _read_json(data_dir / "bootstrap.json")
    manager_data = {}
    for standing in league["standings"]["results"]:
        data = _read_json(data_dir / "managers" / f"{standing['entry']}.json")
        if data is not None:
            manager_data[standing["entry"]] = data

    logger.debug("Loaded %d manager files from %s", len(manager_data), data_dir)
    return build_league(bootstrap, league, manager_data)
