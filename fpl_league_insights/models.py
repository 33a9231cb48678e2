from __future__ import annotations

from dataclasses import asdict, dataclass, field

POSITION_NAMES = {1: "GK", 2: "DEF", 3: "MID", 4: "FWD"}


@dataclass
class Team:
    id: int
    name: str
    short_name: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Gameweek:
    id: int
    name: str
    finished: bool
    is_current: bool
    is_next: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Player:
    id: int
    name: str
    team: int
    position: int  # 1=GK, 2=DEF, 3=MID, 4=FWD
    total_points: int = 0

    @property
    def position_name(self) -> str:
        return POSITION_NAMES.get(self.position, "??")

    def to_dict(self) -> dict:
        d = asdict(self)
        d["position_name"] = self.position_name
        return d


@dataclass
class GameweekHistory:
    event: int
    points: int | None
    total_points: int = 0
    overall_rank: int | None = None
    bank: int = 0
    value: int = 0
    event_transfers: int = 0
    event_transfers_cost: int = 0
    points_on_bench: int | None = None


@dataclass
class Pick:
    element: int
    position: int  # squad slot, 1-11 starting, 12+ bench
    multiplier: int
    is_captain: bool = False
    is_vice_captain: bool = False
    points: int | None = None  # None when live points were unavailable

    @property
    def is_starter(self) -> bool:
        return self.position <= 11

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Transfer:
    event: int
    element_in: int
    element_out: int
    element_in_cost: int = 0
    element_out_cost: int = 0


@dataclass
class ChipUsage:
    name: str
    event: int
    time: str = ""


@dataclass
class Manager:
    entry: int
    player_name: str
    entry_name: str
    rank: int
    last_rank: int = 0
    total: int = 0
    event_total: int = 0
    history: list[GameweekHistory] = field(default_factory=list)
    chips: list[ChipUsage] = field(default_factory=list)
    # Absent key = picks never fetched for that gameweek; empty list = fetched, empty squad.
    picks_by_event: dict[int, list[Pick]] | None = None
    transfers: list[Transfer] = field(default_factory=list)

    def history_by_event(self) -> dict[int, GameweekHistory]:
        return {gw.event: gw for gw in self.history}

    def picks_for(self, event: int) -> list[Pick] | None:
        if not self.picks_by_event:
            return None
        return self.picks_by_event.get(event)

    @property
    def rank_change(self) -> int:
        """Places gained since the previous gameweek (positive = moved up)."""
        if self.last_rank == 0:
            return 0
        return self.last_rank - self.rank

    def chip_for(self, gameweek: int) -> str | None:
        chip = next((c for c in self.chips if c.event == gameweek), None)
        return chip.name if chip else None

    def to_dict(self) -> dict:
        d = asdict(self)
        d["rank_change"] = self.rank_change
        return d


def current_gameweek(gameweeks: list[Gameweek]) -> int:
    """Current gameweek id, falling back to the last finished one, then 1."""
    current = next((gw for gw in gameweeks if gw.is_current), None)
    if current is not None:
        return current.id
    finished = [gw for gw in gameweeks if gw.finished]
    if finished:
        return finished[-1].id
    return 1
