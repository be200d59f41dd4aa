"""Typed league data snapshots and calculation results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .config import POSITION_ORDER
from .parsing import parse_float, parse_int, parse_number


class Position(str, Enum):
    QB = "QB"
    RB = "RB"
    WR = "WR"
    TE = "TE"
    PK = "PK"
    DEF = "DEF"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Position"]:
        """Map a raw position code to a Position, or None if it isn't one."""
        if not value:
            return None
        code = str(value).strip().upper()
        if code == "K":
            code = "PK"
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def rank(self) -> int:
        return POSITION_ORDER.index(self.value)


class DisplayTag(str, Enum):
    ACTIVE = "active"
    PRACTICE = "practice"
    INJURED = "injured"

    @classmethod
    def from_status(cls, status: Optional[str]) -> "DisplayTag":
        """Roster status from MFL (ROSTER, TAXI_SQUAD, INJURED_RESERVE)."""
        normalized = (status or "ROSTER").upper()
        if "TAXI" in normalized:
            return cls.PRACTICE
        if "INJURED" in normalized or normalized == "IR":
            return cls.INJURED
        return cls.ACTIVE


class ToiletBowlLevel(str, Enum):
    WINNER = "winner"
    CONSOLATION = "consolation"
    CONSOLATION2 = "consolation2"


class WindowType(str, Enum):
    OFFSEASON = "offseason"
    IN_SEASON = "in-season"


@dataclass(frozen=True)
class TeamConfig:
    id: str
    name: str
    icon: str = ""
    banner: str = ""


@dataclass(frozen=True)
class Record:
    wins: int = 0
    losses: int = 0
    ties: int = 0


@dataclass(frozen=True)
class StandingSnapshot:
    all_play_pct: float = 0.0
    points_for: float = 0.0
    points_against: float = 0.0
    power_rating: float = 0.0
    victory_points: int = 0


@dataclass(frozen=True)
class StandingsFranchise:
    """One franchise's line from the MFL leagueStandings export."""

    id: str
    fname: str = ""
    divw: int = 0
    divl: int = 0
    divt: int = 0
    nondivw: int = 0
    nondivl: int = 0
    nondivt: int = 0
    all_play_pct: float = 0.0
    pf: float = 0.0
    pa: float = 0.0
    pwr: float = 0.0
    vp: int = 0

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "StandingsFranchise":
        return cls(
            id=str(data.get("id", "")),
            fname=data.get("fname") or "",
            divw=parse_int(data.get("divw")),
            divl=parse_int(data.get("divl")),
            divt=parse_int(data.get("divt")),
            nondivw=parse_int(data.get("nondivw")),
            nondivl=parse_int(data.get("nondivl")),
            nondivt=parse_int(data.get("nondivt")),
            all_play_pct=parse_float(data.get("all_play_pct")),
            pf=parse_float(data.get("pf")),
            pa=parse_float(data.get("pa")),
            pwr=parse_float(data.get("pwr")),
            vp=parse_int(data.get("vp")),
        )

    @property
    def record(self) -> Record:
        return Record(
            wins=self.divw + self.nondivw,
            losses=self.divl + self.nondivl,
            ties=self.divt + self.nondivt,
        )

    @property
    def win_pct(self) -> float:
        """Wins over decisions; ties are not counted as games."""
        record = self.record
        games = record.wins + record.losses
        return record.wins / games if games > 0 else 0.0

    @property
    def standing(self) -> StandingSnapshot:
        return StandingSnapshot(
            all_play_pct=self.all_play_pct,
            points_for=self.pf,
            points_against=self.pa,
            power_rating=self.pwr,
            victory_points=self.vp,
        )


@dataclass(frozen=True)
class DraftPrediction:
    overall_pick_number: int
    round: int
    pick_in_round: int
    franchise_id: str
    team_name: str
    team_icon: str = ""
    team_banner: str = ""
    current_record: Record = field(default_factory=Record)
    current_standing: StandingSnapshot = field(default_factory=StandingSnapshot)
    is_toilet_bowl_pick: bool = False
    toilet_bowl_type: Optional[ToiletBowlLevel] = None
    is_league_winner: bool = False
    original_team_name: Optional[str] = None
    original_team_icon: str = ""
    is_traded: bool = False
    trade_chain: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ToiletBowlResult:
    level: ToiletBowlLevel
    franchise_id: str
    franchise_name: str = ""


@dataclass(frozen=True)
class AssetPick:
    round: int
    pick: int
    original_franchise_id: Optional[str] = None
    original_team_name: Optional[str] = None


@dataclass(frozen=True)
class AssetsFranchise:
    id: str
    name: str
    assets: Tuple[AssetPick, ...] = ()


@dataclass(frozen=True)
class AssetsResult:
    """Pick ownership by franchise, or an error message when inputs were missing."""

    franchises: Tuple[AssetsFranchise, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RosterPlayer:
    """
    A roster row. The divider and stripe flags are display annotations:
    they are derived from the row's place in a sorted list and are never
    read back from storage.
    """

    id: str
    name: str
    position: Optional[Position] = None
    position_code: str = ""  # raw MFL code, kept for positions outside Position
    salary: float = 0
    contract_years: int = 0
    display_tag: DisplayTag = DisplayTag.ACTIVE
    nfl_team: str = ""
    bye_week: Optional[int] = None
    status: str = ""
    birthdate: Optional[int] = None  # unix seconds
    position_divider: bool = False
    position_divider_end: bool = False
    tier_divider: bool = False
    active_stripe: bool = False

    @classmethod
    def from_payload(cls, data: Dict[str, Any], display_tag: Optional[DisplayTag] = None) -> "RosterPlayer":
        status = data.get("status") or ""
        birthdate = data.get("birthdate")
        bye_week = data.get("byeWeek", data.get("bye_week"))
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            position=Position.parse(data.get("position")),
            position_code=str(data.get("position") or "").strip().upper(),
            salary=parse_number(data.get("salary")),
            contract_years=parse_int(data.get("contractYear", data.get("contract_years"))),
            display_tag=display_tag or DisplayTag.from_status(status),
            nfl_team=data.get("team") or data.get("nfl_team") or "",
            bye_week=parse_int(bye_week) if bye_week not in (None, "") else None,
            status=status,
            birthdate=parse_int(birthdate) or None,
        )

    @property
    def position_group(self) -> str:
        """Code rows are grouped by: the canonical position, else the raw code."""
        return self.position.value if self.position else self.position_code


@dataclass(frozen=True)
class ContractValidationError:
    field: str
    message: str


@dataclass(frozen=True)
class WindowStatus:
    in_window: bool
    window_type: Optional[WindowType] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class ContractValidationResult:
    valid: bool
    errors: List[ContractValidationError]
    window_status: WindowStatus


@dataclass(frozen=True)
class ExtensionSalaryResult:
    current_salary: float
    current_years: int
    top5_average: float
    extension_value_per_year: float
    new_contract_salary: float
    total_new_value: float
