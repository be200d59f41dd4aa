"""
Contract submission rules.

Owners may change a player's contract years during two windows, in league-local
time: the offseason (Feb 15 through the 3rd Sunday in August at 8:45 PM) and
the season (Sept 1 through Feb 14 of the following year). Every violated rule
is reported; validation never raises.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from .config import (
    CONTRACT_LEAGUE_IDS,
    CONTRACT_MAX_YEARS,
    CONTRACT_MIN_YEARS,
    IN_SEASON_END,
    IN_SEASON_START,
    OFFSEASON_DEADLINE_TIME,
    OFFSEASON_START,
)
from .league_year import league_now, to_league_time
from .models import ContractValidationError, ContractValidationResult, WindowStatus, WindowType

SUNDAY = 6

OUTSIDE_WINDOW_REASON = (
    "Contract setting is only allowed during offseason (Feb 15 - 3rd Sunday in Aug) "
    "or in-season (Weeks 1-17)"
)


def get_third_sunday_in_august(year: int) -> datetime:
    """Offseason deadline: first Sunday in August + 14 days, at 8:45 PM."""
    august_first = date(year, 8, 1)
    first_sunday = august_first + timedelta(days=(SUNDAY - august_first.weekday()) % 7)
    return datetime.combine(first_sunday + timedelta(days=14), OFFSEASON_DEADLINE_TIME)


def is_in_offseason_window(now: datetime) -> bool:
    now = to_league_time(now)
    start = datetime(now.year, *OFFSEASON_START)
    return start <= now <= get_third_sunday_in_august(now.year)


def is_in_season_window(now: datetime) -> bool:
    now = to_league_time(now)
    # A January date belongs to the season that started the previous September
    for start_year in (now.year - 1, now.year):
        start = datetime(start_year, *IN_SEASON_START)
        end = datetime(start_year + 1, *IN_SEASON_END, 23, 59, 59, 999999)
        if start <= now <= end:
            return True
    return False


def get_contract_window(now: Optional[datetime] = None) -> WindowStatus:
    """Which submission window is open at `now` (defaults to the current league time)."""
    now = to_league_time(now) if now else league_now()
    if is_in_offseason_window(now):
        return WindowStatus(in_window=True, window_type=WindowType.OFFSEASON)
    if is_in_season_window(now):
        return WindowStatus(in_window=True, window_type=WindowType.IN_SEASON)
    return WindowStatus(in_window=False, reason=OUTSIDE_WINDOW_REASON)


def _validate_league_id(league_id: str) -> List[ContractValidationError]:
    if str(league_id) in CONTRACT_LEAGUE_IDS:
        return []
    return [
        ContractValidationError(
            field="leagueId",
            message=f"Contract management is only available for leagues: {', '.join(CONTRACT_LEAGUE_IDS)}",
        )
    ]


def _validate_contract_years(new_years: Union[int, float]) -> List[ContractValidationError]:
    errors = []
    if not float(new_years).is_integer():
        errors.append(ContractValidationError("contractYears", "Contract years must be a whole number"))
    if new_years < CONTRACT_MIN_YEARS:
        errors.append(ContractValidationError("contractYears", f"Contract years must be at least {CONTRACT_MIN_YEARS}"))
    if new_years > CONTRACT_MAX_YEARS:
        errors.append(ContractValidationError("contractYears", f"Contract years cannot exceed {CONTRACT_MAX_YEARS}"))
    return errors


def validate_contract_submission(
    league_id: str,
    old_years: Union[int, float],
    new_years: Union[int, float],
    player_id: Optional[str],
    franchise_id: Optional[str],
    now: Optional[datetime] = None,
) -> ContractValidationResult:
    """Run every contract rule and collect all failures."""
    errors: List[ContractValidationError] = []

    errors.extend(_validate_league_id(league_id))

    if not player_id or not franchise_id:
        errors.append(ContractValidationError("player", "Player and franchise information is required"))

    if old_years == new_years:
        errors.append(
            ContractValidationError("contractYears", "New contract years must be different from current contract years")
        )

    errors.extend(_validate_contract_years(new_years))

    window_status = get_contract_window(now)
    if not window_status.in_window:
        errors.append(
            ContractValidationError("window", window_status.reason or "Contract setting window is not currently open")
        )

    return ContractValidationResult(valid=not errors, errors=errors, window_status=window_status)
