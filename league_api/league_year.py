"""
League calendar.

Two dates move the app's notion of "current year":
- Feb 14 @ 8:45 AM PT: the new MFL league is created and rosters move to it.
- Labor Day: the NFL season starts and standings/playoffs switch seasons.
Between the two, roster pages use the new league year while standings and
the draft predictor still look at the previous season.
"""

import os
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from .config import LEAGUE_TZ, LEAGUE_YEAR_CUTOFF

MONDAY = 0


@dataclass(frozen=True)
class LeagueYear:
    current_league_year: int  # rosters, contracts, cap
    current_season_year: int  # standings, playoffs, draft order
    next_draft_year: int
    next_auction_year: int


def to_league_time(moment: datetime) -> datetime:
    """League-local wall clock. Aware datetimes are converted; naive ones are taken as already local."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(LEAGUE_TZ).replace(tzinfo=None)


def league_now() -> datetime:
    return to_league_time(datetime.now(LEAGUE_TZ))


def get_labor_day(year: int) -> datetime:
    """First Monday in September, at midnight."""
    september_first = date(year, 9, 1)
    labor_day = september_first + timedelta(days=(MONDAY - september_first.weekday()) % 7)
    return datetime.combine(labor_day, datetime.min.time())


def _base_year(reference: datetime) -> int:
    override = os.environ.get("LEAGUE_BASE_YEAR")
    if override:
        return int(override)
    # Season that kicked off last calendar year
    return reference.year - 1


def get_league_year(reference: Optional[datetime] = None) -> LeagueYear:
    reference = to_league_time(reference) if reference else league_now()
    base_year = _base_year(reference)

    month, day, cutoff_time = LEAGUE_YEAR_CUTOFF
    feb_cutoff = datetime.combine(date(reference.year, month, day), cutoff_time)

    league_year = base_year + 1 if reference >= feb_cutoff else base_year
    season_year = base_year + 1 if reference >= get_labor_day(reference.year) else base_year

    return LeagueYear(
        current_league_year=league_year,
        current_season_year=season_year,
        next_draft_year=season_year + 1,
        next_auction_year=league_year + 1,
    )
