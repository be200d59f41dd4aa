"""
Shared fixtures: a 16-team league with distinct records, its display
config, and helpers for building MFL-shaped payloads.
"""

import pytest

from league_api.models import StandingsFranchise, TeamConfig


def franchise_id(n):
    return f"{n:04d}"


def make_standing(n, wins, losses, ties=0, **kwargs):
    """Standings line for franchise n with the record split across division/non-division."""
    return StandingsFranchise(
        id=franchise_id(n),
        fname=kwargs.pop("fname", f"Team {n}"),
        divw=wins // 2,
        divl=losses // 2,
        divt=ties,
        nondivw=wins - wins // 2,
        nondivl=losses - losses // 2,
        **kwargs,
    )


def standings_payload(standings):
    """StandingsFranchise list -> MFL leagueStandings export."""
    return {
        "leagueStandings": {
            "franchise": [
                {
                    "id": s.id,
                    "fname": s.fname,
                    "divw": str(s.divw),
                    "divl": str(s.divl),
                    "divt": str(s.divt),
                    "nondivw": str(s.nondivw),
                    "nondivl": str(s.nondivl),
                    "nondivt": str(s.nondivt),
                    "all_play_pct": str(s.all_play_pct),
                    "pf": str(s.pf),
                    "pa": str(s.pa),
                    "pwr": str(s.pwr),
                    "vp": str(s.vp),
                }
                for s in standings
            ]
        }
    }


@pytest.fixture
def standings():
    """Franchise n finishes with n wins, so 0001 picks first and 0016 last."""
    return [make_standing(n, wins=n, losses=17 - n, pf=1000.0 + n) for n in range(1, 17)]


@pytest.fixture
def team_configs():
    return {
        franchise_id(n): TeamConfig(
            id=franchise_id(n),
            name=f"Team {n}",
            icon=f"/icons/{n}.png",
            banner=f"/banners/{n}.png",
        )
        for n in range(1, 17)
    }


@pytest.fixture
def league_payload():
    return {
        "league": {
            "franchises": {
                "franchise": [
                    {"id": franchise_id(n), "name": f"Team {n}", "icon": f"/icons/{n}.png"}
                    for n in range(1, 17)
                ]
            }
        }
    }
