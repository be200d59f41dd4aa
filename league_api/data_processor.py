"""
Page data assembly for the league site.
Fetches MFL feeds through the client and runs them through the calculation modules.
"""

import logging
from dataclasses import asdict, is_dataclass
from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from .age_utils import (
    calculate_age,
    calculate_average_age,
    calculate_average_age_by_position,
    get_age_distribution,
    get_age_distribution_colors,
)
from .assets import compare_ownership, extract_assets_from_transactions
from .draft_order import (
    apply_pick_ownership,
    build_actual_draft_picks,
    calculate_draft_order,
    convert_actual_picks_to_predictions,
    extract_actual_assets,
)
from .mfl_client import MFLClient
from .models import DisplayTag, RosterPlayer, StandingsFranchise, TeamConfig
from .parsing import as_list, parse_number
from .roster_utils import build_display_rows, split_by_tag
from .salary_cap import build_cap_table, calculate_contract_years_meta, parse_adjustment_meta
from .toilet_bowl import extract_toilet_bowl_winners

logger = logging.getLogger(__name__)


def serialize(value: Any) -> Any:
    """Dataclasses (and lists of them) to JSON-ready dicts."""
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (list, tuple)):
        return [serialize(v) for v in value]
    if isinstance(value, dict):
        return {k: serialize(v) for k, v in value.items()}
    return value


def team_configs_from_league(league_data: Optional[Dict]) -> Dict[str, TeamConfig]:
    """Franchise id -> display info from the MFL league export."""
    league = (league_data or {}).get("league") or {}
    franchises = as_list((league.get("franchises") or {}).get("franchise"))
    return {
        str(f["id"]): TeamConfig(
            id=str(f["id"]),
            name=f.get("name") or "",
            icon=f.get("icon") or f.get("logo") or "",
            banner=f.get("banner") or "",
        )
        for f in franchises
        if isinstance(f, dict) and f.get("id")
    }


def parse_standings(standings_data: Optional[Dict]) -> List[StandingsFranchise]:
    franchises = as_list(((standings_data or {}).get("leagueStandings") or {}).get("franchise"))
    return [StandingsFranchise.from_payload(f) for f in franchises if isinstance(f, dict)]


async def _optional_feed(coro, description: str) -> Dict:
    """Await a feed the page can render without; failures become an empty payload."""
    try:
        return await coro
    except httpx.HTTPError:
        logger.exception("Failed to fetch %s", description)
        return {}


async def build_draft_order(
    client: MFLClient,
    league_id: str,
    season: int,
    league_winner_id: Optional[str] = None,
) -> Dict:
    """
    Predicted draft board for the draft after `season`.
    Regular picks are moved to their current owners when trade history is available.
    """
    draft_year = season + 1
    standings_data = await client.get_standings(league_id, season)
    standings = parse_standings(standings_data)
    team_configs = team_configs_from_league(await _optional_feed(client.get_league(league_id, season), "league"))
    bracket_data = await _optional_feed(client.get_playoff_brackets(league_id, season), "playoff brackets")
    transactions_data = await _optional_feed(client.get_transactions(league_id, season), "transactions")

    toilet_bowl = extract_toilet_bowl_winners(bracket_data)
    predictions = calculate_draft_order(standings, team_configs, league_winner_id, toilet_bowl)

    assets = extract_assets_from_transactions(transactions_data, standings_data, draft_year)
    if assets.ok:
        predictions = apply_pick_ownership(predictions, assets, team_configs)
    else:
        logger.info("Pick ownership unavailable for %s %s: %s", league_id, season, assets.error)

    return {
        "league_id": league_id,
        "season": season,
        "draft_year": draft_year,
        "total_picks": len(predictions),
        "toilet_bowl": serialize(toilet_bowl),
        "ownership_error": assets.error,
        "picks": serialize(predictions),
    }


async def build_actual_draft(client: MFLClient, league_id: str, year: int) -> Dict:
    """Draft results with ownership read from the pick comments."""
    draft_results = await client.get_draft_results(league_id, year)
    team_configs = team_configs_from_league(await _optional_feed(client.get_league(league_id, year), "league"))
    picks = build_actual_draft_picks(draft_results, team_configs, franchise_count=len(team_configs) or 16)
    return {
        "league_id": league_id,
        "year": year,
        "picks": serialize(convert_actual_picks_to_predictions(picks, team_configs)),
    }


async def build_assets(client: MFLClient, league_id: str, season: int, draft_year: Optional[int] = None) -> Dict:
    """Pick ownership rebuilt from trades, cross-checked against draft results when they exist."""
    draft_year = draft_year or season + 1
    standings_data = await _optional_feed(client.get_standings(league_id, season), "standings")
    transactions_data = await _optional_feed(client.get_transactions(league_id, season), "transactions")
    assets = extract_assets_from_transactions(transactions_data, standings_data, draft_year)
    if not assets.ok:
        return {"error": assets.error}

    draft_results = await _optional_feed(client.get_draft_results(league_id, draft_year), "draft results")
    team_configs = team_configs_from_league(await _optional_feed(client.get_league(league_id, season), "league"))
    mismatches = compare_ownership(extract_actual_assets(draft_results, team_configs), assets)
    for mismatch in mismatches:
        logger.warning("Pick ownership mismatch %s", mismatch)

    return {
        "league_id": league_id,
        "season": season,
        "draft_year": draft_year,
        "franchises": serialize(assets.franchises),
        "mismatches": mismatches,
    }


async def build_toilet_bowl(client: MFLClient, league_id: str, season: int) -> Dict:
    bracket_data = await client.get_playoff_brackets(league_id, season)
    return {"league_id": league_id, "season": season, "results": serialize(extract_toilet_bowl_winners(bracket_data))}


def _roster_players(rosters_data: Dict, players_data: Dict, franchise_id: str) -> List[RosterPlayer]:
    directory = {
        str(p.get("id")): p
        for p in as_list(((players_data or {}).get("players") or {}).get("player"))
        if isinstance(p, dict)
    }
    franchises = as_list(((rosters_data or {}).get("rosters") or {}).get("franchise"))
    roster = next((f for f in franchises if isinstance(f, dict) and f.get("id") == franchise_id), None)
    if roster is None:
        return []

    players = []
    for entry in as_list(roster.get("player")):
        if not isinstance(entry, dict):
            continue
        merged = {**directory.get(str(entry.get("id")), {}), **entry}
        players.append(RosterPlayer.from_payload(merged))
    return players


def _dead_money_adjustments(adjustments_data: Dict, franchise_id: str) -> List[Dict]:
    adjustments = []
    for adj in as_list(((adjustments_data or {}).get("salaryAdjustments") or {}).get("salaryAdjustment")):
        if not isinstance(adj, dict) or adj.get("franchise_id") != franchise_id:
            continue
        meta = parse_adjustment_meta(adj.get("description") or "")
        adjustments.append({
            "franchise_id": franchise_id,
            "salary": meta["salary"] or parse_number(adj.get("amount")),
            "years_remaining": meta["years_remaining"],
        })
    return adjustments


async def build_roster(
    client: MFLClient,
    league_id: str,
    year: int,
    franchise_id: str,
    today: Optional[date] = None,
) -> Optional[Dict]:
    """Roster table rows, age chart and cap table for one franchise. None if the franchise isn't in the league."""
    rosters_data = await client.get_rosters(league_id, year, franchise_id)
    players_data = await _optional_feed(client.get_players(year), "players")
    adjustments_data = await _optional_feed(client.get_salary_adjustments(league_id, year), "salary adjustments")

    players = _roster_players(rosters_data, players_data, franchise_id)
    if not players:
        return None

    buckets = split_by_tag(players)
    rows = build_display_rows(
        players=buckets[DisplayTag.ACTIVE],
        practice_squad=buckets[DisplayTag.PRACTICE],
        injured_reserve=buckets[DisplayTag.INJURED],
    )
    distribution = get_age_distribution(players, today=today)

    return {
        "league_id": league_id,
        "year": year,
        "franchise_id": franchise_id,
        "rows": [
            {**serialize(row), "age": calculate_age(row.birthdate, today)}
            for row in rows
        ],
        "average_age": calculate_average_age(players, today),
        "average_age_by_position": calculate_average_age_by_position(players, today),
        "age_distribution": distribution,
        "age_distribution_colors": get_age_distribution_colors(len(distribution)),
        "contract_years": calculate_contract_years_meta(players),
        "cap_table": build_cap_table(players, _dead_money_adjustments(adjustments_data, franchise_id), franchise_id, year),
    }
