"""
FastAPI application for TheLeague / AFL Fantasy.
Serves draft, contract, roster and cap data computed from MFL feeds.
"""

import logging
from datetime import datetime
from typing import Dict, Optional

import httpx
from fastapi import Depends, FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .config import CONTRACT_LEAGUE_IDS, LEAGUES
from .contract_store import ContractTransactionStore, InMemoryContractStore, submit_contract
from .contract_validation import get_contract_window, validate_contract_submission
from .data_processor import (
    build_actual_draft,
    build_assets,
    build_draft_order,
    build_roster,
    build_toilet_bowl,
    serialize,
)
from .extension_calculator import calculate_extension_salary, get_extension_schedule
from .league_year import get_league_year
from .mfl_client import MFLClient, mfl_client

logger = logging.getLogger(__name__)

app = FastAPI(
    title="TheLeague API",
    description="Draft order, contracts and salary cap for TheLeague and AFL Fantasy",
    version="1.0.0"
)

# CORS middleware for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.state.contract_store = InMemoryContractStore()


def get_client() -> MFLClient:
    return mfl_client


def get_contract_store() -> ContractTransactionStore:
    return app.state.contract_store


def get_league_id(league: str) -> str:
    """Resolve a league slug to its MFL league id."""
    if league not in LEAGUES:
        raise HTTPException(status_code=404, detail=f"League {league} not found")
    return LEAGUES[league]["id"]


class ExtensionRequest(BaseModel):
    current_salary: float = Field(ge=0)
    current_years: int = Field(ge=0)
    top5_average: float = Field(ge=0)


class ContractRequest(BaseModel):
    league_id: str
    franchise_id: Optional[str] = None
    player_id: Optional[str] = None
    old_years: int
    new_years: float


# API Routes

@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "leagues": [info["name"] for info in LEAGUES.values()]}


@app.get("/api/leagues")
async def list_leagues():
    """List leagues and the years each page should show right now."""
    return {
        "leagues": LEAGUES,
        "contract_leagues": list(CONTRACT_LEAGUE_IDS),
        "league_year": serialize(get_league_year()),
    }


@app.get("/api/league-year")
async def league_year(date: Optional[datetime] = None):
    """League/season/draft years, optionally as of a test date."""
    return serialize(get_league_year(date))


@app.get("/api/{league}/{season}/draft-order")
async def get_draft_order(
    league: str,
    season: int,
    league_winner_id: Optional[str] = None,
    client: MFLClient = Depends(get_client),
):
    """
    Predicted draft for the season after `season`.
    Picks 1-16 of each round go in reverse standings order; toilet bowl
    winners get 1.17, 2.17 and 2.18.
    """
    league_id = get_league_id(league)
    try:
        return await build_draft_order(client, league_id, season, league_winner_id)
    except httpx.HTTPError as e:
        logger.exception("Draft order failed for %s %s", league_id, season)
        raise HTTPException(status_code=502, detail=f"MFL request failed: {e}")


@app.get("/api/{league}/{year}/draft-results")
async def get_draft_results(league: str, year: int, client: MFLClient = Depends(get_client)):
    """Actual draft picks and who owns them, from the draft results feed."""
    league_id = get_league_id(league)
    try:
        return await build_actual_draft(client, league_id, year)
    except httpx.HTTPError as e:
        logger.exception("Draft results failed for %s %s", league_id, year)
        raise HTTPException(status_code=502, detail=f"MFL request failed: {e}")


@app.get("/api/{league}/{season}/assets")
async def get_assets(
    league: str,
    season: int,
    draft_year: Optional[int] = None,
    client: MFLClient = Depends(get_client),
):
    """Draft pick ownership rebuilt from the season's trades."""
    league_id = get_league_id(league)
    return await build_assets(client, league_id, season, draft_year)


@app.get("/api/{league}/{season}/toilet-bowl")
async def get_toilet_bowl(league: str, season: int, client: MFLClient = Depends(get_client)):
    """Toilet bowl ladder winners. Empty until the brackets are played."""
    league_id = get_league_id(league)
    try:
        return await build_toilet_bowl(client, league_id, season)
    except httpx.HTTPError:
        logger.exception("Playoff brackets unavailable for %s %s", league_id, season)
        return {"league_id": league_id, "season": season, "results": []}


@app.get("/api/{league}/{year}/rosters/{franchise_id}")
async def get_roster(league: str, year: int, franchise_id: str, client: MFLClient = Depends(get_client)):
    """Roster table, age breakdown and cap table for a franchise."""
    league_id = get_league_id(league)
    try:
        roster = await build_roster(client, league_id, year, franchise_id)
    except httpx.HTTPError as e:
        logger.exception("Roster failed for %s %s %s", league_id, year, franchise_id)
        raise HTTPException(status_code=502, detail=f"MFL request failed: {e}")
    if roster is None:
        raise HTTPException(status_code=404, detail=f"Franchise {franchise_id} not found")
    return roster


@app.post("/api/extensions/calculate")
async def calculate_extension(request: ExtensionRequest):
    """Price a 2-year extension and project the new contract year by year."""
    result = calculate_extension_salary(request.current_salary, request.current_years, request.top5_average)
    return {
        **serialize(result),
        "schedule": get_extension_schedule(result),
    }


@app.get("/api/contracts/window")
async def contract_window():
    """Whether contract changes can be submitted right now."""
    return serialize(get_contract_window())


@app.post("/api/contracts/validate")
async def validate_contract(request: ContractRequest):
    """Check a contract change against every rule without recording it."""
    result = validate_contract_submission(
        request.league_id,
        request.old_years,
        request.new_years,
        request.player_id,
        request.franchise_id,
    )
    return serialize(result)


@app.post("/api/contracts/submit")
async def submit_contract_change(
    request: ContractRequest,
    store: ContractTransactionStore = Depends(get_contract_store),
):
    """Validate and record a contract change. Rejected submissions come back with their errors."""
    transaction = submit_contract(
        store,
        request.league_id,
        request.franchise_id,
        request.player_id,
        request.old_years,
        request.new_years,
    )
    if transaction.status == "rejected":
        raise HTTPException(status_code=400, detail=jsonable_encoder(serialize(transaction)))
    logger.info("Contract %s recorded for player %s", transaction.id, transaction.player_id)
    return serialize(transaction)


@app.get("/api/contracts/{league_id}")
async def list_contracts(league_id: str, store: ContractTransactionStore = Depends(get_contract_store)) -> Dict:
    """Recorded contract submissions for a league."""
    return {"league_id": league_id, "transactions": serialize(store.list_for_league(league_id))}


# For running directly
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
