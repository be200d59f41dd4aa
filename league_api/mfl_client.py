"""MyFantasyLeague export API client with caching."""

import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from .config import CACHE_TTL, MFL_API_BASE, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)


class MFLClient:
    """Async client for the MFL export API."""

    def __init__(self, base_url: str = MFL_API_BASE, api_key: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key if api_key is not None else os.environ.get("MFL_API_KEY")
        self._transport = transport
        self._cache: Dict[str, Any] = {}
        self._cache_time: Dict[str, datetime] = {}

    def export_url(self, year: int, export_type: str, league_id: Optional[str] = None, **params) -> str:
        """Build an export URL, e.g. {base}/2025/export?TYPE=standings&L=13522&JSON=1."""
        query = {"TYPE": export_type}
        if league_id:
            query["L"] = league_id
        query.update({k.upper(): v for k, v in params.items() if v is not None})
        query["JSON"] = 1
        return f"{self.base_url}/{year}/export?{urlencode(query)}"

    def clear_cache(self) -> None:
        self._cache.clear()
        self._cache_time.clear()

    async def _cached_get(self, url: str) -> Any:
        """GET request with caching."""
        now = datetime.now()

        if url in self._cache:
            cache_age = (now - self._cache_time[url]).total_seconds()
            if cache_age < CACHE_TTL:
                return self._cache[url]

        logger.debug("Fetching %s", url)
        async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT, transport=self._transport) as client:
            response = await client.get(url)
            response.raise_for_status()
            try:
                data = response.json()
            except ValueError as exc:
                # MFL answers some failures with a 200 HTML page
                raise httpx.DecodingError(f"Non-JSON response from {url}", request=response.request) from exc

        self._cache[url] = data
        self._cache_time[url] = now
        return data

    async def get_league(self, league_id: str, year: int) -> Dict:
        """League settings, including the franchise list with names and icons."""
        return await self._cached_get(self.export_url(year, "league", league_id))

    async def get_standings(self, league_id: str, year: int, week: Optional[int] = None) -> Dict:
        return await self._cached_get(self.export_url(year, "leagueStandings", league_id, w=week))

    async def get_playoff_brackets(self, league_id: str, year: int) -> Dict:
        """Playoff tier items, including the toilet bowl ladder."""
        return await self._cached_get(self.export_url(year, "playoffBracket", league_id))

    async def get_transactions(self, league_id: str, year: int, trans_type: Optional[str] = None) -> Dict:
        return await self._cached_get(self.export_url(year, "transactions", league_id, trans_type=trans_type))

    async def get_draft_results(self, league_id: str, year: int) -> Dict:
        return await self._cached_get(self.export_url(year, "draftResults", league_id))

    async def get_rosters(self, league_id: str, year: int, franchise_id: Optional[str] = None) -> Dict:
        return await self._cached_get(self.export_url(year, "rosters", league_id, franchise=franchise_id))

    async def get_players(self, year: int) -> Dict:
        """All NFL players (large and rarely changes, so rely on the cache)."""
        return await self._cached_get(self.export_url(year, "players", details=1))

    async def get_salary_adjustments(self, league_id: str, year: int) -> Dict:
        return await self._cached_get(self.export_url(year, "salaryAdjustments", league_id))

    async def get_assets(self, league_id: str, year: int) -> Dict:
        """Draft pick assets. Requires an API key; MFL answers with an error otherwise."""
        return await self._cached_get(self.export_url(year, "assets", league_id, apikey=self.api_key))


# Singleton instance
mfl_client = MFLClient()
