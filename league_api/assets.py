"""
Draft pick ownership from MFL data.

When the assets export isn't available, ownership is rebuilt by replaying
TRADE transactions oldest-first over a starting map where every franchise
owns its own picks. Future picks appear in trades as FP_<franchise>_<year>_<round>.
"""

import logging
import re
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Optional

from .config import DRAFT_ROUNDS
from .draft_order import overall_pick_number, sort_by_record_reverse
from .models import AssetPick, AssetsFranchise, AssetsResult, DraftPrediction, StandingsFranchise, TeamConfig
from .parsing import as_list, parse_int

logger = logging.getLogger(__name__)

FUTURE_PICK_PATTERN = re.compile(r"^FP_(\d+)_(\d+)_(\d+)$")
MISSING_DATA_ERROR = "Missing transaction or standings data"


def future_pick_key(franchise_id: str, year: int, round_number: int) -> str:
    return f"FP_{franchise_id}_{year}_{round_number}"


def _split_items(value: Optional[str]) -> List[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def replay_pick_ownership(
    transactions: List[Dict[str, Any]],
    franchise_ids: List[str],
    draft_year: int,
) -> "OrderedDict[str, str]":
    """
    Future pick key -> current owner after replaying every trade.
    Later trades overwrite earlier ones for the same pick.
    """
    ownership: "OrderedDict[str, str]" = OrderedDict()
    for franchise_id in franchise_ids:
        for round_number in range(1, DRAFT_ROUNDS + 1):
            ownership[future_pick_key(franchise_id, draft_year, round_number)] = franchise_id

    trades = [t for t in transactions if isinstance(t, dict) and t.get("type") == "TRADE"]
    trades.sort(key=lambda t: parse_int(t.get("timestamp")))

    for trade in trades:
        franchise1 = trade.get("franchise")
        franchise2 = trade.get("franchise2")
        if not franchise1 or not franchise2:
            logger.debug("Skipping trade without both franchises: %r", trade)
            continue

        for item in _split_items(trade.get("franchise1_gave_up")):
            if item.startswith("FP_"):
                ownership[item] = franchise2
        for item in _split_items(trade.get("franchise2_gave_up")):
            if item.startswith("FP_"):
                ownership[item] = franchise1

    return ownership


def extract_assets_from_transactions(
    transactions_data: Optional[Dict[str, Any]],
    standings_data: Optional[Dict[str, Any]],
    draft_year: int,
) -> AssetsResult:
    """
    Which draft_year picks each franchise owns, rebuilt from trade history.

    Each pick's number within its round comes from the original owner's
    predicted draft position. Missing feeds return an error result.
    """
    transactions = ((transactions_data or {}).get("transactions") or {}).get("transaction")
    franchises_raw = ((standings_data or {}).get("leagueStandings") or {}).get("franchise")
    if transactions is None or franchises_raw is None:
        return AssetsResult(error=MISSING_DATA_ERROR)

    standings = [StandingsFranchise.from_payload(f) for f in as_list(franchises_raw) if isinstance(f, dict)]
    draft_position = {s.id: index + 1 for index, s in enumerate(sort_by_record_reverse(standings))}
    names = {s.id: s.fname or s.id for s in standings}

    ownership = replay_pick_ownership(as_list(transactions), [s.id for s in standings], draft_year)

    by_owner: Dict[str, List[AssetPick]] = OrderedDict()
    for key, owner in ownership.items():
        match = FUTURE_PICK_PATTERN.match(key)
        if not match:
            continue
        original_id, year, round_number = match.group(1), int(match.group(2)), int(match.group(3))
        if year != draft_year:
            continue
        if original_id not in draft_position:
            logger.debug("Pick %s belongs to a franchise missing from standings", key)
        by_owner.setdefault(owner, []).append(
            AssetPick(
                round=round_number,
                pick=draft_position.get(original_id, 1),
                original_franchise_id=original_id,
                original_team_name=names.get(original_id),
            )
        )

    franchises = []
    for owner, picks in by_owner.items():
        if owner not in names:
            logger.debug("Dropping picks owned by unknown franchise %s", owner)
            continue
        picks.sort(key=lambda p: (p.round, p.pick))
        franchises.append(AssetsFranchise(id=owner, name=names[owner], assets=tuple(picks)))

    return AssetsResult(franchises=tuple(franchises))


def is_valid_assets_data(data: Any) -> bool:
    """True for an MFL assets payload with a franchise list and no error."""
    if not isinstance(data, dict) or data.get("error"):
        return False
    assets = data.get("assets")
    return isinstance(assets, dict) and isinstance(assets.get("franchise"), list)


def assets_from_payload(data: Dict[str, Any]) -> AssetsResult:
    """Read an MFL-style assets payload ({"assets": {"franchise": [...]}})."""
    if not is_valid_assets_data(data):
        error = data.get("error") if isinstance(data, dict) else None
        return AssetsResult(error=str(error or "Invalid assets data"))

    franchises = []
    for franchise in data["assets"]["franchise"]:
        if not isinstance(franchise, dict):
            continue
        picks = tuple(
            AssetPick(
                round=parse_int(asset.get("round")),
                pick=parse_int(asset.get("pick")),
                original_franchise_id=asset.get("originalFranchiseId") or asset.get("original_franchise_id"),
            )
            for asset in as_list(franchise.get("asset"))
            if isinstance(asset, dict)
        )
        franchises.append(AssetsFranchise(id=str(franchise.get("id", "")), name=franchise.get("name") or "", assets=picks))
    return AssetsResult(franchises=tuple(franchises))


def convert_assets_to_predictions(
    assets: AssetsResult,
    team_configs: Mapping[str, TeamConfig],
    franchise_count: int = 16,
) -> List[DraftPrediction]:
    """One grid row per owned pick, sorted by overall pick number."""
    predictions = []
    for franchise in assets.franchises:
        config = team_configs.get(franchise.id)
        if config is None:
            continue
        for asset in franchise.assets:
            is_traded = bool(asset.original_franchise_id) and asset.original_franchise_id != franchise.id
            original = team_configs.get(asset.original_franchise_id) if is_traded else None
            predictions.append(
                DraftPrediction(
                    overall_pick_number=overall_pick_number(asset.round, asset.pick, franchise_count),
                    round=asset.round,
                    pick_in_round=asset.pick,
                    franchise_id=franchise.id,
                    team_name=config.name,
                    team_icon=config.icon,
                    team_banner=config.banner,
                    original_team_name=original.name if original else None,
                    original_team_icon=original.icon if original else "",
                    is_traded=is_traded,
                    trade_chain=(original.name,) if original else (),
                )
            )
    return sorted(predictions, key=lambda p: p.overall_pick_number)


def compare_ownership(actual_assets: Dict[str, Dict], replayed: AssetsResult) -> List[Dict]:
    """
    Cross-check draft-comment ownership against transaction replay.
    Returns one entry per pick where the two disagree on the current owner.
    """
    if not replayed.ok:
        return []

    replay_owner = {
        (asset.round, asset.pick): franchise.id
        for franchise in replayed.franchises
        for asset in franchise.assets
    }

    mismatches = []
    for pick_id, asset in actual_assets.items():
        key = (asset["round"], asset["pick"])
        if key not in replay_owner:
            continue
        if replay_owner[key] != asset["current_franchise_id"]:
            mismatches.append({
                "pick_id": pick_id,
                "draft_results_owner": asset["current_franchise_id"],
                "transactions_owner": replay_owner[key],
            })
    return mismatches
