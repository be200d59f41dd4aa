"""
Draft order prediction and pick ownership.

Next year's draft runs in reverse standings order (worst record picks first)
for three rounds. The toilet bowl ladder adds three bonus picks: 1.17 for the
Toilet Bowl winner, 2.17 and 2.18 for the two consolation winners. With 16
franchises the board therefore has 17 + 18 + 16 = 51 slots, numbered overall
in the order they are actually drafted.
"""

import logging
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .config import DRAFT_ROUNDS, TOILET_BOWL_SLOTS
from .models import (
    AssetsResult,
    DraftPrediction,
    Record,
    StandingSnapshot,
    StandingsFranchise,
    TeamConfig,
    ToiletBowlLevel,
    ToiletBowlResult,
)
from .parsing import as_list, parse_int

logger = logging.getLogger(__name__)

DEFAULT_FRANCHISE_COUNT = 16

TRADE_COMMENT_PATTERN = re.compile(r"\[Pick (?:traded from|traded) (.+?)\.\]")


# --- Slot layout ---------------------------------------------------------

def _reserved_picks(round_number: int) -> List[int]:
    return [pick for rnd, pick, _ in TOILET_BOWL_SLOTS if rnd == round_number]


def regular_picks_in_round(round_number: int, franchise_count: int) -> List[int]:
    """Pick-in-round numbers for the regular picks, skipping toilet bowl slots."""
    reserved = set(_reserved_picks(round_number))
    picks = []
    pick = 0
    while len(picks) < franchise_count:
        pick += 1
        if pick not in reserved:
            picks.append(pick)
    return picks


def round_size(round_number: int, franchise_count: int) -> int:
    """Number of slots in a round, counting reserved toilet bowl slots."""
    regular = regular_picks_in_round(round_number, franchise_count)
    return max(regular[-1:] + _reserved_picks(round_number) + [0])


def overall_pick_number(round_number: int, pick_in_round: int, franchise_count: int = DEFAULT_FRANCHISE_COUNT) -> int:
    """Overall slot of round.pick. With 16 teams: 1.17 -> 17, 2.1 -> 18, 2.18 -> 35, 3.16 -> 51."""
    earlier = sum(round_size(r, franchise_count) for r in range(1, round_number))
    return earlier + pick_in_round


# --- Predicted order -----------------------------------------------------

def record_sort_key(franchise: StandingsFranchise) -> Tuple:
    """
    Worst-first sort key: win %, then all-play %, points for, power rating,
    victory points and points against, each ascending.
    """
    return (
        franchise.win_pct,
        franchise.all_play_pct,
        franchise.pf,
        franchise.pwr,
        franchise.vp,
        franchise.pa,
    )


def sort_by_record_reverse(standings: Iterable[StandingsFranchise]) -> List[StandingsFranchise]:
    """Worst record first. Stable, so full ties keep their input order."""
    return sorted(standings, key=record_sort_key)


def build_draft_prediction(
    standing: StandingsFranchise,
    team_configs: Mapping[str, TeamConfig],
    overall: int,
    round_number: int,
    pick_in_round: int,
    is_league_winner: bool = False,
    toilet_bowl_type: Optional[ToiletBowlLevel] = None,
) -> DraftPrediction:
    config = team_configs.get(standing.id)
    return DraftPrediction(
        overall_pick_number=overall,
        round=round_number,
        pick_in_round=pick_in_round,
        franchise_id=standing.id,
        team_name=(config.name if config else "") or standing.fname,
        team_icon=config.icon if config else "",
        team_banner=config.banner if config else "",
        current_record=standing.record,
        current_standing=standing.standing,
        is_toilet_bowl_pick=toilet_bowl_type is not None,
        toilet_bowl_type=toilet_bowl_type,
        is_league_winner=is_league_winner,
    )


def calculate_draft_order(
    standings: List[StandingsFranchise],
    team_configs: Mapping[str, TeamConfig],
    league_winner_id: Optional[str] = None,
    toilet_bowl_winners: Iterable[ToiletBowlResult] = (),
) -> List[DraftPrediction]:
    """
    Predict every pick of next year's draft, ordered by overall pick number.

    Round 1 runs in reverse record order. The league winner is only flagged,
    not moved. Each decided toilet bowl level adds its bonus pick; an
    undecided level leaves its slot empty. Rounds 2 and 3 repeat the round 1
    order around the reserved slots.
    """
    ordered = sort_by_record_reverse(standings)
    count = len(ordered)
    by_id = {s.id: s for s in standings}
    winners = list(toilet_bowl_winners)
    predictions: List[DraftPrediction] = []

    for round_number in range(1, DRAFT_ROUNDS + 1):
        picks = regular_picks_in_round(round_number, count)
        for standing, pick_in_round in zip(ordered, picks):
            is_winner = round_number == 1 and bool(league_winner_id) and standing.id == league_winner_id
            predictions.append(
                build_draft_prediction(
                    standing,
                    team_configs,
                    overall_pick_number(round_number, pick_in_round, count),
                    round_number,
                    pick_in_round,
                    is_league_winner=is_winner,
                )
            )

    for round_number, pick_in_round, level in TOILET_BOWL_SLOTS:
        level = ToiletBowlLevel(level)
        winner = next((w for w in winners if w.level == level), None)
        if winner is None:
            continue
        standing = by_id.get(winner.franchise_id)
        if standing is None:
            logger.debug("Toilet bowl %s winner %s not in standings", level.value, winner.franchise_id)
            continue
        predictions.append(
            build_draft_prediction(
                standing,
                team_configs,
                overall_pick_number(round_number, pick_in_round, count),
                round_number,
                pick_in_round,
                toilet_bowl_type=level,
            )
        )

    return sorted(predictions, key=lambda p: p.overall_pick_number)


def apply_pick_ownership(
    predictions: List[DraftPrediction],
    assets: AssetsResult,
    team_configs: Mapping[str, TeamConfig],
) -> List[DraftPrediction]:
    """
    Move predicted regular picks to their current owners from a transaction
    replay. Toilet bowl picks are awarded after trades close and never move.
    """
    if not assets.ok:
        return list(predictions)

    owners: Dict[Tuple[str, int], str] = {}
    for franchise in assets.franchises:
        for asset in franchise.assets:
            owners[(asset.original_franchise_id or franchise.id, asset.round)] = franchise.id

    result = []
    for prediction in predictions:
        owner = owners.get((prediction.franchise_id, prediction.round))
        if prediction.is_toilet_bowl_pick or owner is None or owner == prediction.franchise_id:
            result.append(prediction)
            continue
        original = prediction.team_name
        config = team_configs.get(owner)
        result.append(
            replace(
                prediction,
                franchise_id=owner,
                team_name=config.name if config else owner,
                team_icon=config.icon if config else "",
                team_banner=config.banner if config else "",
                original_team_name=original,
                original_team_icon=prediction.team_icon,
                is_traded=True,
                trade_chain=(original,),
            )
        )
    return result


# --- Actual draft results ------------------------------------------------

class TradeCommentStatus(str, Enum):
    NONE = "none"
    PARSED = "parsed"
    UNPARSEABLE = "unparseable"


@dataclass(frozen=True)
class TradeComment:
    status: TradeCommentStatus
    team_name: Optional[str] = None


def classify_trade_comment(comment: Optional[str]) -> TradeComment:
    """
    Read the "[Pick traded from Team.]" note MFL adds to traded picks.
    A note that mentions a trade but doesn't match the pattern is reported
    as unparseable rather than as an untraded pick.
    """
    if not comment:
        return TradeComment(TradeCommentStatus.NONE)
    match = TRADE_COMMENT_PATTERN.search(comment)
    if match:
        return TradeComment(TradeCommentStatus.PARSED, match.group(1).strip())
    if re.search(r"pick\s+traded", comment, re.IGNORECASE):
        logger.debug("Unparseable trade comment: %r", comment)
        return TradeComment(TradeCommentStatus.UNPARSEABLE)
    return TradeComment(TradeCommentStatus.NONE)


def parse_trade_from_comment(comment: Optional[str]) -> Optional[str]:
    """Team name the pick was traded from, or None."""
    return classify_trade_comment(comment).team_name


def _draft_picks(draft_results: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not isinstance(draft_results, dict):
        return []
    units = as_list((draft_results.get("draftResults") or {}).get("draftUnit"))
    picks = []
    for unit in units:
        if isinstance(unit, dict):
            picks.extend(p for p in as_list(unit.get("draftPick")) if isinstance(p, dict))
    return picks


def _franchise_id_for_name(team_configs: Mapping[str, TeamConfig], name: str) -> Optional[str]:
    return next((fid for fid, config in team_configs.items() if config.name == name), None)


def build_trade_chains(
    draft_results: Optional[Dict[str, Any]],
    team_configs: Mapping[str, TeamConfig],
) -> Dict[str, Dict]:
    """
    Pick id ("round.pick") -> {"original", "original_franchise_id", "chain"}
    for every traded pick. MFL only records the immediately prior owner, so
    chains are a single hop.
    """
    chains: Dict[str, Dict] = {}
    for pick in _draft_picks(draft_results):
        if not (pick.get("round") and pick.get("pick") and pick.get("franchise")):
            continue
        traded_from = parse_trade_from_comment(pick.get("comments"))
        if not traded_from:
            continue
        chains[f"{pick['round']}.{pick['pick']}"] = {
            "original": traded_from,
            "original_franchise_id": _franchise_id_for_name(team_configs, traded_from),
            "chain": [traded_from],
        }
    return chains


def format_trade_chain(chain: List[str]) -> str:
    """["A"] -> "from A"; ["A", "B", "C"] -> "from A via B via C"."""
    if not chain:
        return ""
    if len(chain) == 1:
        return f"from {chain[0]}"
    return f"from {chain[0]} via {' via '.join(chain[1:])}"


def extract_actual_assets(
    draft_results: Optional[Dict[str, Any]],
    team_configs: Mapping[str, TeamConfig],
) -> Dict[str, Dict]:
    """Pick id -> current owner and, for traded picks, the team it came from."""
    assets: Dict[str, Dict] = {}
    for pick in _draft_picks(draft_results):
        if not (pick.get("round") and pick.get("pick") and pick.get("franchise")):
            continue
        franchise_id = str(pick["franchise"])
        config = team_configs.get(franchise_id)
        comment = classify_trade_comment(pick.get("comments"))
        assets[f"{pick['round']}.{pick['pick']}"] = {
            "round": parse_int(pick["round"]),
            "pick": parse_int(pick["pick"]),
            "current_franchise_id": franchise_id,
            "current_team_name": config.name if config else "Unknown Team",
            "original_team_name": comment.team_name,
            "is_traded": comment.status == TradeCommentStatus.PARSED,
            "comment_status": comment.status,
        }
    return assets


def build_actual_draft_picks(
    draft_results: Optional[Dict[str, Any]],
    team_configs: Mapping[str, TeamConfig],
    franchise_count: int = DEFAULT_FRANCHISE_COUNT,
) -> List[Dict]:
    """Draft results as a list sorted by overall pick, with the original team's icon on traded picks."""
    picks = []
    for asset in extract_actual_assets(draft_results, team_configs).values():
        original_icon = None
        if asset["is_traded"]:
            original_id = _franchise_id_for_name(team_configs, asset["original_team_name"])
            if original_id:
                original_icon = team_configs[original_id].icon
        picks.append({
            **asset,
            "overall_pick_number": overall_pick_number(asset["round"], asset["pick"], franchise_count),
            "original_team_icon": original_icon,
        })
    return sorted(picks, key=lambda p: p["overall_pick_number"])


def convert_actual_picks_to_predictions(
    actual_picks: List[Dict],
    team_configs: Mapping[str, TeamConfig],
) -> List[DraftPrediction]:
    """Shape actual picks like predictions so the draft grid can render either."""
    predictions = []
    for pick in actual_picks:
        config = team_configs.get(pick["current_franchise_id"])
        predictions.append(
            DraftPrediction(
                overall_pick_number=pick["overall_pick_number"],
                round=pick["round"],
                pick_in_round=pick["pick"],
                franchise_id=pick["current_franchise_id"],
                team_name=pick["current_team_name"],
                team_icon=config.icon if config else "",
                team_banner=config.banner if config else "",
                current_record=Record(),
                current_standing=StandingSnapshot(),
                original_team_name=pick.get("original_team_name"),
                original_team_icon=pick.get("original_team_icon") or "",
                is_traded=pick["is_traded"],
                trade_chain=(pick["original_team_name"],) if pick["is_traded"] else (),
            )
        )
    return predictions
