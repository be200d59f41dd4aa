"""
Toilet bowl ladder results from the MFL playoffBracket export.

Bracket #4 (Toilet Bowl) wins pick 1.17, #5 (Consolation) pick 2.17 and
#6 (Consolation 2) pick 2.18.
"""

import logging
from typing import Any, Dict, List, Optional

from .config import TOILET_BOWL_BRACKET_IDS, TOILET_BOWL_SLOTS, TOILET_BOWL_TIER_NAMES
from .models import ToiletBowlLevel, ToiletBowlResult
from .parsing import as_list, pad_franchise_id

logger = logging.getLogger(__name__)


def _first(item: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value not in (None, ""):
            return value
    return None


def _level_for_item(item: Dict[str, Any]) -> Optional[ToiletBowlLevel]:
    bracket_id = _first(item, "bracketId", "bracket_id")
    if bracket_id is not None:
        try:
            level = TOILET_BOWL_BRACKET_IDS.get(int(str(bracket_id).strip()))
        except ValueError:
            level = None
    else:
        level = TOILET_BOWL_TIER_NAMES.get(item.get("tier") or "")
    return ToiletBowlLevel(level) if level else None


def extract_toilet_bowl_winners(bracket_data: Optional[Dict[str, Any]]) -> List[ToiletBowlResult]:
    """
    Parse playoff tier items into ladder results.

    The bracket id is authoritative when present; the tier name is only a
    fallback. Unknown brackets are dropped, and the first winner seen for a
    level is kept. No bracket data means no playoffs yet: returns [].
    """
    results: List[ToiletBowlResult] = []
    if not isinstance(bracket_data, dict):
        return results

    bracket = bracket_data.get("playoffBracket") or {}
    items = as_list(bracket.get("playoffTierItem"))

    seen = set()
    for item in items:
        if not isinstance(item, dict):
            continue
        level = _level_for_item(item)
        if level is None:
            logger.debug("Skipping non toilet bowl tier item: %r", item)
            continue

        franchise_id = _first(item, "franchiseId", "franchise_id")
        if franchise_id is None:
            continue
        if level in seen:
            logger.debug("Duplicate %s result ignored for franchise %s", level.value, franchise_id)
            continue

        seen.add(level)
        results.append(
            ToiletBowlResult(
                level=level,
                franchise_id=pad_franchise_id(franchise_id),
                franchise_name=_first(item, "franchiseName", "franchise_name") or "",
            )
        )

    return results


def get_toilet_bowl_winner(winners: List[ToiletBowlResult], level: ToiletBowlLevel) -> Optional[ToiletBowlResult]:
    """The result for a ladder level, or None if it hasn't been decided."""
    level = ToiletBowlLevel(level)
    return next((w for w in winners if w.level == level), None)


def get_toilet_bowl_draft_picks(winners: List[ToiletBowlResult]) -> List[Dict]:
    """The three bonus picks with their winner's franchise id ('' if undecided)."""
    picks = []
    for round_number, pick_in_round, level in TOILET_BOWL_SLOTS:
        winner = get_toilet_bowl_winner(winners, ToiletBowlLevel(level))
        picks.append({
            "round": round_number,
            "pick_in_round": pick_in_round,
            "level": ToiletBowlLevel(level),
            "franchise_id": winner.franchise_id if winner else "",
        })
    return picks
