"""
Roster table preparation.

Rows are sorted by position then salary, concatenated active -> practice ->
injured, and annotated with purely presentational flags (position dividers,
tier dividers, active-row striping). Every annotate_* function is a pure
transform over an already-sorted list and returns new rows.
"""

from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from .config import POSITION_ORDER
from .models import DisplayTag, Position, RosterPlayer


def get_position_rank(position: Optional[Position]) -> int:
    """Sort rank for a position; unknown positions sort last."""
    if position is None:
        return len(POSITION_ORDER)
    return position.rank


def sort_by_position(players: Iterable[RosterPlayer]) -> List[RosterPlayer]:
    """Position order first, then salary descending. Unknown codes sort last, grouped by code. Stable."""
    return sorted(players, key=lambda p: (get_position_rank(p.position), p.position_group, -p.salary))


def annotate_position_dividers(rows: List[RosterPlayer]) -> List[RosterPlayer]:
    """Mark the first row of each position run and the last row before a change."""
    annotated = []
    for index, player in enumerate(rows):
        group = player.position_group
        prev_group = rows[index - 1].position_group if index > 0 else None
        next_group = rows[index + 1].position_group if index + 1 < len(rows) else None
        annotated.append(
            replace(
                player,
                position_divider=index == 0 or group != prev_group,
                position_divider_end=next_group is not None and next_group != group,
            )
        )
    return annotated


def annotate_tier_dividers(rows: List[RosterPlayer]) -> List[RosterPlayer]:
    """Mark the first practice/injured row after a tier change."""
    annotated = []
    last_tag = None
    for player in rows:
        tag = player.display_tag
        divider = last_tag is not None and tag != last_tag and tag != DisplayTag.ACTIVE
        last_tag = tag
        annotated.append(replace(player, tier_divider=divider))
    return annotated


def annotate_active_striping(rows: List[RosterPlayer]) -> List[RosterPlayer]:
    """Alternate stripes over active rows only; practice/injured rows never stripe."""
    annotated = []
    active_index = 0
    for player in rows:
        if player.display_tag == DisplayTag.ACTIVE:
            annotated.append(replace(player, active_stripe=active_index % 2 == 1))
            active_index += 1
        else:
            annotated.append(replace(player, active_stripe=False))
    return annotated


def build_display_rows(
    players: Iterable[RosterPlayer] = (),
    practice_squad: Iterable[RosterPlayer] = (),
    injured_reserve: Iterable[RosterPlayer] = (),
    bye_weeks: Optional[Dict[str, Optional[int]]] = None,
) -> List[RosterPlayer]:
    """
    Build the full roster table.

    Each bucket is sorted on its own and tagged with its tier, so the order is
    always active rows, then practice squad, then injured reserve. A player's
    own bye week wins over the NFL team lookup in bye_weeks.
    """
    bye_weeks = bye_weeks or {}

    def tagged(bucket: Iterable[RosterPlayer], tag: DisplayTag) -> List[RosterPlayer]:
        return [
            replace(
                player,
                display_tag=tag,
                bye_week=player.bye_week if player.bye_week is not None else bye_weeks.get(player.nfl_team),
            )
            for player in sort_by_position(bucket)
        ]

    combined = (
        tagged(players, DisplayTag.ACTIVE)
        + tagged(practice_squad, DisplayTag.PRACTICE)
        + tagged(injured_reserve, DisplayTag.INJURED)
    )
    return annotate_active_striping(annotate_tier_dividers(annotate_position_dividers(combined)))


def split_by_tag(players: Iterable[RosterPlayer]) -> Dict[DisplayTag, List[RosterPlayer]]:
    """Group a flat MFL roster into the three display buckets."""
    buckets: Dict[DisplayTag, List[RosterPlayer]] = {tag: [] for tag in DisplayTag}
    for player in players:
        buckets[player.display_tag].append(player)
    return buckets
