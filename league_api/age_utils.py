"""Age calculations for roster pages."""

from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional

from .config import AGE_DISTRIBUTION_COLORS
from .models import RosterPlayer


def calculate_age(birthdate: Optional[int], today: Optional[date] = None) -> Optional[int]:
    """
    Age in whole years from an MFL birthdate (unix seconds).
    Returns None when the birthdate is missing.
    """
    if not birthdate:
        return None
    today = today or date.today()
    born = datetime.fromtimestamp(birthdate, tz=timezone.utc).date()
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


def _ages(players: Iterable[RosterPlayer], today: Optional[date]) -> List[int]:
    ages = (calculate_age(p.birthdate, today) for p in players)
    return [a for a in ages if a is not None]


def calculate_average_age(players: Iterable[RosterPlayer], today: Optional[date] = None) -> Optional[float]:
    """Average age to one decimal place, or None if no player has a birthdate."""
    ages = _ages(players, today)
    if not ages:
        return None
    return round(sum(ages) / len(ages), 1)


def calculate_average_age_by_position(
    players: Iterable[RosterPlayer], today: Optional[date] = None
) -> Dict[str, Dict]:
    """Position code -> {"avg_age", "count"}. Unknown codes keep their own key; players without any code group under UNK."""
    by_position: Dict[str, List[int]] = defaultdict(list)
    for player in players:
        age = calculate_age(player.birthdate, today)
        if age is None:
            continue
        key = player.position_group or "UNK"
        by_position[key].append(age)

    return {
        position: {"avg_age": round(sum(ages) / len(ages), 1), "count": len(ages)}
        for position, ages in by_position.items()
    }


def get_age_distribution(
    players: Iterable[RosterPlayer], bucket_size: int = 5, today: Optional[date] = None
) -> List[Dict]:
    """
    Bucket player ages for the age chart.
    E.g. bucket_size=5 -> "20-24", "25-29", ... sorted youngest first.
    """
    ages = _ages(players, today)
    if not ages:
        return []

    buckets: Dict[int, int] = defaultdict(int)
    for age in ages:
        buckets[(age // bucket_size) * bucket_size] += 1

    return [
        {
            "range": f"{start}-{start + bucket_size - 1}",
            "count": count,
            "percentage": round(count / len(ages) * 100),
        }
        for start, count in sorted(buckets.items())
    ]


def get_age_distribution_colors(count: int) -> List[str]:
    """One bar color per bucket, cycling through the palette if needed."""
    palette = AGE_DISTRIBUTION_COLORS
    return [palette[i % len(palette)] for i in range(count)]
