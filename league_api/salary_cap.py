"""
Salary cap accounting: cap hits, dead money and cap space.

Every contract escalates 10% on Feb 15. Practice squad players count 50%
against the current season's cap and 100% against future seasons. Releasing a
player charges 50% of salary in the release season plus a percentage of salary
the next season that grows with the years left on the deal.
"""

import re
from typing import Dict, Iterable, List, Mapping, Optional

from .config import (
    ANNUAL_ESCALATION,
    CAP_INCLUSION,
    CAP_YEARS,
    DEAD_MONEY_CURRENT_PERCENT,
    DEAD_MONEY_FUTURE_PERCENT,
    RESERVE_FOR_ROOKIES,
    SALARY_CAP,
)
from .models import DisplayTag, Position, RosterPlayer
from .parsing import parse_int, parse_number


def get_cap_percent(tag: DisplayTag = DisplayTag.ACTIVE, is_current: bool = True) -> float:
    """Fraction of salary counted against the cap for a roster tier."""
    inclusion = CAP_INCLUSION.get(DisplayTag(tag).value, {"current": 1.0, "future": 1.0})
    return inclusion["current"] if is_current else inclusion["future"]


def calculate_escalated_salary(base_salary: float, years_from_now: int) -> int:
    return round(base_salary * (1 + ANNUAL_ESCALATION) ** years_from_now)


def calculate_cap_charges(players: Iterable[RosterPlayer], years: int = CAP_YEARS) -> List[float]:
    """
    Total cap charge for each of the next `years` seasons (index 0 = current).
    A player counts in season i only while contract_years > i.
    """
    players = list(players)
    charges = []
    for index in range(years):
        total = 0.0
        for player in players:
            if player.contract_years <= index:
                continue
            percent = get_cap_percent(player.display_tag, is_current=index == 0)
            total += player.salary * (1 + ANNUAL_ESCALATION) ** index * percent
        charges.append(total)
    return charges


def aggregate_dead_money(
    adjustments: Iterable[Mapping],
    franchise_id: Optional[str] = None,
    years: int = CAP_YEARS,
) -> List[float]:
    """
    Dead money per season from salary adjustments.

    An adjustment with years_remaining is a release: 50% of salary in its
    season plus DEAD_MONEY_FUTURE_PERCENT[years_remaining] the season after.
    An adjustment without it is a carry-over charged in full.
    """
    totals = [0.0] * years
    for adjustment in adjustments:
        if franchise_id and adjustment.get("franchise_id", adjustment.get("franchiseId")) != franchise_id:
            continue

        offset = parse_int(adjustment.get("year_offset", adjustment.get("season_offset", 0)))
        salary = parse_number(adjustment.get("salary")) or parse_number(adjustment.get("amount"))
        years_remaining = adjustment.get("years_remaining", adjustment.get("yearsRemaining"))

        if years_remaining is None:
            current, future = salary, 0.0
        else:
            current = DEAD_MONEY_CURRENT_PERCENT * salary
            future = DEAD_MONEY_FUTURE_PERCENT.get(parse_int(years_remaining), 0.0) * salary

        if 0 <= offset < years:
            totals[offset] += current
        if future and 0 <= offset + 1 < years:
            totals[offset + 1] += future
    return totals


def calculate_cap_space(cap_charges: float, dead_money: float = 0, cap_limit: float = SALARY_CAP) -> float:
    return cap_limit - cap_charges - dead_money


def calculate_effective_cap_space(cap_space: float, reserve: float = RESERVE_FOR_ROOKIES) -> float:
    """Cap space left for veterans after holding back the rookie reserve."""
    return cap_space - reserve


def calculate_next_year_cap_hit(
    current_salary: float, contract_years_remaining: int, tag: DisplayTag = DisplayTag.ACTIVE
) -> int:
    """Next season's cap hit after contracts roll over on Feb 15 (expired -> 0)."""
    if contract_years_remaining - 1 <= 0:
        return 0
    escalated = calculate_escalated_salary(current_salary, 1)
    return round(escalated * get_cap_percent(tag, is_current=True))


def generate_contract_schedule(player_id: str, base_salary: float, contract_years: int, start_year: int) -> Dict:
    """Year-by-year escalated cap hits with total and average annual value."""
    schedule = []
    total = 0
    for i in range(contract_years):
        salary = calculate_escalated_salary(base_salary, i)
        total += salary
        schedule.append({"year": start_year + i, "salary": salary, "cap_hit": salary})

    return {
        "player_id": player_id,
        "base_year": start_year,
        "base_salary": base_salary,
        "contract_years": contract_years,
        "yearly_schedule": schedule,
        "total_contract_value": total,
        "average_annual_value": round(total / contract_years) if contract_years else 0,
    }


def calculate_contract_years_meta(players: Iterable[RosterPlayer]) -> Dict[str, int]:
    players = list(players)
    return {
        "contract_years_total": sum(max(p.contract_years, 0) for p in players),
        "longest_contract": max((p.contract_years for p in players), default=0),
    }


def parse_adjustment_meta(description: str = "") -> Dict:
    """
    Pull player details out of a release note, e.g.
    "Dropped John Doe RB SF (Salary: $5,000,000, Years: 3)".
    """
    meta = {"name": "", "nfl_team": "", "salary": None, "years_remaining": None}

    name_match = re.match(r"^Dropped\s+([^()]+)\s*\(", description or "", re.IGNORECASE)
    if name_match:
        meta["name"] = name_match.group(1).strip()
        # Team and position trail the name in either order ("RB SF" or "SF RB")
        for token in meta["name"].split(" ")[-2:][::-1]:
            if 2 <= len(token) <= 3 and token.isalpha() and token.isupper() and Position.parse(token) is None:
                meta["nfl_team"] = token.upper()
                break

    salary_match = re.search(r"Salary:\s*\$?([\d,.]+)", description or "", re.IGNORECASE)
    if salary_match:
        meta["salary"] = parse_number(salary_match.group(1).replace(",", "")) or None

    years_match = re.search(r"Years:\s*(\d+)", description or "", re.IGNORECASE)
    if years_match:
        meta["years_remaining"] = int(years_match.group(1))

    return meta


def build_cap_table(
    players: Iterable[RosterPlayer],
    adjustments: Iterable[Mapping] = (),
    franchise_id: Optional[str] = None,
    start_year: int = 0,
) -> List[Dict]:
    """Per-season cap summary rows for a franchise's cap page."""
    players = list(players)
    charges = calculate_cap_charges(players)
    dead = aggregate_dead_money(adjustments, franchise_id)
    rows = []
    for index, (charge, dead_money) in enumerate(zip(charges, dead)):
        space = calculate_cap_space(charge, dead_money)
        rows.append({
            "year": start_year + index if start_year else index,
            "cap_charges": round(charge, 2),
            "dead_money": round(dead_money, 2),
            "cap_space": round(space, 2),
            "effective_cap_space": round(calculate_effective_cap_space(space), 2),
        })
    return rows
