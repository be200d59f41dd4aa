"""
2-year extension pricing.

1. Extension value per year = (top-5 average at position x 2) / (current years + 2)
2. New contract salary = current salary + extension value per year
3. Future years follow the league-wide 10% annual increase
"""

from typing import List

from .config import ANNUAL_ESCALATION, EXTENSION_YEARS
from .models import ExtensionSalaryResult


def calculate_extension_salary(current_salary: float, current_years: int, top5_average: float) -> ExtensionSalaryResult:
    """Price a 2-year extension. current_years may be 0; the divisor is always >= 2."""
    total_years = current_years + EXTENSION_YEARS
    extension_value_per_year = (top5_average * EXTENSION_YEARS) / total_years
    new_contract_salary = current_salary + extension_value_per_year

    return ExtensionSalaryResult(
        current_salary=current_salary,
        current_years=current_years,
        top5_average=top5_average,
        extension_value_per_year=extension_value_per_year,
        new_contract_salary=new_contract_salary,
        total_new_value=new_contract_salary * total_years,
    )


def get_projected_salary(base_salary: float, years_from_now: int) -> float:
    """Salary years_from_now seasons out, compounding 10% a year."""
    return base_salary * (1 + ANNUAL_ESCALATION) ** years_from_now


def get_extension_schedule(result: ExtensionSalaryResult) -> List[float]:
    """Year-by-year salaries of the extended contract, starting next season."""
    years = result.current_years + EXTENSION_YEARS
    return [get_projected_salary(result.new_contract_salary, i) for i in range(years)]
