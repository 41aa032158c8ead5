"""Break-even (sustainability) analysis over monthly fixed and variable costs."""

from dataclasses import dataclass
from typing import Iterable

from .models import BepConfiguration, Employee


def _num(x) -> float:
    return float(x or 0)


@dataclass(frozen=True)
class BreakEvenAnalysis:
    staffing_cost: float
    other_fixed_cost: float
    total_fixed_cost: float
    variable_ratio: float
    margin_ratio: float
    break_even_revenue: float
    break_even_units: float

    @property
    def sustainable(self) -> bool:
        """False when variable costs eat the whole revenue."""
        return self.margin_ratio > 0


def staffing_cost(employees: Iterable[Employee]) -> float:
    """Monthly payroll including employer contributions."""
    return sum(
        _num(e.monthly_salary) * (1 + _num(e.contribution_percentage) / 100.0)
        for e in employees
    )


def analyze_break_even(employees: Iterable[Employee], config: BepConfiguration) -> BreakEvenAnalysis:
    staff = staffing_cost(employees)
    other = sum(_num(c.amount) for c in config.fixed_costs)
    total_fixed = staff + other

    variable_ratio = (
        _num(config.food_cost_incidence)
        + _num(config.service_incidence)
        + _num(config.waste_incidence)
    ) / 100.0
    margin_ratio = 1 - variable_ratio

    # margin <= 0 means no revenue ever breaks even; 0 is the sentinel
    revenue = total_fixed / margin_ratio if margin_ratio > 0 else 0.0
    ticket = _num(config.average_ticket)
    units = revenue / ticket if ticket > 0 else 0.0

    return BreakEvenAnalysis(
        staffing_cost=staff,
        other_fixed_cost=other,
        total_fixed_cost=total_fixed,
        variable_ratio=variable_ratio,
        margin_ratio=margin_ratio,
        break_even_revenue=revenue,
        break_even_units=units,
    )
