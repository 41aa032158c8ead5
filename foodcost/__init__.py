"""Food cost core: recipe costing, break-even analysis and price suggestions."""

from .bep import BreakEvenAnalysis, analyze_break_even, staffing_cost
from .calc import (
    CostWarning,
    cost_breakdown,
    ingredient_cost,
    item_cost_report,
    item_total_cost,
    preparation_cost_report,
    preparation_unit_cost,
)
from .pricing import current_food_cost_ratio, price_item, recommend_price, round_price

__all__ = [
    "BreakEvenAnalysis",
    "CostWarning",
    "analyze_break_even",
    "cost_breakdown",
    "current_food_cost_ratio",
    "ingredient_cost",
    "item_cost_report",
    "item_total_cost",
    "preparation_cost_report",
    "preparation_unit_cost",
    "price_item",
    "recommend_price",
    "round_price",
    "staffing_cost",
]
