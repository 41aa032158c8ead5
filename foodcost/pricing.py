"""Suggested selling prices from costs and target incidences."""

from dataclasses import dataclass
from math import ceil
from typing import Optional

from .models import BepConfiguration, MenuItem, ProductCategory, ProductMix

GOOD = "good"
WARNING = "warning"
CRITICAL = "critical"


def recommend_price(cost: float, food_cost_pct: float, delivery_pct: float = 0.0,
                    is_delivery_item: bool = False) -> float:
    """Price at which ``cost`` is ``food_cost_pct`` percent of it.

    Delivery items get ``delivery_pct`` percent on top. Returns 0 when either
    the cost or the target percentage is not positive.
    """
    if cost <= 0 or food_cost_pct <= 0:
        return 0.0
    base = cost / (food_cost_pct / 100.0)
    if is_delivery_item:
        return base * (1 + (delivery_pct or 0) / 100.0)
    return base


def current_food_cost_ratio(cost: float, selling_price: float) -> float:
    """Food cost as a percentage of the selling price, 0 when unpriced."""
    if not selling_price or selling_price <= 0:
        return 0.0
    return cost / selling_price * 100.0


def round_price(price: float, step: float) -> float:
    """Round up to the next multiple of ``step``."""
    if step <= 0:
        return price
    # 4.5 / 0.1 is not exactly 45
    return ceil(round(price / step, 9)) * step


def food_cost_band(ratio: float) -> str:
    if ratio <= 25:
        return GOOD
    if ratio <= 35:
        return WARNING
    return CRITICAL


@dataclass(frozen=True)
class PriceRecommendation:
    cost: float
    current_ratio: float
    base_price: float
    suggested_price: float
    rounded_price: float
    delivery_applied: bool
    band: str


def price_item(item: MenuItem, cost: float, config: BepConfiguration,
               step: Optional[float] = None) -> PriceRecommendation:
    """Advisory price for a menu item; the item itself is never touched."""
    delivery = bool(item.is_delivery and config.delivery_enabled)
    base = recommend_price(cost, config.food_cost_incidence)
    suggested = recommend_price(cost, config.food_cost_incidence,
                                config.delivery_incidence, delivery)
    ratio = current_food_cost_ratio(cost, item.selling_price)
    return PriceRecommendation(
        cost=cost,
        current_ratio=ratio,
        base_price=base,
        suggested_price=suggested,
        rounded_price=round_price(suggested, step) if step else suggested,
        delivery_applied=delivery,
        band=food_cost_band(ratio),
    )


# -----------------------------------------------------------------------------
# Product mix
# -----------------------------------------------------------------------------
def mix_average_ticket(mix: ProductMix) -> float:
    return sum((c.revenue_share / 100.0) * c.average_price for c in mix.categories)


def mix_target_revenue(mix: ProductMix) -> float:
    return mix.monthly_volume * mix_average_ticket(mix)


def mix_is_balanced(mix: ProductMix) -> bool:
    """Revenue shares must add up to 100%."""
    return abs(sum(c.revenue_share for c in mix.categories) - 100) < 0.01


@dataclass(frozen=True)
class CategoryPricing:
    category: ProductCategory
    valid: bool
    unit_volume: int
    category_fixed_cost: float
    fixed_cost_per_unit: float
    variable_pct: float
    break_even_price: float = 0.0
    recommended_price: float = 0.0
    variable_cost_per_unit: float = 0.0
    profit_per_unit: float = 0.0
    monthly_revenue: float = 0.0
    monthly_cost: float = 0.0
    monthly_profit: float = 0.0
    monthly_margin_pct: float = 0.0
    error: str = ""


def price_category(category: ProductCategory, mix: ProductMix, config: BepConfiguration,
                   fixed_cost_total: float, raw_material_cost: float,
                   profit_margin_pct: float) -> CategoryPricing:
    """Price one product-mix category so it carries its share of fixed costs.

    Fixed costs are allocated by revenue share and spread over the units the
    category sells per month. Variable incidences apply according to the
    category flags, delivery only when delivery is enabled.
    """
    volume = int(round(mix.monthly_volume * category.units_per_cover))
    category_fixed = fixed_cost_total * (category.revenue_share / 100.0)
    fixed_per_unit = category_fixed / volume if volume > 0 else 0.0

    variable_pct = 0.0
    if category.packaging:
        variable_pct += config.service_incidence
    if category.waste:
        variable_pct += config.waste_incidence
    if category.delivery and config.delivery_enabled:
        variable_pct += config.delivery_incidence or 0

    denominator = 1 - variable_pct / 100.0 - profit_margin_pct / 100.0
    if denominator <= 0:
        return CategoryPricing(
            category=category,
            valid=False,
            unit_volume=volume,
            category_fixed_cost=category_fixed,
            fixed_cost_per_unit=fixed_per_unit,
            variable_pct=variable_pct,
            error="variable costs and margin exceed 100% of the price",
        )

    unit_cost = raw_material_cost + fixed_per_unit
    break_even = unit_cost / (1 - variable_pct / 100.0)
    recommended = unit_cost / denominator

    revenue = volume * recommended
    cost = volume * raw_material_cost + category_fixed + revenue * variable_pct / 100.0
    profit = revenue - cost
    return CategoryPricing(
        category=category,
        valid=True,
        unit_volume=volume,
        category_fixed_cost=category_fixed,
        fixed_cost_per_unit=fixed_per_unit,
        variable_pct=variable_pct,
        break_even_price=break_even,
        recommended_price=recommended,
        variable_cost_per_unit=recommended * variable_pct / 100.0,
        profit_per_unit=recommended * profit_margin_pct / 100.0,
        monthly_revenue=revenue,
        monthly_cost=cost,
        monthly_profit=profit,
        monthly_margin_pct=profit / revenue * 100.0 if revenue > 0 else 0.0,
    )
