"""Menu performance summary."""

from dataclasses import dataclass, field
from typing import List

from .calc import Collection, CostWarning, index_by_id, item_cost_report
from .models import MenuItem
from .pricing import current_food_cost_ratio, food_cost_band


@dataclass(frozen=True)
class ItemPerformance:
    item: MenuItem
    cost: float
    margin: float
    food_cost_ratio: float
    band: str
    warnings: List[CostWarning] = field(default_factory=list)


@dataclass(frozen=True)
class MenuPerformance:
    rows: List[ItemPerformance]
    star_products: List[ItemPerformance]
    average_food_cost_ratio: float


def menu_performance(menu: Collection, ingredients: Collection,
                     preparations: Collection = None, top: int = 3) -> MenuPerformance:
    """Cost, margin and food-cost ratio of every item, best margins first in ``star_products``."""
    items = index_by_id(menu)
    ings = index_by_id(ingredients)
    preps = index_by_id(preparations)

    rows = []
    for item in items.values():
        cost, warnings = item_cost_report(item, ings, preps, items)
        ratio = current_food_cost_ratio(cost, item.selling_price)
        rows.append(ItemPerformance(
            item=item,
            cost=cost,
            margin=(item.selling_price or 0) - cost,
            food_cost_ratio=ratio,
            band=food_cost_band(ratio),
            warnings=warnings,
        ))

    if not rows:
        return MenuPerformance(rows=[], star_products=[], average_food_cost_ratio=0.0)
    stars = sorted(rows, key=lambda r: r.margin, reverse=True)[:top]
    avg = sum(r.food_cost_ratio for r in rows) / len(rows)
    return MenuPerformance(rows=rows, star_products=stars, average_food_cost_ratio=avg)
