"""Entity types handed to the cost core as read-only snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class Unit(str, Enum):
    KG = "kg"
    G = "g"
    L = "l"
    ML = "ml"
    UNIT = "unit"
    PZ = "pz"


# composition quantities are grams/ml, prices of kg/l ingredients are per kg/l
_PER_THOUSAND_UNITS = (Unit.KG, Unit.L)


def unit_factor(unit: Unit) -> float:
    """Multiplier turning a composition quantity into priced units."""
    return 0.001 if unit in _PER_THOUSAND_UNITS else 1.0


class ComponentType(str, Enum):
    INGREDIENT = "ingredient"
    PREPARATION = "subrecipe"
    MENU_ITEM = "menuitem"


class QuantityBasis(str, Enum):
    """How a component quantity is read.

    ``measure`` means grams/millilitres (or a plain count for ``pz``/``unit``
    ingredients); ``portions`` means a number of servings.
    """

    MEASURE = "measure"
    PORTIONS = "portions"


@dataclass(frozen=True)
class ComponentUsage:
    id: str
    type: ComponentType
    quantity: float
    basis: Optional[QuantityBasis] = None


@dataclass(frozen=True)
class Ingredient:
    id: str
    name: str
    unit: Unit
    price_per_unit: float
    category: str = ""


@dataclass(frozen=True)
class Preparation:
    """A sub-recipe: ingredients and/or other preparations yielding a weight.

    Weights are kilograms, except ``portion_weight`` which is grams.
    """

    id: str
    name: str
    components: Tuple[ComponentUsage, ...] = ()
    yield_weight: float = 0.0
    initial_weight: float = 0.0
    portion_weight: Optional[float] = None
    category: str = ""

    @property
    def sold_by_portion(self) -> bool:
        return bool(self.portion_weight and self.portion_weight > 0)


@dataclass(frozen=True)
class MenuItem:
    id: str
    name: str
    components: Tuple[ComponentUsage, ...] = ()
    selling_price: float = 0.0
    category: str = ""
    is_delivery: bool = False


@dataclass(frozen=True)
class Employee:
    monthly_salary: float
    contribution_percentage: float = 0.0
    id: str = ""
    first_name: str = ""
    last_name: str = ""
    department: str = ""


@dataclass(frozen=True)
class FixedCostEntry:
    label: str
    amount: float
    id: str = ""
    category: str = "altro"


@dataclass(frozen=True)
class ProductCategory:
    id: str
    name: str
    revenue_share: float
    average_price: float
    food_cost_target: float = 30.0
    packaging: bool = True
    waste: bool = True
    delivery: bool = False
    units_per_cover: float = 1.0


@dataclass(frozen=True)
class ProductMix:
    monthly_volume: float
    categories: Tuple[ProductCategory, ...] = ()

    def category(self, category_id: str) -> Optional[ProductCategory]:
        for cat in self.categories:
            if cat.id == category_id:
                return cat
        return None


@dataclass(frozen=True)
class BepConfiguration:
    fixed_costs: Tuple[FixedCostEntry, ...] = ()
    food_cost_incidence: float = 30.0
    service_incidence: float = 5.0
    waste_incidence: float = 2.0
    average_ticket: float = 15.0
    delivery_enabled: bool = False
    delivery_incidence: float = 0.0
    product_mix: Optional[ProductMix] = None


@dataclass(frozen=True)
class Snapshot:
    """Every collection the core reads, as handed over by the entity store."""

    ingredients: Tuple[Ingredient, ...] = ()
    preparations: Tuple[Preparation, ...] = ()
    menu_items: Tuple[MenuItem, ...] = ()
    employees: Tuple[Employee, ...] = ()
    bep_config: BepConfiguration = field(default_factory=BepConfiguration)
