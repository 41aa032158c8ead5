"""Pure calculation utilities for food cost logic.

Preparations and menu items form a composition graph addressed by id. The
resolvers walk it recursively with a fixed depth bound instead of cycle
detection, and degrade to a zero contribution on anything they cannot price.
Degradations are never raised: they are logged and, when the caller passes a
``warnings`` list, reported as :class:`CostWarning` entries.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .models import (
    ComponentType,
    ComponentUsage,
    Ingredient,
    MenuItem,
    Preparation,
    QuantityBasis,
    unit_factor,
)

log = logging.getLogger(__name__)

MAX_DEPTH = 5

MISSING_REFERENCE = "missing_reference"
SELF_REFERENCE = "self_reference"
DEPTH_EXCEEDED = "depth_exceeded"
NO_WEIGHT = "no_weight"
MISSING_PORTION_WEIGHT = "missing_portion_weight"
UNSUPPORTED_COMPONENT = "unsupported_component"

Collection = Union[Mapping[str, Any], Iterable[Any], None]
Composite = Union[Preparation, MenuItem]


@dataclass(frozen=True)
class CostWarning:
    kind: str
    owner_id: str
    reference_id: str
    message: str


def index_by_id(entities: Collection) -> Dict[str, Any]:
    """Return an id -> entity dict from a mapping or an iterable of entities."""
    if entities is None:
        return {}
    if isinstance(entities, Mapping):
        return dict(entities)
    return {e.id: e for e in entities}


def _warn(warnings: Optional[List[CostWarning]], kind: str, owner_id: str,
          reference_id: str, message: str) -> None:
    log.debug("%s: %s (owner=%s, ref=%s)", kind, message, owner_id, reference_id)
    if warnings is not None:
        warnings.append(CostWarning(kind, owner_id, reference_id, message))


def _unique(warnings: List[CostWarning]) -> List[CostWarning]:
    return list(dict.fromkeys(warnings))


def ingredient_cost(ingredient: Ingredient, quantity: float) -> float:
    """Cost of ``quantity`` grams/ml (or pieces) of an ingredient."""
    return float(ingredient.price_per_unit) * float(quantity) * unit_factor(ingredient.unit)


def usage_basis(usage: ComponentUsage, preparation: Optional[Preparation] = None) -> QuantityBasis:
    """Resolve how ``usage.quantity`` is read when the usage sits in a menu item."""
    if usage.type is ComponentType.INGREDIENT:
        return QuantityBasis.MEASURE
    if usage.type is ComponentType.MENU_ITEM:
        return QuantityBasis.PORTIONS
    if usage.basis is not None:
        return usage.basis
    if preparation is not None and preparation.sold_by_portion:
        return QuantityBasis.PORTIONS
    return QuantityBasis.MEASURE


def _ingredient_usage_cost(owner: Composite, usage: ComponentUsage,
                           ingredients: Dict[str, Ingredient],
                           warnings: Optional[List[CostWarning]]) -> float:
    ing = ingredients.get(usage.id)
    if ing is None:
        _warn(warnings, MISSING_REFERENCE, owner.id, usage.id,
              f"ingredient {usage.id!r} not found, counted as free")
        return 0.0
    return ingredient_cost(ing, usage.quantity)


# -----------------------------------------------------------------------------
# Preparations (cost per kg)
# -----------------------------------------------------------------------------
def _preparation_component_cost(prep: Preparation, usage: ComponentUsage,
                                ingredients: Dict[str, Ingredient],
                                preparations: Dict[str, Preparation],
                                depth: int,
                                warnings: Optional[List[CostWarning]]) -> float:
    if usage.type is ComponentType.INGREDIENT:
        return _ingredient_usage_cost(prep, usage, ingredients, warnings)
    if usage.type is ComponentType.PREPARATION:
        nested = preparations.get(usage.id)
        if nested is None:
            _warn(warnings, MISSING_REFERENCE, prep.id, usage.id,
                  f"preparation {usage.id!r} not found, counted as free")
            return 0.0
        if nested.id == prep.id:
            _warn(warnings, SELF_REFERENCE, prep.id, usage.id,
                  f"preparation {prep.name!r} lists itself as a component")
            return 0.0
        # nested preparations are always grams, whatever their portion weight
        per_kg = _preparation_unit_cost(nested, ingredients, preparations, depth + 1, warnings)
        return per_kg * (float(usage.quantity) / 1000.0)
    _warn(warnings, UNSUPPORTED_COMPONENT, prep.id, usage.id,
          f"a preparation cannot contain a {usage.type.value}")
    return 0.0


def _component_weight_kg(prep: Preparation) -> float:
    return sum(float(u.quantity) for u in prep.components) / 1000.0


def _preparation_unit_cost(prep: Preparation,
                           ingredients: Dict[str, Ingredient],
                           preparations: Dict[str, Preparation],
                           depth: int,
                           warnings: Optional[List[CostWarning]]) -> float:
    if depth > MAX_DEPTH:
        _warn(warnings, DEPTH_EXCEEDED, prep.id, prep.id,
              f"nesting deeper than {MAX_DEPTH} levels at {prep.name!r}, counted as free")
        return 0.0
    if not prep.components:
        return 0.0

    total = sum(
        _preparation_component_cost(prep, u, ingredients, preparations, depth, warnings)
        for u in prep.components
    )
    if total <= 0:
        return 0.0
    for weight in (prep.yield_weight, prep.initial_weight, _component_weight_kg(prep)):
        if weight and weight > 0:
            return total / float(weight)
    _warn(warnings, NO_WEIGHT, prep.id, prep.id,
          f"preparation {prep.name!r} has no usable weight")
    return 0.0


def preparation_unit_cost(preparation: Preparation, ingredients: Collection,
                          preparations: Collection = None, depth: int = 0,
                          warnings: Optional[List[CostWarning]] = None) -> float:
    """Cost per kg of a preparation, 0 when it cannot be priced."""
    return _preparation_unit_cost(
        preparation, index_by_id(ingredients), index_by_id(preparations), depth, warnings
    )


# -----------------------------------------------------------------------------
# Menu items (total cost)
# -----------------------------------------------------------------------------
def _item_component_cost(item: Composite, usage: ComponentUsage,
                         ingredients: Dict[str, Ingredient],
                         preparations: Dict[str, Preparation],
                         menu_items: Dict[str, MenuItem],
                         depth: int,
                         warnings: Optional[List[CostWarning]]) -> float:
    if usage.type is ComponentType.INGREDIENT:
        return _ingredient_usage_cost(item, usage, ingredients, warnings)

    if usage.type is ComponentType.PREPARATION:
        prep = preparations.get(usage.id)
        if prep is None:
            _warn(warnings, MISSING_REFERENCE, item.id, usage.id,
                  f"preparation {usage.id!r} not found, counted as free")
            return 0.0
        per_kg = _preparation_unit_cost(prep, ingredients, preparations, 0, warnings)
        if usage_basis(usage, prep) is QuantityBasis.PORTIONS:
            if not prep.sold_by_portion:
                _warn(warnings, MISSING_PORTION_WEIGHT, item.id, usage.id,
                      f"{prep.name!r} is used by portion but declares no portion weight")
                return 0.0
            per_portion = per_kg * float(prep.portion_weight) / 1000.0
            return per_portion * float(usage.quantity)
        return per_kg * (float(usage.quantity) / 1000.0)

    nested = menu_items.get(usage.id)
    if nested is None:
        _warn(warnings, MISSING_REFERENCE, item.id, usage.id,
              f"menu item {usage.id!r} not found, counted as free")
        return 0.0
    if nested.id == item.id:
        _warn(warnings, SELF_REFERENCE, item.id, usage.id,
              f"menu item {item.name!r} lists itself as a component")
        return 0.0
    nested_cost = _item_total_cost(nested, ingredients, preparations, menu_items, depth + 1, warnings)
    return nested_cost * float(usage.quantity)


def _item_total_cost(item: Composite,
                     ingredients: Dict[str, Ingredient],
                     preparations: Dict[str, Preparation],
                     menu_items: Dict[str, MenuItem],
                     depth: int,
                     warnings: Optional[List[CostWarning]]) -> float:
    if depth > MAX_DEPTH:
        _warn(warnings, DEPTH_EXCEEDED, item.id, item.id,
              f"nesting deeper than {MAX_DEPTH} levels at {item.name!r}, counted as free")
        return 0.0
    return sum(
        _item_component_cost(item, u, ingredients, preparations, menu_items, depth, warnings)
        for u in item.components
    )


def item_total_cost(item: Composite, ingredients: Collection,
                    preparations: Collection = None, menu_items: Collection = None,
                    depth: int = 0,
                    warnings: Optional[List[CostWarning]] = None) -> float:
    """Total cost of one serving of a menu item (or of a preparation used as one)."""
    return _item_total_cost(
        item,
        index_by_id(ingredients),
        index_by_id(preparations),
        index_by_id(menu_items),
        depth,
        warnings,
    )


# -----------------------------------------------------------------------------
# Reports
# -----------------------------------------------------------------------------
def preparation_cost_report(preparation: Preparation, ingredients: Collection,
                            preparations: Collection = None) -> Tuple[float, List[CostWarning]]:
    """Return cost per kg and the distinct warnings raised while computing it."""
    warnings: List[CostWarning] = []
    cost = preparation_unit_cost(preparation, ingredients, preparations, warnings=warnings)
    return cost, _unique(warnings)


def item_cost_report(item: Composite, ingredients: Collection,
                     preparations: Collection = None,
                     menu_items: Collection = None) -> Tuple[float, List[CostWarning]]:
    """Return total item cost and the distinct warnings raised while computing it."""
    warnings: List[CostWarning] = []
    cost = item_total_cost(item, ingredients, preparations, menu_items, warnings=warnings)
    return cost, _unique(warnings)


def cost_breakdown(entity: Composite, ingredients: Collection,
                   preparations: Collection = None,
                   menu_items: Collection = None) -> List[Tuple[str, float]]:
    """Per-component (label, cost) rows.

    A preparation is broken down as a whole batch (grams throughout), a menu
    item as one serving.
    """
    ings = index_by_id(ingredients)
    preps = index_by_id(preparations)
    items = index_by_id(menu_items)
    lookup = {
        ComponentType.INGREDIENT: ings,
        ComponentType.PREPARATION: preps,
        ComponentType.MENU_ITEM: items,
    }

    rows = []
    for usage in entity.components:
        if isinstance(entity, Preparation):
            cost = _preparation_component_cost(entity, usage, ings, preps, 0, None)
        else:
            cost = _item_component_cost(entity, usage, ings, preps, items, 0, None)
        ref = lookup[usage.type].get(usage.id)
        rows.append((ref.name if ref is not None else usage.id, cost))
    return rows
