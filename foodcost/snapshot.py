"""Read-only loading of entity snapshots.

A snapshot is one JSON document holding the collections the entity store
hands to the core. Keys follow the store's camelCase layout::

    {"ingredients": [...], "subRecipes": [...], "menu": [...],
     "employees": [...], "bepConfig": {...}}
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from .models import (
    BepConfiguration,
    ComponentType,
    ComponentUsage,
    Employee,
    FixedCostEntry,
    Ingredient,
    MenuItem,
    Preparation,
    ProductCategory,
    ProductMix,
    QuantityBasis,
    Snapshot,
    Unit,
)

log = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot document cannot be turned into entities."""


def _obj(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise SnapshotError(f"{what}: expected an object, got {value!r}")
    return value


def _entries(d: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    """The objects listed under ``key``; absent or null is an empty list."""
    val = d.get(key)
    if val is None:
        return []
    if not isinstance(val, list):
        raise SnapshotError(f"{key}: expected a list, got {val!r}")
    return [_obj(v, key) for v in val]


def _num(d: Dict[str, Any], key: str, default: float = 0.0) -> float:
    val = d.get(key)
    if val is None or val == "":
        return default
    try:
        return float(val)
    except (TypeError, ValueError):
        raise SnapshotError(f"{key}: not a number: {val!r}") from None


def _flag(d: Dict[str, Any], key: str) -> bool:
    val = d.get(key, False)
    if val is None:
        return False
    if not isinstance(val, bool):
        raise SnapshotError(f"{key}: expected true or false, got {val!r}")
    return val


def _enum(cls, value, what: str):
    try:
        return cls(str(value).lower())
    except ValueError:
        raise SnapshotError(f"unknown {what}: {value!r}") from None


def component_from_dict(d: Dict[str, Any]) -> ComponentUsage:
    basis = d.get("basis")
    return ComponentUsage(
        id=str(d["id"]),
        type=_enum(ComponentType, d.get("type"), "component type"),
        quantity=_num(d, "quantity"),
        basis=_enum(QuantityBasis, basis, "quantity basis") if basis else None,
    )


def _components(d: Dict[str, Any]) -> Tuple[ComponentUsage, ...]:
    return tuple(component_from_dict(c) for c in _entries(d, "components"))


def ingredient_from_dict(d: Dict[str, Any]) -> Ingredient:
    return Ingredient(
        id=str(d["id"]),
        name=d.get("name", ""),
        unit=_enum(Unit, d.get("unit"), "unit"),
        price_per_unit=_num(d, "pricePerUnit"),
        category=d.get("category", ""),
    )


def preparation_from_dict(d: Dict[str, Any]) -> Preparation:
    portion = _num(d, "portionWeight", default=0.0)
    return Preparation(
        id=str(d["id"]),
        name=d.get("name", ""),
        components=_components(d),
        yield_weight=_num(d, "yieldWeight"),
        initial_weight=_num(d, "initialWeight"),
        portion_weight=portion or None,
        category=d.get("category", ""),
    )


def menu_item_from_dict(d: Dict[str, Any]) -> MenuItem:
    return MenuItem(
        id=str(d["id"]),
        name=d.get("name", ""),
        components=_components(d),
        selling_price=_num(d, "sellingPrice"),
        category=d.get("category", ""),
        is_delivery=_flag(d, "isDelivery"),
    )


def employee_from_dict(d: Dict[str, Any]) -> Employee:
    return Employee(
        monthly_salary=_num(d, "monthlySalary"),
        contribution_percentage=_num(d, "contributionPercentage"),
        id=str(d.get("id", "")),
        first_name=d.get("firstName", ""),
        last_name=d.get("lastName", ""),
        department=d.get("department", ""),
    )


def _category_from_dict(d: Dict[str, Any]) -> ProductCategory:
    flags = _obj(d.get("costiVariabili") or {}, "costiVariabili")
    return ProductCategory(
        id=str(d["id"]),
        name=d.get("nome", ""),
        revenue_share=_num(d, "incidenzaFatturato"),
        average_price=_num(d, "prezzoMedio"),
        food_cost_target=_num(d, "foodCostTarget", 30.0),
        packaging=_flag(flags, "packaging"),
        waste=_flag(flags, "sfrido"),
        delivery=_flag(flags, "delivery"),
        units_per_cover=_num(d, "volumeUnitario", 1.0),
    )


def _product_mix_from_dict(d: Dict[str, Any]) -> ProductMix:
    return ProductMix(
        monthly_volume=_num(d, "volumeMensile"),
        categories=tuple(_category_from_dict(c) for c in _entries(d, "categorie")),
    )


def bep_config_from_dict(d: Dict[str, Any]) -> BepConfiguration:
    mix = d.get("productMix")
    return BepConfiguration(
        fixed_costs=tuple(
            FixedCostEntry(
                label=c.get("label", ""),
                amount=_num(c, "amount"),
                id=str(c.get("id", "")),
                category=c.get("category", "altro"),
            )
            for c in _entries(d, "fixedCosts")
        ),
        food_cost_incidence=_num(d, "foodCostIncidence", 30.0),
        service_incidence=_num(d, "serviceIncidence", 5.0),
        waste_incidence=_num(d, "wasteIncidence", 2.0),
        average_ticket=_num(d, "averageTicket", 15.0),
        delivery_enabled=_flag(d, "deliveryEnabled"),
        delivery_incidence=_num(d, "deliveryIncidence"),
        product_mix=_product_mix_from_dict(_obj(mix, "productMix")) if mix else None,
    )


def snapshot_from_dict(data: Dict[str, Any]) -> Snapshot:
    data = _obj(data, "snapshot")
    try:
        return Snapshot(
            ingredients=tuple(ingredient_from_dict(d) for d in _entries(data, "ingredients")),
            preparations=tuple(preparation_from_dict(d) for d in _entries(data, "subRecipes")),
            menu_items=tuple(menu_item_from_dict(d) for d in _entries(data, "menu")),
            employees=tuple(employee_from_dict(d) for d in _entries(data, "employees")),
            bep_config=bep_config_from_dict(_obj(data.get("bepConfig") or {}, "bepConfig")),
        )
    except KeyError as e:
        raise SnapshotError(f"missing field {e}") from None


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """Load a snapshot file; a missing file is an empty snapshot."""
    path = Path(path)
    if not path.exists():
        log.info("no snapshot at %s, starting empty", path)
        return Snapshot()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"{path}: invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError(f"{path}: expected a JSON object")
    snap = snapshot_from_dict(data)
    log.info(
        "loaded snapshot %s: %d ingredients, %d preparations, %d menu items",
        path, len(snap.ingredients), len(snap.preparations), len(snap.menu_items),
    )
    return snap
