import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from foodcost.calc import (
    DEPTH_EXCEEDED,
    MISSING_PORTION_WEIGHT,
    MISSING_REFERENCE,
    NO_WEIGHT,
    SELF_REFERENCE,
    cost_breakdown,
    ingredient_cost,
    item_cost_report,
    item_total_cost,
    preparation_cost_report,
    preparation_unit_cost,
    usage_basis,
)
from foodcost.models import (
    ComponentType,
    ComponentUsage,
    Ingredient,
    MenuItem,
    Preparation,
    QuantityBasis,
    Unit,
    unit_factor,
)

ING = ComponentType.INGREDIENT
PREP = ComponentType.PREPARATION
ITEM = ComponentType.MENU_ITEM


def use(ref_id, kind, qty, basis=None):
    return ComponentUsage(ref_id, kind, qty, basis)


@pytest.fixture
def ingredients():
    return [
        Ingredient("x", "Flour", Unit.KG, 10.0),
        Ingredient("y", "Tomato", Unit.KG, 5.0),
        Ingredient("oil", "Oil EVO", Unit.L, 8.0),
        Ingredient("egg", "Egg", Unit.PZ, 0.30),
        Ingredient("basil", "Basil", Unit.G, 0.02),
    ]


@pytest.fixture
def sauce():
    return Preparation("sauce", "Sauce", components=(use("x", ING, 500), use("y", ING, 200)))


def test_unit_factor():
    assert unit_factor(Unit.KG) == 0.001
    assert unit_factor(Unit.L) == 0.001
    for unit in (Unit.G, Unit.ML, Unit.PZ, Unit.UNIT):
        assert unit_factor(unit) == 1.0


def test_ingredient_cost_by_unit(ingredients):
    by_id = {i.id: i for i in ingredients}
    assert ingredient_cost(by_id["x"], 500) == pytest.approx(5.0)
    assert ingredient_cost(by_id["oil"], 250) == pytest.approx(2.0)
    assert ingredient_cost(by_id["egg"], 2) == pytest.approx(0.60)
    assert ingredient_cost(by_id["basil"], 10) == pytest.approx(0.20)


def test_empty_preparation_costs_nothing(ingredients):
    assert preparation_unit_cost(Preparation("p", "Empty"), ingredients, []) == 0.0


def test_preparation_weight_from_components(ingredients, sauce):
    assert preparation_unit_cost(sauce, ingredients, [sauce]) == pytest.approx(6 / 0.7)


def test_preparation_prefers_yield_then_initial_weight(ingredients):
    comps = (use("x", ING, 500), use("y", ING, 200))
    with_yield = Preparation("a", "A", comps, yield_weight=0.6, initial_weight=0.7)
    with_initial = Preparation("b", "B", comps, initial_weight=0.8)
    assert preparation_unit_cost(with_yield, ingredients) == pytest.approx(10.0)
    assert preparation_unit_cost(with_initial, ingredients) == pytest.approx(7.5)


def test_preparation_collections_accept_mappings(ingredients, sauce):
    ings = {i.id: i for i in ingredients}
    assert preparation_unit_cost(sauce, ings, {sauce.id: sauce}) == pytest.approx(6 / 0.7)


def test_nested_preparation_is_grams(ingredients, sauce):
    portioned = Preparation("sauce", "Sauce", sauce.components, portion_weight=80)
    base = Preparation("base", "Base", components=(use("sauce", PREP, 1000),), yield_weight=1.0)
    assert preparation_unit_cost(base, ingredients, [portioned, base]) == pytest.approx(6 / 0.7)


def test_missing_ingredient_is_free_but_reported(ingredients):
    prep = Preparation("p", "P", components=(use("x", ING, 500), use("ghost", ING, 500)))
    cost, warnings = preparation_cost_report(prep, ingredients)
    assert cost == pytest.approx(5.0 / 1.0)
    assert [w.kind for w in warnings] == [MISSING_REFERENCE]
    assert warnings[0].reference_id == "ghost"


def test_preparation_self_reference_ignored(ingredients):
    prep = Preparation("p", "P", components=(use("x", ING, 1000), use("p", PREP, 500)), yield_weight=1.0)
    cost, warnings = preparation_cost_report(prep, ingredients, [prep])
    assert cost == pytest.approx(10.0)
    assert [w.kind for w in warnings] == [SELF_REFERENCE]


def test_preparation_cycle_terminates(ingredients):
    a = Preparation("a", "A", components=(use("x", ING, 1000), use("b", PREP, 1000)), yield_weight=1.0)
    b = Preparation("b", "B", components=(use("a", PREP, 1000),), yield_weight=1.0)
    cost, warnings = preparation_cost_report(a, ingredients, [a, b])
    # A = 10 + B, B = A; the chain is cut at depth 6, leaving three copies of A
    assert cost == pytest.approx(30.0)
    assert any(w.kind == DEPTH_EXCEEDED for w in warnings)


def test_depth_beyond_bound_returns_zero(ingredients, sauce):
    assert preparation_unit_cost(sauce, ingredients, [sauce], depth=6) == 0.0
    assert preparation_unit_cost(sauce, ingredients, [sauce], depth=5) > 0


def test_preparation_without_cost_is_zero(ingredients):
    prep = Preparation("p", "P", components=(use("ghost", ING, 100),))
    assert preparation_unit_cost(prep, ingredients) == 0.0


def test_preparation_without_weight_is_reported(ingredients):
    # two eggs priced, but the quantities net out to zero grams
    free = Preparation("free", "Free", components=(use("egg", ING, 0),))
    weird = Preparation("w", "W", components=(use("egg", ING, 2), use("free", PREP, -2)))
    cost, warnings = preparation_cost_report(weird, ingredients, [free, weird])
    assert cost == 0.0
    assert NO_WEIGHT in [w.kind for w in warnings]


def test_menu_item_with_preparation_in_grams(ingredients, sauce):
    item = MenuItem("m", "Margherita", components=(use("sauce", PREP, 150),), selling_price=8.0)
    cost = item_total_cost(item, ingredients, [sauce], [item])
    assert cost == pytest.approx(6 / 0.7 * 0.15)
    assert cost == pytest.approx(1.286, abs=1e-3)


def test_menu_item_with_preparation_by_portion(ingredients):
    dough = Preparation("dough", "Dough", components=(use("x", ING, 1000),),
                        yield_weight=1.0, portion_weight=250)
    item = MenuItem("m", "Pizza", components=(use("dough", PREP, 2),))
    assert item_total_cost(item, ingredients, [dough]) == pytest.approx(10.0 * 0.25 * 2)


def test_explicit_measure_basis_overrides_portion_weight(ingredients):
    dough = Preparation("dough", "Dough", components=(use("x", ING, 1000),),
                        yield_weight=1.0, portion_weight=250)
    item = MenuItem("m", "Pizza", components=(use("dough", PREP, 300, QuantityBasis.MEASURE),))
    assert item_total_cost(item, ingredients, [dough]) == pytest.approx(3.0)


def test_portion_basis_without_portion_weight_reported(ingredients, sauce):
    item = MenuItem("m", "Pizza", components=(use("sauce", PREP, 1, QuantityBasis.PORTIONS),))
    cost, warnings = item_cost_report(item, ingredients, [sauce])
    assert cost == 0.0
    assert [w.kind for w in warnings] == [MISSING_PORTION_WEIGHT]


def test_usage_basis_defaults(sauce):
    portioned = Preparation("d", "D", portion_weight=250)
    assert usage_basis(use("x", ING, 1)) is QuantityBasis.MEASURE
    assert usage_basis(use("m", ITEM, 0.5)) is QuantityBasis.PORTIONS
    assert usage_basis(use("sauce", PREP, 100), sauce) is QuantityBasis.MEASURE
    assert usage_basis(use("d", PREP, 1), portioned) is QuantityBasis.PORTIONS


def test_half_and_half_item(ingredients):
    a = MenuItem("a", "A", components=(use("x", ING, 400),))
    b = MenuItem("b", "B", components=(use("y", ING, 400),))
    combo = MenuItem("c", "Half & half", components=(use("a", ITEM, 0.5), use("b", ITEM, 0.5)))
    assert item_total_cost(combo, ingredients, [], [a, b, combo]) == pytest.approx(2.0 + 1.0)


def test_menu_item_self_reference_ignored(ingredients):
    item = MenuItem("m", "Loop", components=(use("x", ING, 100), use("m", ITEM, 1)))
    cost, warnings = item_cost_report(item, ingredients, [], [item])
    assert cost == pytest.approx(1.0)
    assert [w.kind for w in warnings] == [SELF_REFERENCE]


def test_menu_item_cycle_terminates(ingredients):
    a = MenuItem("a", "A", components=(use("x", ING, 100), use("b", ITEM, 1)))
    b = MenuItem("b", "B", components=(use("a", ITEM, 1),))
    cost, warnings = item_cost_report(a, ingredients, [], [a, b])
    assert cost == pytest.approx(3.0)
    assert any(w.kind == DEPTH_EXCEEDED for w in warnings)


def test_missing_references_in_item(ingredients):
    item = MenuItem("m", "M", components=(
        use("ghost", ING, 1), use("ghost", PREP, 100), use("ghost", ITEM, 1),
    ))
    cost, warnings = item_cost_report(item, ingredients, [], [item])
    assert cost == 0.0
    assert [w.kind for w in warnings] == [MISSING_REFERENCE] * 3


def test_empty_item_costs_nothing(ingredients):
    assert item_total_cost(MenuItem("m", "M"), ingredients) == 0.0


def test_preparation_as_item(ingredients):
    dough = Preparation("dough", "Dough", components=(use("x", ING, 1000), use("egg", ING, 2)))
    assert item_total_cost(dough, ingredients) == pytest.approx(10.6)


def test_report_warnings_are_distinct(ingredients):
    broken = Preparation("p", "P", components=(use("x", ING, 100), use("ghost", ING, 10)))
    item = MenuItem("m", "M", components=(use("p", PREP, 50), use("p", PREP, 50)))
    _, warnings = item_cost_report(item, ingredients, [broken])
    assert len(warnings) == 1


def test_cost_breakdown(ingredients, sauce):
    item = MenuItem("m", "M", components=(use("sauce", PREP, 150), use("basil", ING, 5), use("gone", ING, 1)))
    rows = cost_breakdown(item, ingredients, [sauce])
    assert [lbl for lbl, _ in rows] == ["Sauce", "Basil", "gone"]
    assert rows[0][1] == pytest.approx(6 / 0.7 * 0.15)
    assert rows[1][1] == pytest.approx(0.10)
    assert rows[2][1] == 0.0

    batch = cost_breakdown(sauce, ingredients, [sauce])
    assert batch == [("Flour", pytest.approx(5.0)), ("Tomato", pytest.approx(1.0))]
