# app.py
# =============================================================================
# Food Cost — menu costs, break-even and price suggestions (read-only view)
# =============================================================================

import logging
from math import ceil
from typing import Any, Dict, List

import matplotlib.pyplot as plt  # per il grafico a torta
import streamlit as st

from foodcost.bep import BreakEvenAnalysis, analyze_break_even
from foodcost.calc import CostWarning, cost_breakdown, preparation_cost_report
from foodcost.config import Settings, configure_logging
from foodcost.formatting import format_money, format_number, format_percent
from foodcost.models import Snapshot
from foodcost.pricing import (
    mix_average_ticket,
    mix_is_balanced,
    mix_target_revenue,
    price_category,
    price_item,
)
from foodcost.report import menu_performance
from foodcost.snapshot import SnapshotError, load_snapshot

log = logging.getLogger("app")

BAND_ICONS = {"good": "🟢", "warning": "🟡", "critical": "🔴"}


# -----------------------------------------------------------------------------
# FUNZIONI DI SUPPORTO
# -----------------------------------------------------------------------------
def warning_lines(warnings: List[CostWarning]) -> List[str]:
    return [w.message for w in warnings]


def menu_rows(snap: Snapshot, step: float) -> List[Dict[str, Any]]:
    """One row per menu item: cost, current ratio and rounded suggested price."""
    rows = []
    for perf in menu_performance(snap.menu_items, snap.ingredients, snap.preparations).rows:
        rec = price_item(perf.item, perf.cost, snap.bep_config, step)
        rows.append({
            "id": perf.item.id,
            "name": perf.item.name,
            "category": perf.item.category,
            "selling_price": perf.item.selling_price,
            "cost": perf.cost,
            "food_cost_pct": perf.food_cost_ratio,
            "band": perf.band,
            "suggested_price": rec.rounded_price,
            "delivery": rec.delivery_applied,
            "warnings": warning_lines(perf.warnings),
        })
    return rows


def preparation_rows(snap: Snapshot) -> List[Dict[str, Any]]:
    rows = []
    for prep in snap.preparations:
        per_kg, warnings = preparation_cost_report(prep, snap.ingredients, snap.preparations)
        per_portion = per_kg * prep.portion_weight / 1000.0 if prep.sold_by_portion else None
        rows.append({
            "id": prep.id,
            "name": prep.name,
            "category": prep.category,
            "cost_per_kg": per_kg,
            "cost_per_portion": per_portion,
            "warnings": warning_lines(warnings),
        })
    return rows


def break_even_covers(bep: BreakEvenAnalysis) -> int:
    """Covers needed to break even; a partial cover still has to be sold."""
    return ceil(round(bep.break_even_units, 9))


def pie_chart(labels: List[str], values: List[float]):
    fig, ax = plt.subplots()
    ax.pie(values, labels=labels, autopct='%1.1f%%', startangle=90)
    ax.axis('equal')
    return fig


# -----------------------------------------------------------------------------
# PAGES
# -----------------------------------------------------------------------------
def page_menu(snap: Snapshot, settings: Settings) -> None:
    st.header("Menu — Food Cost")
    if not snap.menu_items:
        st.info("No menu items in the snapshot.")
        return
    cur, loc = settings.currency, settings.locale
    for row in menu_rows(snap, settings.price_step):
        icon = BAND_ICONS[row["band"]]
        with st.expander(f"{icon} {row['name']} — {format_percent(row['food_cost_pct'], locale=loc)} FC"):
            m1, m2, m3 = st.columns(3)
            m1.metric("Selling price", format_money(row["selling_price"], cur, loc))
            m2.metric("Cost", format_money(row["cost"], cur, loc))
            m3.metric("Suggested price", format_money(row["suggested_price"], cur, loc))
            if row["delivery"]:
                st.caption("Delivery surcharge included.")
            for msg in row["warnings"]:
                st.warning(msg)


def page_preparations(snap: Snapshot, settings: Settings) -> None:
    st.header("Preparations")
    if not snap.preparations:
        st.info("No preparations in the snapshot.")
        return
    cur, loc = settings.currency, settings.locale
    by_id = {p.id: p for p in snap.preparations}
    rows = preparation_rows(snap)
    sel = st.selectbox("Preparation", [r["id"] for r in rows],
                       format_func=lambda pid: by_id[pid].name, key="prep_sel")
    row = next(r for r in rows if r["id"] == sel)

    m1, m2 = st.columns(2)
    m1.metric("Cost / kg", format_money(row["cost_per_kg"], cur, loc))
    m2.metric("Cost / portion", format_money(row["cost_per_portion"], cur, loc))
    for msg in row["warnings"]:
        st.warning(msg)

    parts = [(lbl, val) for lbl, val in cost_breakdown(by_id[sel], snap.ingredients, snap.preparations)
             if val > 0]
    if parts:
        labels, values = zip(*parts)
        fig = pie_chart(list(labels), list(values))
        st.pyplot(fig)
        plt.close(fig)
        st.caption("Pie chart of cost distribution per component")
    else:
        st.info("Add priced components to see the cost breakdown pie chart.")


def page_bep(snap: Snapshot, settings: Settings) -> None:
    st.header("Break-even")
    cur, loc = settings.currency, settings.locale
    bep = analyze_break_even(snap.employees, snap.bep_config)

    m1, m2, m3 = st.columns(3)
    m1.metric("Staff", format_money(bep.staffing_cost, cur, loc))
    m2.metric("Other fixed costs", format_money(bep.other_fixed_cost, cur, loc))
    m3.metric("Total fixed", format_money(bep.total_fixed_cost, cur, loc))
    if not bep.sustainable:
        st.error("Variable costs reach 100% of revenue: no break-even point.")
        return
    m1, m2, m3 = st.columns(3)
    m1.metric("Margin", format_percent(bep.margin_ratio * 100, locale=loc))
    m2.metric("Break-even revenue", format_money(bep.break_even_revenue, cur, loc))
    m3.metric("Break-even covers", format_number(break_even_covers(bep), 0, loc))


def page_pricing(snap: Snapshot, settings: Settings) -> None:
    st.header("Pricing — product mix")
    cur, loc = settings.currency, settings.locale
    mix = snap.bep_config.product_mix
    if mix is None or not mix.categories:
        st.info("No product mix configured.")
        return
    if not mix_is_balanced(mix):
        st.warning("Category revenue shares do not add up to 100%.")

    m1, m2 = st.columns(2)
    m1.metric("Average ticket", format_money(mix_average_ticket(mix), cur, loc))
    m2.metric("Target revenue", format_money(mix_target_revenue(mix), cur, loc))

    cat_id = st.selectbox("Category", [c.id for c in mix.categories],
                          format_func=lambda cid: mix.category(cid).name, key="pricing_cat")
    raw = st.number_input("Raw material cost", 0.0, value=1.0, step=0.10, key="pricing_raw")
    margin = st.slider("Profit margin %", 0, 50, 10, key="pricing_margin")

    fixed = analyze_break_even(snap.employees, snap.bep_config).total_fixed_cost
    res = price_category(mix.category(cat_id), mix, snap.bep_config, fixed, raw, margin)
    if not res.valid:
        st.error(res.error)
        return
    m1, m2, m3 = st.columns(3)
    m1.metric("Break-even price", format_money(res.break_even_price, cur, loc))
    m2.metric("Recommended price", format_money(res.recommended_price, cur, loc))
    m3.metric("Monthly profit", format_money(res.monthly_profit, cur, loc))


PAGES = {
    "Menu": page_menu,
    "Preparations": page_preparations,
    "Break-even": page_bep,
    "Pricing": page_pricing,
}


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    st.set_page_config(page_title="Food Cost", layout="wide")

    try:
        snap = load_snapshot(settings.snapshot_path)
    except SnapshotError as e:
        log.error("cannot load snapshot: %s", e)
        st.error(f"Cannot load snapshot: {e}")
        st.stop()

    page = st.sidebar.selectbox("Navigate", list(PAGES), key="nav")
    PAGES[page](snap, settings)


if __name__ == "__main__":
    main()
