"""Locale-aware display of money and numbers."""

from typing import Optional

from babel.numbers import format_currency, format_decimal


def format_money(x: Optional[float], cur: str = "EUR", locale: str = "it_IT") -> str:
    if x is None:
        return "—"
    return format_currency(x, cur, locale=locale)


def format_number(x: float, decimals: int = 2, locale: str = "it_IT") -> str:
    """Format a generic number following the given locale."""
    pattern = f"#,##0.{'0' * decimals}" if decimals > 0 else "#,##0"
    return format_decimal(x, format=pattern, locale=locale)


def format_percent(x: float, decimals: int = 1, locale: str = "it_IT") -> str:
    """Format a value already expressed in percent (30.0 -> '30,0%')."""
    return f"{format_number(x, decimals, locale)}%"
