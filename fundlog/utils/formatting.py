"""
Display formatting utilities for CLI output.

Provides consistent formatting for:
- Currency values (EUR)
- Percentages
"""
from __future__ import annotations

from typing import Optional


def fmt_signed_pct(x: Optional[float], decimals: int = 1) -> str:
    """Format an already-scaled percentage with + prefix for positives."""
    if x is None or not isinstance(x, (int, float)):
        return "n/a"
    return f"{float(x):+.{decimals}f}%"


def fmt_eur(x: Optional[float], show_cents: bool = True) -> str:
    """Format as EUR currency."""
    if x is None or not isinstance(x, (int, float)):
        return "n/a"
    if show_cents:
        return f"€{float(x):,.2f}"
    return f"€{float(x):,.0f}"


def fmt_signed_eur(x: Optional[float], show_cents: bool = True) -> str:
    """Format as signed EUR with + prefix for positives."""
    if x is None or not isinstance(x, (int, float)):
        return "n/a"
    if show_cents:
        return f"€{float(x):+,.2f}"
    return f"€{float(x):+,.0f}"


def result_style(x: float) -> str:
    """Rich color for a profit/loss figure."""
    return "green" if x >= 0 else "red"


def truncate(s: str, max_len: int = 20) -> str:
    """Truncate string with ellipsis if needed."""
    if len(s) <= max_len:
        return s
    return s[:max_len-1] + "…"
