"""
Pytest configuration and shared fixtures for fundlog tests.

Usage:
    @pytest.fixture functions are automatically available to all tests.
    Import helpers from conftest when needed.
"""
import sys
from pathlib import Path

import pytest


def pytest_configure():
    """
    Ensure the repository root is on sys.path for the flat-layout package import (`fundlog`).
    This keeps tests runnable without requiring an editable install.
    """
    root = Path(__file__).resolve().parents[1]
    if (root / "fundlog").exists():
        sys.path.insert(0, str(root))


TODAY = "2026-03-10"


# =============================================================================
# Test Data Helpers
# =============================================================================

def make_holding(
    id: str = "h1",
    ticker: str = "ABC",
    quantity: float = 10.0,
    average_price: float = 100.0,
    transaction_fees: float = 0.0,
    current_price: float | None = None,
    purchase_date: str = TODAY,
    name: str | None = None,
):
    """
    Create a Holding for testing.

    Usage:
        h = make_holding(ticker="X", quantity=3, current_price=50)
    """
    from fundlog.models import Holding

    return Holding(
        id=id,
        ticker=ticker,
        name=name or f"{ticker} fund",
        quantity=quantity,
        average_price=average_price,
        transaction_fees=transaction_fees,
        current_price=average_price if current_price is None else current_price,
        purchase_date=purchase_date,
        updated_at=0,
    )


def make_entry(date: str, prices: dict[str, float], quantities: dict[str, float], cash: float = 0.0):
    """Auto-style snapshot where breakdown = quantity * price per ticker."""
    from fundlog.models import HistoryEntry
    from fundlog.utils.dates import date_timestamp

    breakdown = {t: quantities[t] * p for t, p in prices.items()}
    return HistoryEntry(
        date=date,
        timestamp=date_timestamp(date),
        total_value=sum(breakdown.values()) + cash,
        total_invested=0.0,
        breakdown=breakdown,
        prices=dict(prices),
    )


def is_sorted_unique(series) -> bool:
    """Strictly increasing timestamps and no repeated date."""
    prev_ts = None
    seen = set()
    for e in series:
        if e.date in seen:
            return False
        if prev_ts is not None and e.timestamp <= prev_ts:
            return False
        seen.add(e.date)
        prev_ts = e.timestamp
    return True


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def state_path(tmp_path: Path) -> str:
    return str(tmp_path / "state.json")


@pytest.fixture
def empty_state():
    from fundlog.models import PortfolioState

    return PortfolioState()
