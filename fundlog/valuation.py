"""
Valuation calculator.

Pure functions over an explicit holdings list (and, where needed, an explicit
ticker -> price map). Nothing here reads or writes session state.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from fundlog.models import Funds, HistoryEntry, Holding, PortfolioSummary
from fundlog.utils.dates import date_timestamp


def total_invested(holdings: Iterable[Holding]) -> float:
    """Sum of (quantity * average price) + fees. 0 for no holdings."""
    return sum((h.quantity * h.average_price + h.transaction_fees for h in holdings), 0.0)


def breakdown_and_total(holdings: Iterable[Holding]) -> tuple[dict[str, float], dict[str, float], float]:
    """
    Aggregate holdings at their current prices.

    Returns (breakdown, prices, total):
    - breakdown[ticker] = sum of quantity * current price over holdings of that ticker
    - prices[ticker] = current price of the last holding seen with that ticker
    - total = sum of all breakdown values
    """
    breakdown: dict[str, float] = {}
    prices: dict[str, float] = {}
    total = 0.0
    for h in holdings:
        value = h.quantity * h.current_price
        breakdown[h.ticker] = breakdown.get(h.ticker, 0.0) + value
        prices[h.ticker] = h.current_price
        total += value
    return breakdown, prices, total


def snapshot_at(
    holdings: Iterable[Holding],
    price_map: Mapping[str, float],
    date: str,
    funds: Funds,
) -> HistoryEntry:
    """
    Build the snapshot for `date` assuming the prices in `price_map` held.

    A ticker missing from the map falls back to the holding's current price and
    that fallback is written into the snapshot's price map, so later holdings of
    the same ticker in this pass use the same price. The caller's map is not
    modified.
    """
    prices = dict(price_map)
    breakdown: dict[str, float] = {}
    invested = 0.0
    for h in holdings:
        if h.ticker not in prices:
            prices[h.ticker] = h.current_price
        price = prices[h.ticker]
        breakdown[h.ticker] = breakdown.get(h.ticker, 0.0) + h.quantity * price
        invested += h.quantity * h.average_price + h.transaction_fees

    return HistoryEntry(
        date=date,
        timestamp=date_timestamp(date),
        total_value=sum(breakdown.values()) + funds.cash + funds.assets,
        total_invested=invested,
        breakdown=breakdown,
        prices=prices,
    )


def summarize(holdings: Iterable[Holding], funds: Funds) -> PortfolioSummary:
    invested = 0.0
    etf_value = 0.0
    fees = 0.0
    for h in holdings:
        invested += h.quantity * h.average_price + h.transaction_fees
        etf_value += h.quantity * h.current_price
        fees += h.transaction_fees

    result = etf_value - invested
    pct = (result / invested) * 100.0 if invested > 0 else 0.0
    return PortfolioSummary(
        total_invested=invested,
        etf_value=etf_value,
        cash=funds.cash,
        assets=funds.assets,
        current_value=etf_value + funds.cash + funds.assets,
        total_fees=fees,
        total_result=result,
        percentage_result=pct,
    )


@dataclass(frozen=True)
class HoldingResult:
    invested: float
    value: float
    result: float
    percentage: float


def holding_result(h: Holding) -> HoldingResult:
    """Profit/loss of a single position against its cost basis (fees included)."""
    invested = h.invested
    value = h.value
    result = value - invested
    return HoldingResult(
        invested=invested,
        value=value,
        result=result,
        percentage=(result / invested) * 100.0 if invested > 0 else 0.0,
    )
