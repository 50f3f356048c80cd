"""
Chart shaping for the snapshot series.

Read-only transforms: nothing here modifies the entries it is given.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Sequence

import pandas as pd

from fundlog.history.series import sort_series
from fundlog.models import HistoryEntry, Holding

UNKNOWN_SERIES = "unknown"


def iter_chart_points(
    history: Sequence[HistoryEntry],
    holdings: Sequence[Holding],
    *,
    unknown_series: str = UNKNOWN_SERIES,
) -> Iterator[dict[str, Any]]:
    """
    Yield one flat record per snapshot, oldest first:
    {"date", "timestamp", "totalValue", "totalInvested", <ticker>: value, ...}

    Snapshots with a breakdown contribute their own values. Manual points
    (no breakdown) repeat each ticker's last known value so lines stay flat.
    A manual point seen before any ticker is known is attributed to the only
    held ticker, or to `unknown_series` when there is not exactly one.
    """
    tickers = sorted({h.ticker for h in holdings})
    last_known: dict[str, float] = {}

    for entry in sort_series(history):
        point: dict[str, Any] = {
            "date": entry.date,
            "timestamp": entry.timestamp,
            "totalValue": entry.total_value,
            "totalInvested": entry.total_invested,
        }
        if entry.breakdown is not None:
            for ticker, value in entry.breakdown.items():
                point[ticker] = value
                last_known[ticker] = value
        elif last_known:
            point.update(last_known)
        elif len(tickers) == 1:
            point[tickers[0]] = entry.total_value
        else:
            point[unknown_series] = entry.total_value
        yield point


def chart_series_keys(points: Sequence[dict[str, Any]]) -> list[str]:
    """Per-asset keys present in any point, in first-seen order."""
    fixed = {"date", "timestamp", "totalValue", "totalInvested"}
    keys: dict[str, None] = {}
    for p in points:
        for k in p:
            if k not in fixed:
                keys.setdefault(k, None)
    return list(keys)


def chart_frame(
    history: Sequence[HistoryEntry],
    holdings: Sequence[Holding],
    *,
    unknown_series: str = UNKNOWN_SERIES,
) -> pd.DataFrame:
    """Chart points as a DataFrame indexed by date; missing asset values are NaN."""
    points = list(iter_chart_points(history, holdings, unknown_series=unknown_series))
    cols = ["totalValue", "totalInvested"] + chart_series_keys(points)
    if not points:
        return pd.DataFrame(columns=cols)
    df = pd.DataFrame.from_records(points).set_index("date")
    return df[cols]


@dataclass(frozen=True)
class PriceHistoryRow:
    date: str
    price: float
    value: float


def price_history(
    history: Sequence[HistoryEntry],
    holdings: Sequence[Holding],
    ticker: str,
) -> list[PriceHistoryRow]:
    """
    Unit price and position value of `ticker` per snapshot, newest first.

    Older snapshots without a stored price fall back to value / current total
    quantity of the ticker.
    """
    total_qty = sum(h.quantity for h in holdings if h.ticker == ticker)
    rows: list[PriceHistoryRow] = []
    for entry in reversed(sort_series(history)):
        if entry.breakdown is None or ticker not in entry.breakdown:
            continue
        value = entry.breakdown[ticker]
        price = entry.price_of(ticker)
        if price is None:
            price = value / total_qty if total_qty > 0 else 0.0
        rows.append(PriceHistoryRow(date=entry.date, price=price, value=value))
    return rows
