"""
Reconciliation of the snapshot series with holding edits.

Three writers:
- `record_today`: full recompute of today's snapshot from the current holdings.
- `backfill_purchase_point`: one-off synthetic snapshot on a backdated purchase date.
- `propagate_price`: single-asset price correction on a past date, carried
  forward through later snapshots that still hold the stale price.

All functions take the series as a value and return a new sorted series.
"""
from __future__ import annotations

import logging
from typing import Sequence

from fundlog.history.series import find_entry, preceding_entry, sort_series, upsert
from fundlog.models import Funds, HistoryEntry, Holding
from fundlog.utils.dates import date_timestamp
from fundlog.valuation import breakdown_and_total, snapshot_at, total_invested

logger = logging.getLogger(__name__)

# Two prices closer than this are treated as the same carried-forward value.
PRICE_MATCH_TOLERANCE = 0.001


def today_snapshot(holdings: Sequence[Holding], funds: Funds, *, today: str) -> HistoryEntry:
    breakdown, prices, total = breakdown_and_total(holdings)
    return HistoryEntry(
        date=today,
        timestamp=date_timestamp(today),
        total_value=total + funds.cash + funds.assets,
        total_invested=total_invested(holdings),
        breakdown=breakdown,
        prices=prices,
    )


def record_today(
    history: Sequence[HistoryEntry],
    holdings: Sequence[Holding],
    funds: Funds,
    *,
    today: str,
) -> tuple[HistoryEntry, ...]:
    """Replace today's snapshot with one recomputed from `holdings`."""
    return upsert(history, today_snapshot(holdings, funds, today=today))


def purchase_snapshot(holdings: Sequence[Holding], funds: Funds, *, holding: Holding) -> HistoryEntry:
    """
    Approximate portfolio state on `holding.purchase_date`.

    Every other holding is valued at today's price because no historical price
    is known for it on that date; only `holding` itself uses its purchase
    (average) price. This is a best-effort backfill, not a reconstruction.
    """
    others = [h for h in holdings if h.id != holding.id]
    breakdown, prices, total = breakdown_and_total(others)

    value = holding.quantity * holding.average_price
    breakdown[holding.ticker] = breakdown.get(holding.ticker, 0.0) + value
    prices[holding.ticker] = holding.average_price
    total += value

    return HistoryEntry(
        date=holding.purchase_date,
        timestamp=date_timestamp(holding.purchase_date),
        total_value=total + funds.cash + funds.assets,
        total_invested=total_invested(others) + holding.invested,
        breakdown=breakdown,
        prices=prices,
    )


def backfill_purchase_point(
    history: Sequence[HistoryEntry],
    holdings: Sequence[Holding],
    funds: Funds,
    *,
    holding: Holding,
    today: str,
) -> tuple[HistoryEntry, ...]:
    """Add a synthetic snapshot on a backdated purchase date. Never overwrites."""
    if not holding.purchase_date or holding.purchase_date == today:
        return tuple(history)
    if find_entry(history, holding.purchase_date) is not None:
        return tuple(history)
    logger.debug("backfilling purchase point %s for %s", holding.purchase_date, holding.ticker)
    return upsert(history, purchase_snapshot(holdings, funds, holding=holding))


def price_before_edit(history: Sequence[HistoryEntry], ticker: str, date: str) -> float | None:
    """
    Price `ticker` carried at `date` before a correction: the entry on `date`
    if it has one, otherwise the latest earlier entry with a price for it.
    None means this is the first known price point for the ticker.
    """
    ts = date_timestamp(date)
    found: float | None = None
    for e in sort_series(history):
        if e.timestamp > ts:
            break
        p = e.price_of(ticker)
        if p is not None:
            found = p
    return found


def _carries_stale_price(old: float | None, match_value: float | None) -> bool:
    if match_value is None:
        return old is None or old == 0
    return old is not None and abs(old - match_value) < PRICE_MATCH_TOLERANCE


def latest_price(history: Sequence[HistoryEntry], ticker: str) -> float | None:
    """Price of `ticker` in the chronologically last entry that has one."""
    for e in reversed(sort_series(history)):
        p = e.price_of(ticker)
        if p is not None:
            return p
    return None


def propagate_price(
    history: Sequence[HistoryEntry],
    holdings: Sequence[Holding],
    funds: Funds,
    *,
    ticker: str,
    new_price: float,
    date: str,
) -> tuple[HistoryEntry, ...]:
    """
    Correct `ticker`'s price on `date` and carry it forward.

    Later entries are overwritten while they still hold the pre-edit price
    (within PRICE_MATCH_TOLERANCE), or, when there was no earlier price, while
    they have none or zero. Entries already at the new price are kept as they
    are and the walk continues past them. The first entry that breaks the run
    and everything after it are left untouched.
    """
    series = sort_series(history)
    match_value = price_before_edit(series, ticker, date)

    base = find_entry(series, date) or preceding_entry(series, date)
    prices = dict(base.prices) if base is not None and base.prices else {}
    for h in holdings:
        if h.ticker not in prices:
            prices[h.ticker] = h.current_price
    prices[ticker] = new_price

    edited = snapshot_at(holdings, prices, date, funds)
    series = upsert(series, edited)

    out = list(series)
    for i, entry in enumerate(out):
        if entry.timestamp <= edited.timestamp:
            continue
        old = entry.price_of(ticker)
        if old is not None and abs(old - new_price) < PRICE_MATCH_TOLERANCE:
            continue
        if not _carries_stale_price(old, match_value):
            logger.debug("price run for %s breaks at %s (%s != %s)", ticker, entry.date, old, match_value)
            break
        next_prices = dict(entry.prices or {})
        next_prices[ticker] = new_price
        out[i] = snapshot_at(holdings, next_prices, entry.date, funds)
        logger.debug("propagated %s=%s to %s", ticker, new_price, entry.date)

    return tuple(out)
