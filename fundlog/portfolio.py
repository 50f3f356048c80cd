"""
Session transitions.

Each operation takes the previous `PortfolioState` and returns the next one.
Inputs are already-validated primitives from the CLI or a caller; numbers are
still coerced so garbage degrades to 0 instead of raising. An unknown holding
id returns the state unchanged.
"""
from __future__ import annotations

import logging
import re
import uuid
from dataclasses import replace
from typing import Any, Mapping

from fundlog.history import reconcile
from fundlog.history.series import remove, upsert
from fundlog.models import Funds, HistoryEntry, Holding, PortfolioState
from fundlog.utils.dates import date_timestamp, normalize_date, today_iso, utc_now_ms
from fundlog.utils.numbers import to_float
from fundlog.valuation import total_invested

logger = logging.getLogger(__name__)


def derive_ticker(name: str) -> str:
    """Pseudo-ticker from a fund name: first word, alphanumerics only, max 8 chars."""
    words = (name or "").strip().upper().split()
    first = re.sub(r"[^A-Z0-9]", "", words[0]) if words else ""
    return first[:8] or "ETF"


def _with_today(state: PortfolioState, holdings: tuple[Holding, ...], *, today: str) -> tuple[HistoryEntry, ...]:
    return reconcile.record_today(state.history, holdings, state.funds, today=today)


def save_holding(
    state: PortfolioState,
    *,
    name: str,
    quantity: Any,
    average_price: Any,
    transaction_fees: Any = 0.0,
    purchase_date: str | None = None,
    holding_id: str | None = None,
    ticker: str | None = None,
    sector: str | None = None,
    today: str | None = None,
) -> PortfolioState:
    """
    Create a holding, or edit the one with `holding_id`.

    Writes today's snapshot from the resulting holdings and, for a backdated
    purchase date with no snapshot yet, a synthetic purchase-day snapshot.
    """
    today = normalize_date(today or today_iso())
    purchase_date = normalize_date(purchase_date or today)
    qty = to_float(quantity)
    avg = to_float(average_price)
    fees = abs(to_float(transaction_fees))
    now = utc_now_ms()

    if holding_id is not None:
        existing = state.find_holding(holding_id)
        if existing is None:
            logger.info("save_holding: no holding with id %s", holding_id)
            return state
        holding = replace(
            existing,
            name=name or existing.name,
            quantity=qty,
            average_price=avg,
            transaction_fees=fees,
            purchase_date=purchase_date,
            sector=sector if sector is not None else existing.sector,
            updated_at=now,
        )
        holdings = tuple(holding if h.id == holding_id else h for h in state.holdings)
    else:
        holding = Holding(
            id=str(uuid.uuid4()),
            ticker=(ticker or "").strip().upper() or derive_ticker(name),
            name=name,
            quantity=qty,
            average_price=avg,
            transaction_fees=fees,
            current_price=avg,
            purchase_date=purchase_date,
            updated_at=now,
            sector=sector,
        )
        holdings = state.holdings + (holding,)

    history = _with_today(state, holdings, today=today)
    history = reconcile.backfill_purchase_point(history, holdings, state.funds, holding=holding, today=today)
    return replace(state, holdings=holdings, history=history)


def delete_holding(state: PortfolioState, holding_id: str, *, today: str | None = None) -> PortfolioState:
    """Remove a holding and recompute today's snapshot. Older snapshots are kept."""
    if state.find_holding(holding_id) is None:
        return state
    holdings = tuple(h for h in state.holdings if h.id != holding_id)
    history = _with_today(state, holdings, today=normalize_date(today or today_iso()))
    return replace(state, holdings=holdings, history=history)


def correct_price(
    state: PortfolioState,
    holding_id: str,
    new_price: Any,
    date: str,
) -> PortfolioState:
    """
    Set the holding's ticker price on `date` and carry it forward through
    later snapshots that still hold the old price. The holding's current
    price becomes the price in the latest snapshot for its ticker.
    """
    holding = state.find_holding(holding_id)
    if holding is None:
        return state
    price = to_float(new_price)
    date = normalize_date(date)

    history = reconcile.propagate_price(
        state.history,
        state.holdings,
        state.funds,
        ticker=holding.ticker,
        new_price=price,
        date=date,
    )
    latest = reconcile.latest_price(history, holding.ticker)
    updated = replace(
        holding,
        current_price=latest if latest is not None else price,
        updated_at=utc_now_ms(),
    )
    holdings = tuple(updated if h.id == holding_id else h for h in state.holdings)
    return replace(state, holdings=holdings, history=history)


def update_prices(
    state: PortfolioState,
    prices: Mapping[str, Any],
    *,
    today: str | None = None,
) -> PortfolioState:
    """Set current prices by holding id (unknown ids ignored) and recompute today's snapshot."""
    if not any(state.find_holding(hid) is not None for hid in prices):
        return state
    now = utc_now_ms()
    holdings = tuple(
        replace(h, current_price=to_float(prices[h.id]), updated_at=now) if h.id in prices else h
        for h in state.holdings
    )
    history = _with_today(state, holdings, today=normalize_date(today or today_iso()))
    return replace(state, holdings=holdings, history=history)


def set_funds(state: PortfolioState, *, cash: Any, assets: Any, today: str | None = None) -> PortfolioState:
    funds = Funds(cash=to_float(cash), assets=to_float(assets))
    today = normalize_date(today or today_iso())
    history = reconcile.record_today(state.history, state.holdings, funds, today=today)
    return replace(state, funds=funds, history=history)


def add_manual_point(state: PortfolioState, date: str, value: Any) -> PortfolioState:
    """Insert or replace a total-only snapshot (no breakdown, no prices)."""
    date = normalize_date(date)
    entry = HistoryEntry(
        date=date,
        timestamp=date_timestamp(date),
        total_value=to_float(value),
        total_invested=total_invested(state.holdings),
    )
    return replace(state, history=upsert(state.history, entry))


def remove_manual_point(state: PortfolioState, date: str) -> PortfolioState:
    """Remove the snapshot on `date`, whatever produced it."""
    return replace(state, history=remove(state.history, normalize_date(date)))


def transactions(state: PortfolioState) -> list[Holding]:
    """Holdings by purchase date, newest first."""
    return sorted(state.holdings, key=lambda h: h.purchase_date, reverse=True)
