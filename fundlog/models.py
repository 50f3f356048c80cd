from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

from fundlog.utils.dates import date_timestamp, normalize_date
from fundlog.utils.numbers import to_float


@dataclass(frozen=True)
class Holding:
    id: str
    ticker: str
    name: str
    quantity: float
    average_price: float  # purchase price per unit
    transaction_fees: float  # total fees paid, always stored non-negative
    current_price: float  # latest known market price per unit
    purchase_date: str  # YYYY-MM-DD
    updated_at: int  # epoch milliseconds
    sector: str | None = None

    @property
    def invested(self) -> float:
        return self.quantity * self.average_price + self.transaction_fees

    @property
    def value(self) -> float:
        return self.quantity * self.current_price


@dataclass(frozen=True)
class Funds:
    """Value held outside the tracked holdings."""

    cash: float = 0.0
    assets: float = 0.0  # receivable claims


@dataclass(frozen=True)
class HistoryEntry:
    """
    One valuation snapshot per calendar date.

    `breakdown` and `prices` are both present for snapshots produced by
    recomputation, and both absent for manually entered totals.
    """

    date: str
    timestamp: int
    total_value: float
    total_invested: float
    breakdown: dict[str, float] | None = None
    prices: dict[str, float] | None = None

    @property
    def is_manual(self) -> bool:
        return self.breakdown is None

    def price_of(self, ticker: str) -> float | None:
        if not self.prices:
            return None
        return self.prices.get(ticker)


@dataclass(frozen=True)
class PortfolioSummary:
    total_invested: float  # (qty * avg price) + fees
    etf_value: float  # qty * current price
    cash: float
    assets: float
    current_value: float  # etf value + cash + assets
    total_fees: float
    total_result: float  # etf value - total invested
    percentage_result: float


@dataclass(frozen=True)
class PortfolioState:
    """
    The whole session: holdings, funds and the snapshot series.

    Transitions in `fundlog.portfolio` never mutate a state; they return a new one.
    """

    holdings: tuple[Holding, ...] = ()
    funds: Funds = field(default_factory=Funds)
    history: tuple[HistoryEntry, ...] = ()

    def find_holding(self, holding_id: str) -> Holding | None:
        for h in self.holdings:
            if h.id == holding_id:
                return h
        return None


# ---------------------------------------------------------------------------
# Record conversion (used by the JSON store)
# ---------------------------------------------------------------------------

def _price_map(raw: Any) -> dict[str, float] | None:
    if not isinstance(raw, Mapping):
        return None
    return {str(k): to_float(v) for k, v in raw.items()}


def holding_from_dict(row: Mapping[str, Any]) -> Holding:
    sector = row.get("sector")
    return Holding(
        id=str(row["id"]),
        ticker=str(row.get("ticker") or ""),
        name=str(row.get("name") or ""),
        quantity=to_float(row.get("quantity")),
        average_price=to_float(row.get("average_price")),
        transaction_fees=abs(to_float(row.get("transaction_fees"))),
        current_price=to_float(row.get("current_price")),
        purchase_date=str(row.get("purchase_date") or ""),
        updated_at=int(to_float(row.get("updated_at"))),
        sector=str(sector) if sector else None,
    )


def funds_from_dict(row: Mapping[str, Any] | None) -> Funds:
    row = row or {}
    return Funds(cash=to_float(row.get("cash")), assets=to_float(row.get("assets")))


def entry_from_dict(row: Mapping[str, Any]) -> HistoryEntry:
    d = normalize_date(str(row["date"]))
    breakdown = _price_map(row.get("breakdown"))
    prices = _price_map(row.get("prices"))
    if breakdown is None or prices is None:
        breakdown, prices = None, None
    return HistoryEntry(
        date=d,
        # Always derived from the date so ordering cannot drift from stored values.
        timestamp=date_timestamp(d),
        total_value=to_float(row.get("total_value")),
        total_invested=to_float(row.get("total_invested")),
        breakdown=breakdown,
        prices=prices,
    )


def state_to_dict(state: PortfolioState) -> dict[str, Any]:
    return {
        "holdings": [asdict(h) for h in state.holdings],
        "funds": asdict(state.funds),
        "history": [asdict(e) for e in state.history],
    }
