from __future__ import annotations

import copy
import math

from conftest import make_entry, make_holding

from fundlog.history.presenter import chart_frame, iter_chart_points, price_history
from fundlog.models import HistoryEntry
from fundlog.utils.dates import date_timestamp


def _manual(date: str, value: float) -> HistoryEntry:
    return HistoryEntry(date=date, timestamp=date_timestamp(date), total_value=value, total_invested=0.0)


def test_manual_points_forward_fill_last_known_values():
    holdings = [make_holding(id="a", ticker="A"), make_holding(id="b", ticker="B")]
    history = [
        make_entry("2026-01-01", {"A": 10.0, "B": 5.0}, {"A": 1, "B": 2}),
        _manual("2026-01-02", 999.0),
        make_entry("2026-01-03", {"A": 12.0}, {"A": 1}),
        _manual("2026-01-04", 1234.0),
    ]

    points = list(iter_chart_points(history, holdings))

    assert [p["date"] for p in points] == ["2026-01-01", "2026-01-02", "2026-01-03", "2026-01-04"]
    assert points[1]["A"] == 10.0 and points[1]["B"] == 10.0
    assert points[1]["totalValue"] == 999.0
    assert "B" not in points[2]
    assert points[3]["A"] == 12.0 and points[3]["B"] == 10.0


def test_leading_manual_point_goes_to_sole_ticker():
    holdings = [make_holding(id="a", ticker="A"), make_holding(id="a2", ticker="A")]
    history = [_manual("2025-12-01", 500.0), make_entry("2026-01-01", {"A": 10.0}, {"A": 3})]

    points = list(iter_chart_points(history, holdings))

    assert points[0]["A"] == 500.0
    assert "unknown" not in points[0]


def test_leading_manual_point_goes_to_unknown_series():
    holdings = [make_holding(id="a", ticker="A"), make_holding(id="b", ticker="B")]
    points = list(iter_chart_points([_manual("2025-12-01", 500.0)], holdings, unknown_series="other"))
    assert points[0]["other"] == 500.0

    points = list(iter_chart_points([_manual("2025-12-01", 500.0)], []))
    assert points[0]["unknown"] == 500.0


def test_presenter_is_lazy_sorted_and_read_only():
    history = [
        make_entry("2026-01-02", {"A": 2.0}, {"A": 1}),
        make_entry("2026-01-01", {"A": 1.0}, {"A": 1}),
    ]
    before = copy.deepcopy(history)

    gen = iter_chart_points(history, [])
    assert next(gen)["date"] == "2026-01-01"
    assert [p["date"] for p in gen] == ["2026-01-02"]
    assert history == before


def test_chart_frame_columns_and_gaps():
    holdings = [make_holding(id="a", ticker="A"), make_holding(id="b", ticker="B")]
    history = [
        make_entry("2026-01-01", {"A": 10.0, "B": 5.0}, {"A": 1, "B": 1}),
        make_entry("2026-01-02", {"A": 11.0}, {"A": 1}),
    ]
    df = chart_frame(history, holdings)

    assert list(df.columns) == ["totalValue", "totalInvested", "A", "B"]
    assert list(df.index) == ["2026-01-01", "2026-01-02"]
    assert df.loc["2026-01-02", "A"] == 11.0
    assert math.isnan(df.loc["2026-01-02", "B"])

    empty = chart_frame([], holdings)
    assert empty.empty
    assert list(empty.columns) == ["totalValue", "totalInvested"]


def test_price_history_newest_first_with_quantity_fallback():
    holdings = [make_holding(id="a", ticker="A", quantity=2), make_holding(id="a2", ticker="A", quantity=3)]
    legacy = HistoryEntry(
        date="2026-01-01",
        timestamp=date_timestamp("2026-01-01"),
        total_value=50.0,
        total_invested=0.0,
        breakdown={"A": 50.0},
        prices={},
    )
    history = [legacy, _manual("2026-01-02", 70.0), make_entry("2026-01-03", {"A": 12.0}, {"A": 5})]

    rows = price_history(history, holdings, "A")

    assert [r.date for r in rows] == ["2026-01-03", "2026-01-01"]
    assert rows[0].price == 12.0 and rows[0].value == 60.0
    assert rows[1].price == 10.0
    assert price_history(history, [], "A")[1].price == 0.0
    assert price_history(history, holdings, "ZZZ") == []
