from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from conftest import TODAY, is_sorted_unique

from fundlog.models import PortfolioState
from fundlog.portfolio import add_manual_point, save_holding, set_funds
from fundlog.store import load_state, save_state


def test_state_round_trip(tmp_path: Path):
    path = str(tmp_path / "state.json")
    state = save_holding(
        PortfolioState(), name="ABC World", ticker="ABC", quantity=10, average_price=100,
        transaction_fees=5, purchase_date="2026-01-02", sector="Global", today=TODAY,
    )
    state = set_funds(state, cash=150, assets=25, today=TODAY)
    state = add_manual_point(state, "2025-11-30", 700)

    assert save_state(state, path) is True
    loaded = load_state(path)

    assert loaded == state
    assert loaded.history[0].is_manual


def test_missing_file_is_empty_state(tmp_path: Path):
    assert load_state(str(tmp_path / "nope.json")) == PortfolioState()


def test_corrupt_file_falls_back_to_empty(tmp_path: Path):
    path = tmp_path / "state.json"
    path.write_text("{not json")
    assert load_state(str(path)) == PortfolioState()

    path.write_text(json.dumps(["unexpected", "shape"]))
    assert load_state(str(path)) == PortfolioState()


def test_malformed_records_are_skipped(tmp_path: Path):
    path = tmp_path / "state.json"
    path.write_text(
        json.dumps(
            {
                "holdings": [
                    {"name": "no id"},
                    {"id": "h1", "ticker": "X", "quantity": "3", "average_price": 10, "transaction_fees": -2},
                ],
                "funds": {"cash": "oops", "assets": 5},
                "history": [
                    {"date": "2026-13-45", "total_value": 1},
                    {"date": "2026-01-02", "total_value": 30, "breakdown": {"X": 30}},
                    {"date": "2026-01-01", "total_value": 10},
                    {"date": "2026-01-02", "total_value": 31, "breakdown": {"X": 31}, "prices": {"X": 10.33}},
                ],
            }
        )
    )

    state = load_state(str(path))

    assert [h.id for h in state.holdings] == ["h1"]
    assert state.holdings[0].quantity == 3.0
    assert state.holdings[0].transaction_fees == 2.0
    assert state.funds.cash == 0.0 and state.funds.assets == 5.0
    assert [e.date for e in state.history] == ["2026-01-01", "2026-01-02"]
    assert state.history[1].total_value == 31
    assert state.history[1].prices == {"X": 10.33}


def test_breakdown_without_prices_loads_as_manual(tmp_path: Path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"history": [{"date": "2026-01-02", "total_value": 30, "breakdown": {"X": 30}}]}))
    entry = load_state(str(path)).history[0]
    assert entry.breakdown is None and entry.prices is None


def test_write_failure_is_reported_not_raised(tmp_path: Path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    state = add_manual_point(PortfolioState(), TODAY, 1)

    assert save_state(state, str(blocker / "state.json")) is False
    assert state.history[0].total_value == 1


def test_failed_write_leaves_no_temp_file(tmp_path: Path, monkeypatch):
    import fundlog.store as store

    path = tmp_path / "state.json"
    monkeypatch.setattr(store, "state_to_dict", lambda state: {"history": [object()]})

    assert save_state(PortfolioState(), str(path)) is False
    assert not (tmp_path / "state.json.tmp").exists()
    assert not path.exists()


@pytest.mark.skipif(sys.version_info < (3, 11), reason="compact ISO dates need Python 3.11+")
def test_equivalent_date_spellings_collapse_on_load(tmp_path: Path):
    path = tmp_path / "state.json"
    path.write_text(
        json.dumps(
            {
                "history": [
                    {"date": "2026-01-01", "total_value": 10},
                    {"date": "20260101", "total_value": 11},
                    {"date": "2025-12-31", "total_value": 9},
                ]
            }
        )
    )

    state = load_state(str(path))

    assert [e.date for e in state.history] == ["2025-12-31", "2026-01-01"]
    assert state.history[1].total_value == 11
    assert is_sorted_unique(state.history)
