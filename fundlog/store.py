"""
JSON persistence for the whole session state.

One file holds three records: holdings, funds, history. Loading never fails:
a missing or corrupt file yields an empty state, and malformed records are
skipped. Saving never raises: a failed write is logged and reported through
the return value, and the in-memory state stays authoritative.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from fundlog.history.series import sort_series
from fundlog.models import (
    PortfolioState,
    entry_from_dict,
    funds_from_dict,
    holding_from_dict,
    state_to_dict,
)

logger = logging.getLogger(__name__)


def default_state_path() -> str:
    return os.environ.get("FUNDLOG_STATE_PATH", "data/fundlog_state.json")


def _records(raw: Any, key: str) -> list[Any]:
    rows = raw.get(key) if isinstance(raw, dict) else None
    return rows if isinstance(rows, list) else []


def load_state(path: str | None = None) -> PortfolioState:
    path = path or default_state_path()
    if not Path(path).exists():
        return PortfolioState()
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Failed to load state from %s, starting empty: %s", path, exc)
        return PortfolioState()

    holdings = []
    for row in _records(raw, "holdings"):
        try:
            holdings.append(holding_from_dict(row))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Skipping malformed holding record %r: %s", row, exc)

    by_date = {}
    for row in _records(raw, "history"):
        try:
            entry = entry_from_dict(row)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Skipping malformed history record %r: %s", row, exc)
            continue
        # Later duplicates win so the loaded series is unique by date.
        by_date[entry.date] = entry

    funds_raw = raw.get("funds") if isinstance(raw, dict) else None
    return PortfolioState(
        holdings=tuple(holdings),
        funds=funds_from_dict(funds_raw if isinstance(funds_raw, dict) else None),
        history=sort_series(by_date.values()),
    )


def save_state(state: PortfolioState, path: str | None = None) -> bool:
    path = path or default_state_path()
    tmp = f"{path}.tmp"
    try:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(state_to_dict(state), f, indent=2)
        os.replace(tmp, path)
    except (OSError, TypeError, ValueError) as exc:
        with contextlib.suppress(OSError):
            Path(tmp).unlink(missing_ok=True)
        logger.warning("Failed to save state to %s: %s", path, exc)
        return False
    return True
