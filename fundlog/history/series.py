from __future__ import annotations

from typing import Iterable

from fundlog.models import HistoryEntry
from fundlog.utils.dates import date_timestamp


def sort_series(entries: Iterable[HistoryEntry]) -> tuple[HistoryEntry, ...]:
    return tuple(sorted(entries, key=lambda e: e.timestamp))


def find_entry(series: Iterable[HistoryEntry], date: str) -> HistoryEntry | None:
    for e in series:
        if e.date == date:
            return e
    return None


def preceding_entry(series: Iterable[HistoryEntry], date: str) -> HistoryEntry | None:
    """Nearest entry strictly before `date`."""
    ts = date_timestamp(date)
    best: HistoryEntry | None = None
    for e in series:
        if e.timestamp < ts and (best is None or e.timestamp > best.timestamp):
            best = e
    return best


def upsert(series: Iterable[HistoryEntry], entry: HistoryEntry) -> tuple[HistoryEntry, ...]:
    """Insert or replace the entry for `entry.date`, keeping the series sorted."""
    kept = [e for e in series if e.date != entry.date]
    kept.append(entry)
    return sort_series(kept)


def remove(series: Iterable[HistoryEntry], date: str) -> tuple[HistoryEntry, ...]:
    return tuple(e for e in series if e.date != date)
