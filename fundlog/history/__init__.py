"""Snapshot series: storage primitives, reconciliation and chart shaping.

The series is a tuple of `HistoryEntry` kept sorted ascending by timestamp with
at most one entry per date. Every writer goes through `series.upsert`, which
filters out the date, appends, then re-sorts.
"""
