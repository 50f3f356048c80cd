"""Centralized settings utilities."""

from __future__ import annotations

import os

from fundlog.config import Settings, load_settings


def safe_load_settings() -> Settings:
    """
    Load settings with graceful fallback.

    If .env is unreadable (e.g., sandbox), construct Settings directly from environment variables.
    """
    try:
        return load_settings()
    except Exception:
        return Settings.model_construct(
            FUNDLOG_STATE_PATH=os.getenv("FUNDLOG_STATE_PATH", "data/fundlog_state.json"),
            FUNDLOG_LOG_LEVEL=os.getenv("FUNDLOG_LOG_LEVEL", "WARNING"),
            FUNDLOG_UNKNOWN_SERIES=os.getenv("FUNDLOG_UNKNOWN_SERIES", "unknown"),
        )
