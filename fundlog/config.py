from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Single JSON blob holding holdings, funds and the snapshot series.
    FUNDLOG_STATE_PATH: str = "data/fundlog_state.json"
    FUNDLOG_LOG_LEVEL: str = "WARNING"
    # Chart series key used for manual totals before any ticker is known.
    FUNDLOG_UNKNOWN_SERIES: str = "unknown"

    # snake_case accessors used across the codebase.
    @property
    def state_path(self) -> str:
        return self.FUNDLOG_STATE_PATH

    @property
    def log_level(self) -> str:
        return (self.FUNDLOG_LOG_LEVEL or "WARNING").strip().upper()

    @property
    def unknown_series(self) -> str:
        return (self.FUNDLOG_UNKNOWN_SERIES or "unknown").strip() or "unknown"


def load_settings() -> Settings:
    return Settings()
