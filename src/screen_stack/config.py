"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_MAX_HTML_CHARS = 240_000
DEFAULT_MAX_REVISION_NOTE_CHARS = 200
DEFAULT_RETENTION_DAYS = 21


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)


def _env_int(key: str, default: int) -> int:
    raw = _env(key).strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(key: str, *, default: bool) -> bool:
    raw = _env(key).strip().lower()
    if not raw:
        return default
    return raw not in {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ScreenConfig:
    max_html_chars: int = field(
        default_factory=lambda: _env_int("SCREEN_MAX_HTML_CHARS", DEFAULT_MAX_HTML_CHARS)
    )
    max_revision_note_chars: int = field(
        default_factory=lambda: _env_int(
            "SCREEN_MAX_REVISION_NOTE_CHARS", DEFAULT_MAX_REVISION_NOTE_CHARS
        )
    )


@dataclass(frozen=True)
class HistoryConfig:
    workspace_root: str = field(default_factory=lambda: _env("HISTORY_WORKSPACE_ROOT", "."))
    retention_days: int = field(
        default_factory=lambda: _env_int("HISTORY_RETENTION_DAYS", DEFAULT_RETENTION_DAYS)
    )
    enabled: bool = field(
        default_factory=lambda: _env_bool("HISTORY_ENABLED", default=True)
    )

    @property
    def workspace_path(self) -> Path:
        return Path(self.workspace_root or ".").resolve()


@dataclass(frozen=True)
class AppConfig:
    env: str = field(default_factory=lambda: _env("APP_ENV", "development"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    host: str = field(default_factory=lambda: _env("APP_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: _env_int("APP_PORT", 8787))

    @property
    def is_development(self) -> bool:
        return self.env == "development"


@dataclass(frozen=True)
class Settings:
    screen: ScreenConfig = field(default_factory=ScreenConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    app: AppConfig = field(default_factory=AppConfig)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load settings once per process, reading a local ``.env`` when present."""
    load_dotenv()
    return Settings()
