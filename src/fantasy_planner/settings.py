from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


DEFAULT_SEASON = 2024


@dataclass
class AppSettings:
    """Application configuration sourced from environment variables."""

    data_root: Path
    season: int
    reference_path: Optional[Path]
    league_config_path: Optional[Path]
    log_level: str

    def stats_path(self, season: Optional[int] = None) -> Path:
        target = season or self.season
        return self.data_root / "out" / "stats" / str(target) / f"weekly_scores_{target}.csv"


def _coerce_int(value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Expected integer-compatible value, got: {value!r}") from None


def _optional_path(value: Optional[str]) -> Optional[Path]:
    if not value:
        return None
    return Path(value).resolve()


@lru_cache(maxsize=1)
def get_settings(env_path: Optional[Path | str] = None) -> AppSettings:
    """Load settings from `.env` (if present) and environment variables."""

    env_file = Path(env_path) if env_path else Path(".env")
    if env_file.exists():
        load_dotenv(env_file)

    data_root = Path(os.getenv("DATA_ROOT", "./data")).resolve()
    season = _coerce_int(os.getenv("FANTASY_SEASON"))

    return AppSettings(
        data_root=data_root,
        season=season if season is not None else DEFAULT_SEASON,
        reference_path=_optional_path(os.getenv("REFERENCE_PATH")),
        league_config_path=_optional_path(os.getenv("LEAGUE_CONFIG_PATH")),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


def reset_settings_cache() -> None:
    """Clear cached settings; useful for tests."""

    get_settings.cache_clear()  # type: ignore[attr-defined]
