"""Core package for fantasy roster projections and what-if planning."""

from .adjustments import PlayerProjection, ProjectionPipeline
from .reference import LeagueConfig, ReferenceData
from .settings import AppSettings, get_settings, reset_settings_cache
from .stats_store import PlayerRecord, StatsStore

__all__ = [
    "AppSettings",
    "LeagueConfig",
    "PlayerProjection",
    "PlayerRecord",
    "ProjectionPipeline",
    "ReferenceData",
    "StatsStore",
    "get_settings",
    "reset_settings_cache",
]
