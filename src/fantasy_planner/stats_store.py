"""Read access to scored weekly player totals."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .settings import AppSettings

LOGGER = logging.getLogger(__name__)

STAT_COLUMNS = ["player_id", "name", "position", "team", "season", "week", "total_points"]
FREE_AGENT_TEAM = "FA"


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


class PlayerRecord(BaseModel):
    """Validated store row: one player with a representative point total."""

    player_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    position: str = ""
    team: str = FREE_AGENT_TEAM
    total_points: float = Field(..., allow_inf_nan=False)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("position")
    @classmethod
    def upper_position(cls, value: str) -> str:
        return value.upper()

    @field_validator("team")
    @classmethod
    def upper_team(cls, value: str) -> str:
        return value.upper() or FREE_AGENT_TEAM

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PlayerRecord":
        """Build a record from a raw stats row; raises ``ValueError`` when the row is unusable."""

        payload: Dict[str, Any] = {
            key: str(row[key]) for key in ("player_id", "name", "position", "team") if not _is_missing(row.get(key))
        }
        points = pd.to_numeric(row.get("total_points"), errors="coerce")
        payload["total_points"] = None if _is_missing(points) else float(points)
        return cls(**payload)


def _mask(condition: pd.Series) -> pd.Series:
    return condition.fillna(False).astype(bool)


def _valid_records(frame: pd.DataFrame) -> Iterable[PlayerRecord]:
    for row in frame.to_dict("records"):
        try:
            yield PlayerRecord.from_row(row)
        except ValueError as exc:
            LOGGER.warning("Skipping invalid stats row: %s", exc)


def _normalize_frame(df: pd.DataFrame) -> pd.DataFrame:
    missing = {"player_id", "name", "total_points"} - set(df.columns)
    if missing:
        raise ValueError(f"Stats table missing columns: {', '.join(sorted(missing))}")

    frame = df.copy()
    for column in STAT_COLUMNS:
        if column not in frame.columns:
            frame[column] = pd.NA
    frame["player_id"] = frame["player_id"].astype("string").str.strip()
    frame["name"] = frame["name"].astype("string").str.strip()
    frame["position"] = frame["position"].astype("string").str.upper()
    frame["team"] = frame["team"].astype("string").str.upper()
    frame["season"] = pd.to_numeric(frame["season"], errors="coerce").astype("Int64")
    frame["week"] = pd.to_numeric(frame["week"], errors="coerce").astype("Int64")
    frame["total_points"] = pd.to_numeric(frame["total_points"], errors="coerce")
    return frame.reset_index(drop=True)


class StatsStore:
    """Query helper over a scored weekly stats table.

    Expected columns: ``player_id``, ``name``, ``position``, ``team``,
    ``season``, ``week``, ``total_points``.
    """

    def __init__(self, frame: pd.DataFrame) -> None:
        self._frame = _normalize_frame(frame)

    @classmethod
    def from_csv(cls, path: Path) -> "StatsStore":
        if not path.exists():
            raise FileNotFoundError(f"Weekly scores not found at {path}")
        df = pd.read_csv(path, dtype={"player_id": str})
        LOGGER.debug("Loaded %d stat rows from %s", len(df), path)
        return cls(df)

    @classmethod
    def for_settings(cls, settings: AppSettings, season: Optional[int] = None) -> "StatsStore":
        return cls.from_csv(settings.stats_path(season))

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame

    def _season_rows(self, season: Optional[int]) -> pd.DataFrame:
        if season is None:
            return self._frame
        return self._frame.loc[_mask(self._frame["season"] == season)]

    @staticmethod
    def _best_rows(rows: pd.DataFrame, key: str) -> pd.DataFrame:
        ordered = rows.sort_values("total_points", ascending=False, kind="mergesort")
        return ordered.drop_duplicates(key, keep="first")

    def resolve_players(self, identifiers: Iterable[str], season: Optional[int]) -> Dict[str, PlayerRecord]:
        """Resolve identifiers to their highest single-week row in one pass.

        Each identifier is matched against ``player_id`` first and falls back to
        an exact ``name`` match. Identifiers that match nothing are absent from
        the result.
        """

        wanted = list(dict.fromkeys(str(item) for item in identifiers))
        if not wanted:
            return {}

        rows = self._season_rows(season)
        resolved: Dict[str, PlayerRecord] = {}

        by_id = self._best_rows(rows.loc[_mask(rows["player_id"].isin(wanted))], "player_id")
        for record in _valid_records(by_id):
            resolved[record.player_id] = record

        unresolved = [item for item in wanted if item not in resolved]
        if unresolved:
            by_name = self._best_rows(rows.loc[_mask(rows["name"].isin(unresolved))], "name")
            for record in _valid_records(by_name):
                resolved[record.name] = record

        LOGGER.debug("Resolved %d of %d roster identifiers", len(resolved), len(wanted))
        return resolved

    def recent_totals(self, player_name: str, season: Optional[int], limit: int = 10) -> List[float]:
        """Most recent weekly totals for a player, newest first."""

        rows = self._season_rows(season)
        rows = rows.loc[_mask(rows["name"] == player_name)]
        rows = rows.sort_values("week", ascending=False, kind="mergesort").head(limit)
        return [float(value) for value in rows["total_points"].fillna(0.0)]

    def top_players(
        self,
        season: Optional[int],
        *,
        position: Optional[str] = None,
        exclude: Sequence[str] = (),
        limit: int = 100,
    ) -> List[PlayerRecord]:
        """Players ordered by their best single-week total, skipping ``exclude`` ids and names."""

        rows = self._season_rows(season)
        if position:
            rows = rows.loc[_mask(rows["position"] == str(position).upper())]
        if exclude:
            excluded = set(exclude)
            rows = rows.loc[~_mask(rows["player_id"].isin(excluded) | rows["name"].isin(excluded))]

        best = self._best_rows(rows, "player_id").head(limit)
        return list(_valid_records(best))

    def weekly_rows(
        self,
        season: Optional[int],
        *,
        start_week: Optional[int] = None,
        end_week: Optional[int] = None,
        position: Optional[str] = None,
    ) -> pd.DataFrame:
        """Weekly rows ordered by player name then week; ``end_week`` is exclusive."""

        rows = self._season_rows(season)
        if start_week is not None:
            rows = rows.loc[_mask(rows["week"] >= start_week)]
        if end_week is not None:
            rows = rows.loc[_mask(rows["week"] < end_week)]
        if position:
            rows = rows.loc[_mask(rows["position"] == str(position).upper())]
        return rows.sort_values(["name", "week"], kind="mergesort").reset_index(drop=True)
