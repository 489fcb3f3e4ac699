"""Static reference tables: injury report, strength of schedule and league settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

import yaml


INJURY_MULTIPLIERS: Mapping[str, float] = MappingProxyType(
    {
        "Q": 0.85,
        "O": 0.00,
        "IR": 0.00,
        "PUP": 0.25,
        "Doubtful": 0.10,
        "Probable": 1.00,
    }
)

INJURY_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "QUESTIONABLE": "Q",
        "OUT": "O",
        "INJUREDRESERVE": "IR",
        "INJURED_RESERVE": "IR",
        "PHYSICALLYUNABLETOPERFORM": "PUP",
        "DOUBTFUL": "Doubtful",
        "PROBABLE": "Probable",
    }
)

SOS_EASY_THRESHOLD = 10
SOS_HARD_THRESHOLD = 22
SOS_VERY_HARD_THRESHOLD = 27
SOS_EASY_BONUS = 0.05
SOS_HARD_PENALTY = 0.05

SOS_EASY = "Easy"
SOS_MEDIUM = "Medium"
SOS_HARD = "Hard"
SOS_VERY_HARD = "Very Hard"

DEFAULT_STARTER_COUNT = 9
DEFAULT_PLAYOFF_WEEKS = (15, 16, 17)
DEFAULT_ROSTER_SLOTS: Mapping[str, int] = MappingProxyType(
    {"QB": 1, "RB": 2, "WR": 2, "TE": 1, "FLEX": 1, "DEF": 1, "K": 1, "Bench": 6}
)

_DEFAULT_INJURIES = {
    "Josh Allen": "Q",
    "Lamar Jackson": "O",
    "Patrick Mahomes": "Probable",
    "Jalen Hurts": "Q",
    "C.J. Stroud": "IR",
    "Deebo Samuel": "Q",
    "T.J. Hockenson": "IR",
    "Mark Andrews": "IR",
}

# Average remaining-schedule rank per team/position; lower means an easier slate.
_DEFAULT_SOS = {
    "QB": {
        "BAL": 8, "BUF": 6, "KC": 6, "MIA": 6, "PHI": 6, "SF": 6, "DET": 6,
        "CIN": 12, "DEN": 14, "LV": 14, "NE": 14, "WAS": 14, "CAR": 14, "NYG": 14,
    },
    "RB": {
        "BAL": 12, "BUF": 14, "KC": 12, "MIA": 12, "SF": 12, "DET": 12,
        "CIN": 16, "DEN": 20, "LV": 20, "NE": 20, "WAS": 20, "CAR": 20, "NYG": 20,
    },
    "WR": {
        "BAL": 15, "BUF": 18, "KC": 16, "MIA": 16, "SF": 16, "DET": 16,
        "CIN": 20, "DEN": 24, "LV": 24, "NE": 24, "WAS": 24, "CAR": 24, "NYG": 24,
    },
    "TE": {
        "BAL": 10, "BUF": 8, "KC": 8, "MIA": 8, "SF": 8, "DET": 8,
        "CIN": 12, "DEN": 16, "LV": 16, "NE": 16, "WAS": 16, "CAR": 16, "NYG": 16,
    },
}


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Reference config not found at {path}")
    raw = yaml.safe_load(path.read_text())
    return raw or {}


def normalize_injury_status(status: Optional[str]) -> Optional[str]:
    if status is None:
        return None
    cleaned = str(status).strip()
    if not cleaned:
        return None
    if cleaned in INJURY_MULTIPLIERS:
        return cleaned
    return INJURY_ALIASES.get(cleaned.upper().replace(" ", ""), cleaned)


def _parse_sos(raw: Mapping[str, object]) -> Dict[Tuple[str, str], int]:
    """Accept either ``TEAM_POS: rank`` entries or nested ``POS: {TEAM: rank}`` blocks."""

    ranks: Dict[Tuple[str, str], int] = {}
    for key, value in raw.items():
        if isinstance(value, Mapping):
            position = str(key).upper()
            for team, rank in value.items():
                ranks[(str(team).upper(), position)] = int(rank)
            continue
        team, sep, position = str(key).rpartition("_")
        if not sep or not team:
            raise ValueError(f"SOS key {key!r} must look like TEAM_POSITION")
        ranks[(team.upper(), position.upper())] = int(value)
    return ranks


@dataclass(frozen=True)
class SosScore:
    label: str
    adjustment: float


@dataclass(frozen=True)
class ReferenceData:
    """Read-only injury and schedule-strength lookups injected into the pipeline."""

    injuries: Mapping[str, str] = field(default_factory=dict)
    sos_ranks: Mapping[Tuple[str, str], int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        injuries: Dict[str, str] = {}
        for name, status in self.injuries.items():
            normalized = normalize_injury_status(status)
            if normalized:
                injuries[str(name)] = normalized
        object.__setattr__(self, "injuries", MappingProxyType(injuries))
        object.__setattr__(self, "sos_ranks", MappingProxyType(dict(self.sos_ranks)))

    @classmethod
    def default(cls) -> "ReferenceData":
        return cls(injuries=dict(_DEFAULT_INJURIES), sos_ranks=_parse_sos(_DEFAULT_SOS))

    @classmethod
    def load(cls, path: Path) -> "ReferenceData":
        raw = _load_yaml(path)
        return cls(injuries=raw.get("injuries") or {}, sos_ranks=_parse_sos(raw.get("sos") or {}))

    def injury_status(self, player_name: str) -> Optional[str]:
        return self.injuries.get(player_name)

    @staticmethod
    def injury_multiplier(status: Optional[str]) -> float:
        normalized = normalize_injury_status(status)
        if normalized is None:
            return 1.0
        return INJURY_MULTIPLIERS.get(normalized, 1.0)

    def sos_rank(self, team: str, position: str) -> Optional[int]:
        return self.sos_ranks.get((str(team).upper(), str(position).upper()))

    def sos_score(self, team: str, position: str) -> SosScore:
        rank = self.sos_rank(team, position)
        if not rank:
            return SosScore(SOS_MEDIUM, 0.0)
        if rank <= SOS_EASY_THRESHOLD:
            return SosScore(SOS_EASY, SOS_EASY_BONUS)
        if rank >= SOS_HARD_THRESHOLD:
            return SosScore(SOS_HARD, -SOS_HARD_PENALTY)
        return SosScore(SOS_MEDIUM, 0.0)

    def weekly_sos_label(self, team: str, position: str, week: int) -> str:
        """Four-level matchup label used by the week-by-week analyzers.

        Ranks are season-long today, so ``week`` does not change the answer yet.
        """

        rank = self.sos_rank(team, position)
        if not rank:
            return SOS_MEDIUM
        if rank <= SOS_EASY_THRESHOLD:
            return SOS_EASY
        if rank < SOS_HARD_THRESHOLD:
            return SOS_MEDIUM
        if rank < SOS_VERY_HARD_THRESHOLD:
            return SOS_HARD
        return SOS_VERY_HARD


@dataclass(frozen=True)
class LeagueConfig:
    season: Optional[int] = None
    starter_count: int = DEFAULT_STARTER_COUNT
    playoff_weeks: Tuple[int, ...] = DEFAULT_PLAYOFF_WEEKS
    roster_slots: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_ROSTER_SLOTS))
    )

    @classmethod
    def load(cls, path: Path) -> "LeagueConfig":
        raw = _load_yaml(path)

        season = raw.get("season")
        starter_count = int(raw.get("starter_count", DEFAULT_STARTER_COUNT))
        if starter_count < 0:
            raise ValueError("starter_count must be >= 0")

        playoff_weeks = tuple(int(week) for week in raw.get("playoff_weeks") or DEFAULT_PLAYOFF_WEEKS)
        for week in playoff_weeks:
            if not 1 <= week <= 18:
                raise ValueError(f"playoff week {week} is outside 1-18")

        roster_slots = {str(slot): int(count) for slot, count in (raw.get("roster_slots") or {}).items()}

        return cls(
            season=int(season) if season is not None else None,
            starter_count=starter_count,
            playoff_weeks=playoff_weeks,
            roster_slots=MappingProxyType(roster_slots or dict(DEFAULT_ROSTER_SLOTS)),
        )
