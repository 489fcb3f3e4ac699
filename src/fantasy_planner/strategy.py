from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Sequence

from .adjustments import PlayerProjection, ProjectionPipeline
from .reference import SOS_EASY, SOS_HARD, SOS_VERY_HARD
from .roster import project_roster

LOGGER = logging.getLogger(__name__)

HARD_MATCHUP_PENALTY = 5.0
SUGGESTION_POOL_SIZE = 50
MAX_SUGGESTIONS = 3
EASY_WEEK_SHARE = 0.5


@dataclass
class PlayoffIssue:
    position: str
    issue: str
    suggestion: str
    affected_players: List[str] = field(default_factory=list)
    playoff_weeks: List[int] = field(default_factory=list)
    projected_impact: float = 0.0
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def playoff_suggestions(
    pipeline: ProjectionPipeline,
    position: str,
    playoff_weeks: Sequence[int],
    *,
    season: int,
    exclude: Sequence[str] = (),
) -> List[str]:
    """Unrostered players at ``position`` with Easy matchups in at least half the playoff weeks."""

    suggestions: List[str] = []
    candidates = pipeline.store.top_players(
        season, position=position, exclude=exclude, limit=SUGGESTION_POOL_SIZE
    )
    for candidate in candidates:
        easy_weeks = sum(
            1
            for week in playoff_weeks
            if pipeline.reference.weekly_sos_label(candidate.team, position, week) == SOS_EASY
        )
        if easy_weeks >= len(playoff_weeks) * EASY_WEEK_SHARE:
            suggestions.append(f"{candidate.name} ({candidate.team}) - Easy playoff schedule")
            if len(suggestions) >= MAX_SUGGESTIONS:
                break
    return suggestions


def get_season_strategy(
    pipeline: ProjectionPipeline,
    roster: Sequence[str],
    starters: Sequence[str],
    playoff_weeks: Sequence[int],
    include_injuries: bool = True,
    *,
    season: int,
) -> List[PlayoffIssue]:
    """Flag starters facing Hard or Very Hard opponents during the playoff weeks."""

    roster_players = project_roster(pipeline, roster, season, include_injuries)
    starter_ids = set(starters)

    starters_by_position: Dict[str, List[PlayerProjection]] = {}
    for player in roster_players:
        if player.player_id in starter_ids or player.name in starter_ids:
            starters_by_position.setdefault(player.position, []).append(player)

    rostered = [player.player_id for player in roster_players if player.player_id] + list(roster)

    issues: List[PlayoffIssue] = []
    for position, players in starters_by_position.items():
        for player in players:
            tough_weeks = [
                week
                for week in playoff_weeks
                if pipeline.reference.weekly_sos_label(player.team, position, week) in (SOS_HARD, SOS_VERY_HARD)
            ]
            if not tough_weeks:
                continue

            suggestions = playoff_suggestions(
                pipeline, position, playoff_weeks, season=season, exclude=rostered
            )
            issues.append(
                PlayoffIssue(
                    position=position,
                    issue=f"Week {', '.join(str(week) for week in tough_weeks)} starter faces tough {position} defense",
                    suggestion=suggestions[0] if suggestions else f"Target {position}s with easier playoff matchups",
                    affected_players=[player.name],
                    playoff_weeks=tough_weeks,
                    projected_impact=-HARD_MATCHUP_PENALTY * len(tough_weeks),
                    suggestions=suggestions,
                )
            )

    LOGGER.info("Season strategy found %d playoff issue(s)", len(issues))
    return issues
