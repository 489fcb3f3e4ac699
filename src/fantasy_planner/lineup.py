from __future__ import annotations

from typing import List, Sequence

from .adjustments import PlayerProjection
from .reference import DEFAULT_STARTER_COUNT


def select_optimal_lineup(
    projected_roster: Sequence[PlayerProjection],
    starter_count: int = DEFAULT_STARTER_COUNT,
) -> List[PlayerProjection]:
    """Top ``starter_count`` players by final projection.

    Ties keep roster order. Slot eligibility (QB/RB/WR/TE/FLEX) is ignored, so
    the result is a ceiling estimate rather than a legal lineup.
    """

    if starter_count < 0:
        raise ValueError("starter_count must be >= 0")
    ranked = sorted(projected_roster, key=lambda player: player.final_projection, reverse=True)
    return ranked[:starter_count]
