from __future__ import annotations

import logging
from typing import Iterable, List

from .adjustments import PlayerProjection, ProjectionPipeline

LOGGER = logging.getLogger(__name__)


def project_roster(
    pipeline: ProjectionPipeline,
    entries: Iterable[str],
    season: int,
    include_injuries: bool = True,
) -> List[PlayerProjection]:
    """Resolve roster identifiers and return adjusted projections in roster order.

    Identifiers are resolved in a single store query (id first, then exact
    name). Unresolved identifiers are dropped. A failure while projecting one
    entry is logged and that entry omitted; the rest of the roster still
    projects.

    ``base_projection`` is the player's best single-week total for the season,
    not a per-game average.
    """

    identifiers = [str(entry) for entry in entries]
    if not identifiers:
        return []

    resolved = pipeline.store.resolve_players(identifiers, season)

    projections: List[PlayerProjection] = []
    for identifier in identifiers:
        record = resolved.get(identifier)
        if record is None:
            LOGGER.debug("Roster entry %r did not match any player", identifier)
            continue
        try:
            projection = pipeline.enhance_projection(
                record.name,
                record.position,
                record.team,
                record.total_points,
                season,
                include_injuries,
                player_id=record.player_id,
            )
        except Exception as exc:
            LOGGER.warning("Omitting roster entry %r: %s", identifier, exc)
            continue
        projections.append(projection)

    LOGGER.info(
        "Projected %d of %d roster entries for season %s", len(projections), len(identifiers), season
    )
    return projections


def total_projection(projections: Iterable[PlayerProjection]) -> float:
    return sum(player.final_projection for player in projections)
