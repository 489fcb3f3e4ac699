"""What-if roster simulation: apply moves and compare projected totals."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Iterable, List, Mapping, Optional, Sequence

from .adjustments import PlayerProjection, ProjectionPipeline
from .lineup import select_optimal_lineup
from .reference import DEFAULT_STARTER_COUNT
from .roster import project_roster, total_projection

LOGGER = logging.getLogger(__name__)

MODE_DRAFT = "draft"
MODE_LINEUP = "lineup"
MODE_WAIVER = "waiver"
SIMULATION_MODES = (MODE_DRAFT, MODE_LINEUP, MODE_WAIVER)

ACTION_ADD = "add"
ACTION_REMOVE = "remove"
ACTION_SWAP = "swap"
MOVE_ACTIONS = (ACTION_ADD, ACTION_REMOVE, ACTION_SWAP)


@dataclass(frozen=True)
class SimulationMove:
    action: str
    player_id: str
    target_slot: Optional[str] = None
    swap_with_player_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.action not in MOVE_ACTIONS:
            raise ValueError(f"Unknown move action {self.action!r}; expected one of {', '.join(MOVE_ACTIONS)}")
        if not self.player_id:
            raise ValueError("Simulation moves require a player identifier")
        if self.action == ACTION_SWAP and not self.swap_with_player_id:
            raise ValueError("Swap moves require swap_with_player_id")

    @classmethod
    def add(cls, player_id: str, target_slot: Optional[str] = None) -> "SimulationMove":
        return cls(ACTION_ADD, player_id, target_slot=target_slot)

    @classmethod
    def remove(cls, player_id: str) -> "SimulationMove":
        return cls(ACTION_REMOVE, player_id)

    @classmethod
    def swap(cls, player_id: str, swap_with_player_id: str) -> "SimulationMove":
        return cls(ACTION_SWAP, player_id, swap_with_player_id=swap_with_player_id)

    @classmethod
    def parse(cls, text: str) -> "SimulationMove":
        """Parse ``add:ID[:SLOT]``, ``remove:ID`` or ``swap:ID:WITH``."""

        action, _, rest = text.partition(":")
        action = action.strip().lower()
        parts = [part.strip() for part in rest.split(":")] if rest else []
        if not parts or not parts[0]:
            raise ValueError(f"Move {text!r} is missing a player identifier")
        if action == ACTION_ADD:
            return cls.add(parts[0], parts[1] if len(parts) > 1 and parts[1] else None)
        if action == ACTION_REMOVE:
            return cls.remove(parts[0])
        if action == ACTION_SWAP:
            if len(parts) < 2 or not parts[1]:
                raise ValueError(f"Swap move {text!r} needs two identifiers")
            return cls.swap(parts[0], parts[1])
        raise ValueError(f"Unknown move action {action!r}")

    @classmethod
    def from_dict(cls, payload: Mapping[str, object]) -> "SimulationMove":
        player = payload.get("player_id") or payload.get("player_name")
        return cls(
            action=str(payload.get("action", "")),
            player_id=str(player) if player else "",
            target_slot=str(payload["target_slot"]) if payload.get("target_slot") else None,
            swap_with_player_id=(
                str(payload["swap_with_player_id"]) if payload.get("swap_with_player_id") else None
            ),
        )


@dataclass
class PlayerImpact:
    player_id: Optional[str]
    player_name: str
    position: str
    team: str
    projection: float
    change: float
    injury_status: Optional[str] = None
    sos_score: Optional[str] = None
    trend: Optional[str] = None

    @classmethod
    def from_projection(cls, player: PlayerProjection, *, projection: float, change: float) -> "PlayerImpact":
        return cls(
            player_id=player.player_id,
            player_name=player.name,
            position=player.position,
            team=player.team,
            projection=projection,
            change=change,
            injury_status=player.injury_status,
            sos_score=player.sos_label,
            trend=player.trend,
        )


@dataclass
class SimulationResult:
    baseline_projection: float
    new_projection: float
    difference: float
    player_impacts: List[PlayerImpact]
    slot_warnings: Optional[List[str]] = None
    optimal_projection: Optional[float] = None
    optimal_lineup: Optional[List[PlayerImpact]] = None
    new_roster: Optional[List[str]] = None

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


def _apply_add(
    roster: List[str],
    move: SimulationMove,
    roster_slots: Optional[Mapping[str, int]],
    slot_warnings: Optional[List[str]],
) -> None:
    roster.append(move.player_id)
    if slot_warnings is None or not roster_slots or not move.target_slot:
        return
    # Counts the whole roster against the slot; player positions are not checked.
    count = len(roster)
    limit = int(roster_slots.get(move.target_slot, 0) or 0)
    if count > limit:
        slot_warnings.append(f"+{count - limit} over slot limit for {move.target_slot}")


def _apply_lineup_swap(roster: List[str], move: SimulationMove) -> None:
    if move.player_id in roster and move.swap_with_player_id in roster:
        first = roster.index(move.player_id)
        second = roster.index(move.swap_with_player_id)
        roster[first], roster[second] = roster[second], roster[first]


def _apply_waiver_swap(roster: List[str], move: SimulationMove) -> List[str]:
    updated = [entry for entry in roster if entry != move.swap_with_player_id]
    updated.append(move.player_id)
    return updated


def apply_moves(
    mode: str,
    roster: Sequence[str],
    moves: Iterable[SimulationMove],
    roster_slots: Optional[Mapping[str, int]] = None,
    slot_warnings: Optional[List[str]] = None,
) -> List[str]:
    """Apply moves in order and return the resulting roster.

    ``remove`` filters in every mode. ``add`` only applies in draft mode.
    ``swap`` exchanges list positions in lineup mode, means "drop swap_with,
    add player" in waiver mode and is ignored in draft mode. Slot warnings
    are only collected in draft mode.
    """

    if mode not in SIMULATION_MODES:
        raise ValueError(f"Unknown simulation mode {mode!r}; expected one of {', '.join(SIMULATION_MODES)}")

    updated = list(roster)
    for move in moves:
        if move.action == ACTION_ADD:
            if mode == MODE_DRAFT:
                _apply_add(updated, move, roster_slots, slot_warnings)
            else:
                LOGGER.debug("Ignoring add of %s in %s mode", move.player_id, mode)
        elif move.action == ACTION_REMOVE:
            updated = [entry for entry in updated if entry != move.player_id]
        elif mode == MODE_LINEUP:
            _apply_lineup_swap(updated, move)
        elif mode == MODE_WAIVER:
            updated = _apply_waiver_swap(updated, move)
        else:
            LOGGER.debug("Ignoring swap %s <-> %s in %s mode", move.player_id, move.swap_with_player_id, mode)
    return updated


def calculate_player_impacts(
    baseline_players: Sequence[PlayerProjection],
    new_players: Sequence[PlayerProjection],
) -> List[PlayerImpact]:
    impacts: List[PlayerImpact] = []

    baseline_by_id = {}
    for player in baseline_players:
        baseline_by_id.setdefault(player.player_id, player)

    for player in new_players:
        baseline = baseline_by_id.get(player.player_id)
        change = player.final_projection - baseline.final_projection if baseline else player.final_projection
        impacts.append(PlayerImpact.from_projection(player, projection=player.final_projection, change=change))

    remaining_ids = {player.player_id for player in new_players}
    for player in baseline_players:
        if player.player_id not in remaining_ids:
            impacts.append(PlayerImpact.from_projection(player, projection=0.0, change=-player.final_projection))

    return impacts


def simulate(
    pipeline: ProjectionPipeline,
    mode: str,
    current_roster: Sequence[str],
    moves: Sequence[SimulationMove],
    roster_slots: Optional[Mapping[str, int]] = None,
    *,
    season: int,
    include_injuries: bool = True,
    starter_count: int = DEFAULT_STARTER_COUNT,
) -> SimulationResult:
    baseline_players = project_roster(pipeline, current_roster, season, include_injuries)
    baseline_projection = total_projection(baseline_players)

    slot_warnings: List[str] = []
    new_roster = apply_moves(mode, current_roster, moves, roster_slots, slot_warnings)

    optimal_projection: Optional[float] = None
    optimal_lineup: Optional[List[PlayerImpact]] = None
    if mode == MODE_LINEUP:
        lineup = select_optimal_lineup(
            project_roster(pipeline, new_roster, season, include_injuries), starter_count
        )
        optimal_projection = total_projection(lineup)
        optimal_lineup = [
            PlayerImpact.from_projection(player, projection=player.final_projection, change=0.0)
            for player in lineup
        ]

    new_players = project_roster(pipeline, new_roster, season, include_injuries)
    new_projection = total_projection(new_players)

    LOGGER.info(
        "Simulated %d %s move(s): %.2f -> %.2f", len(moves), mode, baseline_projection, new_projection
    )

    return SimulationResult(
        baseline_projection=baseline_projection,
        new_projection=new_projection,
        difference=new_projection - baseline_projection,
        player_impacts=calculate_player_impacts(baseline_players, new_players),
        slot_warnings=slot_warnings or None,
        optimal_projection=optimal_projection,
        optimal_lineup=optimal_lineup,
        new_roster=new_roster,
    )
