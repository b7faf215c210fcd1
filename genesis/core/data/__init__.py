"""Core data definitions.

This package contains the enums shared by every layer of the engine:
- game_enums.py: Sides, statuses, card kinds, step kinds, encounter phases
  and castle tiles
"""

from .game_enums import (
    BattleSide,
    StatusType,
    CardKind,
    EnemyRole,
    StepKind,
    LogKind,
    EncounterPhase,
    EncounterOutcome,
    RoomKind,
    BuildingKind,
    TileStatus,
    TERMINAL_PHASES,
    PHASE_OUTCOMES,
    SIDE_LABELS,
    STATUS_NAMES,
    ROOM_TITLES,
)

__all__ = [
    "BattleSide",
    "StatusType",
    "CardKind",
    "EnemyRole",
    "StepKind",
    "LogKind",
    "EncounterPhase",
    "EncounterOutcome",
    "RoomKind",
    "BuildingKind",
    "TileStatus",
    "TERMINAL_PHASES",
    "PHASE_OUTCOMES",
    "SIDE_LABELS",
    "STATUS_NAMES",
    "ROOM_TITLES",
]
