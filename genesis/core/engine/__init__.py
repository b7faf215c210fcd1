"""Core combat engine data.

This package contains the fundamental engine records:
- battle_state.py: BattleState, per-side state, cards and the combat log
- actions.py: Card play validation
- errors.py: Combat, run and castle error taxonomy
"""

from .battle_state import (
    ActionCard,
    BattleState,
    CombatLogEntry,
    SideState,
    StatusInstance,
    TurnStartOutcome,
    SEPARATOR_TEXT,
    new_identifier,
)
from .actions import ActionValidation, validate_card_play, validate_turn_action
from .errors import (
    CombatError,
    InsufficientActionPoints,
    UnknownCard,
    UnknownEnemy,
    EncounterAlreadyTerminal,
    TurnSkipped,
    RunError,
    NoActiveRun,
    RoomLocked,
    InvalidRoom,
    EncounterInProgress,
    NoPendingReward,
    InvalidReward,
    EncounterMismatch,
    CastleError,
    InvalidTile,
    TileOccupied,
    TileNotUpgradeable,
    InsufficientGold,
)

__all__ = [
    "ActionCard",
    "BattleState",
    "CombatLogEntry",
    "SideState",
    "StatusInstance",
    "TurnStartOutcome",
    "SEPARATOR_TEXT",
    "new_identifier",
    "ActionValidation",
    "validate_card_play",
    "validate_turn_action",
    "CombatError",
    "InsufficientActionPoints",
    "UnknownCard",
    "UnknownEnemy",
    "EncounterAlreadyTerminal",
    "TurnSkipped",
    "RunError",
    "NoActiveRun",
    "RoomLocked",
    "InvalidRoom",
    "EncounterInProgress",
    "NoPendingReward",
    "InvalidReward",
    "EncounterMismatch",
    "CastleError",
    "InvalidTile",
    "TileOccupied",
    "TileNotUpgradeable",
    "InsufficientGold",
]
