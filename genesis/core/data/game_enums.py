"""Centralized combat enums and constants.

This module contains all core enums that are shared between the combat engine,
the content catalogs and the run manager, providing a single source of truth.
"""

from enum import Enum, auto


class BattleSide(Enum):
    """The two sides of an encounter."""
    PLAYER = "player"
    ENEMY = "enemy"


class StatusType(Enum):
    """Stackable status effects attached to a battle side."""
    BLEED = "bleed"            # Damage at turn start, decays by a fixed amount
    WEAK = "weak"              # Outgoing weapon damage reduced
    VULNERABLE = "vulnerable"  # Incoming weapon damage increased
    STUN = "stun"              # Side skips its next action


class CardKind(Enum):
    """Kinds of action cards the player can play."""
    STRONG_ATTACK = "strong_attack"
    DOUBLE_ATTACK = "double_attack"
    DEFEND = "defend"
    COUNTER = "counter"
    BLEED = "bleed"
    WEAKEN = "weaken"
    STUN = "stun"


class EnemyRole(Enum):
    """Descriptive enemy role tag (not consumed by combat math)."""
    DAMAGE = "damage"
    DEFENSE = "defense"
    COUNTER = "counter"
    MULTI_HIT = "multi_hit"


class StepKind(Enum):
    """Kinds of enemy pattern steps."""
    ATTACK = "attack"
    BLOCK = "block"
    BLOCK_AND_ATTACK = "block_and_attack"
    MULTI_HIT_ATTACK = "multi_hit_attack"


class LogKind(Enum):
    """Attribution tag of a combat log entry."""
    PLAYER = auto()
    SYSTEM = auto()
    SEPARATOR = auto()


class EncounterPhase(Enum):
    """Phases of the turn resolution state machine."""
    AWAITING_INTENT_TELEGRAPH = auto()
    AWAITING_PLAYER_ACTION = auto()
    RESOLVING_PLAYER_ACTION = auto()
    RESOLVING_ENEMY_ACTION = auto()
    CHECKING_END = auto()

    # Terminal phases
    VICTORY = auto()
    DEFEAT = auto()
    ABANDONED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_PHASES


class EncounterOutcome(Enum):
    """Final result of an encounter, handed to the run manager."""
    VICTORY = "victory"
    DEFEAT = "defeat"
    ABANDONED = "abandoned"


class RoomKind(Enum):
    """Kinds of tower rooms offered between floors."""
    COMBAT = "combat"
    CHEST = "chest"


class BuildingKind(Enum):
    """Castle buildings that produce daily gold."""
    MINE = "mine"
    FARM = "farm"


class TileStatus(Enum):
    """Construction state of a castle tile."""
    EMPTY = auto()
    CONSTRUCTING = auto()  # Becomes a level 1 building on the next day
    BUILT = auto()
    UPGRADING = auto()     # Gains one level on the next day


TERMINAL_PHASES = frozenset({
    EncounterPhase.VICTORY,
    EncounterPhase.DEFEAT,
    EncounterPhase.ABANDONED,
})

PHASE_OUTCOMES = {
    EncounterPhase.VICTORY: EncounterOutcome.VICTORY,
    EncounterPhase.DEFEAT: EncounterOutcome.DEFEAT,
    EncounterPhase.ABANDONED: EncounterOutcome.ABANDONED,
}

# Convenience mappings for log lines and display
SIDE_LABELS = {
    BattleSide.PLAYER: "Player",
    BattleSide.ENEMY: "Enemy",
}

STATUS_NAMES = {
    StatusType.BLEED: "Bleed",
    StatusType.WEAK: "Weak",
    StatusType.VULNERABLE: "Vulnerable",
    StatusType.STUN: "Stun",
}

ROOM_TITLES = {
    RoomKind.COMBAT: "Battle",
    RoomKind.CHEST: "Chest",
}
