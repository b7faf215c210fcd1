"""Combat events and event types.

This module defines all events that the combat engine and the run manager
publish on the event bus.

Event Design Principles:
- Events are immutable dataclasses
- All events carry the encounter turn they were emitted on (0 outside combat)
- Events use proper enums instead of magic strings
- Events are published only after the state they describe is committed
"""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING
from abc import ABC
from enum import Enum, auto

from ..data import BattleSide, BuildingKind, CardKind, EncounterOutcome, StatusType, StepKind

if TYPE_CHECKING:
    from ...game.managers.log_manager import LogLevel


class EventType(Enum):
    """Types of events that managers can subscribe to."""
    # Encounter lifecycle
    ENCOUNTER_STARTED = auto()
    TURN_STARTED = auto()
    ENCOUNTER_ENDED = auto()

    # Combat resolution
    INTENT_TELEGRAPHED = auto()
    CARD_PLAYED = auto()
    ENEMY_ACTED = auto()
    STATUS_TICKED = auto()

    # Run progression
    RUN_STARTED = auto()
    FLOOR_ADVANCED = auto()
    REWARD_CLAIMED = auto()
    RUN_ENDED = auto()

    # Castle economy
    DAY_PASSED = auto()
    CASTLE_ORDER_PLACED = auto()

    # Logging
    LOG_MESSAGE = auto()
    DEBUG_MESSAGE = auto()
    LOG_SAVE_REQUESTED = auto()


@dataclass(frozen=True)
class CombatEvent(ABC):
    """Base class for all events."""
    turn: int
    event_type: EventType = field(init=False)


@dataclass(frozen=True)
class EncounterStarted(CombatEvent):
    """Event emitted when a new encounter has been set up."""
    encounter_id: str
    enemy_id: str
    floor: int

    def __post_init__(self):
        # Set event_type since dataclass frozen=True prevents normal assignment
        object.__setattr__(self, 'event_type', EventType.ENCOUNTER_STARTED)


@dataclass(frozen=True)
class TurnStarted(CombatEvent):
    """Event emitted when a new player turn begins."""
    encounter_id: str
    action_points: int
    skipped: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.TURN_STARTED)


@dataclass(frozen=True)
class IntentTelegraphed(CombatEvent):
    """Event emitted when the enemy intent for a turn is fixed."""
    encounter_id: str
    kind: StepKind
    block: int
    damage: int
    hits: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.INTENT_TELEGRAPHED)


@dataclass(frozen=True)
class CardPlayed(CombatEvent):
    """Event emitted when a card play has been resolved."""
    encounter_id: str
    card_id: str
    kind: CardKind
    cost: int
    damage_dealt: int = 0
    block_gained: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.CARD_PLAYED)


@dataclass(frozen=True)
class EnemyActed(CombatEvent):
    """Event emitted when the telegraphed intent has been executed."""
    encounter_id: str
    kind: StepKind
    damage_dealt: int
    damage_blocked: int
    block_gained: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ENEMY_ACTED)


@dataclass(frozen=True)
class StatusTicked(CombatEvent):
    """Event emitted when a status is processed at turn start."""
    side: BattleSide
    status: StatusType
    remaining: int
    damage: int = 0

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.STATUS_TICKED)


@dataclass(frozen=True)
class EncounterEnded(CombatEvent):
    """Event emitted when an encounter reaches a terminal phase."""
    encounter_id: str
    outcome: EncounterOutcome

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.ENCOUNTER_ENDED)


# Run Events


@dataclass(frozen=True)
class RunStarted(CombatEvent):
    """Event emitted when a new tower run begins."""
    floor: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.RUN_STARTED)


@dataclass(frozen=True)
class FloorAdvanced(CombatEvent):
    """Event emitted when the run moves up a floor."""
    floor: int
    best_floor: int
    gold: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.FLOOR_ADVANCED)


@dataclass(frozen=True)
class RewardClaimed(CombatEvent):
    """Event emitted when a card reward is claimed."""
    kind: CardKind
    new_level: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.REWARD_CLAIMED)


@dataclass(frozen=True)
class RunEnded(CombatEvent):
    """Event emitted when a run terminates."""
    floor: int
    reason: str  # "defeat", "abandoned", "quit"

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.RUN_ENDED)


# Castle Events


@dataclass(frozen=True)
class DayPassed(CombatEvent):
    """Event emitted after a day's income is collected."""
    day: int
    income: int
    gold: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DAY_PASSED)


@dataclass(frozen=True)
class CastleOrderPlaced(CombatEvent):
    """Event emitted when a build or upgrade is paid for."""
    tile: int
    kind: BuildingKind
    target_level: int
    cost: int
    gold: int

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.CASTLE_ORDER_PLACED)


# Logging Events


@dataclass(frozen=True)
class LogMessage(CombatEvent):
    """Event emitted when a log message is created."""
    message: str
    category: str
    level: "LogLevel"
    source: str

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_MESSAGE)


@dataclass(frozen=True)
class DebugMessage(CombatEvent):
    """Event emitted for debug-specific messages."""
    message: str
    source: str
    context: Optional[dict] = None

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.DEBUG_MESSAGE)


@dataclass(frozen=True)
class LogSaveRequested(CombatEvent):
    """Event emitted when the log should be written to a file."""

    def __post_init__(self):
        object.__setattr__(self, 'event_type', EventType.LOG_SAVE_REQUESTED)
