"""Event system for publisher-subscriber communication.

This package contains the complete event-driven architecture:
- event_manager.py: Publisher-subscriber event routing and coordination
- events.py: Event definitions for combat, run and castle communication
"""

from .event_manager import EventManager, EventPriority, QueuedEvent, SubscriberFailure
from .events import (
    CombatEvent,
    EventType,
    EncounterStarted,
    TurnStarted,
    IntentTelegraphed,
    CardPlayed,
    EnemyActed,
    StatusTicked,
    EncounterEnded,
    RunStarted,
    FloorAdvanced,
    RewardClaimed,
    RunEnded,
    DayPassed,
    CastleOrderPlaced,
    LogMessage,
    DebugMessage,
    LogSaveRequested,
)

__all__ = [
    "EventManager",
    "EventPriority",
    "QueuedEvent",
    "SubscriberFailure",
    "CombatEvent",
    "EventType",
    "EncounterStarted",
    "TurnStarted",
    "IntentTelegraphed",
    "CardPlayed",
    "EnemyActed",
    "StatusTicked",
    "EncounterEnded",
    "RunStarted",
    "FloorAdvanced",
    "RewardClaimed",
    "RunEnded",
    "DayPassed",
    "CastleOrderPlaced",
    "LogMessage",
    "DebugMessage",
    "LogSaveRequested",
]
