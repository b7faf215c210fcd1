"""Battle state management.

This module defines :class:`BattleState`, the mutable combat snapshot owned by
one encounter, together with the smaller dataclasses it is built from: the
per-side hit point/block/status record, the action cards in hand and the
append-only combat log.

The combat resolver never mutates a state it was handed. It works on a deep
copy (see :meth:`BattleState.clone`) and returns the copy, so a rejected or
failed action leaves the caller's state untouched.
"""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from ..data import (
    BattleSide,
    CardKind,
    EncounterOutcome,
    EncounterPhase,
    LogKind,
    PHASE_OUTCOMES,
    StatusType,
)

if TYPE_CHECKING:
    from ...game.content.enemy_catalog import ResolvedStep


SEPARATOR_TEXT = "__DIVIDER__"


def new_identifier() -> str:
    """Opaque unique identifier for cards, log entries and encounters."""
    return uuid.uuid4().hex


@dataclass
class StatusInstance:
    """A stack of one status type on a battle side.

    ``fresh_stacks`` counts the stacks applied during the enemy's action; only
    those are exempt from the decay at the end of that same round.
    """

    type: StatusType
    stacks: int
    fresh_stacks: int = 0


@dataclass
class SideState:
    """Hit points, block and statuses of one battle side."""

    side: BattleSide
    hp: int
    max_hp: int
    block: int = 0
    statuses: list[StatusInstance] = field(default_factory=list)

    @property
    def is_defeated(self) -> bool:
        return self.hp <= 0

    def get_status(self, status_type: StatusType) -> Optional[StatusInstance]:
        for status in self.statuses:
            if status.type == status_type:
                return status
        return None

    def status_stacks(self) -> dict[StatusType, int]:
        """Snapshot of current stacks keyed by type."""
        return {status.type: status.stacks for status in self.statuses}


@dataclass(frozen=True)
class ActionCard:
    """A card instance in hand. Identity is per instance, not per kind."""

    kind: CardKind
    cost: int
    card_id: str = field(default_factory=new_identifier)


@dataclass(frozen=True)
class CombatLogEntry:
    """One line of the player-facing combat log."""

    text: str
    kind: LogKind
    entry_id: str = field(default_factory=new_identifier)

    @classmethod
    def player(cls, message: str) -> "CombatLogEntry":
        return cls(text=f"[PLAYER] {message}", kind=LogKind.PLAYER)

    @classmethod
    def enemy(cls, message: str) -> "CombatLogEntry":
        # Enemy lines are attributed to the system, not to the player
        return cls(text=f"[ENEMY] {message}", kind=LogKind.SYSTEM)

    @classmethod
    def system(cls, message: str) -> "CombatLogEntry":
        return cls(text=f"[SYSTEM] {message}", kind=LogKind.SYSTEM)

    @classmethod
    def separator(cls) -> "CombatLogEntry":
        return cls(text=SEPARATOR_TEXT, kind=LogKind.SEPARATOR)

    @property
    def is_separator(self) -> bool:
        return self.kind == LogKind.SEPARATOR


@dataclass
class TurnStartOutcome:
    """Result of turn-start status processing for one side. Not persisted."""

    skipped: bool = False
    log_lines: list[str] = field(default_factory=list)
    # (status, stacks remaining, damage dealt) per processed status
    ticks: list[tuple[StatusType, int, int]] = field(default_factory=list)


@dataclass
class BattleState:
    """Mutable combat snapshot of one encounter."""

    encounter_id: str
    floor: int
    enemy_id: str
    enemy_name: str
    player: SideState
    enemy: SideState
    action_points: int
    x_value: int
    intent: "ResolvedStep"
    turn: int = 1
    phase: EncounterPhase = EncounterPhase.AWAITING_INTENT_TELEGRAPH
    hand: list[ActionCard] = field(default_factory=list)
    card_levels: dict[CardKind, int] = field(default_factory=dict)
    player_skip_turn: bool = False
    log: list[CombatLogEntry] = field(default_factory=list)
    seed: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return self.phase.is_terminal

    @property
    def outcome(self) -> Optional[EncounterOutcome]:
        """Final outcome once the encounter is terminal, else None."""
        return PHASE_OUTCOMES.get(self.phase)

    def side(self, side: BattleSide) -> SideState:
        return self.player if side == BattleSide.PLAYER else self.enemy

    def opponent(self, side: BattleSide) -> SideState:
        return self.enemy if side == BattleSide.PLAYER else self.player

    def find_card(self, card_id: str) -> Optional[ActionCard]:
        for card in self.hand:
            if card.card_id == card_id:
                return card
        return None

    def card_level(self, kind: CardKind) -> int:
        return self.card_levels.get(kind, 1)

    def push_log(self, entry: CombatLogEntry) -> None:
        self.log.append(entry)

    def clone(self) -> "BattleState":
        """Deep copy used as the working state of every resolver operation."""
        return copy.deepcopy(self)
