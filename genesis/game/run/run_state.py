"""Run and meta progression records.

RunState lives for one climb of the tower. PlayerMeta outlives runs and
accumulates days, gold, the best floor reached, collected artifacts and the
castle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ...core.data import CardKind, ROOM_TITLES, RoomKind
from ...core.engine.battle_state import BattleState, new_identifier
from ..content.artifact_catalog import Artifact
from .castle import Castle


@dataclass
class RoomOption:
    """One room offered on the tower screen."""

    kind: RoomKind
    is_locked: bool = False
    option_id: str = field(default_factory=new_identifier)

    @property
    def title(self) -> str:
        return ROOM_TITLES[self.kind]

    @property
    def subtitle(self) -> str:
        if self.kind == RoomKind.CHEST and self.is_locked:
            return "Locked: can't take 3 chests in a row"
        return ""


@dataclass
class ChestState:
    is_opened: bool = False
    revealed: Optional[Artifact] = None


@dataclass(frozen=True)
class RewardState:
    """Card kinds offered after a victory; one may be upgraded."""

    options: tuple[CardKind, ...]
    reward_id: str = field(default_factory=new_identifier)


@dataclass
class PlayerMeta:
    days: int = 0
    gold: int = 0
    best_floor: int = 0
    artifacts: list[Artifact] = field(default_factory=list)
    castle: Castle = field(default_factory=Castle)

    def income_per_day(self, base_income: int) -> int:
        """Base income plus every artifact's bonus plus the castle's buildings."""
        return (
            base_income
            + sum(artifact.income_bonus for artifact in self.artifacts)
            + self.castle.income_per_day()
        )


@dataclass
class RunState:
    current_floor: int = 1
    non_combat_streak: int = 0
    room_options: list[RoomOption] = field(default_factory=list)
    card_levels: dict[CardKind, int] = field(default_factory=dict)
    pending_reward: Optional[RewardState] = None
    active_encounter: Optional[BattleState] = None
    chest: Optional[ChestState] = None
    is_over: bool = False
    end_reason: Optional[str] = None

    def card_level(self, kind: CardKind) -> int:
        return self.card_levels.get(kind, 1)

    @property
    def is_busy(self) -> bool:
        """True while an encounter, reward or chest must be resolved first."""
        return (
            (self.active_encounter is not None and not self.active_encounter.is_terminal)
            or self.pending_reward is not None
            or self.chest is not None
        )
