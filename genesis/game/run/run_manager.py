"""
Run management for tower climbs.

The RunManager owns the current RunState and the persistent PlayerMeta. It
turns room selections into encounters or chests, folds terminal encounter
states back into run and meta progression, and places castle orders paid
with meta gold. Combat itself is delegated to the CombatResolver; the manager
only consumes the states it returns.
"""
import random
from typing import TYPE_CHECKING, Optional

from ...core.config import CombatRules
from ...core.data import BuildingKind, CardKind, EncounterOutcome, RoomKind
from ...core.engine.battle_state import BattleState
from ...core.engine.errors import (
    EncounterInProgress,
    EncounterMismatch,
    InvalidReward,
    InvalidRoom,
    NoActiveRun,
    NoPendingReward,
    RoomLocked,
    RunError,
)
from ...core.events import (
    CastleOrderPlaced,
    DayPassed,
    FloorAdvanced,
    LogMessage,
    RewardClaimed,
    RunEnded,
    RunStarted,
)
from ..combat.combat_resolver import CombatResolver
from ..content.artifact_catalog import Artifact, ArtifactCatalog, get_artifact_catalog
from ..managers.log_manager import LogLevel
from .castle import CastleOrder
from .run_state import ChestState, PlayerMeta, RewardState, RunState
from .tower_service import TowerService

if TYPE_CHECKING:
    from ...core.events import EventManager


END_REASONS = {
    EncounterOutcome.DEFEAT: "defeat",
    EncounterOutcome.ABANDONED: "abandoned",
}


class RunManager:
    """Drives a single tower run on top of the combat resolver."""

    def __init__(
        self,
        resolver: CombatResolver,
        event_manager: Optional["EventManager"] = None,
        meta: Optional[PlayerMeta] = None,
        artifact_catalog: Optional[ArtifactCatalog] = None,
        rng: Optional[random.Random] = None,
    ):
        self.resolver = resolver
        self.event_manager = event_manager
        self.meta = meta or PlayerMeta()
        self.artifact_catalog = artifact_catalog or get_artifact_catalog()
        self.rng = rng or random.Random()
        self.tower = TowerService(self.rng)

        self.run: Optional[RunState] = None

    @property
    def rules(self) -> CombatRules:
        return self.resolver.rules

    def _require_run(self, operation: str) -> RunState:
        if self.run is None or self.run.is_over:
            raise NoActiveRun(operation)
        return self.run

    def start_run(self) -> RunState:
        """Begin a new run on floor 1, discarding any previous one."""
        run = RunState()
        run.room_options = self.tower.generate_room_options(run.non_combat_streak)
        self.run = run

        self._publish(RunStarted(turn=0, floor=run.current_floor))
        self._emit_log(f"Run started on floor {run.current_floor}")
        return run

    def income_per_day(self) -> int:
        return self.meta.income_per_day(self.rules.base_income)

    def day_tick(self) -> int:
        """Advance one day, collect income, then finish pending castle work.

        Buildings completed by this tick start paying on the next one.

        Returns:
            Gold earned
        """
        income = self.income_per_day()
        self.meta.days += 1
        self.meta.gold += income
        completed = self.meta.castle.complete_pending()

        self._publish(DayPassed(turn=0, day=self.meta.days, income=income, gold=self.meta.gold))
        self._emit_log(f"Day {self.meta.days}: gold +{income} ({self.meta.gold} total)")
        for tile in completed:
            title = self.meta.castle.catalog.lookup(tile.building).title
            self._emit_log(f"{title} on tile {tile.index} is now level {tile.level}")
        return income

    def build(self, tile_index: int, kind: BuildingKind) -> CastleOrder:
        """
        Pay for a new building on an empty castle tile.

        The building opens on the next day tick. Castle orders do not need an
        active run.

        Raises:
            InvalidTile: If the index is out of range
            TileOccupied: If the tile is not empty
            InsufficientGold: If the building costs more than the gold held
        """
        order = self.meta.castle.build(tile_index, kind, self.meta.gold)
        self._pay(order)
        return order

    def upgrade(self, tile_index: int) -> CastleOrder:
        """
        Pay for the next level of a finished building.

        Raises:
            InvalidTile: If the index is out of range
            TileNotUpgradeable: If the tile holds no finished building below max level
            InsufficientGold: If the upgrade costs more than the gold held
        """
        order = self.meta.castle.upgrade(tile_index, self.meta.gold)
        self._pay(order)
        return order

    def _pay(self, order: CastleOrder) -> None:
        self.meta.gold -= order.cost
        self._publish(CastleOrderPlaced(
            turn=0,
            tile=order.tile,
            kind=order.kind,
            target_level=order.target_level,
            cost=order.cost,
            gold=self.meta.gold,
        ))
        title = self.meta.castle.catalog.lookup(order.kind).title
        self._emit_log(
            f"Ordered {title} level {order.target_level} on tile {order.tile} "
            f"for {order.cost} gold ({self.meta.gold} left)"
        )

    def select_room(self, option_index: int) -> RunState:
        """
        Enter one of the offered rooms.

        Moves up a floor, ticks a day, then starts a battle against a random
        enemy or places a closed chest.

        Raises:
            NoActiveRun: If no run is in progress
            EncounterInProgress: If the current encounter has not ended
            RunError: If a reward or chest is still unclaimed
            InvalidRoom: If the index is out of range
            RoomLocked: If the chosen room is locked
        """
        run = self._require_run("select a room")
        if run.is_busy:
            if run.active_encounter is not None and not run.active_encounter.is_terminal:
                raise EncounterInProgress(run.active_encounter.encounter_id)
            raise RunError("Claim the pending reward before moving on")
        if not 0 <= option_index < len(run.room_options):
            raise InvalidRoom(option_index, len(run.room_options))

        option = run.room_options[option_index]
        if option.is_locked:
            raise RoomLocked(option_index)

        if option.kind == RoomKind.COMBAT:
            run.non_combat_streak = 0
        else:
            run.non_combat_streak += 1

        run.current_floor += 1
        self.day_tick()
        self.meta.best_floor = max(self.meta.best_floor, run.current_floor)
        run.room_options = self.tower.generate_room_options(run.non_combat_streak)
        run.active_encounter = None

        self._publish(FloorAdvanced(
            turn=0,
            floor=run.current_floor,
            best_floor=self.meta.best_floor,
            gold=self.meta.gold,
        ))
        self._emit_log(f"Entered {option.title} on floor {run.current_floor}")

        if option.kind == RoomKind.COMBAT:
            enemy = self.resolver.enemy_catalog.choose(self.rng)
            run.active_encounter = self.resolver.start_encounter(
                enemy.id, run.current_floor, card_levels=dict(run.card_levels)
            )
        else:
            run.chest = ChestState()
        return run

    def open_chest(self) -> Artifact:
        """Reveal the chest's artifact. Opening twice reveals the same one.

        Raises:
            NoPendingReward: If there is no chest
        """
        run = self._require_run("open a chest")
        if run.chest is None:
            raise NoPendingReward("There is no chest to open")
        if not run.chest.is_opened:
            run.chest.revealed = self.artifact_catalog.draw(self.rng)
            run.chest.is_opened = True
        assert run.chest.revealed is not None
        return run.chest.revealed

    def claim_chest(self) -> Artifact:
        """Add the revealed artifact to the meta progression.

        Raises:
            NoPendingReward: If there is no opened chest
        """
        run = self._require_run("claim a chest")
        if run.chest is None or not run.chest.is_opened or run.chest.revealed is None:
            raise NoPendingReward("There is no opened chest to claim")

        artifact = run.chest.revealed
        self.meta.artifacts.append(artifact)
        run.chest = None
        self._emit_log(
            f"{artifact.icon} {artifact.name} added (+{artifact.income_bonus}/day)"
        )
        return artifact

    def conclude_encounter(self, state: BattleState) -> Optional[RewardState]:
        """
        Fold a finished encounter into the run.

        Victory offers a card reward. Defeat and surrender end the run.

        Returns:
            The reward on victory, otherwise None

        Raises:
            NoActiveRun: If no run is in progress
            EncounterMismatch: If the state is not from the open encounter
            EncounterInProgress: If the state is not terminal
        """
        run = self._require_run("conclude an encounter")
        active = run.active_encounter
        if active is None or active.encounter_id != state.encounter_id:
            raise EncounterMismatch(state.encounter_id, active.encounter_id if active else None)
        outcome = state.outcome
        if outcome is None:
            raise EncounterInProgress(state.encounter_id)

        run.active_encounter = None
        if outcome == EncounterOutcome.VICTORY:
            options = self.resolver.card_catalog.draw_reward_options(self.rng, self.rules.reward_options)
            run.pending_reward = RewardState(options=tuple(options))
            self._emit_log(
                f"Victory on floor {run.current_floor}; reward: "
                + ", ".join(kind.value for kind in options)
            )
            return run.pending_reward

        self.end_run(END_REASONS[outcome])
        return None

    def claim_reward(self, kind: CardKind) -> int:
        """
        Upgrade one offered card kind for the rest of the run.

        Returns:
            The card kind's new level

        Raises:
            NoPendingReward: If no reward is waiting
            InvalidReward: If the kind was not offered
        """
        run = self._require_run("claim a reward")
        if run.pending_reward is None:
            raise NoPendingReward("There is no reward to claim")
        if kind not in run.pending_reward.options:
            raise InvalidReward(kind)

        new_level = run.card_level(kind) + 1
        run.card_levels[kind] = new_level
        run.pending_reward = None

        self._publish(RewardClaimed(turn=0, kind=kind, new_level=new_level))
        self._emit_log(f"{kind.value} upgraded to level {new_level}")
        return new_level

    def end_run(self, reason: str = "quit") -> None:
        """Terminate the current run."""
        run = self._require_run("end the run")
        run.is_over = True
        run.end_reason = reason
        run.active_encounter = None
        run.pending_reward = None
        run.chest = None

        self._publish(RunEnded(turn=0, floor=run.current_floor, reason=reason))
        self._emit_log(f"Run ended on floor {run.current_floor} ({reason})")

    def _publish(self, event) -> None:
        if self.event_manager is not None:
            self.event_manager.publish(event, source="RunManager")

    def _emit_log(self, message: str, level: LogLevel = LogLevel.INFO) -> None:
        """Emit a log message event."""
        self._publish(LogMessage(
            turn=0,
            message=message,
            category="RUN",
            level=level,
            source="RunManager",
        ))
