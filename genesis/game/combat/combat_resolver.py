"""
Combat resolution system for executing turns of an encounter.

This module sequences an encounter: telegraphing the enemy intent, resolving
card plays, running the enemy turn and checking for the end of the fight. The
arithmetic lives in BattleCalculator and the status bookkeeping in
StatusEngine; this class decides what happens when and writes the combat log.

Every public operation deep-copies the state it is given, works on the copy and
returns it. Rejected actions raise before the copy is made, and domain events
are only published once the new state is complete.
"""
import random
from typing import TYPE_CHECKING, Optional

from ...core.config import CombatRules, load_combat_rules
from ...core.data import (
    BattleSide,
    CardKind,
    EncounterPhase,
    SIDE_LABELS,
    STATUS_NAMES,
    StepKind,
)
from ...core.engine.actions import ActionValidation, validate_card_play, validate_turn_action
from ...core.engine.battle_state import (
    BattleState,
    CombatLogEntry,
    SideState,
    TurnStartOutcome,
    new_identifier,
)
from ...core.events import (
    CardPlayed,
    CombatEvent,
    EncounterEnded,
    EncounterStarted,
    EnemyActed,
    IntentTelegraphed,
    LogMessage,
    StatusTicked,
    TurnStarted,
)
from ..content.card_catalog import CardCatalog, get_card_catalog
from ..content.enemy_catalog import EnemyCatalog, EnemyDefinition, ResolvedStep, get_enemy_catalog
from ..managers.log_manager import LogLevel
from .battle_calculator import BattleCalculator, HitResolution
from .pattern_resolver import intent_for_turn
from .scaling import resolve_x
from .status_engine import StatusEngine

if TYPE_CHECKING:
    from ...core.events import EventManager


SEED_RANGE = 2 ** 32

ENEMY_ACTION_TITLES = {
    StepKind.ATTACK: "Attack",
    StepKind.BLOCK: "Defend",
    StepKind.BLOCK_AND_ATTACK: "Counter Stance",
    StepKind.MULTI_HIT_ATTACK: "Flurry",
}


class CombatResolver:
    """Runs the turn resolution state machine of an encounter."""

    def __init__(
        self,
        enemy_catalog: Optional[EnemyCatalog] = None,
        card_catalog: Optional[CardCatalog] = None,
        rules: Optional[CombatRules] = None,
        event_manager: Optional["EventManager"] = None,
        rng: Optional[random.Random] = None,
    ):
        self.enemy_catalog = enemy_catalog or get_enemy_catalog()
        self.card_catalog = card_catalog or get_card_catalog()
        self.rules = rules or load_combat_rules()
        self.event_manager = event_manager
        self.rng = rng or random.Random()
        self.status_engine = StatusEngine(self.rules)

        self._pending: list[CombatEvent] = []

    # Public operations

    def start_encounter(
        self,
        enemy_id: str,
        floor: int,
        card_levels: Optional[dict[CardKind, int]] = None,
        seed: Optional[int] = None,
    ) -> BattleState:
        """
        Set up a new encounter and telegraph the first intent.

        Args:
            enemy_id: Catalog id of the enemy
            floor: Current tower floor (fixed for the whole encounter)
            card_levels: Run card levels; missing kinds are level 1
            seed: Seed for hand draws; a random one is picked when omitted

        Returns:
            BattleState awaiting the player's first action

        Raises:
            UnknownEnemy: If the enemy id is not in the catalog
            ValueError: If the floor is negative or a card level is below 1
        """
        self._pending = []
        enemy = self.enemy_catalog.lookup(enemy_id)
        x_value = resolve_x(floor)

        levels = dict(card_levels or {})
        for kind, level in levels.items():
            if level < 1:
                raise ValueError(f"card level for {kind.value} must be at least 1, got {level}")

        enemy_hp = enemy.max_hp or self.rules.enemy_max_hp
        state = BattleState(
            encounter_id=new_identifier(),
            floor=floor,
            enemy_id=enemy.id,
            enemy_name=enemy.name,
            player=SideState(
                side=BattleSide.PLAYER,
                hp=self.rules.player_max_hp,
                max_hp=self.rules.player_max_hp,
            ),
            enemy=SideState(side=BattleSide.ENEMY, hp=enemy_hp, max_hp=enemy_hp),
            action_points=self.rules.action_points_per_turn,
            x_value=x_value,
            intent=intent_for_turn(enemy, 1, x_value),
            card_levels=levels,
            seed=seed if seed is not None else self.rng.randrange(SEED_RANGE),
        )

        self._queue(EncounterStarted(
            turn=state.turn,
            encounter_id=state.encounter_id,
            enemy_id=enemy.id,
            floor=floor,
        ))
        self._emit_log(state, f"Encounter vs {enemy.name} on floor {floor} (X={x_value})", "SYSTEM")
        self._telegraph(state, enemy, x_value)
        self._begin_player_turn(state)
        return self._commit(state)

    def validate_play(self, state: BattleState, card_id: str) -> ActionValidation:
        """Read-only check of a card play."""
        return validate_card_play(state, card_id)

    def play_card(self, state: BattleState, card_id: str) -> BattleState:
        """
        Resolve one card play.

        Raises:
            EncounterAlreadyTerminal: If the encounter has ended
            UnknownCard: If the card is not in the current hand
            TurnSkipped: If the player is stunned this turn
            InsufficientActionPoints: If the card costs more than the AP left
        """
        validate_card_play(state, card_id).raise_if_invalid()

        self._pending = []
        working = state.clone()
        working.phase = EncounterPhase.RESOLVING_PLAYER_ACTION

        card = working.find_card(card_id)
        assert card is not None
        working.action_points -= card.cost
        working.hand = [c for c in working.hand if c.card_id != card_id]

        definition = self.card_catalog.lookup(card.kind)
        effect = BattleCalculator.card_effect(
            definition.damage_ratio,
            definition.hits,
            definition.block_ratio,
            working.card_level(card.kind),
            self.rules,
        )

        parts: list[str] = []
        dealt = 0
        if effect.block > 0:
            working.player.block += effect.block
            parts.append(f"block +{effect.block}")

        if effect.hits > 0:
            resolution = self._strike(working, BattleSide.PLAYER, effect.damage_per_hit, effect.hits)
            dealt = resolution.hp_damage
            parts.append(f"dmg {resolution.hp_damage} (blocked {resolution.blocked})")

        if definition.status is not None:
            self.status_engine.apply_status(working.enemy, definition.status, definition.status_stacks)
            working.push_log(CombatLogEntry.player(
                f"Player uses {definition.title} → Enemy: "
                f"{STATUS_NAMES[definition.status]} +{definition.status_stacks}"
            ))
        else:
            working.push_log(CombatLogEntry.player(
                f"{definition.title} (-{card.cost} AP): {', '.join(parts)}"
            ))

        self._queue(CardPlayed(
            turn=working.turn,
            encounter_id=working.encounter_id,
            card_id=card.card_id,
            kind=card.kind,
            cost=card.cost,
            damage_dealt=dealt,
            block_gained=effect.block,
        ))
        self._emit_log(working, f"Played {definition.title}, {working.action_points} AP left")

        if working.enemy.is_defeated:
            self._finish(working, EncounterPhase.VICTORY)
        else:
            working.phase = EncounterPhase.AWAITING_PLAYER_ACTION
        return self._commit(working)

    def end_turn(self, state: BattleState) -> BattleState:
        """
        End the player's turn and run the enemy turn and round end.

        Raises:
            EncounterAlreadyTerminal: If the encounter has ended
        """
        validate_turn_action(state).raise_if_invalid()

        self._pending = []
        working = state.clone()
        enemy = self.enemy_catalog.lookup(working.enemy_id)

        working.push_log(CombatLogEntry.player("End turn"))
        working.phase = EncounterPhase.RESOLVING_ENEMY_ACTION

        enemy_start = self.status_engine.consume_turn_start(working.enemy)
        self._record_turn_start(working, BattleSide.ENEMY, enemy_start)
        if working.enemy.is_defeated:
            self._finish(working, EncounterPhase.VICTORY)
            return self._commit(working)

        if not enemy_start.skipped:
            working.push_log(CombatLogEntry.separator())
            self._execute_intent(working, enemy)
            if working.player.is_defeated:
                self._finish(working, EncounterPhase.DEFEAT)
                return self._commit(working)

        self.status_engine.decay_round_end(working.player)
        self.status_engine.decay_round_end(working.enemy)

        working.phase = EncounterPhase.CHECKING_END
        working.turn += 1
        working.action_points = self.rules.action_points_per_turn
        working.player.block = 0
        self._telegraph(working, enemy, resolve_x(working.floor))

        player_start = self.status_engine.consume_turn_start(working.player)
        self._record_turn_start(working, BattleSide.PLAYER, player_start)
        if working.player.is_defeated:
            self._finish(working, EncounterPhase.DEFEAT)
            return self._commit(working)

        working.player_skip_turn = player_start.skipped
        if player_start.skipped:
            working.push_log(CombatLogEntry.system("You are stunned and cannot act."))
        self._begin_player_turn(working)
        return self._commit(working)

    def surrender(self, state: BattleState) -> BattleState:
        """
        Abandon the encounter.

        Raises:
            EncounterAlreadyTerminal: If the encounter has ended
        """
        validate_turn_action(state).raise_if_invalid()

        self._pending = []
        working = state.clone()
        working.push_log(CombatLogEntry.system("Player surrendered."))
        self._finish(working, EncounterPhase.ABANDONED)
        return self._commit(working)

    # Turn steps

    def _telegraph(self, state: BattleState, enemy: EnemyDefinition, x_value: int) -> None:
        """Fix the intent for ``state.turn`` from the X value resolved for it."""
        state.phase = EncounterPhase.AWAITING_INTENT_TELEGRAPH
        state.x_value = x_value
        state.intent = intent_for_turn(enemy, state.turn, state.x_value)

        self._queue(IntentTelegraphed(
            turn=state.turn,
            encounter_id=state.encounter_id,
            kind=state.intent.kind,
            block=state.intent.block,
            damage=state.intent.damage_per_hit,
            hits=state.intent.hits,
        ))
        self._emit_log(state, f"Intent for turn {state.turn}: {state.intent.describe()}", "INTENT")

    def _begin_player_turn(self, state: BattleState) -> None:
        state.hand = self.card_catalog.draw_hand(self._hand_rng(state), self.rules.hand_size)
        state.push_log(CombatLogEntry.separator())
        state.push_log(CombatLogEntry.system("New turn: hand refreshed"))
        state.phase = EncounterPhase.AWAITING_PLAYER_ACTION

        self._queue(TurnStarted(
            turn=state.turn,
            encounter_id=state.encounter_id,
            action_points=state.action_points,
            skipped=state.player_skip_turn,
        ))

    def _execute_intent(self, state: BattleState, enemy: EnemyDefinition) -> None:
        """Carry out the stored intent verbatim."""
        intent: ResolvedStep = state.intent
        title = ENEMY_ACTION_TITLES[intent.kind]
        parts: list[str] = []

        if intent.block > 0:
            state.enemy.block += intent.block
            parts.append(f"block +{intent.block}")

        dealt = 0
        blocked = 0
        on_hit_lines: list[str] = []
        if intent.is_attack:
            resolution = self._strike(state, BattleSide.ENEMY, intent.damage_per_hit, intent.hits)
            dealt = resolution.hp_damage
            blocked = resolution.blocked
            parts.append(f"dmg {dealt} (blocked {blocked})")

            if enemy.on_hit_status is not None:
                status = enemy.on_hit_status
                for _ in range(intent.hits):
                    self.status_engine.apply_status(state.player, status.type, status.stacks, fresh=True)
                    on_hit_lines.append(
                        f"Enemy attack → Player: {STATUS_NAMES[status.type]} +{status.stacks}"
                    )

        state.push_log(CombatLogEntry.enemy(f"{title}: {', '.join(parts)}"))
        for line in on_hit_lines:
            state.push_log(CombatLogEntry.enemy(line))

        self._queue(EnemyActed(
            turn=state.turn,
            encounter_id=state.encounter_id,
            kind=intent.kind,
            damage_dealt=dealt,
            damage_blocked=blocked,
            block_gained=intent.block,
        ))
        self._emit_log(state, f"{state.enemy_name} used {title}: {', '.join(parts)}")

    def _strike(self, state: BattleState, attacker: BattleSide, damage_per_hit: int,
                hits: int) -> HitResolution:
        """Land ``hits`` weapon hits from ``attacker`` on the other side."""
        target = state.opponent(attacker)
        # Modifiers are read once, before the first hit lands
        per_hit = BattleCalculator.weapon_hit_damage(
            damage_per_hit, state.side(attacker), target, self.rules
        )
        resolution = BattleCalculator.apply_hits(target, [per_hit] * hits)
        if hits > 1:
            self._emit_log(
                state,
                f"{SIDE_LABELS[attacker]} hits for "
                + " + ".join(str(damage) for damage in resolution.per_hit_hp_damage),
                level=LogLevel.DEBUG,
            )
        return resolution

    def _record_turn_start(self, state: BattleState, side: BattleSide, outcome: TurnStartOutcome) -> None:
        for line in outcome.log_lines:
            state.push_log(CombatLogEntry.system(line))
        for status, remaining, damage in outcome.ticks:
            self._queue(StatusTicked(
                turn=state.turn,
                side=side,
                status=status,
                remaining=remaining,
                damage=damage,
            ))
            self._emit_log(
                state,
                f"{SIDE_LABELS[side]} {STATUS_NAMES[status]} ticked: {damage} damage, {remaining} left",
                "STATUS",
            )

    def _finish(self, state: BattleState, phase: EncounterPhase) -> None:
        state.phase = phase
        outcome = state.outcome
        assert outcome is not None
        if phase == EncounterPhase.VICTORY:
            state.push_log(CombatLogEntry.system(f"{state.enemy_name} is defeated. Victory!"))
        elif phase == EncounterPhase.DEFEAT:
            state.push_log(CombatLogEntry.system("You have fallen. Defeat."))

        self._queue(EncounterEnded(
            turn=state.turn,
            encounter_id=state.encounter_id,
            outcome=outcome,
        ))
        self._emit_log(state, f"Encounter ended: {outcome.value}", "SYSTEM")

    # Helpers

    def _hand_rng(self, state: BattleState) -> random.Random:
        """RNG for the hand of ``state.turn``; the same state always draws the same hand."""
        return random.Random(f"{state.seed}:{state.turn}")

    def _queue(self, event: CombatEvent) -> None:
        self._pending.append(event)

    def _emit_log(self, state: BattleState, message: str, category: str = "BATTLE",
                  level: LogLevel = LogLevel.INFO) -> None:
        """Queue a diagnostic log message event."""
        self._queue(LogMessage(
            turn=state.turn,
            message=message,
            category=category,
            level=level,
            source="CombatResolver",
        ))

    def _commit(self, state: BattleState) -> BattleState:
        """Publish the events of a completed operation and hand back the state."""
        events, self._pending = self._pending, []
        if self.event_manager is not None:
            self.event_manager.publish_many(events, source="CombatResolver")
        return state
