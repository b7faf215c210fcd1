"""
Unit tests for the CombatResolver class.

Tests encounter setup, card plays, the enemy turn and terminal transitions.
"""
import pytest

from genesis.core.data import CardKind, EncounterOutcome, EncounterPhase, LogKind, StatusType, StepKind
from genesis.core.engine import (
    EncounterAlreadyTerminal,
    InsufficientActionPoints,
    TurnSkipped,
    UnknownCard,
    UnknownEnemy,
)
from genesis.core.events import EventType
from tests.conftest import TestDataBuilder


def texts(entries) -> list[str]:
    return [entry.text for entry in entries]


class TestStartEncounter:
    """Test encounter setup."""

    def test_initial_state(self, punisher_state):
        state = punisher_state

        assert state.phase == EncounterPhase.AWAITING_PLAYER_ACTION
        assert state.turn == 1
        assert state.floor == 1
        assert state.action_points == 2
        assert state.player.hp == 20
        assert state.enemy.hp == 20
        assert state.enemy_name == "Punisher"
        assert state.x_value == 6
        assert state.intent.kind == StepKind.ATTACK
        assert state.intent.damage_per_hit == 6
        assert state.outcome is None

    def test_hand_has_distinct_kinds(self, punisher_state):
        kinds = [card.kind for card in punisher_state.hand]

        assert len(kinds) == 3
        assert len(set(kinds)) == 3

    def test_opening_log(self, punisher_state):
        log = punisher_state.log

        assert texts(log) == ["__DIVIDER__", "[SYSTEM] New turn: hand refreshed"]
        assert log[0].kind == LogKind.SEPARATOR
        assert log[1].kind == LogKind.SYSTEM

    def test_same_seed_draws_same_hand(self, resolver):
        first = resolver.start_encounter("graphite_golem_v1", floor=3, seed=5)
        second = resolver.start_encounter("graphite_golem_v1", floor=3, seed=5)

        assert [c.kind for c in first.hand] == [c.kind for c in second.hand]
        assert first.encounter_id != second.encounter_id

    def test_card_levels_kept(self, resolver):
        state = resolver.start_encounter("punisher_v1", floor=1, card_levels={CardKind.DEFEND: 3})

        assert state.card_level(CardKind.DEFEND) == 3
        assert state.card_level(CardKind.STUN) == 1

    def test_unknown_enemy(self, resolver):
        with pytest.raises(UnknownEnemy) as exc_info:
            resolver.start_encounter("nobody", floor=1)
        assert exc_info.value.enemy_id == "nobody"

    def test_negative_floor(self, resolver):
        with pytest.raises(ValueError):
            resolver.start_encounter("punisher_v1", floor=-1)

    def test_invalid_card_level(self, resolver):
        with pytest.raises(ValueError):
            resolver.start_encounter("punisher_v1", floor=1, card_levels={CardKind.DEFEND: 0})

    def test_events_published(self, resolver, event_manager):
        received = []
        event_manager.subscribe_all(received.append)

        resolver.start_encounter("punisher_v1", floor=1)
        event_manager.process_events()

        types = [event.event_type for event in received if event.event_type != EventType.LOG_MESSAGE]
        assert types == [
            EventType.ENCOUNTER_STARTED,
            EventType.INTENT_TELEGRAPHED,
            EventType.TURN_STARTED,
        ]


class TestPlayCard:
    """Test card effects and rejections."""

    def play(self, resolver, state, kind):
        TestDataBuilder.with_hand(state, kind, *(k for k in (CardKind.DEFEND, CardKind.BLEED) if k != kind))
        return resolver.play_card(state, TestDataBuilder.card_id(state, kind))

    def test_strong_attack(self, resolver, punisher_state):
        state = self.play(resolver, punisher_state, CardKind.STRONG_ATTACK)

        assert state.enemy.hp == 15
        assert state.action_points == 1
        assert CardKind.STRONG_ATTACK not in [card.kind for card in state.hand]
        assert len(state.hand) == 2
        assert state.log[-1].text == "[PLAYER] Power Strike (-1 AP): dmg 5 (blocked 0)"
        assert state.log[-1].kind == LogKind.PLAYER

    def test_input_state_untouched(self, resolver, punisher_state):
        TestDataBuilder.with_hand(punisher_state, CardKind.STRONG_ATTACK)
        snapshot = punisher_state.clone()

        resolver.play_card(punisher_state, TestDataBuilder.card_id(punisher_state, CardKind.STRONG_ATTACK))

        assert punisher_state == snapshot

    def test_defend(self, resolver, punisher_state):
        state = self.play(resolver, punisher_state, CardKind.DEFEND)

        assert state.player.block == 5
        assert state.log[-1].text == "[PLAYER] Guard (-1 AP): block +5"

    def test_double_attack(self, resolver, punisher_state):
        state = self.play(resolver, punisher_state, CardKind.DOUBLE_ATTACK)

        assert state.enemy.hp == 12
        assert state.action_points == 0
        assert state.log[-1].text == "[PLAYER] Double Strike (-2 AP): dmg 8 (blocked 0)"

    def test_multi_hit_logs_each_hit(self, resolver, punisher_state, event_manager):
        received = []
        event_manager.subscribe(EventType.LOG_MESSAGE, received.append)
        punisher_state.enemy.block = 2

        self.play(resolver, punisher_state, CardKind.DOUBLE_ATTACK)
        event_manager.process_events()

        assert "Player hits for 2 + 4" in [event.message for event in received]

    def test_counter(self, resolver, punisher_state):
        state = self.play(resolver, punisher_state, CardKind.COUNTER)

        assert state.player.block == 4
        assert state.enemy.hp == 17
        assert state.log[-1].text == "[PLAYER] Counter Stance (-2 AP): block +4, dmg 3 (blocked 0)"

    @pytest.mark.parametrize("kind,status,stacks,line", [
        (CardKind.BLEED, StatusType.BLEED, 2, "[PLAYER] Player uses Bleed → Enemy: Bleed +2"),
        (CardKind.WEAKEN, StatusType.WEAK, 1, "[PLAYER] Player uses Weaken → Enemy: Weak +1"),
        (CardKind.STUN, StatusType.STUN, 1, "[PLAYER] Player uses Stun → Enemy: Stun +1"),
    ])
    def test_status_cards(self, resolver, punisher_state, kind, status, stacks, line):
        state = self.play(resolver, punisher_state, kind)

        assert state.enemy.status_stacks() == {status: stacks}
        assert state.log[-1].text == line

    def test_card_level_scales_damage(self, resolver, punisher_state):
        punisher_state.card_levels[CardKind.STRONG_ATTACK] = 2

        state = self.play(resolver, punisher_state, CardKind.STRONG_ATTACK)

        assert state.enemy.hp == 14

    def test_enemy_block_absorbs(self, resolver, punisher_state):
        punisher_state.enemy.block = 3

        state = self.play(resolver, punisher_state, CardKind.STRONG_ATTACK)

        assert state.enemy.hp == 18
        assert state.enemy.block == 0
        assert state.log[-1].text == "[PLAYER] Power Strike (-1 AP): dmg 2 (blocked 3)"

    def test_insufficient_action_points(self, resolver, punisher_state):
        TestDataBuilder.with_hand(punisher_state, CardKind.COUNTER)
        punisher_state.action_points = 1
        snapshot = punisher_state.clone()

        with pytest.raises(InsufficientActionPoints):
            resolver.play_card(punisher_state, TestDataBuilder.card_id(punisher_state, CardKind.COUNTER))

        assert punisher_state == snapshot

    def test_unknown_card(self, resolver, punisher_state):
        with pytest.raises(UnknownCard):
            resolver.play_card(punisher_state, "missing")

    def test_card_cannot_be_played_twice(self, resolver, punisher_state):
        TestDataBuilder.with_hand(punisher_state, CardKind.DEFEND)
        card_id = TestDataBuilder.card_id(punisher_state, CardKind.DEFEND)
        state = resolver.play_card(punisher_state, card_id)

        with pytest.raises(UnknownCard):
            resolver.play_card(state, card_id)

    def test_stunned_player_cannot_play(self, resolver, punisher_state):
        TestDataBuilder.with_hand(punisher_state, CardKind.DEFEND)
        punisher_state.player_skip_turn = True

        with pytest.raises(TurnSkipped):
            resolver.play_card(punisher_state, TestDataBuilder.card_id(punisher_state, CardKind.DEFEND))

    def test_validate_play_is_read_only(self, resolver, punisher_state):
        TestDataBuilder.with_hand(punisher_state, CardKind.STUN)
        punisher_state.action_points = 1
        snapshot = punisher_state.clone()

        result = resolver.validate_play(punisher_state, TestDataBuilder.card_id(punisher_state, CardKind.STUN))

        assert not result.is_valid
        assert isinstance(result.error, InsufficientActionPoints)
        assert punisher_state == snapshot

    def test_rejected_play_publishes_nothing(self, resolver, punisher_state, event_manager):
        event_manager.clear_queue()

        with pytest.raises(UnknownCard):
            resolver.play_card(punisher_state, "missing")

        assert not event_manager.has_queued_events()


class TestVictoryDuringPlayerAction:
    """Enemy death ends the encounter before the enemy acts."""

    def test_lethal_card(self, resolver, punisher_state):
        punisher_state.enemy.hp = 5
        TestDataBuilder.with_hand(punisher_state, CardKind.STRONG_ATTACK)

        state = resolver.play_card(
            punisher_state, TestDataBuilder.card_id(punisher_state, CardKind.STRONG_ATTACK)
        )

        assert state.phase == EncounterPhase.VICTORY
        assert state.outcome == EncounterOutcome.VICTORY
        assert state.enemy.hp == 0
        assert state.player.hp == 20
        assert not any(text.startswith("[ENEMY]") for text in texts(state.log))
        assert state.log[-1].text == "[SYSTEM] Punisher is defeated. Victory!"

    def test_actions_rejected_after_victory(self, resolver, punisher_state):
        punisher_state.enemy.hp = 1
        TestDataBuilder.with_hand(punisher_state, CardKind.STRONG_ATTACK, CardKind.DEFEND)
        state = resolver.play_card(
            punisher_state, TestDataBuilder.card_id(punisher_state, CardKind.STRONG_ATTACK)
        )

        with pytest.raises(EncounterAlreadyTerminal):
            resolver.play_card(state, TestDataBuilder.card_id(state, CardKind.DEFEND))
        with pytest.raises(EncounterAlreadyTerminal):
            resolver.end_turn(state)
        with pytest.raises(EncounterAlreadyTerminal):
            resolver.surrender(state)


class TestSurrender:

    def test_surrender_is_abandoned(self, resolver, punisher_state):
        state = resolver.surrender(punisher_state)

        assert state.phase == EncounterPhase.ABANDONED
        assert state.outcome == EncounterOutcome.ABANDONED
        assert texts(state.log[len(punisher_state.log):]) == ["[SYSTEM] Player surrendered."]
        assert not any(text.startswith("[ENEMY]") for text in texts(state.log))
        assert punisher_state.phase == EncounterPhase.AWAITING_PLAYER_ACTION

    def test_surrender_event(self, resolver, punisher_state, event_manager):
        event_manager.clear_queue()
        received = []
        event_manager.subscribe(EventType.ENCOUNTER_ENDED, received.append)

        resolver.surrender(punisher_state)
        event_manager.process_events()

        assert len(received) == 1
        assert received[0].outcome == EncounterOutcome.ABANDONED
