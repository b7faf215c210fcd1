"""
Unit tests for status stacking, turn-start ticks and round-end decay.
"""
from genesis.core.data import StatusType
from tests.conftest import TestDataBuilder


class TestApplyStatus:
    """Test adding stacks."""

    def test_new_status(self, status_engine):
        side = TestDataBuilder.side()

        assert status_engine.apply_status(side, StatusType.BLEED, 2) == 2
        assert status_engine.stacks(side, StatusType.BLEED) == 2

    def test_stacks_merge(self, status_engine):
        side = TestDataBuilder.side(weak=1)

        status_engine.apply_status(side, StatusType.WEAK, 2)

        assert status_engine.stacks(side, StatusType.WEAK) == 3
        assert len(side.statuses) == 1

    def test_non_positive_is_noop(self, status_engine):
        side = TestDataBuilder.side()

        assert status_engine.apply_status(side, StatusType.STUN, 0) == 0
        assert status_engine.apply_status(side, StatusType.STUN, -2) == 0
        assert side.statuses == []

    def test_absent_status_has_zero_stacks(self, status_engine):
        assert status_engine.stacks(TestDataBuilder.side(), StatusType.VULNERABLE) == 0

    def test_fresh_stacks_recorded(self, status_engine):
        side = TestDataBuilder.side()

        status_engine.apply_status(side, StatusType.VULNERABLE, 1, fresh=True)

        assert side.get_status(StatusType.VULNERABLE).fresh_stacks == 1

    def test_fresh_stacks_counted_separately(self, status_engine):
        side = TestDataBuilder.side(vulnerable=1)

        status_engine.apply_status(side, StatusType.VULNERABLE, 2, fresh=True)

        status = side.get_status(StatusType.VULNERABLE)
        assert (status.stacks, status.fresh_stacks) == (3, 2)


class TestConsumeTurnStart:
    """Test bleed and stun processing."""

    def test_bleed_damage_and_decay(self, status_engine):
        side = TestDataBuilder.side(bleed=5)

        outcome = status_engine.consume_turn_start(side)

        assert side.hp == 15
        assert status_engine.stacks(side, StatusType.BLEED) == 2
        assert outcome.log_lines == ["Player suffers Bleed (5)."]
        assert outcome.ticks == [(StatusType.BLEED, 2, 5)]
        assert not outcome.skipped

    def test_bleed_absorbed_by_block(self, status_engine):
        side = TestDataBuilder.side(block=3, bleed=5)

        outcome = status_engine.consume_turn_start(side)

        assert side.block == 0
        assert side.hp == 18
        assert outcome.ticks == [(StatusType.BLEED, 2, 2)]

    def test_bleed_ignores_vulnerable(self, status_engine):
        side = TestDataBuilder.side(bleed=4, vulnerable=2)

        status_engine.consume_turn_start(side)

        assert side.hp == 16

    def test_bleed_removed_when_decayed_out(self, status_engine):
        side = TestDataBuilder.side(bleed=2)

        status_engine.consume_turn_start(side)

        assert side.get_status(StatusType.BLEED) is None

    def test_stun_skips_and_decrements(self, status_engine):
        side = TestDataBuilder.side(stun=2)

        outcome = status_engine.consume_turn_start(side, "Enemy")

        assert outcome.skipped
        assert outcome.log_lines == ["Enemy is Stunned and skips the turn."]
        assert status_engine.stacks(side, StatusType.STUN) == 1

    def test_last_stun_removed(self, status_engine):
        side = TestDataBuilder.side(stun=1)

        status_engine.consume_turn_start(side)

        assert side.statuses == []

    def test_bleed_processed_before_stun(self, status_engine):
        side = TestDataBuilder.side(bleed=3, stun=1)

        outcome = status_engine.consume_turn_start(side)

        assert outcome.log_lines == [
            "Player suffers Bleed (3).",
            "Player is Stunned and skips the turn.",
        ]

    def test_round_statuses_untouched(self, status_engine):
        side = TestDataBuilder.side(weak=2, vulnerable=1)

        outcome = status_engine.consume_turn_start(side)

        assert outcome.log_lines == []
        assert side.status_stacks() == {StatusType.WEAK: 2, StatusType.VULNERABLE: 1}


class TestDecayRoundEnd:
    """Test weak and vulnerable decay."""

    def test_decay_by_one(self, status_engine):
        side = TestDataBuilder.side(weak=2, vulnerable=1)

        status_engine.decay_round_end(side)

        assert side.status_stacks() == {StatusType.WEAK: 1}

    def test_fresh_stacks_survive_one_round(self, status_engine):
        side = TestDataBuilder.side()
        status_engine.apply_status(side, StatusType.WEAK, 1, fresh=True)

        status_engine.decay_round_end(side)
        assert status_engine.stacks(side, StatusType.WEAK) == 1
        assert side.get_status(StatusType.WEAK).fresh_stacks == 0

        status_engine.decay_round_end(side)
        assert side.get_status(StatusType.WEAK) is None

    def test_older_stack_decays_under_fresh_one(self, status_engine):
        side = TestDataBuilder.side(weak=1)
        status_engine.apply_status(side, StatusType.WEAK, 1, fresh=True)

        status_engine.decay_round_end(side)

        status = side.get_status(StatusType.WEAK)
        assert (status.stacks, status.fresh_stacks) == (1, 0)

    def test_repeated_fresh_hits_do_not_pile_up(self, status_engine):
        side = TestDataBuilder.side()

        for _ in range(3):
            status_engine.apply_status(side, StatusType.VULNERABLE, 1, fresh=True)
            status_engine.decay_round_end(side)

        assert status_engine.stacks(side, StatusType.VULNERABLE) == 1

    def test_bleed_and_stun_do_not_decay_at_round_end(self, status_engine):
        side = TestDataBuilder.side(bleed=4, stun=1)

        status_engine.decay_round_end(side)

        assert side.status_stacks() == {StatusType.BLEED: 4, StatusType.STUN: 1}

    def test_stacks_never_negative(self, status_engine):
        side = TestDataBuilder.side(weak=1, bleed=1, stun=1)

        for _ in range(5):
            status_engine.consume_turn_start(side)
            status_engine.decay_round_end(side)

        assert side.statuses == []
