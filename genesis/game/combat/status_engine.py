"""Status effect bookkeeping for one battle side.

Bleed and stun are consumed when the afflicted side's turn starts. Weak and
vulnerable lose one stack at the end of each round; stacks applied during the
enemy's action are counted as fresh and cannot be the stack that decays in
that same round.
"""

from ...core.config import CombatRules
from ...core.data import SIDE_LABELS, StatusType
from ...core.engine.battle_state import SideState, StatusInstance, TurnStartOutcome
from .battle_calculator import BattleCalculator


ROUND_DECAYING = (StatusType.WEAK, StatusType.VULNERABLE)


class StatusEngine:
    """Applies, ticks and decays statuses on a SideState in place."""

    def __init__(self, rules: CombatRules):
        self.rules = rules

    def apply_status(self, side: SideState, status_type: StatusType, stacks: int,
                     fresh: bool = False) -> int:
        """Add stacks to a side, merging with an existing entry.

        Returns:
            The resulting stack count (unchanged when ``stacks <= 0``)
        """
        existing = side.get_status(status_type)
        if stacks <= 0:
            return existing.stacks if existing else 0

        if existing is None:
            existing = StatusInstance(type=status_type, stacks=0)
            side.statuses.append(existing)
        existing.stacks += stacks
        if fresh:
            existing.fresh_stacks += stacks
        return existing.stacks

    def stacks(self, side: SideState, status_type: StatusType) -> int:
        status = side.get_status(status_type)
        return status.stacks if status else 0

    def consume_turn_start(self, side: SideState, label: str = "") -> TurnStartOutcome:
        """Process bleed then stun at the start of ``side``'s turn."""
        label = label or SIDE_LABELS[side.side]
        outcome = TurnStartOutcome()

        bleed = self.stacks(side, StatusType.BLEED)
        if bleed > 0:
            # Status damage ignores weak/vulnerable but is absorbed by block
            resolution = BattleCalculator.apply_hits(side, [bleed])
            remaining = self._set_stacks(side, StatusType.BLEED, bleed - self.rules.bleed_decay)
            outcome.log_lines.append(f"{label} suffers Bleed ({bleed}).")
            outcome.ticks.append((StatusType.BLEED, remaining, resolution.hp_damage))

        stun = self.stacks(side, StatusType.STUN)
        if stun > 0:
            remaining = self._set_stacks(side, StatusType.STUN, stun - 1)
            outcome.skipped = True
            outcome.log_lines.append(f"{label} is Stunned and skips the turn.")
            outcome.ticks.append((StatusType.STUN, remaining, 0))

        self.prune(side)
        return outcome

    def decay_round_end(self, side: SideState) -> None:
        """Weak and vulnerable lose one stack, as long as one predates this round."""
        for status in side.statuses:
            if status.type in ROUND_DECAYING and status.stacks > status.fresh_stacks:
                status.stacks -= 1
            status.fresh_stacks = 0
        self.prune(side)

    def prune(self, side: SideState) -> None:
        side.statuses = [status for status in side.statuses if status.stacks > 0]

    def _set_stacks(self, side: SideState, status_type: StatusType, stacks: int) -> int:
        status = side.get_status(status_type)
        stacks = max(0, stacks)
        if status is not None:
            status.stacks = stacks
        return stacks
