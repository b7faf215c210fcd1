"""Turns enemy pattern steps into concrete intents.

A step magnitude of 0 is a placeholder for the floor's X value. Each field is
defaulted on its own, so a block-and-attack step may fix one half and scale
the other.
"""

from ...core.data import StepKind
from ..content.enemy_catalog import (
    AttackStep,
    BlockAndAttackStep,
    BlockStep,
    DEFAULT_MULTI_HITS,
    EnemyDefinition,
    EnemyPatternStep,
    MultiHitAttackStep,
    ResolvedStep,
)


def _or_x(value: int, x: int) -> int:
    return value if value > 0 else x


def resolve_step(step: EnemyPatternStep, x: int) -> ResolvedStep:
    """Fix every magnitude of ``step`` using ``x`` for the zero placeholders."""
    if isinstance(step, AttackStep):
        return ResolvedStep(
            kind=StepKind.ATTACK,
            damage_per_hit=_or_x(step.amount, x),
            hits=1,
            uses_weapon=step.uses_weapon,
        )
    if isinstance(step, BlockStep):
        return ResolvedStep(
            kind=StepKind.BLOCK,
            block=_or_x(step.amount, x),
            uses_weapon=step.uses_weapon,
        )
    if isinstance(step, BlockAndAttackStep):
        return ResolvedStep(
            kind=StepKind.BLOCK_AND_ATTACK,
            block=_or_x(step.block, x),
            damage_per_hit=_or_x(step.attack, x),
            hits=1,
            uses_weapon=step.uses_weapon,
        )
    if isinstance(step, MultiHitAttackStep):
        return ResolvedStep(
            kind=StepKind.MULTI_HIT_ATTACK,
            damage_per_hit=_or_x(step.per_hit, x),
            hits=step.hits if step.hits is not None else DEFAULT_MULTI_HITS,
            uses_weapon=step.uses_weapon,
        )
    raise TypeError(f"Unsupported pattern step: {step!r}")


def intent_for_turn(enemy: EnemyDefinition, turn: int, x: int) -> ResolvedStep:
    """Resolved intent for a 1-based turn number."""
    return resolve_step(enemy.step_for_turn(turn), x)
