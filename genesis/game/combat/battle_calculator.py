"""
Battle calculation system for damage, block and status modifiers.

This module holds the deterministic arithmetic of combat, separate from the
resolver that sequences turns and writes the log. Everything here is a static
function over plain values or a single SideState, so the UI can preview a card
without touching the encounter.
"""
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ...core.config import CombatRules
from ...core.data import StatusType
from ...core.engine.battle_state import SideState


@dataclass(frozen=True)
class HitResolution:
    """Outcome of a sequence of hits against a block pool."""
    hp_damage: int
    blocked: int
    block_remaining: int
    per_hit_hp_damage: tuple[int, ...] = ()


@dataclass(frozen=True)
class CardEffect:
    """Concrete numbers of one card play before status modifiers."""
    damage_per_hit: int = 0
    hits: int = 0
    block: int = 0


class BattleCalculator:
    """Deterministic combat math."""

    @staticmethod
    def round_half_up(value: float) -> int:
        """Round to the nearest integer, halves away from zero for positives."""
        return int(math.floor(value + 0.5))

    @staticmethod
    def scaled_base(level: int, rules: CombatRules) -> int:
        """Card base value: ``card_base_value`` at level 1, grown once per extra level."""
        value = rules.card_base_value
        for _ in range(max(0, level - 1)):
            value = BattleCalculator.round_half_up(value * rules.card_level_growth)
        return value

    @staticmethod
    def card_effect(damage_ratio: float, hits: int, block_ratio: float,
                    level: int, rules: CombatRules) -> CardEffect:
        """Scale a card's ratios by its level."""
        base = BattleCalculator.scaled_base(level, rules)
        damage = BattleCalculator.round_half_up(base * damage_ratio) if damage_ratio > 0 else 0
        block = BattleCalculator.round_half_up(base * block_ratio) if block_ratio > 0 else 0
        return CardEffect(
            damage_per_hit=damage,
            hits=hits if damage > 0 else 0,
            block=block,
        )

    @staticmethod
    def outgoing_damage(base: int, attacker: SideState, rules: CombatRules) -> int:
        """Weapon damage after the attacker's Weak."""
        if base <= 0:
            return 0
        if attacker.get_status(StatusType.WEAK) is not None:
            return max(0, BattleCalculator.round_half_up(base * rules.weak_multiplier))
        return base

    @staticmethod
    def incoming_damage(amount: int, target: SideState, rules: CombatRules) -> int:
        """Weapon damage after the target's Vulnerable."""
        if amount <= 0:
            return 0
        if target.get_status(StatusType.VULNERABLE) is not None:
            return max(0, BattleCalculator.round_half_up(amount * rules.vulnerable_multiplier))
        return amount

    @staticmethod
    def weapon_hit_damage(base: int, attacker: SideState, target: SideState,
                          rules: CombatRules) -> int:
        """Per-hit weapon damage with both modifiers applied."""
        outgoing = BattleCalculator.outgoing_damage(base, attacker, rules)
        return BattleCalculator.incoming_damage(outgoing, target, rules)

    @staticmethod
    def resolve_hits(per_hit_damages: Sequence[int], block: int) -> HitResolution:
        """
        Absorb hits against a block pool in order.

        Block soaks each hit until it runs out; the remainder of every hit
        reaches hit points.

        Args:
            per_hit_damages: Damage of each hit, in order
            block: Block available before the first hit

        Returns:
            HitResolution with total HP damage, damage blocked and block left
        """
        hits = np.clip(np.asarray(per_hit_damages, dtype=np.int64), 0, None)
        if hits.size == 0:
            return HitResolution(hp_damage=0, blocked=0, block_remaining=max(0, block))

        block = max(0, block)
        absorbed_so_far = np.minimum(np.cumsum(hits), block)
        absorbed = np.diff(absorbed_so_far, prepend=0)
        hp_per_hit = hits - absorbed

        blocked = int(absorbed.sum())
        return HitResolution(
            hp_damage=int(hp_per_hit.sum()),
            blocked=blocked,
            block_remaining=block - blocked,
            per_hit_hp_damage=tuple(int(value) for value in hp_per_hit),
        )

    @staticmethod
    def apply_hits(target: SideState, per_hit_damages: Sequence[int]) -> HitResolution:
        """Resolve hits against ``target`` and write block and HP back.

        ``hp_damage`` in the result is the HP actually lost, so overkill past 0
        is not counted.
        """
        resolution = BattleCalculator.resolve_hits(per_hit_damages, target.block)
        hp_before = target.hp
        target.block = resolution.block_remaining
        target.hp = max(0, target.hp - resolution.hp_damage)
        return HitResolution(
            hp_damage=hp_before - target.hp,
            blocked=resolution.blocked,
            block_remaining=resolution.block_remaining,
            per_hit_hp_damage=resolution.per_hit_hp_damage,
        )
