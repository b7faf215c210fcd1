"""Combat system components.

This package contains the combat logic with clear separation of concerns:
- scaling.py: Floor to X value
- pattern_resolver.py: Enemy pattern steps to concrete intents
- status_engine.py: Status stacking, turn-start ticks and round-end decay
- battle_calculator.py: Damage, block and modifier arithmetic
- combat_resolver.py: Turn sequencing, combat log and domain events
"""

from .scaling import resolve_x
from .pattern_resolver import resolve_step, intent_for_turn
from .battle_calculator import BattleCalculator, CardEffect, HitResolution
from .status_engine import StatusEngine
from .combat_resolver import CombatResolver

__all__ = [
    "resolve_x",
    "resolve_step",
    "intent_for_turn",
    "BattleCalculator",
    "CardEffect",
    "HitResolution",
    "StatusEngine",
    "CombatResolver",
]
