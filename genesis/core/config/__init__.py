"""Configuration loading.

- rules_loader.py: YAML-backed combat rules with defaults
"""

from .rules_loader import CombatRules, ConfigError, RulesLoader, load_combat_rules, DEFAULT_RULES_PATH

__all__ = [
    "CombatRules",
    "ConfigError",
    "RulesLoader",
    "load_combat_rules",
    "DEFAULT_RULES_PATH",
]
