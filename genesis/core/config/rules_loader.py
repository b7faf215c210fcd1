"""
Configuration loader for combat rules.

This module handles loading and parsing of the YAML file that holds the
tunable numbers of the combat engine (hit points, action points, status
modifiers, card scaling).
"""
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml


DEFAULT_RULES_PATH = "assets/config/combat_rules.yaml"


class ConfigError(Exception):
    """Raised when a rules file exists but cannot be used."""

    def __init__(self, path: str, detail: str):
        super().__init__(f"Invalid combat rules in {path}: {detail}")
        self.path = path
        self.detail = detail


@dataclass(frozen=True)
class CombatRules:
    """Tunable numbers used by the combat engine and the run manager."""

    player_max_hp: int = 20
    enemy_max_hp: int = 20
    action_points_per_turn: int = 2
    hand_size: int = 3

    bleed_decay: int = 3
    weak_multiplier: float = 0.75
    vulnerable_multiplier: float = 1.25

    card_base_value: int = 5
    card_level_growth: float = 1.25

    base_income: int = 3
    reward_options: int = 3

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ValueError: If any value is out of range
        """
        for name in ("player_max_hp", "enemy_max_hp", "hand_size", "card_base_value", "reward_options"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1")
        for name in ("action_points_per_turn", "bleed_decay", "base_income"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        for name in ("weak_multiplier", "vulnerable_multiplier", "card_level_growth"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")


class RulesLoader:
    """Loads combat rules from a YAML file."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or DEFAULT_RULES_PATH

    def resolve_path(self) -> Path:
        """Resolve the configured path, relative paths being anchored at the project root."""
        if os.path.isabs(self.config_path):
            return Path(self.config_path)
        project_root = Path(__file__).resolve().parent.parent.parent.parent
        return project_root / self.config_path

    def load(self) -> CombatRules:
        """Load the rules file.

        Returns:
            CombatRules built from the file, or the defaults when the file is missing

        Raises:
            ConfigError: If the file is not valid YAML or holds invalid values
        """
        config_file = self.resolve_path()
        if not config_file.exists():
            return CombatRules()

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(str(config_file), f"malformed YAML ({e})") from e

        return self.parse(data, source=str(config_file))

    @staticmethod
    def parse(data: Any, source: str = "<memory>") -> CombatRules:
        """Build CombatRules from already-parsed YAML data."""
        if not isinstance(data, dict):
            raise ConfigError(source, "top level must be a mapping")

        section = data.get('combat_rules', {})
        if not isinstance(section, dict):
            raise ConfigError(source, "'combat_rules' must be a mapping")

        known = {f.name: f.type for f in fields(CombatRules)}
        unknown = sorted(set(section) - set(known))
        if unknown:
            raise ConfigError(source, f"unknown keys: {', '.join(unknown)}")

        overrides: dict[str, Any] = {}
        for key, value in section.items():
            default = getattr(CombatRules, key)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(source, f"'{key}' must be a number")
            if isinstance(default, int) and not isinstance(value, int):
                raise ConfigError(source, f"'{key}' must be an integer")
            overrides[key] = float(value) if isinstance(default, float) else value

        rules = replace(CombatRules(), **overrides)
        try:
            rules.validate()
        except ValueError as e:
            raise ConfigError(source, str(e)) from e
        return rules


def load_combat_rules(config_path: Optional[str] = None) -> CombatRules:
    """Convenience wrapper around RulesLoader."""
    return RulesLoader(config_path).load()
