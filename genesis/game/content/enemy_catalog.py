"""Enemy definitions and the enemy pattern catalog.

Enemies are loaded from YAML into frozen dataclasses. Each enemy owns a
pattern of exactly three steps that repeats for the whole encounter. Every
step kind is its own dataclass carrying only the fields it needs; a magnitude
of 0 means "scale with the floor" and is replaced by the X value when the step
is resolved.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

from ...core.data import EnemyRole, StatusType, StepKind
from ...core.engine.errors import UnknownEnemy
from .loader import CatalogError, load_yaml_data


DEFAULT_ENEMY_CATALOG_PATH = "assets/data/enemies/enemy_catalog.yaml"
PATTERN_LENGTH = 3
DEFAULT_MULTI_HITS = 2


@dataclass(frozen=True)
class AttackStep:
    amount: int = 0
    uses_weapon: bool = False

    @property
    def kind(self) -> StepKind:
        return StepKind.ATTACK


@dataclass(frozen=True)
class BlockStep:
    amount: int = 0
    uses_weapon: bool = False

    @property
    def kind(self) -> StepKind:
        return StepKind.BLOCK


@dataclass(frozen=True)
class BlockAndAttackStep:
    block: int = 0
    attack: int = 0
    uses_weapon: bool = False

    @property
    def kind(self) -> StepKind:
        return StepKind.BLOCK_AND_ATTACK


@dataclass(frozen=True)
class MultiHitAttackStep:
    per_hit: int = 0
    hits: Optional[int] = None
    uses_weapon: bool = False

    @property
    def kind(self) -> StepKind:
        return StepKind.MULTI_HIT_ATTACK


EnemyPatternStep = Union[AttackStep, BlockStep, BlockAndAttackStep, MultiHitAttackStep]


@dataclass(frozen=True)
class ResolvedStep:
    """A pattern step with every magnitude fixed for one turn.

    ``damage_per_hit`` is 0 for pure block steps; ``hits`` is 1 for single
    attacks and 0 for pure block steps.
    """

    kind: StepKind
    block: int = 0
    damage_per_hit: int = 0
    hits: int = 0
    uses_weapon: bool = False

    @property
    def total_damage(self) -> int:
        return self.damage_per_hit * self.hits

    @property
    def is_attack(self) -> bool:
        return self.hits > 0 and self.damage_per_hit > 0

    def describe(self) -> str:
        """Short text for the intent display."""
        if self.kind == StepKind.ATTACK:
            return f"Attack {self.damage_per_hit}"
        if self.kind == StepKind.BLOCK:
            return f"Block {self.block}"
        if self.kind == StepKind.BLOCK_AND_ATTACK:
            return f"Block {self.block} + Attack {self.damage_per_hit}"
        return f"Attack {self.damage_per_hit}x{self.hits} ({self.total_damage})"


@dataclass(frozen=True)
class OnHitStatus:
    """Status inflicted on the player after each enemy attack hit."""

    type: StatusType
    stacks: int


@dataclass(frozen=True)
class EnemyDefinition:
    id: str
    name: str
    role: EnemyRole
    pattern: tuple[EnemyPatternStep, ...]
    short_description: str = ""
    lore_description: str = ""
    emoji: Optional[str] = None
    max_hp: Optional[int] = None
    on_hit_status: Optional[OnHitStatus] = None

    def step_for_turn(self, turn: int) -> EnemyPatternStep:
        """Pattern step used on a 1-based turn number."""
        return self.pattern[(turn - 1) % len(self.pattern)]


def _non_negative(data: dict[str, Any], key: str, where: str, default: int = 0) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{where}: '{key}' must be a non-negative integer")
    return value


def parse_step(data: Any, where: str = "step") -> EnemyPatternStep:
    """Convert a YAML mapping into a pattern step.

    Raises:
        ValueError: If the kind is unknown or a field is invalid
    """
    if not isinstance(data, dict):
        raise ValueError(f"{where}: must be a mapping")

    try:
        kind = StepKind(data.get("kind"))
    except ValueError:
        raise ValueError(f"{where}: unknown step kind {data.get('kind')!r}")

    uses_weapon = bool(data.get("uses_weapon", False))

    if kind == StepKind.ATTACK:
        return AttackStep(amount=_non_negative(data, "amount", where), uses_weapon=uses_weapon)
    if kind == StepKind.BLOCK:
        return BlockStep(amount=_non_negative(data, "amount", where), uses_weapon=uses_weapon)
    if kind == StepKind.BLOCK_AND_ATTACK:
        return BlockAndAttackStep(
            block=_non_negative(data, "block", where),
            attack=_non_negative(data, "attack", where),
            uses_weapon=uses_weapon,
        )

    hits = data.get("hits")
    if hits is not None and (isinstance(hits, bool) or not isinstance(hits, int) or hits < 1):
        raise ValueError(f"{where}: 'hits' must be a positive integer")
    return MultiHitAttackStep(
        per_hit=_non_negative(data, "per_hit", where),
        hits=hits,
        uses_weapon=uses_weapon,
    )


def parse_enemy(data: Any) -> EnemyDefinition:
    """Convert a YAML mapping into an EnemyDefinition.

    Raises:
        ValueError: If the definition is incomplete or invalid
    """
    if not isinstance(data, dict):
        raise ValueError("enemy entry must be a mapping")

    enemy_id = data.get("id")
    if not enemy_id or not isinstance(enemy_id, str):
        raise ValueError("enemy entry is missing an 'id'")

    raw_pattern = data.get("pattern") or []
    if len(raw_pattern) != PATTERN_LENGTH:
        raise ValueError(f"{enemy_id}: pattern must have exactly {PATTERN_LENGTH} steps")
    pattern = tuple(
        parse_step(step, where=f"{enemy_id} step {index + 1}")
        for index, step in enumerate(raw_pattern)
    )

    try:
        role = EnemyRole(data.get("role"))
    except ValueError:
        raise ValueError(f"{enemy_id}: unknown role {data.get('role')!r}")

    on_hit = None
    if data.get("on_hit_status"):
        raw = data["on_hit_status"]
        try:
            on_hit = OnHitStatus(type=StatusType(raw["type"]), stacks=int(raw["stacks"]))
        except (KeyError, TypeError, ValueError):
            raise ValueError(f"{enemy_id}: invalid on_hit_status {raw!r}")
        if on_hit.stacks < 1:
            raise ValueError(f"{enemy_id}: on_hit_status stacks must be positive")

    max_hp = data.get("max_hp")
    if max_hp is not None and (not isinstance(max_hp, int) or max_hp < 1):
        raise ValueError(f"{enemy_id}: 'max_hp' must be a positive integer")

    return EnemyDefinition(
        id=enemy_id,
        name=data.get("name", enemy_id),
        role=role,
        pattern=pattern,
        short_description=data.get("short_description", ""),
        lore_description=data.get("lore_description", ""),
        emoji=data.get("emoji"),
        max_hp=max_hp,
        on_hit_status=on_hit,
    )


class EnemyCatalog:
    """Read-only lookup table of enemy definitions."""

    def __init__(self, enemies: list[EnemyDefinition]):
        ids = [enemy.id for enemy in enemies]
        duplicates = sorted({enemy_id for enemy_id in ids if ids.count(enemy_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicate enemy ids: {', '.join(duplicates)}")
        self._enemies: dict[str, EnemyDefinition] = {enemy.id: enemy for enemy in enemies}

    @classmethod
    def from_yaml(cls, path: str = DEFAULT_ENEMY_CATALOG_PATH) -> "EnemyCatalog":
        """Load the catalog from a YAML file.

        Raises:
            CatalogError: If the file is missing or any entry is invalid
        """
        entries = load_yaml_data(path, root_key="enemies")
        if not isinstance(entries, list) or not entries:
            raise CatalogError(path, "'enemies' must be a non-empty list")
        try:
            return cls([parse_enemy(entry) for entry in entries])
        except ValueError as e:
            raise CatalogError(path, str(e))

    def lookup(self, enemy_id: str) -> EnemyDefinition:
        """Get an enemy definition.

        Raises:
            UnknownEnemy: If the id is not in the catalog
        """
        try:
            return self._enemies[enemy_id]
        except KeyError:
            raise UnknownEnemy(enemy_id) from None

    def choose(self, rng: random.Random) -> EnemyDefinition:
        """Uniform random pick across the whole catalog."""
        return self._enemies[rng.choice(self.ids)]

    @property
    def ids(self) -> list[str]:
        return list(self._enemies)

    def __contains__(self, enemy_id: object) -> bool:
        return enemy_id in self._enemies

    def __iter__(self) -> Iterator[EnemyDefinition]:
        return iter(self._enemies.values())

    def __len__(self) -> int:
        return len(self._enemies)


_default_catalog: Optional[EnemyCatalog] = None


def get_enemy_catalog() -> EnemyCatalog:
    """Shared catalog built from the bundled YAML on first use."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = EnemyCatalog.from_yaml()
    return _default_catalog
