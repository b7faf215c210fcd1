"""Action card definitions and hand drawing.

Card effects are data: a damage ratio and hit count, a block ratio, and an
optional status applied to the enemy. Ratios scale the card's level-dependent
base value; the arithmetic lives in the battle calculator.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from ...core.data import CardKind, StatusType
from ...core.engine.battle_state import ActionCard
from .loader import CatalogError, load_yaml_data


DEFAULT_CARD_CATALOG_PATH = "assets/data/cards/action_cards.yaml"


@dataclass(frozen=True)
class CardDefinition:
    """Static description of one card kind."""

    kind: CardKind
    title: str
    cost: int
    damage_ratio: float = 0.0
    hits: int = 0
    block_ratio: float = 0.0
    status: Optional[StatusType] = None
    status_stacks: int = 0

    @property
    def deals_damage(self) -> bool:
        return self.damage_ratio > 0 and self.hits > 0

    @property
    def grants_block(self) -> bool:
        return self.block_ratio > 0

    def create_card(self) -> ActionCard:
        """New card instance with its own identity."""
        return ActionCard(kind=self.kind, cost=self.cost)


def parse_card(key: str, data: Any) -> CardDefinition:
    """Convert one YAML entry into a CardDefinition.

    Raises:
        ValueError: If the kind is unknown or a field is invalid
    """
    try:
        kind = CardKind(key)
    except ValueError:
        raise ValueError(f"unknown card kind {key!r}")
    if not isinstance(data, dict):
        raise ValueError(f"{key}: must be a mapping")

    cost = data.get("cost")
    if isinstance(cost, bool) or not isinstance(cost, int) or cost < 0:
        raise ValueError(f"{key}: 'cost' must be a non-negative integer")

    damage_ratio = float(data.get("damage_ratio", 0.0))
    block_ratio = float(data.get("block_ratio", 0.0))
    hits = int(data.get("hits", 1 if damage_ratio > 0 else 0))
    if damage_ratio < 0 or block_ratio < 0 or hits < 0:
        raise ValueError(f"{key}: ratios and hits must not be negative")

    status = None
    status_stacks = 0
    if data.get("status"):
        raw = data["status"]
        try:
            status = StatusType(raw["type"])
            status_stacks = int(raw["stacks"])
        except (KeyError, TypeError, ValueError):
            raise ValueError(f"{key}: invalid status {raw!r}")
        if status_stacks < 1:
            raise ValueError(f"{key}: status stacks must be positive")

    return CardDefinition(
        kind=kind,
        title=data.get("title", kind.value),
        cost=cost,
        damage_ratio=damage_ratio,
        hits=hits,
        block_ratio=block_ratio,
        status=status,
        status_stacks=status_stacks,
    )


class CardCatalog:
    """Read-only lookup table of card definitions."""

    def __init__(self, cards: list[CardDefinition]):
        self._cards: dict[CardKind, CardDefinition] = {card.kind: card for card in cards}

    @classmethod
    def from_yaml(cls, path: str = DEFAULT_CARD_CATALOG_PATH) -> "CardCatalog":
        """Load the catalog from a YAML file.

        Raises:
            CatalogError: If the file is missing or any entry is invalid
        """
        entries = load_yaml_data(path, root_key="cards")
        if not isinstance(entries, dict) or not entries:
            raise CatalogError(path, "'cards' must be a non-empty mapping")
        try:
            return cls([parse_card(key, value) for key, value in entries.items()])
        except ValueError as e:
            raise CatalogError(path, str(e))

    def lookup(self, kind: CardKind) -> CardDefinition:
        """Get a card definition.

        Raises:
            KeyError: If the kind is not in the catalog
        """
        if kind not in self._cards:
            raise KeyError(f"No card definition for kind: {kind}")
        return self._cards[kind]

    @property
    def kinds(self) -> list[CardKind]:
        return list(self._cards)

    def draw_hand(self, rng: random.Random, size: int) -> list[ActionCard]:
        """Draw ``size`` cards of distinct kinds (fewer if the pool is smaller)."""
        kinds = rng.sample(self.kinds, min(size, len(self._cards)))
        return [self._cards[kind].create_card() for kind in kinds]

    def draw_reward_options(self, rng: random.Random, count: int) -> list[CardKind]:
        """Distinct card kinds offered after a victory."""
        return rng.sample(self.kinds, min(count, len(self._cards)))

    def __iter__(self) -> Iterator[CardDefinition]:
        return iter(self._cards.values())

    def __len__(self) -> int:
        return len(self._cards)


_default_catalog: Optional[CardCatalog] = None


def get_card_catalog() -> CardCatalog:
    """Shared catalog built from the bundled YAML on first use."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = CardCatalog.from_yaml()
    return _default_catalog
