"""
Shared test fixtures for the genesis combat engine test suite.

Provides catalogs, rules, an event bus and a seeded resolver, plus a small
builder for putting a battle state into a known shape.
"""

import sys
import os
import random

import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from genesis.core.config import CombatRules
from genesis.core.data import CardKind, StatusType
from genesis.core.engine.battle_state import ActionCard, BattleState, SideState
from genesis.core.events import EventManager
from genesis.game.combat import CombatResolver, StatusEngine
from genesis.game.content import ArtifactCatalog, BuildingCatalog, CardCatalog, EnemyCatalog
from genesis.game.run import Castle, RunManager


CARD_COSTS = {
    CardKind.STRONG_ATTACK: 1,
    CardKind.DOUBLE_ATTACK: 2,
    CardKind.DEFEND: 1,
    CardKind.COUNTER: 2,
    CardKind.BLEED: 1,
    CardKind.WEAKEN: 1,
    CardKind.STUN: 2,
}


class TestDataBuilder:
    """Helpers for shaping battle states in tests."""

    @staticmethod
    def card(kind: CardKind) -> ActionCard:
        return ActionCard(kind=kind, cost=CARD_COSTS[kind])

    @staticmethod
    def with_hand(state: BattleState, *kinds: CardKind) -> BattleState:
        """Replace the hand with fresh cards of the given kinds."""
        state.hand = [TestDataBuilder.card(kind) for kind in kinds]
        return state

    @staticmethod
    def card_id(state: BattleState, kind: CardKind) -> str:
        for card in state.hand:
            if card.kind == kind:
                return card.card_id
        raise AssertionError(f"No {kind.value} card in hand")

    @staticmethod
    def side(hp: int = 20, block: int = 0, **statuses: int) -> SideState:
        """SideState with statuses given as ``bleed=2, weak=1``."""
        from genesis.core.data import BattleSide
        side = SideState(side=BattleSide.PLAYER, hp=hp, max_hp=max(hp, 20), block=block)
        engine = StatusEngine(CombatRules())
        for name, stacks in statuses.items():
            engine.apply_status(side, StatusType(name), stacks)
        return side


@pytest.fixture
def rules():
    """Default combat rules."""
    return CombatRules()


@pytest.fixture
def event_manager():
    """Create an event manager for testing."""
    return EventManager()


@pytest.fixture(scope="session")
def enemy_catalog():
    return EnemyCatalog.from_yaml()


@pytest.fixture(scope="session")
def card_catalog():
    return CardCatalog.from_yaml()


@pytest.fixture(scope="session")
def artifact_catalog():
    return ArtifactCatalog.from_yaml()


@pytest.fixture(scope="session")
def building_catalog():
    return BuildingCatalog.from_yaml()


@pytest.fixture
def castle(building_catalog):
    """Empty 25-tile castle."""
    return Castle(building_catalog)


@pytest.fixture
def status_engine(rules):
    return StatusEngine(rules)


@pytest.fixture
def resolver(enemy_catalog, card_catalog, rules, event_manager):
    """Resolver wired to the bundled catalogs with a seeded RNG."""
    return CombatResolver(
        enemy_catalog=enemy_catalog,
        card_catalog=card_catalog,
        rules=rules,
        event_manager=event_manager,
        rng=random.Random(1234),
    )


@pytest.fixture
def run_manager(resolver, event_manager, artifact_catalog):
    return RunManager(
        resolver,
        event_manager=event_manager,
        artifact_catalog=artifact_catalog,
        rng=random.Random(99),
    )


@pytest.fixture
def punisher_state(resolver):
    """Fresh encounter against the punisher on floor 1 (X = 6)."""
    return resolver.start_encounter("punisher_v1", floor=1, seed=42)
