"""Static game content.

This package loads the immutable catalogs the engine reads from:
- enemy_catalog.py: Enemy definitions and their 3-step patterns
- card_catalog.py: Action card definitions and hand drawing
- artifact_catalog.py: Chest artifacts
- building_catalog.py: Castle buildings, their costs and income
- loader.py: Shared YAML loading
"""

from .loader import CatalogError, load_yaml_data
from .enemy_catalog import (
    AttackStep,
    BlockStep,
    BlockAndAttackStep,
    MultiHitAttackStep,
    EnemyPatternStep,
    ResolvedStep,
    OnHitStatus,
    EnemyDefinition,
    EnemyCatalog,
    get_enemy_catalog,
)
from .card_catalog import CardDefinition, CardCatalog, get_card_catalog
from .artifact_catalog import Artifact, ArtifactCatalog, get_artifact_catalog
from .building_catalog import BuildingDefinition, BuildingCatalog, get_building_catalog

__all__ = [
    "CatalogError",
    "load_yaml_data",
    "AttackStep",
    "BlockStep",
    "BlockAndAttackStep",
    "MultiHitAttackStep",
    "EnemyPatternStep",
    "ResolvedStep",
    "OnHitStatus",
    "EnemyDefinition",
    "EnemyCatalog",
    "get_enemy_catalog",
    "CardDefinition",
    "CardCatalog",
    "get_card_catalog",
    "Artifact",
    "ArtifactCatalog",
    "get_artifact_catalog",
    "BuildingDefinition",
    "BuildingCatalog",
    "get_building_catalog",
]
