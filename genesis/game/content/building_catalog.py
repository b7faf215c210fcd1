"""Castle building definitions and their cost and income curves."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ...core.data import BuildingKind
from .loader import CatalogError, load_yaml_data


DEFAULT_BUILDING_CATALOG_PATH = "assets/data/castle/buildings.yaml"

BUILD_COST_PER_BUILDING = 4


@dataclass(frozen=True)
class BuildingDefinition:
    """Static description of one building kind."""

    kind: BuildingKind
    title: str
    icon: str
    base_build_cost: int
    base_income: int
    income_growth: int
    max_level: int = 5

    def build_cost(self, existing_buildings: int) -> int:
        return self.base_build_cost + existing_buildings * BUILD_COST_PER_BUILDING

    def income_per_day(self, level: int) -> int:
        level = max(1, level)
        return self.base_income + (level - 1) * self.income_growth

    @staticmethod
    def upgrade_cost(from_level: int) -> int:
        level = max(1, from_level)
        return 10 + 5 * level * level + 5 * level


def _non_negative_int(key: str, data: dict, field_name: str, default: Optional[int] = None) -> int:
    value = data.get(field_name, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{key}: '{field_name}' must be a non-negative integer")
    return value


def parse_building(key: str, data: Any) -> BuildingDefinition:
    """Convert one YAML entry into a BuildingDefinition.

    Raises:
        ValueError: If the kind is unknown or a field is invalid
    """
    try:
        kind = BuildingKind(key)
    except ValueError:
        raise ValueError(f"unknown building kind {key!r}")
    if not isinstance(data, dict):
        raise ValueError(f"{key}: must be a mapping")

    max_level = _non_negative_int(key, data, "max_level", 5)
    if max_level < 1:
        raise ValueError(f"{key}: 'max_level' must be at least 1")

    return BuildingDefinition(
        kind=kind,
        title=data.get("title", kind.value),
        icon=data.get("icon", ""),
        base_build_cost=_non_negative_int(key, data, "base_build_cost"),
        base_income=_non_negative_int(key, data, "base_income"),
        income_growth=_non_negative_int(key, data, "income_growth", 0),
        max_level=max_level,
    )


class BuildingCatalog:
    """Read-only lookup table of building definitions."""

    def __init__(self, buildings: list[BuildingDefinition]):
        if not buildings:
            raise ValueError("building catalog must not be empty")
        self._buildings: dict[BuildingKind, BuildingDefinition] = {
            building.kind: building for building in buildings
        }

    @classmethod
    def from_yaml(cls, path: str = DEFAULT_BUILDING_CATALOG_PATH) -> "BuildingCatalog":
        entries = load_yaml_data(path, root_key="buildings")
        if not isinstance(entries, dict) or not entries:
            raise CatalogError(path, "'buildings' must be a non-empty mapping")
        try:
            return cls([parse_building(key, value) for key, value in entries.items()])
        except ValueError as e:
            raise CatalogError(path, str(e))

    def lookup(self, kind: BuildingKind) -> BuildingDefinition:
        """Get a building definition.

        Raises:
            KeyError: If the kind is not in the catalog
        """
        return self._buildings[kind]

    @property
    def kinds(self) -> list[BuildingKind]:
        return list(self._buildings)

    def __len__(self) -> int:
        return len(self._buildings)


_default_catalog: Optional[BuildingCatalog] = None


def get_building_catalog() -> BuildingCatalog:
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = BuildingCatalog.from_yaml()
    return _default_catalog
