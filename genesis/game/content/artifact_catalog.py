"""Chest artifacts and their daily income bonuses."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Optional

from ...core.engine.battle_state import new_identifier
from .loader import CatalogError, load_yaml_data


DEFAULT_ARTIFACT_CATALOG_PATH = "assets/data/artifacts/artifacts.yaml"


@dataclass(frozen=True)
class Artifact:
    icon: str
    name: str
    description: str
    income_bonus: int
    artifact_id: str = field(default_factory=new_identifier)


def parse_artifact(data: Any) -> Artifact:
    if not isinstance(data, dict) or not data.get("name"):
        raise ValueError(f"artifact entry must be a mapping with a name, got {data!r}")
    bonus = data.get("income_bonus", 0)
    if isinstance(bonus, bool) or not isinstance(bonus, int) or bonus < 0:
        raise ValueError(f"{data['name']}: 'income_bonus' must be a non-negative integer")
    return Artifact(
        icon=data.get("icon", ""),
        name=data["name"],
        description=data.get("description", ""),
        income_bonus=bonus,
    )


class ArtifactCatalog:
    """Pool of artifacts a chest can reveal."""

    def __init__(self, artifacts: list[Artifact]):
        if not artifacts:
            raise ValueError("artifact pool must not be empty")
        self._artifacts = list(artifacts)

    @classmethod
    def from_yaml(cls, path: str = DEFAULT_ARTIFACT_CATALOG_PATH) -> "ArtifactCatalog":
        entries = load_yaml_data(path, root_key="artifacts")
        if not isinstance(entries, list):
            raise CatalogError(path, "'artifacts' must be a list")
        try:
            return cls([parse_artifact(entry) for entry in entries])
        except ValueError as e:
            raise CatalogError(path, str(e))

    def draw(self, rng: random.Random) -> Artifact:
        """Uniform random artifact; each draw is a new instance."""
        template = rng.choice(self._artifacts)
        return Artifact(
            icon=template.icon,
            name=template.name,
            description=template.description,
            income_bonus=template.income_bonus,
        )

    @property
    def names(self) -> list[str]:
        return [artifact.name for artifact in self._artifacts]

    def __len__(self) -> int:
        return len(self._artifacts)


_default_catalog: Optional[ArtifactCatalog] = None


def get_artifact_catalog() -> ArtifactCatalog:
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = ArtifactCatalog.from_yaml()
    return _default_catalog
