"""
The castle: a grid of tiles holding buildings that pay gold every day.

Orders are paid up front and never finish immediately. Building puts a tile
into CONSTRUCTING and upgrading puts it into UPGRADING; the next day tick
turns both into finished buildings, after that day's income was collected.
Only finished buildings produce income, so a tile being upgraded earns
nothing until the upgrade completes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...core.data import BuildingKind, TileStatus
from ...core.engine.errors import InsufficientGold, InvalidTile, TileNotUpgradeable, TileOccupied
from ..content.building_catalog import BuildingCatalog, BuildingDefinition, get_building_catalog


CASTLE_SIZE = 25

PENDING_STATUSES = (TileStatus.CONSTRUCTING, TileStatus.UPGRADING)


@dataclass
class CastleTile:
    """One plot of the castle grid."""

    index: int
    status: TileStatus = TileStatus.EMPTY
    building: Optional[BuildingKind] = None
    # Level of the finished building; 0 while empty or constructing
    level: int = 0

    @property
    def is_empty(self) -> bool:
        return self.status == TileStatus.EMPTY

    @property
    def is_busy(self) -> bool:
        return self.status in PENDING_STATUSES

    @property
    def produces_income(self) -> bool:
        return self.status == TileStatus.BUILT


@dataclass(frozen=True)
class CastleOrder:
    """A paid build or upgrade waiting for the next day."""

    tile: int
    kind: BuildingKind
    target_level: int
    cost: int


class Castle:
    """Owns the tiles and prices every order against the building catalog."""

    def __init__(self, catalog: Optional[BuildingCatalog] = None, size: int = CASTLE_SIZE):
        if size < 1:
            raise ValueError(f"castle size must be positive, got {size}")
        self.catalog = catalog or get_building_catalog()
        self.tiles = [CastleTile(index=index) for index in range(size)]

    def tile(self, index: int) -> CastleTile:
        """Get a tile by index.

        Raises:
            InvalidTile: If the index is out of range
        """
        if not 0 <= index < len(self.tiles):
            raise InvalidTile(index, len(self.tiles))
        return self.tiles[index]

    @property
    def buildings_count(self) -> int:
        """Tiles holding a building, finished or not."""
        return sum(1 for tile in self.tiles if not tile.is_empty)

    @property
    def free_tiles_count(self) -> int:
        return sum(1 for tile in self.tiles if tile.is_empty)

    def income_per_day(self) -> int:
        """Gold paid by the finished buildings."""
        return sum(
            self.catalog.lookup(tile.building).income_per_day(tile.level)
            for tile in self.tiles
            if tile.produces_income and tile.building is not None
        )

    def build_cost(self, kind: BuildingKind) -> int:
        return self.catalog.lookup(kind).build_cost(self.buildings_count)

    def upgrade_cost(self, index: int) -> int:
        """Price of the next level on a tile.

        Raises:
            InvalidTile: If the index is out of range
            TileNotUpgradeable: If the tile holds no finished building below max level
        """
        tile = self.tile(index)
        self._upgradeable_definition(tile)
        return BuildingDefinition.upgrade_cost(tile.level)

    def can_upgrade(self, index: int) -> bool:
        try:
            self.upgrade_cost(index)
        except (InvalidTile, TileNotUpgradeable):
            return False
        return True

    def build(self, index: int, kind: BuildingKind, gold: int) -> CastleOrder:
        """Start constructing ``kind`` on an empty tile.

        Args:
            index: Tile to build on
            kind: Building to construct
            gold: Gold available to pay with

        Returns:
            The placed order; the caller deducts its cost

        Raises:
            InvalidTile: If the index is out of range
            TileOccupied: If the tile is not empty
            InsufficientGold: If the building costs more than ``gold``
        """
        tile = self.tile(index)
        if not tile.is_empty:
            raise TileOccupied(index)
        cost = self.build_cost(kind)
        if cost > gold:
            raise InsufficientGold(cost, gold)

        tile.status = TileStatus.CONSTRUCTING
        tile.building = kind
        tile.level = 0
        return CastleOrder(tile=index, kind=kind, target_level=1, cost=cost)

    def upgrade(self, index: int, gold: int) -> CastleOrder:
        """Start upgrading the finished building on a tile by one level.

        Raises:
            InvalidTile: If the index is out of range
            TileNotUpgradeable: If the tile holds no finished building below max level
            InsufficientGold: If the upgrade costs more than ``gold``
        """
        tile = self.tile(index)
        definition = self._upgradeable_definition(tile)
        cost = definition.upgrade_cost(tile.level)
        if cost > gold:
            raise InsufficientGold(cost, gold)

        tile.status = TileStatus.UPGRADING
        return CastleOrder(tile=index, kind=definition.kind, target_level=tile.level + 1, cost=cost)

    def complete_pending(self) -> list[CastleTile]:
        """Finish every construction and upgrade.

        Returns:
            The tiles that changed, in grid order
        """
        completed = []
        for tile in self.tiles:
            if tile.status == TileStatus.CONSTRUCTING:
                tile.level = 1
            elif tile.status == TileStatus.UPGRADING:
                tile.level = max(1, tile.level) + 1
            else:
                continue
            tile.status = TileStatus.BUILT
            completed.append(tile)
        return completed

    def _upgradeable_definition(self, tile: CastleTile) -> BuildingDefinition:
        if tile.status != TileStatus.BUILT or tile.building is None:
            reason = "it is empty" if tile.is_empty else "work is already in progress"
            raise TileNotUpgradeable(tile.index, reason)
        definition = self.catalog.lookup(tile.building)
        if tile.level >= definition.max_level:
            raise TileNotUpgradeable(tile.index, f"already at max level {definition.max_level}")
        return definition
