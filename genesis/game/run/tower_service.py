"""Room generation between floors."""

import random

from ...core.data import RoomKind
from .run_state import RoomOption


CHEST_LOCK_STREAK = 2


class TowerService:
    """Offers two battles and one chest, in random order."""

    def __init__(self, rng: random.Random):
        self.rng = rng

    def generate_room_options(self, non_combat_streak: int) -> list[RoomOption]:
        """
        Build the room choice for the next floor.

        The chest is locked once the player has taken two non-combat rooms in
        a row.
        """
        options = [
            RoomOption(kind=RoomKind.COMBAT),
            RoomOption(kind=RoomKind.COMBAT),
            RoomOption(kind=RoomKind.CHEST, is_locked=non_combat_streak >= CHEST_LOCK_STREAK),
        ]
        self.rng.shuffle(options)
        return options
