"""Run and meta progression.

- run_state.py: RunState, PlayerMeta, rooms, chests and rewards
- castle.py: Castle tiles, building orders and their daily income
- tower_service.py: Room generation between floors
- run_manager.py: Folds encounter outcomes into run progression
"""

from .castle import Castle, CastleOrder, CastleTile
from .run_state import ChestState, PlayerMeta, RewardState, RoomOption, RunState
from .tower_service import TowerService
from .run_manager import RunManager

__all__ = [
    "Castle",
    "CastleOrder",
    "CastleTile",
    "ChestState",
    "PlayerMeta",
    "RewardState",
    "RoomOption",
    "RunState",
    "TowerService",
    "RunManager",
]
