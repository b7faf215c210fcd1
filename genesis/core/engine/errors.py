"""Error taxonomy of the combat engine, the run manager and the castle.

Every error is raised before any mutation, so the caller can simply
re-prompt for a valid action.
"""

from typing import Optional

from ..data import CardKind, EncounterPhase


class CombatError(Exception):
    """Base exception for rejected combat actions."""
    pass


class InsufficientActionPoints(CombatError):
    """Raised when a card costs more than the remaining action points."""

    def __init__(self, card_id: str, cost: int, available: int):
        super().__init__(f"Card {card_id} costs {cost} AP but only {available} AP remain")
        self.card_id = card_id
        self.cost = cost
        self.available = available


class UnknownCard(CombatError):
    """Raised when the requested card is not in the current hand."""

    def __init__(self, card_id: str):
        super().__init__(f"Card {card_id} is not in hand")
        self.card_id = card_id


class UnknownEnemy(CombatError):
    """Raised when an enemy id is not in the catalog."""

    def __init__(self, enemy_id: str):
        super().__init__(f"Unknown enemy: {enemy_id}")
        self.enemy_id = enemy_id


class EncounterAlreadyTerminal(CombatError):
    """Raised when an action is attempted after the encounter ended."""

    def __init__(self, phase: EncounterPhase):
        super().__init__(f"Encounter already ended ({phase.name})")
        self.phase = phase


class TurnSkipped(CombatError):
    """Raised when the player tries to play a card while stunned."""

    def __init__(self, turn: int):
        super().__init__(f"Player is stunned and cannot act on turn {turn}")
        self.turn = turn


class RunError(Exception):
    """Base exception for run manager errors."""
    pass


class NoActiveRun(RunError):
    """Raised when a run operation is attempted without a run."""

    def __init__(self, operation: str):
        super().__init__(f"Cannot {operation}: no active run")
        self.operation = operation


class RoomLocked(RunError):
    """Raised when a locked room is selected."""

    def __init__(self, index: int):
        super().__init__(f"Room {index} is locked")
        self.index = index


class InvalidRoom(RunError):
    """Raised when a room index is out of range."""

    def __init__(self, index: int, available: int):
        super().__init__(f"Room {index} does not exist ({available} rooms offered)")
        self.index = index
        self.available = available


class EncounterInProgress(RunError):
    """Raised when the run cannot move on because combat is unresolved."""

    def __init__(self, encounter_id: str):
        super().__init__(f"Encounter {encounter_id} is still in progress")
        self.encounter_id = encounter_id


class NoPendingReward(RunError):
    """Raised when claiming a reward or chest that is not available."""
    pass


class InvalidReward(RunError):
    """Raised when the claimed card kind was not offered."""

    def __init__(self, kind: CardKind):
        super().__init__(f"{kind.value} is not among the offered rewards")
        self.kind = kind


class EncounterMismatch(RunError):
    """Raised when a state does not belong to the run's open encounter."""

    def __init__(self, encounter_id: str, active_id: Optional[str]):
        if active_id is None:
            detail = "no encounter is open"
        else:
            detail = f"the open encounter is {active_id}"
        super().__init__(f"Encounter {encounter_id} cannot be concluded: {detail}")
        self.encounter_id = encounter_id
        self.active_id = active_id


class CastleError(Exception):
    """Base exception for rejected castle orders."""
    pass


class InvalidTile(CastleError):
    """Raised when a castle tile index is out of range."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Tile {index} does not exist ({size} tiles)")
        self.index = index
        self.size = size


class TileOccupied(CastleError):
    """Raised when building on a tile that is not empty."""

    def __init__(self, index: int):
        super().__init__(f"Tile {index} is not empty")
        self.index = index


class TileNotUpgradeable(CastleError):
    """Raised when a tile holds no finished building below max level."""

    def __init__(self, index: int, reason: str):
        super().__init__(f"Tile {index} cannot be upgraded: {reason}")
        self.index = index
        self.reason = reason


class InsufficientGold(CastleError):
    """Raised when an order costs more gold than the player has."""

    def __init__(self, cost: int, available: int):
        super().__init__(f"Costs {cost} gold but only {available} gold available")
        self.cost = cost
        self.available = available
