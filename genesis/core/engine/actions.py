"""Action validation for card plays.

The resolver checks every card play with :func:`validate_card_play` before it
touches the state. The result object mirrors the error that ``play_card``
raises, so a UI can grey out cards without catching exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .battle_state import ActionCard, BattleState
from .errors import (
    CombatError,
    EncounterAlreadyTerminal,
    InsufficientActionPoints,
    TurnSkipped,
    UnknownCard,
)


@dataclass
class ActionValidation:
    """Result of action validation."""

    is_valid: bool
    reason: str = ""
    error: Optional[CombatError] = None
    card: Optional[ActionCard] = None

    @classmethod
    def valid(cls, card: Optional[ActionCard] = None) -> "ActionValidation":
        """Create a valid result."""
        return cls(is_valid=True, card=card)

    @classmethod
    def invalid(cls, error: CombatError) -> "ActionValidation":
        """Create an invalid result carrying the error to raise."""
        return cls(is_valid=False, reason=str(error), error=error)

    def raise_if_invalid(self) -> None:
        if not self.is_valid and self.error is not None:
            raise self.error


def validate_card_play(state: BattleState, card_id: str) -> ActionValidation:
    """Check whether a card can be played in the given state.

    Checks run in order: terminal encounter, card in hand, stun, action points.
    """
    if state.is_terminal:
        return ActionValidation.invalid(EncounterAlreadyTerminal(state.phase))

    card = state.find_card(card_id)
    if card is None:
        return ActionValidation.invalid(UnknownCard(card_id))

    if state.player_skip_turn:
        return ActionValidation.invalid(TurnSkipped(state.turn))

    if card.cost > state.action_points:
        return ActionValidation.invalid(
            InsufficientActionPoints(card_id, card.cost, state.action_points)
        )

    return ActionValidation.valid(card)


def validate_turn_action(state: BattleState) -> ActionValidation:
    """Check whether end-turn or surrender is allowed."""
    if state.is_terminal:
        return ActionValidation.invalid(EncounterAlreadyTerminal(state.phase))
    return ActionValidation.valid()
