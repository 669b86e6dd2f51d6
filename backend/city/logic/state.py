"""
Game state container for a single city playthrough.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from city.logic.enums import GamePhase, PlacementState

if TYPE_CHECKING:
    from city.logic.board import Board
    from city.logic.enums import Building
    from city.logic.session import GameSession
    from city.logic.settings import GameConfig
    from city.logic.types import DiceRoll, RoundOutcome


@dataclass
class CityGameState:
    """
    Everything one playthrough owns.

    The board and session are exclusively owned by this state and mutated
    only through city.logic.turn and city.logic.game.
    """

    config: GameConfig
    board: Board
    session: GameSession

    # turn tracking
    placement_state: PlacementState = PlacementState.PREP_FIRST
    roll: DiceRoll | None = None  # None while waiting for the next roll
    selected_building: Building | None = None  # player's pick for preparation/bonus placements

    # most recent scored round, kept for the scoring visualization
    last_outcome: RoundOutcome | None = None

    @property
    def phase(self) -> GamePhase:
        if self.session.game_complete:
            return GamePhase.FINISHED
        if self.session.in_bonus_stage:
            return GamePhase.BONUS_STAGE
        if self.session.in_preparation_phase:
            return GamePhase.PREPARATION
        return GamePhase.PLAYING

    @property
    def awaiting_roll(self) -> bool:
        """True when no turn is in progress and the next roll may be made."""
        return self.roll is None and not self.session.game_complete
