"""
Headless autoplayer for City Dice.

Rolls seeded dice and drives the rules core through complete games. Used by
bin/simulate_game.py and by tests that need a realistic full playthrough.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import structlog

from city.logic.buildings import BONUS_BUILDINGS
from city.logic.enums import PlacementState
from city.logic.game import compute_final_score, init_game
from city.logic.placement import is_preparation_state, sibling_step
from city.logic.scoring import PLAYER_CHOICE_DICE_SUMS, score_street
from city.logic.turn import (
    can_place_at,
    choose_placement_step,
    place_building,
    roll_dice,
    select_building,
    select_scoring_row,
)
from shared.logging import game_log_context

if TYPE_CHECKING:
    from city.logic.enums import Building
    from city.logic.settings import GameConfig
    from city.logic.state import CityGameState
    from city.logic.types import CellKey, FinalScore

logger = structlog.get_logger()

MAX_REROLLS = 10


class AutoPlayerStrategy(Enum):
    """Available autoplayer strategies."""

    FIRST_LEGAL = "first_legal"
    RANDOM_LEGAL = "random_legal"


@dataclass(frozen=True)
class GameRecord:
    """Result of one autoplayed game."""

    seed: int
    final_score: FinalScore
    completed: bool  # False when a turn stayed blocked through every re-roll
    turns: int


class AutoPlayer:
    """
    Makes every decision a player would: building picks, cell clicks and
    street nominations for dice sums of 2 and 12.
    """

    def __init__(self, rng: random.Random, strategy: AutoPlayerStrategy = AutoPlayerStrategy.FIRST_LEGAL) -> None:
        self.rng = rng
        self.strategy = strategy

    def legal_cells(self, state: CityGameState) -> list[CellKey]:
        return [
            (row, col)
            for row in range(state.board.rows)
            for col in range(state.board.cols)
            if can_place_at(state, row, col)
        ]

    def choose_cell(self, state: CityGameState) -> CellKey | None:
        cells = self.legal_cells(state)
        if not cells:
            return None
        if self.strategy == AutoPlayerStrategy.RANDOM_LEGAL:
            return self.rng.choice(cells)
        return cells[0]

    def choose_building(self, state: CityGameState) -> Building | None:
        """Pick the building for a preparation or bonus placement."""
        if state.placement_state == PlacementState.BONUS:
            available = state.session.available_bonus_buildings()
            return available[0] if available else None
        return self.rng.choice(BONUS_BUILDINGS)

    def choose_scoring_row(self, state: CityGameState) -> int:
        """Nominate the street that scores best on the current board."""
        if state.roll is None:
            raise ValueError("cannot nominate a street without a roll")
        dice_sum = state.roll.total
        return max(
            range(state.config.rows),
            key=lambda row: score_street(dice_sum, state.board, state.config, row),
        )

    def play_step(self, state: CityGameState) -> bool:
        """
        Make one placement for the current state.

        Switches to the sibling sub-step when the current one has no legal
        cell. Returns False when neither sub-step can be placed.
        """
        if state.placement_state == PlacementState.BONUS or is_preparation_state(state.placement_state):
            select_building(state, self.choose_building(state))

        cell = self.choose_cell(state)
        if cell is None:
            sibling = sibling_step(state.placement_state)
            if sibling is None or not choose_placement_step(state, sibling):
                return False
            if is_preparation_state(sibling):
                select_building(state, self.choose_building(state))
            cell = self.choose_cell(state)
            if cell is None:
                return False

        result = place_building(state, *cell)
        return result.accepted

    def roll(self, state: CityGameState) -> bool:
        """Roll seeded dice and nominate a street when the sum needs one."""
        first = self.rng.randint(1, 6)
        second = self.rng.randint(1, 6)
        if not roll_dice(state, first, second):
            return False
        if first + second in PLAYER_CHOICE_DICE_SUMS:
            select_scoring_row(state, self.choose_scoring_row(state))
        return True

    def play_turn(self, state: CityGameState) -> bool:
        """
        Roll and place until the turn (and any bonus stage) is done.

        A blocked turn is rolled again, at most MAX_REROLLS times.
        """
        for _ in range(MAX_REROLLS + 1):
            if not self.roll(state):
                return False
            while state.roll is not None and not state.session.game_complete:
                if not self.play_step(state):
                    break
            else:
                return True
            logger.info(
                "turn blocked",
                round_number=state.session.current_round,
                placement_state=state.placement_state,
                dice=state.roll.faces if state.roll is not None else None,
            )

        logger.warning("no legal placement left", round_number=state.session.current_round)
        return False


def play_game(
    seed: int,
    config: GameConfig | None = None,
    strategy: AutoPlayerStrategy = AutoPlayerStrategy.FIRST_LEGAL,
) -> GameRecord:
    """Play one full game with seeded dice."""
    state = init_game(config)
    player = AutoPlayer(random.Random(seed), strategy)
    turns = 0
    completed = True
    with game_log_context(seed=seed, strategy=strategy):
        while not state.session.game_complete:
            turns += 1
            if not player.play_turn(state):
                completed = False
                break
        final_score = compute_final_score(state)
        logger.info("autoplay finished", completed=completed, total=final_score.total, turns=turns)
    return GameRecord(seed=seed, final_score=final_score, completed=completed, turns=turns)
