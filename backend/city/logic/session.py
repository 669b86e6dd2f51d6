"""
Round, score and bonus-stage bookkeeping for one playthrough.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING

import structlog

from city.logic.buildings import BONUS_BUILDINGS

if TYPE_CHECKING:
    from city.logic.enums import Building
    from city.logic.settings import GameConfig
    from city.logic.types import CellKey

logger = structlog.get_logger()


@dataclass
class GameSession:
    """
    Mutable session state.

    Round 0 is the preparation round; rounds 1..max_rounds are scored into
    footer_scores[round - 1]. Bonus buildings, once used, stay used until
    reset_game.
    """

    footer_scores: list[int]
    current_round: int = 0
    in_preparation_phase: bool = True
    in_bonus_stage: bool = False
    game_complete: bool = False

    # bonus stages
    used_bonus_buildings: set[Building] = field(default_factory=set)
    bonus_stage_buildings: dict[int, Building] = field(default_factory=dict)  # round -> building

    # current turn
    current_turn_placements: set[CellKey] = field(default_factory=set)
    first_turn_placed: bool = False
    second_turn_placed: bool = False
    selected_scoring_row: int | None = None  # nominated street for dice sums 2 and 12

    @classmethod
    def create(cls, config: GameConfig) -> GameSession:
        return cls(footer_scores=[0] * config.max_rounds)

    def reset_game(self, config: GameConfig) -> None:
        """Return every field to its initial value."""
        fresh = GameSession.create(config)
        for f in fields(fresh):
            setattr(self, f.name, getattr(fresh, f.name))

    # --- rounds ---

    def advance_round(self, max_rounds: int) -> None:
        """Move to the next round, or mark the game complete after the last one."""
        next_round = self.current_round + 1
        if next_round <= max_rounds:
            self.current_round = next_round
        else:
            self.game_complete = True

    def exit_preparation_phase(self) -> None:
        self.in_preparation_phase = False
        self.current_round = 1

    def set_round_score(self, index: int, score: int) -> None:
        """Record the score of round index + 1; out-of-range indexes are ignored."""
        if not 0 <= index < len(self.footer_scores):
            logger.debug("round score index out of range, ignoring", index=index, score=score)
            return
        self.footer_scores[index] = score

    def total_score(self) -> int:
        """Sum of the recorded round scores; the plaza bonus is added by the caller."""
        return sum(self.footer_scores)

    # --- bonus stages ---

    def start_bonus_stage(self) -> None:
        self.in_bonus_stage = True

    def complete_bonus_stage(self, building: Building) -> None:
        """Consume a bonus building, record it against the current round and leave the stage."""
        self.used_bonus_buildings.add(building)
        self.bonus_stage_buildings[self.current_round] = building
        self.in_bonus_stage = False

    def available_bonus_buildings(self) -> tuple[Building, ...]:
        return tuple(b for b in BONUS_BUILDINGS if b not in self.used_bonus_buildings)

    # --- current turn ---

    def add_placement(self, cell: CellKey) -> None:
        self.current_turn_placements.add(cell)

    def clear_placements(self) -> None:
        """Forget the turn's placements and both sub-step flags."""
        self.current_turn_placements = set()
        self.first_turn_placed = False
        self.second_turn_placed = False

    def mark_first_placed(self) -> None:
        self.first_turn_placed = True

    def mark_second_placed(self) -> None:
        self.second_turn_placed = True

    def both_placed(self) -> bool:
        return self.first_turn_placed and self.second_turn_placed
