"""
Value types that cross component boundaries.

DiceRoll is a plain frozen dataclass so that malformed faces fail with the
domain InvalidDieFaceError. Outcome and view types are pydantic models that a
presentation layer can serialize directly.
"""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from city.logic.buildings import is_valid_die_face
from city.logic.enums import Building, GamePhase, PlacementState
from city.logic.exceptions import InvalidDieFaceError

CellKey = tuple[int, int]  # (row, col)


@dataclass(frozen=True)
class DiceRoll:
    """Ordered pair of die faces rolled for one turn."""

    first: int
    second: int

    def __post_init__(self) -> None:
        for face in (self.first, self.second):
            if not is_valid_die_face(face):
                raise InvalidDieFaceError(face)

    @property
    def total(self) -> int:
        return self.first + self.second

    @property
    def is_doubles(self) -> bool:
        return self.first == self.second

    @property
    def faces(self) -> tuple[int, int]:
        return (self.first, self.second)


@dataclass(frozen=True)
class BuildingGroup:
    """A maximal 4-connected region of one building type."""

    building: Building
    cells: tuple[CellKey, ...]

    def touches_row(self, row: int) -> bool:
        return any(r == row for r, _ in self.cells)


class PlazaNeighbor(BaseModel):
    """A building orthogonally adjacent to a qualifying plaza."""

    model_config = ConfigDict(frozen=True)

    row: int
    col: int
    building: Building


class PlazaBonus(BaseModel):
    """A square that earns the plaza bonus and the neighbours that earned it."""

    model_config = ConfigDict(frozen=True)

    row: int
    col: int
    neighbors: tuple[PlazaNeighbor, ...]


class RoundOutcome(BaseModel):
    """Result of scoring one completed round."""

    model_config = ConfigDict(frozen=True)

    round_number: int
    dice_sum: int
    target_row: int | None
    score: int
    scoring_cells: frozenset[CellKey] = frozenset()
    bonus_building: Building | None = None


class FinalScore(BaseModel):
    """Score breakdown for a finished (or in-progress) game."""

    model_config = ConfigDict(frozen=True)

    round_scores: tuple[int, ...]
    rounds_total: int
    plaza_bonus: int
    total: int
    bonus_buildings: dict[int, Building]


class GameView(BaseModel):
    """Read-only snapshot of everything a presentation layer renders."""

    model_config = ConfigDict(frozen=True)

    phase: GamePhase
    placement_state: PlacementState
    board: tuple[tuple[Building | None, ...], ...]
    current_round: int
    dice: tuple[int, int] | None
    doubles: bool
    selected_building: Building | None
    selected_scoring_row: int | None
    round_scores: tuple[int, ...]
    total_score: int
    plaza_bonus: int
    game_complete: bool
    available_bonus_buildings: tuple[Building, ...]
    allowed_columns: frozenset[int] | None
    scoring_street: int | None
    scoring_cells: frozenset[CellKey]
