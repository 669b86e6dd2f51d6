"""Centralized game configuration for City Dice - board shape, rounds and point values."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from city.logic.buildings import MAX_DIE_FACE
from city.logic.exceptions import UnsupportedConfigError

# streets are addressed by dice sums 3..11, which need five rows
MIN_ROWS = 5

DEFAULT_POINT_MATRIX: tuple[tuple[int, ...], ...] = (
    (3, 0, 2, 2, 0, 3),  # (3, 4)
    (0, 1, 0, 0, 1, 0),  # (5, 6)
    (2, 0, 1, 1, 0, 2),  # (7)
    (0, 1, 0, 0, 1, 0),  # (8, 9)
    (3, 0, 2, 2, 0, 3),  # (10, 11)
)


class GameConfig(BaseModel):
    """
    Configuration for a city game.

    All fields default to the standard 5x6 board played over nine rounds with
    bonus stages after rounds 3, 6 and 9. Labels are presentation only.
    """

    model_config = ConfigDict(frozen=True)

    # --- Board ---
    rows: int = Field(default=5, ge=1)
    cols: int = Field(default=6, ge=1)
    row_labels: tuple[str, ...] = ("(3, 4)", "(5, 6)", "(7)", "(8, 9)", "(10, 11)")
    col_labels: tuple[str, ...] = ("1", "2", "3", "4", "5", "6")

    # --- Rounds ---
    max_rounds: int = Field(default=9, ge=1)
    bonus_stage_rounds: tuple[int, ...] = (3, 6, 9)

    # --- Scoring ---
    point_matrix: tuple[tuple[int, ...], ...] = DEFAULT_POINT_MATRIX
    plaza_bonus_points: int = Field(default=10, ge=0)

    def is_bonus_round(self, round_number: int) -> bool:
        return round_number in self.bonus_stage_rounds

    def cell_points(self, row: int, col: int) -> int:
        """Point value of a cell, 0 outside the matrix."""
        if 0 <= row < len(self.point_matrix) and 0 <= col < len(self.point_matrix[row]):
            return self.point_matrix[row][col]
        return 0


DEFAULT_GAME_CONFIG = GameConfig()


def validate_config(config: GameConfig) -> None:
    """Validate that a configuration can actually be played.

    Raises UnsupportedConfigError listing every problem found.
    """
    errors: list[str] = []

    if config.rows < MIN_ROWS:
        errors.append(f"rows={config.rows} is not supported (dice sums need at least {MIN_ROWS} streets)")

    if config.cols < MAX_DIE_FACE:
        errors.append(f"cols={config.cols} is not supported (every die face needs a column)")

    if len(config.point_matrix) != config.rows or any(len(row) != config.cols for row in config.point_matrix):
        errors.append(f"point_matrix must be {config.rows}x{config.cols}")

    if len(config.row_labels) != config.rows:
        errors.append(f"row_labels has {len(config.row_labels)} entries, expected {config.rows}")

    if len(config.col_labels) != config.cols:
        errors.append(f"col_labels has {len(config.col_labels)} entries, expected {config.cols}")

    bad_rounds = sorted(r for r in config.bonus_stage_rounds if not 1 <= r <= config.max_rounds)
    if bad_rounds:
        errors.append(f"bonus_stage_rounds {bad_rounds} fall outside rounds 1-{config.max_rounds}")

    if errors:
        raise UnsupportedConfigError("; ".join(errors))
