"""Test state builders for the city rules core."""

from city.logic.board import Board
from city.logic.enums import Building, PlacementState
from city.logic.game import init_game
from city.logic.settings import GameConfig
from city.logic.state import CityGameState
from city.logic.types import DiceRoll

_SYMBOLS: dict[str, Building | None] = {
    "H": Building.HOUSE,
    "L": Building.LAKE,
    "F": Building.FOREST,
    "S": Building.SQUARE,
    ".": None,
}


def board_from_rows(*rows: str) -> Board:
    """
    Build a board from one string per row.

    H = house, L = lake, F = forest, S = square, . = empty; spaces are ignored.
    """
    grid = [row.replace(" ", "") for row in rows]
    board = Board(len(grid), len(grid[0]))
    for r, line in enumerate(grid):
        for c, symbol in enumerate(line):
            building = _SYMBOLS[symbol]
            if building is not None:
                board.place(r, c, building)
    return board


def empty_board(config: GameConfig | None = None) -> Board:
    return Board.create(config or GameConfig())


def fill_column(board: Board, col: int, building: Building = Building.HOUSE, *, leave_empty: int = 0) -> None:
    """Fill a column from the top, leaving the last `leave_empty` cells empty."""
    for row in range(board.rows - leave_empty):
        board.place(row, col, building)


def make_playing_state(
    *,
    config: GameConfig | None = None,
    board: Board | None = None,
    current_round: int = 1,
) -> CityGameState:
    """Create a game already past the preparation round, waiting for a roll."""
    state = init_game(config)
    if board is not None:
        state.board = board
    state.session.exit_preparation_phase()
    state.session.current_round = current_round
    state.placement_state = PlacementState.COMPLETE
    return state


def make_rolled_state(
    first: int,
    second: int,
    *,
    placement_state: PlacementState = PlacementState.FIRST,
    board: Board | None = None,
    current_round: int = 1,
) -> CityGameState:
    """Create a game mid-turn with the given roll already made."""
    state = make_playing_state(board=board, current_round=current_round)
    state.roll = DiceRoll(first, second)
    state.placement_state = placement_state
    return state
