"""
Street and plaza scoring for a city board.

A street is scored from the groups of same-type buildings that touch it: a
group touching the target row contributes the point value of every one of
its cells, wherever they are on the board. Squares and empty cells split
groups. Plazas are scored separately at game end.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from city.logic.enums import Building
from city.logic.types import BuildingGroup, PlazaBonus, PlazaNeighbor

if TYPE_CHECKING:
    from collections.abc import Iterator

    from city.logic.board import Board
    from city.logic.settings import GameConfig
    from city.logic.types import CellKey

# dice sums 2 and 12 are absent: the player nominates the street
STREET_FOR_DICE_SUM: dict[int, int] = {
    3: 0,
    4: 0,
    5: 1,
    6: 1,
    7: 2,
    8: 3,
    9: 3,
    10: 4,
    11: 4,
}
PLAYER_CHOICE_DICE_SUMS = frozenset({2, 12})

PLAZA_NEIGHBOR_TYPES = frozenset({Building.HOUSE, Building.FOREST, Building.LAKE})

# up, down, left, right
_ORTHOGONAL_OFFSETS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def target_row_for_dice_sum(
    dice_sum: int,
    config: GameConfig,
    player_choice: int | None = None,
) -> int | None:
    """
    Map a dice sum to the street it scores.

    Sums 2 and 12 score the row the player nominated; without a nomination
    (or with one off the board) there is no street and the round scores 0.
    """
    if dice_sum in PLAYER_CHOICE_DICE_SUMS:
        if player_choice is not None and 0 <= player_choice < config.rows:
            return player_choice
        return None
    return STREET_FOR_DICE_SUM.get(dice_sum)


def _orthogonal_neighbors(board: Board, row: int, col: int) -> Iterator[CellKey]:
    for d_row, d_col in _ORTHOGONAL_OFFSETS:
        n_row, n_col = row + d_row, col + d_col
        if board.in_bounds(n_row, n_col):
            yield n_row, n_col


def find_connected_group(
    board: Board,
    start: CellKey,
    visited: list[bool],
) -> BuildingGroup:
    """
    Flood-fill the group of same-type buildings containing `start`.

    `visited` is a flat grid indexed by row * cols + col shared across calls,
    so that a cell joins exactly one group. Cells are marked when queued.
    """
    start_row, start_col = start
    building = board.get(start_row, start_col)
    if building is None or building == Building.SQUARE:
        raise ValueError(f"cell {start} does not hold a groupable building")

    cols = board.cols
    cells: list[CellKey] = []
    queue: deque[CellKey] = deque([start])
    visited[start_row * cols + start_col] = True

    while queue:
        row, col = queue.popleft()
        cells.append((row, col))
        for n_row, n_col in _orthogonal_neighbors(board, row, col):
            index = n_row * cols + n_col
            if visited[index] or board.get(n_row, n_col) != building:
                continue
            visited[index] = True
            queue.append((n_row, n_col))

    return BuildingGroup(building=building, cells=tuple(cells))


def find_building_groups(board: Board) -> list[BuildingGroup]:
    """Partition every non-square building on the board into maximal groups."""
    visited = [False] * (board.rows * board.cols)
    groups: list[BuildingGroup] = []
    for row in range(board.rows):
        for col in range(board.cols):
            if visited[row * board.cols + col]:
                continue
            building = board.get(row, col)
            if building is None or building == Building.SQUARE:
                continue
            groups.append(find_connected_group(board, (row, col), visited))
    return groups


def group_points(group: BuildingGroup, config: GameConfig) -> int:
    return sum(config.cell_points(row, col) for row, col in group.cells)


def _street_groups(
    dice_sum: int,
    board: Board,
    config: GameConfig,
    player_choice: int | None,
) -> list[BuildingGroup]:
    target_row = target_row_for_dice_sum(dice_sum, config, player_choice)
    if target_row is None:
        return []
    return [group for group in find_building_groups(board) if group.touches_row(target_row)]


def score_street(
    dice_sum: int,
    board: Board,
    config: GameConfig,
    player_choice: int | None = None,
) -> int:
    """Sum the points of every group touching the street picked by the dice."""
    return sum(group_points(group, config) for group in _street_groups(dice_sum, board, config, player_choice))


def scoring_cells(
    dice_sum: int,
    board: Board,
    config: GameConfig,
    player_choice: int | None = None,
) -> frozenset[CellKey]:
    """Return the cells of every group that scores for this dice sum."""
    return frozenset(
        cell for group in _street_groups(dice_sum, board, config, player_choice) for cell in group.cells
    )


def _plaza_neighbors(board: Board, row: int, col: int) -> list[PlazaNeighbor]:
    neighbors = []
    for n_row, n_col in _orthogonal_neighbors(board, row, col):
        building = board.get(n_row, n_col)
        if building in PLAZA_NEIGHBOR_TYPES:
            neighbors.append(PlazaNeighbor(row=n_row, col=n_col, building=building))
    return neighbors


def is_plaza_qualifying(board: Board, row: int, col: int) -> bool:
    """Check that a square has a house, a forest and a lake among its orthogonal neighbours."""
    if board.get(row, col) != Building.SQUARE:
        return False
    return {n.building for n in _plaza_neighbors(board, row, col)} >= PLAZA_NEIGHBOR_TYPES


def plaza_bonus_cells(board: Board) -> list[PlazaBonus]:
    """Return every qualifying plaza with the neighbours that qualified it."""
    return [
        PlazaBonus(row=row, col=col, neighbors=tuple(_plaza_neighbors(board, row, col)))
        for row in range(board.rows)
        for col in range(board.cols)
        if is_plaza_qualifying(board, row, col)
    ]


def plaza_bonus(board: Board, config: GameConfig) -> int:
    """Fixed bonus for every qualifying plaza, independent of street scores."""
    return len(plaza_bonus_cells(board)) * config.plaza_bonus_points
