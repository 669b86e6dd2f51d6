"""
Placement rules: which column and which building a placement state allows.

Every function here is pure. Callers pass the current placement state, the
turn's dice, a board snapshot and the player's selection; nothing is
mutated and rejected placements are reported as False, never raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from city.logic.buildings import building_for_die_face
from city.logic.enums import Building, PlacementState

if TYPE_CHECKING:
    from collections.abc import Collection, Set

    from city.logic.board import Board
    from city.logic.types import CellKey, DiceRoll

PREPARATION_STATES = frozenset(
    {
        PlacementState.PREP_FIRST,
        PlacementState.PREP_SECOND,
        PlacementState.PREP_DOUBLES_FIRST,
        PlacementState.PREP_DOUBLES_SECOND,
    },
)
DOUBLES_STATES = frozenset(
    {
        PlacementState.DOUBLES_FIRST,
        PlacementState.DOUBLES_SQUARE,
        PlacementState.PREP_DOUBLES_FIRST,
        PlacementState.PREP_DOUBLES_SECOND,
    },
)
FIRST_STEP_STATES = frozenset(
    {
        PlacementState.FIRST,
        PlacementState.DOUBLES_FIRST,
        PlacementState.PREP_FIRST,
        PlacementState.PREP_DOUBLES_FIRST,
    },
)
SECOND_STEP_STATES = frozenset(
    {
        PlacementState.SECOND,
        PlacementState.DOUBLES_SQUARE,
        PlacementState.PREP_SECOND,
        PlacementState.PREP_DOUBLES_SECOND,
    },
)

# the two sub-steps of each kind of turn; the player may act on either first
_SIBLING_STEPS: dict[PlacementState, PlacementState] = {
    PlacementState.FIRST: PlacementState.SECOND,
    PlacementState.SECOND: PlacementState.FIRST,
    PlacementState.DOUBLES_FIRST: PlacementState.DOUBLES_SQUARE,
    PlacementState.DOUBLES_SQUARE: PlacementState.DOUBLES_FIRST,
    PlacementState.PREP_FIRST: PlacementState.PREP_SECOND,
    PlacementState.PREP_SECOND: PlacementState.PREP_FIRST,
    PlacementState.PREP_DOUBLES_FIRST: PlacementState.PREP_DOUBLES_SECOND,
    PlacementState.PREP_DOUBLES_SECOND: PlacementState.PREP_DOUBLES_FIRST,
}

# index of the die whose face picks the target column
_COLUMN_DIE: dict[PlacementState, int] = {
    PlacementState.PREP_FIRST: 0,
    PlacementState.PREP_SECOND: 1,
    PlacementState.PREP_DOUBLES_FIRST: 0,
    PlacementState.PREP_DOUBLES_SECOND: 0,
    PlacementState.FIRST: 0,
    PlacementState.SECOND: 1,
    PlacementState.DOUBLES_FIRST: 0,
}

# index of the die whose face picks the building (always the other die)
_BUILDING_DIE: dict[PlacementState, int] = {
    PlacementState.FIRST: 1,
    PlacementState.SECOND: 0,
    PlacementState.DOUBLES_FIRST: 0,
}


def is_preparation_state(state: PlacementState) -> bool:
    return state in PREPARATION_STATES


def is_bonus_state(state: PlacementState) -> bool:
    return state == PlacementState.BONUS


def is_doubles_state(state: PlacementState) -> bool:
    return state in DOUBLES_STATES


def is_first_step(state: PlacementState) -> bool:
    return state in FIRST_STEP_STATES


def is_second_step(state: PlacementState) -> bool:
    return state in SECOND_STEP_STATES


def tracks_turn_placement(state: PlacementState) -> bool:
    """Check whether placing in this state marks a first or second sub-step."""
    return state in FIRST_STEP_STATES or state in SECOND_STEP_STATES


def requires_selected_building(state: PlacementState) -> bool:
    """Preparation and bonus placements use the player's selection instead of the dice."""
    return state in PREPARATION_STATES or state == PlacementState.BONUS


def sibling_step(state: PlacementState) -> PlacementState | None:
    """Return the other sub-step of the same turn, or None for BONUS/COMPLETE."""
    return _SIBLING_STEPS.get(state)


def target_column(state: PlacementState, roll: DiceRoll) -> int | None:
    """Column picked by the dice for this state, or None when any column is allowed."""
    die_index = _COLUMN_DIE.get(state)
    if die_index is None:
        return None
    return roll.faces[die_index] - 1


def _adjacent_columns(board: Board, col: int, turn_placements: Set[CellKey]) -> frozenset[int]:
    """
    Fallback columns for a full target column.

    Neighbours off the board never qualify, nor do full neighbours unless they
    hold a building placed this turn (which can still be replaced). Of the
    remaining ones, the neighbour with strictly more empty cells wins; when
    both have the same number of empty cells both are returned and the
    player decides.
    """
    candidates = {
        neighbor: board.count_empty_in_column(neighbor)
        for neighbor in (col - 1, col + 1)
        if 0 <= neighbor < board.cols
    }
    amendable = {c for _, c in turn_placements}
    candidates = {
        neighbor: empty for neighbor, empty in candidates.items() if empty > 0 or neighbor in amendable
    }
    if not candidates:
        return frozenset()
    most_empty = max(candidates.values())
    return frozenset(neighbor for neighbor, empty in candidates.items() if empty == most_empty)


def allowed_columns(
    state: PlacementState,
    roll: DiceRoll,
    board: Board,
    turn_placements: Set[CellKey] = frozenset(),
) -> frozenset[int] | None:
    """
    Return the columns a placement may go into.

    None means any column (DOUBLES_SQUARE, BONUS, COMPLETE). A target column
    beyond the board edge is treated as full. turn_placements are the cells
    filled earlier in the same turn.
    """
    col = target_column(state, roll)
    if col is None:
        return None
    if col < board.cols and not board.is_column_full(col):
        return frozenset({col})
    return _adjacent_columns(board, col, turn_placements)


def building_to_place(
    state: PlacementState,
    roll: DiceRoll | None,
    selected_building: Building | None,
) -> Building | None:
    """
    Return the building a placement in this state puts down.

    Preparation and bonus states return the player's selection. Regular
    states take the building from the die that did not pick the column.
    Returns None when nothing can be placed yet.
    """
    if state == PlacementState.BONUS:
        return selected_building
    if roll is None:
        return None
    if state in PREPARATION_STATES:
        return selected_building
    if state == PlacementState.DOUBLES_SQUARE:
        return Building.SQUARE
    die_index = _BUILDING_DIE.get(state)
    if die_index is None:
        return None
    return building_for_die_face(roll.faces[die_index])


def _is_free_for_turn(board: Board, row: int, col: int, turn_placements: Set[CellKey]) -> bool:
    """A cell is free when empty or when it holds a building placed this turn."""
    return not board.is_occupied(row, col) or (row, col) in turn_placements


def can_place(  # noqa: PLR0913
    row: int,
    col: int,
    state: PlacementState,
    roll: DiceRoll | None,
    board: Board,
    selected_building: Building | None,
    turn_placements: Set[CellKey],
    available_bonus_buildings: Collection[Building],
) -> bool:
    """Check every placement rule for a single cell."""
    if not board.in_bounds(row, col):
        return False

    if state == PlacementState.BONUS:
        if selected_building is None or selected_building not in available_bonus_buildings:
            return False
        return _is_free_for_turn(board, row, col, turn_placements)

    if roll is None or state == PlacementState.COMPLETE:
        return False

    if not _is_free_for_turn(board, row, col, turn_placements):
        return False

    if state in PREPARATION_STATES and selected_building is None:
        return False

    columns = allowed_columns(state, roll, board, turn_placements)
    return columns is None or col in columns


def next_placement_state(
    state: PlacementState,
    *,
    first_placed: bool,
    second_placed: bool,
) -> PlacementState:
    """
    Return the state after a successful placement in `state`.

    The flags describe the turn after the placement was recorded. Each
    sub-step moves to its sibling unless the sibling was already placed, in
    which case the turn is COMPLETE; this lets the two sub-steps happen in
    either order. BONUS and COMPLETE always lead to COMPLETE.
    """
    sibling = _SIBLING_STEPS.get(state)
    if sibling is None:
        return PlacementState.COMPLETE
    sibling_placed = second_placed if state in FIRST_STEP_STATES else first_placed
    if sibling_placed:
        return PlacementState.COMPLETE
    return sibling
