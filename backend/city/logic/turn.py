"""
Turn state machine: rolling, sub-step selection, placement and round completion.

Each turn places two buildings (or a building and a square on doubles), one
per die. The player may act on either die first; the turn is COMPLETE once
both sub-steps are marked placed. Completion runs in the same call as the
closing placement: the preparation round simply ends, a bonus round detours
through one free placement, and every scored round records its street score
and advances the round counter.

Rejected actions never raise and never mutate: rolls return no events,
selections return False and placements return an unaccepted result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

import structlog

from city.logic.enums import Building, PlacementState
from city.logic.events import (
    BonusStageCompletedEvent,
    BonusStageStartedEvent,
    BuildingPlacedEvent,
    DiceRolledEvent,
    GameEndedEvent,
    GameEvent,
    PreparationCompletedEvent,
    RoundScoredEvent,
)
from city.logic.game import compute_final_score
from city.logic.placement import (
    building_to_place,
    can_place,
    is_first_step,
    is_second_step,
    next_placement_state,
    sibling_step,
    tracks_turn_placement,
)
from city.logic.scoring import score_street, scoring_cells, target_row_for_dice_sum
from city.logic.types import DiceRoll, RoundOutcome

if TYPE_CHECKING:
    from city.logic.state import CityGameState

logger = structlog.get_logger()


class PlacementResult(NamedTuple):
    """
    Result of a placement attempt.

    accepted is False for a rejected placement, in which case events is empty
    and nothing changed. outcome is set when the placement closed a scored
    round.
    """

    accepted: bool
    events: list[GameEvent]
    outcome: RoundOutcome | None = None


def roll_dice(state: CityGameState, first: int, second: int) -> list[GameEvent]:
    """
    Start a turn with the given die faces.

    Raises InvalidDieFaceError for faces outside 1..6. Returns no events
    (and changes nothing) when the game is over, a bonus stage is waiting
    for its placement, or the previous turn is still in progress. A turn in
    progress that is blocked (see turn_is_blocked) is abandoned instead: its
    placements stay on the board and the round is played again with the new
    dice.
    """
    roll = DiceRoll(first, second)
    session = state.session

    if session.game_complete:
        logger.debug("roll rejected: game complete")
        return []
    if session.in_bonus_stage:
        logger.debug("roll ignored: bonus stage pending")
        return []
    if state.roll is not None:
        if not turn_is_blocked(state):
            logger.debug("roll rejected: turn in progress", placement_state=state.placement_state)
            return []
        logger.info(
            "turn abandoned: no legal placement",
            round_number=session.current_round,
            dice=state.roll.faces,
            placement_state=state.placement_state,
        )

    session.clear_placements()
    session.selected_scoring_row = None
    state.roll = roll
    if session.in_preparation_phase:
        state.placement_state = PlacementState.PREP_DOUBLES_FIRST if roll.is_doubles else PlacementState.PREP_FIRST
    else:
        state.placement_state = PlacementState.DOUBLES_FIRST if roll.is_doubles else PlacementState.FIRST

    logger.debug("dice rolled", dice=roll.faces, placement_state=state.placement_state)
    return [
        DiceRolledEvent(
            round_number=session.current_round,
            dice=roll.faces,
            placement_state=state.placement_state,
        ),
    ]


def choose_placement_step(state: CityGameState, step: PlacementState) -> bool:
    """
    Switch the turn in progress to its other sub-step.

    Lets the player act on the second die before the first. Only the sibling
    of the current sub-step can be chosen, and only while it is unplaced.
    """
    if state.roll is None or sibling_step(state.placement_state) != step:
        return False
    already_placed = state.session.first_turn_placed if is_first_step(step) else state.session.second_turn_placed
    if already_placed:
        return False
    state.placement_state = step
    return True


def select_building(state: CityGameState, building: Building | None) -> bool:
    """Set the player's building selection used by preparation and bonus placements."""
    if building is not None and state.placement_state == PlacementState.BONUS:
        if building not in state.session.available_bonus_buildings():
            return False
    state.selected_building = building
    return True


def select_scoring_row(state: CityGameState, row: int | None) -> bool:
    """Nominate the street scored for a dice sum of 2 or 12."""
    if row is not None and not 0 <= row < state.config.rows:
        return False
    state.session.selected_scoring_row = row
    return True


def can_place_at(state: CityGameState, row: int, col: int) -> bool:
    """Check whether a click on (row, col) would be accepted right now."""
    session = state.session
    if session.game_complete:
        return False
    return can_place(
        row,
        col,
        state.placement_state,
        state.roll,
        state.board,
        state.selected_building,
        session.current_turn_placements,
        session.available_bonus_buildings(),
    )


def turn_is_blocked(state: CityGameState) -> bool:
    """
    Check whether the turn in progress has no legal cell for any unplaced sub-step.

    Only regular and preparation sub-steps can block; a bonus placement may
    go anywhere that is free.
    """
    session = state.session
    if state.roll is None or session.game_complete or not tracks_turn_placement(state.placement_state):
        return False

    steps = [state.placement_state]
    sibling = sibling_step(state.placement_state)
    if sibling is not None:
        steps.append(sibling)
    for step in steps:
        placed = session.first_turn_placed if is_first_step(step) else session.second_turn_placed
        if not placed and _has_legal_cell(state, step):
            return False
    return True


def _has_legal_cell(state: CityGameState, step: PlacementState) -> bool:
    # allowed columns never depend on the building, so any stands in for a missing selection
    building = state.selected_building or Building.HOUSE
    return any(
        can_place(
            row,
            col,
            step,
            state.roll,
            state.board,
            building,
            state.session.current_turn_placements,
            (),
        )
        for row in range(state.board.rows)
        for col in range(state.board.cols)
    )


def place_building(state: CityGameState, row: int, col: int) -> PlacementResult:
    """
    Place the building the current state calls for at (row, col).

    Closing placements complete the turn in the same call; see the module
    docstring for what completion does.
    """
    if not can_place_at(state, row, col):
        logger.debug("placement rejected", row=row, col=col, placement_state=state.placement_state)
        return PlacementResult(accepted=False, events=[])

    from_state = state.placement_state
    building = building_to_place(from_state, state.roll, state.selected_building)
    if building is None:
        logger.debug("placement rejected: no building", row=row, col=col, placement_state=from_state)
        return PlacementResult(accepted=False, events=[])

    session = state.session
    state.board.place(row, col, building)
    session.add_placement((row, col))

    if from_state == PlacementState.BONUS:
        state.placement_state = PlacementState.COMPLETE
        events: list[GameEvent] = [
            BuildingPlacedEvent(
                row=row,
                col=col,
                building=building,
                from_state=from_state,
                to_state=PlacementState.COMPLETE,
            ),
        ]
        session.complete_bonus_stage(building)
        state.selected_building = None
        events.append(BonusStageCompletedEvent(round_number=session.current_round, building=building))
        logger.debug("bonus building placed", building=building, row=row, col=col)
        outcome, score_events = _score_round(state, bonus_building=building)
        events.extend(score_events)
        return PlacementResult(accepted=True, events=events, outcome=outcome)

    if is_first_step(from_state):
        session.mark_first_placed()
    elif is_second_step(from_state):
        session.mark_second_placed()
    to_state = next_placement_state(
        from_state,
        first_placed=session.first_turn_placed,
        second_placed=session.second_turn_placed,
    )
    state.placement_state = to_state
    events = [BuildingPlacedEvent(row=row, col=col, building=building, from_state=from_state, to_state=to_state)]
    logger.debug("building placed", building=building, row=row, col=col, to_state=to_state)

    if to_state != PlacementState.COMPLETE:
        return PlacementResult(accepted=True, events=events)

    outcome, completion_events = _complete_turn(state)
    events.extend(completion_events)
    return PlacementResult(accepted=True, events=events, outcome=outcome)


def _complete_turn(state: CityGameState) -> tuple[RoundOutcome | None, list[GameEvent]]:
    """Run round completion after both sub-steps of a turn were placed."""
    session = state.session

    if session.in_preparation_phase:
        session.exit_preparation_phase()
        state.roll = None
        logger.info("preparation completed")
        return None, [PreparationCompletedEvent(next_round=session.current_round)]

    available = session.available_bonus_buildings()
    if state.config.is_bonus_round(session.current_round) and available:
        session.start_bonus_stage()
        state.placement_state = PlacementState.BONUS
        state.selected_building = None
        logger.info("bonus stage started", round_number=session.current_round, available=available)
        return None, [BonusStageStartedEvent(round_number=session.current_round, available_buildings=available)]

    return _score_round(state)


def _score_round(
    state: CityGameState,
    bonus_building: Building | None = None,
) -> tuple[RoundOutcome, list[GameEvent]]:
    """Score the turn's street, record it and advance to the next round."""
    session = state.session
    config = state.config
    if state.roll is None:
        raise RuntimeError("cannot score a round without a roll")

    dice_sum = state.roll.total
    choice = session.selected_scoring_row
    outcome = RoundOutcome(
        round_number=session.current_round,
        dice_sum=dice_sum,
        target_row=target_row_for_dice_sum(dice_sum, config, choice),
        score=score_street(dice_sum, state.board, config, choice),
        scoring_cells=scoring_cells(dice_sum, state.board, config, choice),
        bonus_building=bonus_building,
    )
    session.set_round_score(session.current_round - 1, outcome.score)
    state.last_outcome = outcome
    logger.info(
        "round scored",
        round_number=outcome.round_number,
        dice_sum=dice_sum,
        target_row=outcome.target_row,
        score=outcome.score,
    )

    session.selected_scoring_row = None
    state.roll = None
    state.placement_state = PlacementState.COMPLETE
    session.advance_round(config.max_rounds)

    events: list[GameEvent] = [RoundScoredEvent(outcome=outcome)]
    if session.game_complete:
        final_score = compute_final_score(state)
        logger.info("game ended", total=final_score.total, plaza_bonus=final_score.plaza_bonus)
        events.append(GameEndedEvent(final_score=final_score))
    return outcome, events
