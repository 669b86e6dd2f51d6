"""
Game initialization, reset and read-only views for City Dice.
"""

from city.logic.board import Board
from city.logic.enums import PlacementState
from city.logic.placement import allowed_columns, is_doubles_state
from city.logic.scoring import plaza_bonus
from city.logic.session import GameSession
from city.logic.settings import DEFAULT_GAME_CONFIG, GameConfig, validate_config
from city.logic.state import CityGameState
from city.logic.types import FinalScore, GameView


def init_game(config: GameConfig | None = None) -> CityGameState:
    """
    Start a new playthrough on an empty board.

    The game opens in the preparation round waiting for the first roll.
    Raises UnsupportedConfigError for a configuration that cannot be played.
    """
    game_config = config or DEFAULT_GAME_CONFIG
    validate_config(game_config)
    return CityGameState(
        config=game_config,
        board=Board.create(game_config),
        session=GameSession.create(game_config),
    )


def reset_game(state: CityGameState) -> None:
    """Clear the board and every piece of session and turn state."""
    state.board.reset(state.config)
    state.session.reset_game(state.config)
    state.placement_state = PlacementState.PREP_FIRST
    state.roll = None
    state.selected_building = None
    state.last_outcome = None


def compute_final_score(state: CityGameState) -> FinalScore:
    """
    Combine round scores with the plaza bonus.

    Works at any point of the game; the figures are final once the session
    is complete.
    """
    rounds_total = state.session.total_score()
    bonus = plaza_bonus(state.board, state.config)
    return FinalScore(
        round_scores=tuple(state.session.footer_scores),
        rounds_total=rounds_total,
        plaza_bonus=bonus,
        total=rounds_total + bonus,
        bonus_buildings=dict(state.session.bonus_stage_buildings),
    )


def get_game_view(state: CityGameState) -> GameView:
    """Build the read-only snapshot a presentation layer renders."""
    session = state.session
    columns = None
    if state.roll is not None and not session.game_complete:
        columns = allowed_columns(
            state.placement_state,
            state.roll,
            state.board,
            session.current_turn_placements,
        )
    outcome = state.last_outcome
    bonus = plaza_bonus(state.board, state.config)
    return GameView(
        phase=state.phase,
        placement_state=state.placement_state,
        board=state.board.snapshot(),
        current_round=session.current_round,
        dice=state.roll.faces if state.roll is not None else None,
        doubles=is_doubles_state(state.placement_state),
        selected_building=state.selected_building,
        selected_scoring_row=session.selected_scoring_row,
        round_scores=tuple(session.footer_scores),
        total_score=session.total_score(),
        plaza_bonus=bonus,
        game_complete=session.game_complete,
        available_bonus_buildings=session.available_bonus_buildings(),
        allowed_columns=columns,
        scoring_street=outcome.target_row if outcome is not None else None,
        scoring_cells=outcome.scoring_cells if outcome is not None else frozenset(),
    )
