"""
String enum definitions for City Dice game concepts.
"""

from enum import Enum


class Building(str, Enum):
    """Building types that can occupy a board cell."""

    HOUSE = "house"
    LAKE = "lake"
    FOREST = "forest"
    SQUARE = "square"  # plaza, never scores as part of a group


class PlacementState(str, Enum):
    """Sub-step of the turn currently waiting for a placement."""

    PREP_FIRST = "prep_first"
    PREP_SECOND = "prep_second"
    PREP_DOUBLES_FIRST = "prep_doubles_first"
    PREP_DOUBLES_SECOND = "prep_doubles_second"
    FIRST = "first"
    SECOND = "second"
    DOUBLES_FIRST = "doubles_first"
    DOUBLES_SQUARE = "doubles_square"
    BONUS = "bonus"
    COMPLETE = "complete"


class GamePhase(str, Enum):
    """Coarse phase of a city game, derived from the session."""

    PREPARATION = "preparation"
    PLAYING = "playing"
    BONUS_STAGE = "bonus_stage"
    FINISHED = "finished"
