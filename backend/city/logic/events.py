"""Domain event models.

Accepted actions return the events describing what they changed; rejected
actions return none. A presentation layer may replay them at its own pace,
the state they describe is already final when they are returned.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from city.logic.enums import Building, PlacementState
from city.logic.types import FinalScore, RoundOutcome


class EventType(StrEnum):
    """Types of game events."""

    DICE_ROLLED = "dice_rolled"
    BUILDING_PLACED = "building_placed"
    PREPARATION_COMPLETED = "preparation_completed"
    BONUS_STAGE_STARTED = "bonus_stage_started"
    BONUS_STAGE_COMPLETED = "bonus_stage_completed"
    ROUND_SCORED = "round_scored"
    GAME_END = "game_end"


class GameEvent(BaseModel):
    """Base class for all domain game events."""

    model_config = ConfigDict(frozen=True)

    type: EventType


class DiceRolledEvent(GameEvent):
    """A new turn started with this roll."""

    type: Literal[EventType.DICE_ROLLED] = EventType.DICE_ROLLED
    round_number: int
    dice: tuple[int, int]
    placement_state: PlacementState


class BuildingPlacedEvent(GameEvent):
    """A building was written to the board."""

    type: Literal[EventType.BUILDING_PLACED] = EventType.BUILDING_PLACED
    row: int
    col: int
    building: Building
    from_state: PlacementState
    to_state: PlacementState


class PreparationCompletedEvent(GameEvent):
    """The preparation turn ended; scored rounds begin."""

    type: Literal[EventType.PREPARATION_COMPLETED] = EventType.PREPARATION_COMPLETED
    next_round: int


class BonusStageStartedEvent(GameEvent):
    """A bonus round finished its turn and waits for a free placement."""

    type: Literal[EventType.BONUS_STAGE_STARTED] = EventType.BONUS_STAGE_STARTED
    round_number: int
    available_buildings: tuple[Building, ...]


class BonusStageCompletedEvent(GameEvent):
    """The bonus building was placed and is no longer available."""

    type: Literal[EventType.BONUS_STAGE_COMPLETED] = EventType.BONUS_STAGE_COMPLETED
    round_number: int
    building: Building


class RoundScoredEvent(GameEvent):
    """A round's street was scored and recorded."""

    type: Literal[EventType.ROUND_SCORED] = EventType.ROUND_SCORED
    outcome: RoundOutcome


class GameEndedEvent(GameEvent):
    """The last round was scored."""

    type: Literal[EventType.GAME_END] = EventType.GAME_END
    final_score: FinalScore


Event = (
    DiceRolledEvent
    | BuildingPlacedEvent
    | PreparationCompletedEvent
    | BonusStageStartedEvent
    | BonusStageCompletedEvent
    | RoundScoredEvent
    | GameEndedEvent
)

_EVENT_ADAPTER: TypeAdapter[Event] = TypeAdapter(Annotated[Event, Field(discriminator="type")])


def parse_event(payload: dict[str, Any]) -> Event:
    """Rebuild a typed event from its model_dump() form, picking the model by "type"."""
    return _EVENT_ADAPTER.validate_python(payload)
