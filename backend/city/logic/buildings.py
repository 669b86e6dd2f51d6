"""
Building taxonomy helpers: die face mapping and display names.
"""

from city.logic.enums import Building
from city.logic.exceptions import InvalidDieFaceError

MIN_DIE_FACE = 1
MAX_DIE_FACE = 6

# buildings a bonus stage can hand out, in display order
BONUS_BUILDINGS: tuple[Building, ...] = (Building.HOUSE, Building.LAKE, Building.FOREST)

_DIE_FACE_TO_BUILDING: dict[int, Building] = {
    1: Building.HOUSE,
    2: Building.FOREST,
    3: Building.LAKE,
    4: Building.HOUSE,
    5: Building.FOREST,
    6: Building.LAKE,
}

_DISPLAY_NAMES: dict[Building, str] = {
    Building.HOUSE: "House",
    Building.LAKE: "Lake",
    Building.FOREST: "Forest",
    Building.SQUARE: "Square",
}


def is_valid_die_face(face: object) -> bool:
    """Check that a value is an integer die face in 1..6."""
    return isinstance(face, int) and not isinstance(face, bool) and MIN_DIE_FACE <= face <= MAX_DIE_FACE


def building_for_die_face(face: int) -> Building:
    """
    Return the building a die face produces.

    Faces 1 and 4 give a house, 2 and 5 a forest, 3 and 6 a lake. A square is
    never produced by a die face.

    Raises:
        InvalidDieFaceError: If face is not an integer in 1..6

    """
    if not is_valid_die_face(face):
        raise InvalidDieFaceError(face)
    return _DIE_FACE_TO_BUILDING[face]


def building_display_name(building: Building) -> str:
    """Return the user-facing name of a building."""
    return _DISPLAY_NAMES[building]
