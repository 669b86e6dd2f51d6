"""Typed domain exceptions for the city rules core.

Only programming errors and unusable configuration raise. Ordinary rule
violations (wrong column, occupied cell, missing selection) are reported
through return values and never reach this module.
"""


class CityRuleError(Exception):
    """Base exception for the city rules core."""


class InvalidDieFaceError(CityRuleError):
    """A die face outside 1..6 was handed to the rules core.

    Attributes:
        face: The offending value.

    """

    def __init__(self, face: object) -> None:
        self.face = face
        super().__init__(f"invalid die face: {face!r} (expected 1-6)")


class UnsupportedConfigError(CityRuleError):
    """Game configuration contains values the engine cannot play with."""
