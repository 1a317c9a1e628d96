"""
Exceptions raised by fuseclust.

All of them derive from ValueError so that code catching invalid input the
usual way keeps working.
"""


class DimensionError(ValueError):
    """Views disagree on the number of observations."""


class ConfigError(ValueError):
    """Invalid or inconsistent configuration."""


class ShapeError(ValueError):
    """A matrix is not square and symmetric where a kernel is expected."""


class EmptyCandidateSetError(ValueError):
    """Model selection was asked to choose among zero candidates."""
