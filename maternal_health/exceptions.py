"""Project-specific exceptions."""


class MaternalHealthError(Exception):
    """Base exception for the project."""


class InvalidConfig(MaternalHealthError, ValueError):
    """Raised when generation or analysis parameters are invalid."""


class EmptyGroup(MaternalHealthError):
    """Raised when a statistic is requested over a group with no members."""


class DegenerateInput(MaternalHealthError):
    """Raised when a regression predictor has too few points or no variance."""
