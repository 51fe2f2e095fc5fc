class WhenParseError(Exception):
    """Base class for errors raised by whenparse."""


class EvaluationError(WhenParseError, ValueError):
    """A phrase matched the grammar but cannot be resolved to a point in time."""
