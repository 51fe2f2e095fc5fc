from .core import (
    Chain,
    English,
    Failure,
    NotApplicable,
    Result,
    Strategy,
    Success,
    parse,
    try_parse,
)
from .errors import EvaluationError, WhenParseError
from .settings import Settings
from .terms import Anchor, Direction, ParsedExpression, Term, Unit

__all__ = [
    "Strategy",
    "English",
    "Chain",
    "Result",
    "NotApplicable",
    "Failure",
    "Success",
    "Settings",
    "try_parse",
    "parse",
    "Unit",
    "Term",
    "Direction",
    "ParsedExpression",
    "Anchor",
    "WhenParseError",
    "EvaluationError",
]
