"""Semantic evaluation of recognized duration phrases.

Turns a DurationNode into a ParsedExpression, sums its terms in seconds,
applies the direction and resolves the offset against a reference instant.
"""

import logging
from datetime import datetime, timedelta, timezone

from whenparse.errors import EvaluationError
from whenparse.grammar import PREFIX, SUFFIX, DurationNode, TermNode
from whenparse.settings import Settings
from whenparse.terms import Direction, ParsedExpression, Term, Unit
from whenparse.util import MAX_OFFSET_SECONDS, MAX_QUANTITY_DIGITS

logger = logging.getLogger(__name__)


def _quantity(digits: str) -> int:
    significant = digits.lstrip("0") or "0"
    if len(significant) > MAX_QUANTITY_DIGITS:
        raise EvaluationError(f"Quantity {digits[:20]}... is too large")
    return int(significant)


def _term(node: TermNode) -> Term:
    try:
        unit = Unit.from_word(node.unit_word)
    except ValueError as exc:
        # The grammar only admits known spellings
        raise EvaluationError(f"Inconsistent parse tree: {exc}") from exc
    return Term(quantity=_quantity(node.digits), unit=unit)


def _direction(node: DurationNode) -> Direction:
    if node.prefix is not None and node.suffix is not None:
        raise EvaluationError(
            f"Inconsistent parse tree: both {node.prefix!r} and {node.suffix!r}"
        )
    if node.suffix == SUFFIX:
        return Direction.PAST
    if node.prefix == PREFIX:
        return Direction.FUTURE
    if node.prefix is None and node.suffix is None:
        return Direction.UNSPECIFIED
    raise EvaluationError(
        f"Inconsistent parse tree: unknown marker {node.prefix or node.suffix!r}"
    )


def to_expression(node: DurationNode) -> ParsedExpression:
    """Interpret the lexemes of a recognized duration phrase."""
    if not node.terms:
        raise EvaluationError("Inconsistent parse tree: no terms")
    return ParsedExpression(
        terms=tuple(_term(t) for t in node.terms),
        direction=_direction(node),
    )


def signed_seconds(expr: ParsedExpression, settings: Settings | None = None) -> int:
    """Total offset of ``expr`` in seconds, negative for the past.

    Raises:
        EvaluationError: If the total cannot be represented as a timedelta,
            or the direction is unspecified and settings forbid guessing
    """
    settings = settings or Settings()
    total = expr.seconds
    if total > MAX_OFFSET_SECONDS:
        raise EvaluationError(
            f"Offset of {total}s exceeds the largest supported offset "
            f"({MAX_OFFSET_SECONDS}s)"
        )

    direction = expr.direction
    if direction is Direction.UNSPECIFIED:
        if settings.unspecified == "error":
            raise EvaluationError(
                f"Phrase {str(expr)!r} has no direction.\n"
                f"Hint: Say 'in {expr}' or '{expr} ago'"
            )
        direction = Direction(settings.unspecified)

    return -total if direction is Direction.PAST else total


def shift(reference: datetime, seconds: int) -> datetime:
    """Move ``reference`` by exactly ``seconds`` of elapsed time.

    The arithmetic happens in UTC so that DST transitions in the reference
    zone do not change the elapsed time. The result is expressed in the
    reference's zone.
    """
    try:
        moved = reference.astimezone(timezone.utc) + timedelta(seconds=seconds)
        return moved.astimezone(reference.tzinfo)
    except OverflowError as exc:
        raise EvaluationError(
            f"Offset of {seconds}s from {reference.isoformat()} "
            f"falls outside the supported date range"
        ) from exc


def evaluate(
    node: DurationNode, reference: datetime, settings: Settings | None = None
) -> datetime:
    """Resolve a recognized duration phrase against ``reference``."""
    expr = to_expression(node)
    seconds = signed_seconds(expr, settings)
    logger.debug("Resolved %r to an offset of %ds", str(expr), seconds)
    return shift(reference, seconds)
