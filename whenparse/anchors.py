"""Resolution of weekday + clock-time anchors ("friday 2pm", "fri 11:15").

Anchors resolve against calendar fields in the caller's zone rather than by
adding a duration, using python-dateutil's relativedelta to find the weekday.
"""

import logging
from datetime import datetime, timezone

from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta, weekday

from whenparse.errors import EvaluationError
from whenparse.grammar import AnchorNode
from whenparse.terms import WEEKDAYS, Anchor

logger = logging.getLogger(__name__)

_WEEKDAY_MAP: tuple[weekday, ...] = (MO, TU, WE, TH, FR, SA, SU)


def parse_clock(clock: str, meridiem: str | None = None) -> tuple[int, int]:
    """Read a clock lexeme as (hour, minute) on a 24h clock.

    Accepts "2", "14", "215", "0815", "2.15" and "11:15", optionally with
    "am"/"pm". Bare numbers of three or four digits are read as HMM/HHMM.

    Raises:
        EvaluationError: If the hour or minute is out of range
    """
    if ":" in clock or "." in clock:
        hour_text, _, minute_text = clock.replace(".", ":").partition(":")
    elif len(clock) <= 2:
        hour_text, minute_text = clock, "0"
    else:
        hour_text, minute_text = clock[:-2], clock[-2:]
    hour, minute = int(hour_text), int(minute_text)

    if meridiem is not None:
        if not (1 <= hour <= 12):
            raise EvaluationError(
                f"Hour {hour} is not valid with {meridiem!r} (expected 1-12)"
            )
        hour = hour % 12 + (12 if meridiem == "pm" else 0)

    if not (0 <= hour <= 23):
        raise EvaluationError(f"Hour must be 0-23, got {hour} in {clock!r}")
    if not (0 <= minute <= 59):
        raise EvaluationError(f"Minute must be 0-59, got {minute} in {clock!r}")
    return hour, minute


def to_anchor(node: AnchorNode) -> Anchor:
    try:
        day = WEEKDAYS[node.weekday_word]
    except KeyError as exc:
        raise EvaluationError(
            f"Inconsistent parse tree: unknown weekday {node.weekday_word!r}"
        ) from exc
    hour, minute = parse_clock(node.clock, node.meridiem)
    return Anchor(weekday=day, hour=hour, minute=minute)


def next_occurrence(anchor: Anchor, reference: datetime) -> datetime:
    """Return the first time at or after ``reference`` matching ``anchor``.

    The wall-clock time is taken in the reference's zone. When the reference
    already falls on the anchor's weekday but later than its time, the
    following week is used. Wall times skipped by a DST transition are
    normalized to the real instant they denote.
    """
    candidate = reference + relativedelta(
        weekday=_WEEKDAY_MAP[anchor.weekday],
        hour=anchor.hour,
        minute=anchor.minute,
        second=0,
        microsecond=0,
    )
    candidate = candidate.replace(fold=0)
    if candidate.timestamp() < reference.timestamp():
        candidate += relativedelta(weeks=1)
    return candidate.astimezone(timezone.utc).astimezone(reference.tzinfo)


def evaluate_anchor(node: AnchorNode, reference: datetime) -> datetime:
    """Resolve a recognized anchor phrase against ``reference``."""
    anchor = to_anchor(node)
    logger.debug("Resolved anchor %r from %s", anchor, reference.isoformat())
    try:
        return next_occurrence(anchor, reference)
    except OverflowError as exc:
        raise EvaluationError(
            f"Next {node.weekday_word} from {reference.isoformat()} "
            f"falls outside the supported date range"
        ) from exc
