from dataclasses import dataclass
from enum import Enum

from whenparse import util


class Unit(Enum):
    """A fixed-length unit of time, with the spellings the grammar accepts."""

    SECOND = (util.SECOND, ("s", "sec", "secs", "second", "seconds"))
    MINUTE = (util.MINUTE, ("m", "min", "mins", "minute", "minutes"))
    HOUR = (util.HOUR, ("h", "hr", "hrs", "hour", "hours"))
    DAY = (util.DAY, ("d", "day", "days"))
    WEEK = (util.WEEK, ("w", "wk", "wks", "week", "weeks"))

    def __init__(self, factor: int, spellings: tuple[str, ...]):
        self.factor: int = factor
        self.spellings: tuple[str, ...] = spellings

    @classmethod
    def from_word(cls, word: str) -> "Unit":
        try:
            return _BY_SPELLING[word.lower()]
        except KeyError:
            raise ValueError(f"Unknown unit {word!r}") from None


def _index_spellings() -> dict[str, Unit]:
    index: dict[str, Unit] = {}
    for unit in Unit:
        for spelling in unit.spellings:
            if spelling in index:
                raise ValueError(
                    f"Unit spelling {spelling!r} is claimed by both "
                    f"{index[spelling].name} and {unit.name}"
                )
            index[spelling] = unit
    return index


_BY_SPELLING = _index_spellings()

UNIT_WORDS: frozenset[str] = frozenset(_BY_SPELLING)


class Direction(Enum):
    PAST = "past"
    FUTURE = "future"
    UNSPECIFIED = "unspecified"


@dataclass(frozen=True)
class Term:
    quantity: int
    unit: Unit

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValueError(f"Term quantity must be >= 0, got {self.quantity}")

    @property
    def seconds(self) -> int:
        return self.quantity * self.unit.factor

    def __str__(self) -> str:
        name = self.unit.name.lower()
        return f"{self.quantity} {name}" + ("" if self.quantity == 1 else "s")


@dataclass(frozen=True)
class ParsedExpression:
    """Quantity terms plus the direction they apply in.

    Term order is kept for display only; the total does not depend on it.
    """

    terms: tuple[Term, ...]
    direction: Direction

    def __post_init__(self) -> None:
        if not self.terms:
            raise ValueError("ParsedExpression needs at least one term")

    @property
    def seconds(self) -> int:
        """Unsigned total of all terms, in seconds."""
        return sum(term.seconds for term in self.terms)

    def __str__(self) -> str:
        body = " and ".join(str(term) for term in self.terms)
        if self.direction is Direction.PAST:
            return f"{body} ago"
        if self.direction is Direction.FUTURE:
            return f"in {body}"
        return body


@dataclass(frozen=True)
class Anchor:
    """A weekday plus a wall-clock time, e.g. "friday 2pm"."""

    weekday: int
    hour: int
    minute: int = 0

    def __post_init__(self) -> None:
        if not (0 <= self.weekday <= 6):
            raise ValueError(f"weekday must be 0-6, got {self.weekday}")
        if not (0 <= self.hour <= 23):
            raise ValueError(f"hour must be 0-23, got {self.hour}")
        if not (0 <= self.minute <= 59):
            raise ValueError(f"minute must be 0-59, got {self.minute}")


WEEKDAYS: dict[str, int] = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
    "mon": 0,
    "tue": 1,
    "tues": 1,
    "wed": 2,
    "thu": 3,
    "thur": 3,
    "thurs": 3,
    "fri": 4,
    "sat": 5,
    "sun": 6,
}
