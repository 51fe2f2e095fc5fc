from dataclasses import dataclass
from typing import Literal, TypeAlias

Unspecified: TypeAlias = Literal["future", "past", "error"]

_UNSPECIFIED_CHOICES = ("future", "past", "error")


@dataclass(frozen=True, kw_only=True)
class Settings:
    """Options for the English strategy.

    Attributes:
        unspecified: How to read a phrase with neither "in" nor "ago".
            "future" (the default) adds the duration, "past" subtracts it,
            "error" refuses to guess.
        anchors: Whether weekday + clock phrases ("friday 2pm") are recognized
    """

    unspecified: Unspecified = "future"
    anchors: bool = True

    def __post_init__(self) -> None:
        if self.unspecified not in _UNSPECIFIED_CHOICES:
            valid = ", ".join(repr(c) for c in _UNSPECIFIED_CHOICES)
            raise ValueError(
                f"Invalid unspecified direction {self.unspecified!r}. "
                f"Valid choices: {valid}"
            )
