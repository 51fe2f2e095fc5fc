"""Grammar and recognizer for English time phrases.

The grammar is declared as data (token table plus vocabulary) and matched by
a small recursive-descent parser. The recognizer only decides whether a
phrase has a supported shape and records the raw lexemes; what those lexemes
mean (unit lengths, direction, clock arithmetic) belongs to the evaluators.

Grammar (case-insensitive, whitespace-flexible)::

    phrase       := duration | anchor
    duration     := ["in"] term (conjunction term)* ["ago"]
    term         := NUMBER unit_word
    conjunction  := "and" | "," ["and"]
    anchor       := weekday clock
    clock        := CLOCK [meridiem] | NUMBER [meridiem]
    meridiem     := "am" | "pm"

Example:
    >>> tree = recognize("3 weeks and 5 days ago")
    >>> [(t.digits, t.unit_word) for t in tree.terms], tree.suffix
    ([('3', 'weeks'), ('5', 'days')], 'ago')
    >>> recognize("ago in 5 days") is None
    True
"""

import logging
import re
from dataclasses import dataclass

from whenparse.terms import UNIT_WORDS, WEEKDAYS

logger = logging.getLogger(__name__)

# Token kinds, tried in order at each position
TOKENS: list[tuple[str, str]] = [
    ("CLOCK", r"\d{1,2}[:.]\d{2}"),
    ("NUMBER", r"\d+"),
    ("WORD", r"[a-z]+"),
    ("COMMA", r","),
    ("SPACE", r"\s+"),
    ("MISMATCH", r"."),
]

PREFIX = "in"
SUFFIX = "ago"
CONJUNCTION = "and"
MERIDIEMS = frozenset({"am", "pm"})
WEEKDAY_WORDS = frozenset(WEEKDAYS)

# Longest bare number accepted as a clock (HHMM)
MAX_CLOCK_DIGITS = 4

_TOKEN_RE = re.compile(
    "|".join(f"(?P<{kind}>{pattern})" for kind, pattern in TOKENS),
    re.IGNORECASE | re.ASCII | re.DOTALL,
)


@dataclass(frozen=True)
class Token:
    kind: str
    value: str
    pos: int


@dataclass(frozen=True)
class TermNode:
    digits: str
    unit_word: str


@dataclass(frozen=True)
class DurationNode:
    terms: tuple[TermNode, ...]
    prefix: str | None = None
    suffix: str | None = None


@dataclass(frozen=True)
class AnchorNode:
    weekday_word: str
    clock: str
    meridiem: str | None = None


Node = DurationNode | AnchorNode


class _NoMatch(Exception):
    pass


def tokenize(text: str) -> list[Token]:
    """Split text into tokens, dropping whitespace.

    Raises:
        _NoMatch: If any character fits no token kind
    """
    tokens: list[Token] = []
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        assert kind is not None
        if kind == "SPACE":
            continue
        if kind == "MISMATCH":
            raise _NoMatch(f"unexpected {match.group()!r} at {match.start()}")
        tokens.append(Token(kind, match.group().lower(), match.start()))
    return tokens


class _Parser:
    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.index: int = 0

    def peek(self) -> Token | None:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def accept(
        self, kind: str, values: str | frozenset[str] | None = None
    ) -> Token | None:
        """Consume the next token if it has the given kind (and value)."""
        token = self.peek()
        if token is None or token.kind != kind:
            return None
        if isinstance(values, str) and token.value != values:
            return None
        if isinstance(values, frozenset) and token.value not in values:
            return None
        self.index += 1
        return token

    def expect(
        self, kind: str, values: str | frozenset[str] | None = None
    ) -> Token:
        token = self.accept(kind, values)
        if token is None:
            found = self.peek()
            raise _NoMatch(
                f"expected {kind} at token {self.index}, "
                f"got {found.value if found else 'end of input'!r}"
            )
        return token

    def at_end(self) -> bool:
        return self.peek() is None

    def phrase(self, anchors: bool) -> Node:
        token = self.peek()
        if anchors and token is not None and token.value in WEEKDAY_WORDS:
            node: Node = self.anchor()
        else:
            node = self.duration()
        if not self.at_end():
            raise _NoMatch(f"trailing input at {self.peek()!r}")
        return node

    def duration(self) -> DurationNode:
        prefix = self.accept("WORD", PREFIX)
        terms = [self.term()]
        while self.conjunction():
            terms.append(self.term())
        suffix = self.accept("WORD", SUFFIX)
        if prefix is not None and suffix is not None:
            raise _NoMatch(f"both {PREFIX!r} and {SUFFIX!r} given")
        return DurationNode(
            terms=tuple(terms),
            prefix=prefix.value if prefix else None,
            suffix=suffix.value if suffix else None,
        )

    def term(self) -> TermNode:
        digits = self.expect("NUMBER")
        unit = self.expect("WORD", UNIT_WORDS)
        return TermNode(digits=digits.value, unit_word=unit.value)

    def conjunction(self) -> bool:
        if self.accept("COMMA"):
            self.accept("WORD", CONJUNCTION)
            return True
        return self.accept("WORD", CONJUNCTION) is not None

    def anchor(self) -> AnchorNode:
        weekday = self.expect("WORD", WEEKDAY_WORDS)
        clock = self.accept("CLOCK")
        if clock is None:
            clock = self.expect("NUMBER")
            if len(clock.value) > MAX_CLOCK_DIGITS:
                raise _NoMatch(f"clock {clock.value!r} has too many digits")
        meridiem = self.accept("WORD", MERIDIEMS)
        return AnchorNode(
            weekday_word=weekday.value,
            clock=clock.value,
            meridiem=meridiem.value if meridiem else None,
        )


def recognize(text: str, anchors: bool = True) -> Node | None:
    """Match the whole of ``text`` against the grammar.

    Args:
        text: The phrase to recognize
        anchors: Whether weekday + clock phrases are part of the grammar

    Returns:
        The parse tree, or None if the phrase does not fit the grammar.
        A partial match is never returned.
    """
    try:
        tokens = tokenize(text)
        if not tokens:
            raise _NoMatch("empty input")
        return _Parser(tokens).phrase(anchors)
    except _NoMatch as exc:
        logger.debug("No match for %r: %s", text, exc)
        return None
