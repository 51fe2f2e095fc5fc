import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, TypeAlias
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from typing_extensions import override

from whenparse.anchors import evaluate_anchor
from whenparse.errors import EvaluationError
from whenparse.evaluate import evaluate
from whenparse.grammar import AnchorNode, recognize
from whenparse.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotApplicable:
    """The phrase is not in this strategy's grammar; try the next one."""

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class Failure:
    """The phrase matched but could not be resolved.

    Attributes:
        reason: Human-readable description of what went wrong
        error: The underlying exception
    """

    reason: str
    error: EvaluationError

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class Success:
    """The phrase matched and resolved to ``when`` (timezone-aware)."""

    when: datetime

    @property
    def ok(self) -> bool:
        return True


Result: TypeAlias = NotApplicable | Failure | Success

NOT_APPLICABLE = NotApplicable()


def coerce_zone(tz: str | tzinfo) -> tzinfo:
    """Accept an IANA zone name or a tzinfo instance.

    Raises:
        ValueError: If the zone name is unknown
        TypeError: If tz is neither a string nor a tzinfo
    """
    if isinstance(tz, tzinfo):
        return tz
    if isinstance(tz, str):
        try:
            return ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(
                f"Unknown time zone {tz!r}.\n"
                f"Hint: Use an IANA name such as 'UTC', 'US/Pacific' or "
                f"'Europe/London', or pass a tzinfo instance"
            ) from exc
    raise TypeError(
        f"Time zone must be an IANA name or tzinfo, got {type(tz).__name__!r}: {tz!r}"
    )


def reference_instant(tz: str | tzinfo, now: datetime | None = None) -> datetime:
    """Build the reference instant phrases are resolved against.

    Args:
        tz: Zone the reference and the result are expressed in
        now: Current time; must be timezone-aware. Defaults to the clock.

    Raises:
        TypeError: If ``now`` is a naive datetime
    """
    zone = coerce_zone(tz)
    if now is None:
        return datetime.now(zone)
    if now.tzinfo is None or now.utcoffset() is None:
        raise TypeError(
            f"Reference time must be a timezone-aware datetime.\n"
            f"Got naive datetime: {now!r}\n"
            f"Hint: Add timezone info:\n"
            f"  from zoneinfo import ZoneInfo\n"
            f"  now = datetime(..., tzinfo=ZoneInfo('UTC'))"
        )
    return now.astimezone(zone)


class Strategy(ABC):
    """One parser in a chain of natural-language time parsers."""

    @abstractmethod
    def resolve(self, text: str, reference: datetime) -> Result:
        """Resolve ``text`` against an already coerced reference instant."""
        pass

    def try_parse(
        self, tz: str | tzinfo, text: str | bytes, now: datetime | None = None
    ) -> Result:
        """Parse ``text`` relative to ``now`` (or the clock) in zone ``tz``.

        Returns exactly one of NotApplicable, Failure or Success. Phrase
        content never raises; only caller mistakes (naive ``now``, unknown
        zone) do.
        """
        reference = reference_instant(tz, now)
        if isinstance(text, bytes):
            try:
                text = text.decode("utf-8")
            except UnicodeDecodeError:
                logger.debug("Input is not valid UTF-8: %r", text[:40])
                return NOT_APPLICABLE
        return self.resolve(text, reference)

    def __or__(self, other: "Strategy") -> "Strategy":
        if not isinstance(other, Strategy):
            return NotImplemented
        return Chain(self, other)


class English(Strategy):
    """Relative English phrases ("3 weeks ago", "in 5 days") and weekday anchors."""

    def __init__(self, settings: Settings | None = None, **options: Any):
        if settings is not None and options:
            raise TypeError("Pass either settings or keyword options, not both")
        self.settings: Settings = settings or Settings(**options)

    @override
    def resolve(self, text: str, reference: datetime) -> Result:
        tree = recognize(text, anchors=self.settings.anchors)
        if tree is None:
            return NOT_APPLICABLE
        try:
            if isinstance(tree, AnchorNode):
                when = evaluate_anchor(tree, reference)
            else:
                when = evaluate(tree, reference, self.settings)
        except EvaluationError as exc:
            logger.warning("Could not resolve %r: %s", text, exc)
            return Failure(reason=str(exc), error=exc)
        return Success(when=when)

    def __repr__(self) -> str:
        return f"English({self.settings!r})"


class Chain(Strategy):
    """Try strategies in order; the first one that recognizes the text wins.

    A Failure stops the chain: the text was recognized, so later strategies
    are not consulted.
    """

    def __init__(self, *strategies: Strategy):
        flattened: list[Strategy] = []
        for strategy in strategies:
            if isinstance(strategy, Chain):
                flattened.extend(strategy.strategies)
            else:
                flattened.append(strategy)
        self.strategies: tuple[Strategy, ...] = tuple(flattened)

    @override
    def resolve(self, text: str, reference: datetime) -> Result:
        for strategy in self.strategies:
            result = strategy.resolve(text, reference)
            if not isinstance(result, NotApplicable):
                return result
        return NOT_APPLICABLE

    def __repr__(self) -> str:
        return f"Chain{self.strategies!r}"


_default = English()


def try_parse(
    tz: str | tzinfo,
    text: str | bytes,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> Result:
    """Parse an English time phrase.

    Args:
        tz: IANA zone name or tzinfo the result is expressed in
        text: The phrase, e.g. "3 weeks and 5 days ago"
        now: Reference instant (timezone-aware). Defaults to the clock.
        settings: Options; defaults to ``Settings()``

    Returns:
        NotApplicable, Failure or Success

    Example:
        >>> result = try_parse("UTC", "in 5 days and 6 minutes")
        >>> result.ok
        True
    """
    strategy = _default if settings is None else English(settings)
    return strategy.try_parse(tz, text, now)


def parse(
    tz: str | tzinfo,
    text: str | bytes,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> datetime | None:
    """Like try_parse, but returns the datetime directly.

    Returns:
        The resolved datetime, or None if the phrase is not recognized

    Raises:
        EvaluationError: If the phrase is recognized but cannot be resolved
    """
    result = try_parse(tz, text, now, settings)
    if isinstance(result, Failure):
        raise result.error
    if isinstance(result, Success):
        return result.when
    return None
