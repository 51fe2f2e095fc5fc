"""Tests for weekday + clock-time anchors."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from whenparse.anchors import evaluate_anchor, next_occurrence, parse_clock, to_anchor
from whenparse.errors import EvaluationError
from whenparse.grammar import AnchorNode, recognize
from whenparse.terms import Anchor

# Monday, Jan 6 2025, noon UTC
NOW = datetime(2025, 1, 6, 12, 0, 0, tzinfo=timezone.utc)


def test_parse_clock_spellings():
    """Test every accepted clock spelling."""
    assert parse_clock("2", "pm") == (14, 0)
    assert parse_clock("215", "pm") == (14, 15)
    assert parse_clock("2.15", "pm") == (14, 15)
    assert parse_clock("11.15", "am") == (11, 15)
    assert parse_clock("11:15") == (11, 15)
    assert parse_clock("0815") == (8, 15)
    assert parse_clock("17") == (17, 0)


def test_parse_clock_midnight_and_noon():
    """Test the 12am/12pm edge of the 12-hour clock."""
    assert parse_clock("12", "am") == (0, 0)
    assert parse_clock("12", "pm") == (12, 0)
    assert parse_clock("12:30", "am") == (0, 30)


def test_parse_clock_out_of_range():
    """Test that impossible clock times fail evaluation."""
    with pytest.raises(EvaluationError, match="not valid with 'pm'"):
        parse_clock("14", "pm")
    with pytest.raises(EvaluationError, match="not valid with 'am'"):
        parse_clock("0", "am")
    with pytest.raises(EvaluationError, match="Hour must be 0-23"):
        parse_clock("25")
    with pytest.raises(EvaluationError, match="Minute must be 0-59"):
        parse_clock("1075")


def test_to_anchor_unknown_weekday():
    """Test a tree a correct recognizer never builds."""
    with pytest.raises(EvaluationError, match="Inconsistent parse tree"):
        to_anchor(AnchorNode("someday", "2", "pm"))


def test_next_occurrence_later_this_week():
    """Test an anchor later in the current week."""
    result = next_occurrence(Anchor(weekday=4, hour=14), NOW)

    assert result == datetime(2025, 1, 10, 14, 0, tzinfo=timezone.utc)


def test_next_occurrence_same_day():
    """Test the reference weekday before, at and after the anchor time."""
    assert next_occurrence(Anchor(weekday=0, hour=13), NOW) == NOW + timedelta(hours=1)
    assert next_occurrence(Anchor(weekday=0, hour=12), NOW) == NOW
    assert next_occurrence(Anchor(weekday=0, hour=9), NOW) == datetime(
        2025, 1, 13, 9, 0, tzinfo=timezone.utc
    )


def test_next_occurrence_earlier_weekday_wraps():
    """Test an anchor on a weekday that already passed this week."""
    result = next_occurrence(Anchor(weekday=6, hour=8, minute=30), NOW)

    assert result == datetime(2025, 1, 12, 8, 30, tzinfo=timezone.utc)

    # Sunday 1pm, after this week's 8:30am
    sunday = NOW + timedelta(days=6, hours=1)
    result = next_occurrence(Anchor(weekday=6, hour=8, minute=30), sunday)
    assert result == datetime(2025, 1, 19, 8, 30, tzinfo=timezone.utc)


def test_next_occurrence_uses_reference_zone():
    """Test that the wall-clock time is read in the reference's zone."""
    pacific = ZoneInfo("US/Pacific")
    reference = NOW.astimezone(pacific)  # Monday 4am Pacific

    result = next_occurrence(Anchor(weekday=0, hour=9), reference)

    assert result == datetime(2025, 1, 6, 9, 0, tzinfo=pacific)
    assert result.astimezone(timezone.utc).hour == 17


def test_next_occurrence_across_dst():
    """Test anchors on the day clocks spring forward."""
    pacific = ZoneInfo("US/Pacific")
    saturday = datetime(2025, 3, 8, 12, 0, tzinfo=pacific)

    morning = next_occurrence(Anchor(weekday=6, hour=9), saturday)
    skipped = next_occurrence(Anchor(weekday=6, hour=2, minute=30), saturday)

    assert (morning.day, morning.hour) == (9, 9)
    assert morning.utcoffset() == timedelta(hours=-7)
    # 2:30am does not exist that day; it denotes 3:30am daylight time
    assert (skipped.day, skipped.hour, skipped.minute) == (9, 3, 30)


def test_evaluate_anchor_from_recognized_phrases():
    """Test whole anchor phrases end to end."""
    friday = datetime(2025, 1, 10, tzinfo=timezone.utc)
    cases = [
        ("friday 2pm", friday.replace(hour=14)),
        ("friday 215pm", friday.replace(hour=14, minute=15)),
        ("friday 2.15pm", friday.replace(hour=14, minute=15)),
        ("friday 11.15am", friday.replace(hour=11, minute=15)),
        ("friday 11:15", friday.replace(hour=11, minute=15)),
        ("friday 0815", friday.replace(hour=8, minute=15)),
    ]

    for text, expected in cases:
        tree = recognize(text)
        assert isinstance(tree, AnchorNode), text
        assert evaluate_anchor(tree, NOW) == expected, text
