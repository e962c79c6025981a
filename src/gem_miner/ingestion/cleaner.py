"""
Cleaner Module - Best-effort text extraction heuristics.
========================================================

The catalog export was scraped from a PDF, so some fields blend into each
other. The helpers here recover structure from that text:

- Meeting times in compound form ("MW 1030 AM - 1145 AM")
- Instructor names polluted by the first word of the following description

These are heuristics, not parsers with a grammar. They return a usable value
for every input and never raise; misclassifications are possible.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from gem_miner.shared.logging import get_logger
from gem_miner.shared.schemas import MeetingTime

logger = get_logger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Meeting Times
# ─────────────────────────────────────────────────────────────────────────────

DAY_CODES = {
    "M": "Mon",
    "T": "Tue",
    "W": "Wed",
    "R": "Thu",
    "F": "Fri",
    "S": "Sat",
    "U": "Sun",
}

_MEETING_PATTERN = re.compile(
    r"^\s*(?P<days>[MTWRFSU]+)\s+"
    r"(?P<start>\d{1,2}:?\d{2})\s*(?P<start_period>AM|PM)\s*-\s*"
    r"(?P<end>\d{1,2}:?\d{2})\s*(?P<end_period>AM|PM)",
    re.IGNORECASE,
)


def format_clock(digits: str, period: str) -> str:
    """
    Format a raw clock value as ``H:MM AM``.

    Example:
        >>> format_clock("0115", "pm")
        '1:15 PM'
    """
    digits = digits.replace(":", "")
    hours, minutes = digits[:-2], digits[-2:]
    return f"{int(hours)}:{minutes} {period.upper()}"


def parse_meeting_time(text: Optional[str]) -> MeetingTime:
    """
    Parse a compound meeting-time string.

    Best effort: absent text, "No meeting time" text and anything that does
    not match the day-codes-plus-two-clock-times shape all yield the
    unscheduled sentinel.

    Example:
        >>> parse_meeting_time("TR 1200 PM - 0115 PM").weekdays
        'Tue/Thu'
    """
    if not text or "no meeting" in text.lower():
        return MeetingTime.unscheduled()

    match = _MEETING_PATTERN.match(text)
    if not match:
        logger.debug(f"Unparseable meeting time: {text!r}")
        return MeetingTime.unscheduled()

    weekdays = "/".join(DAY_CODES[code] for code in match.group("days").upper())
    start = format_clock(match.group("start"), match.group("start_period"))
    end = format_clock(match.group("end"), match.group("end_period"))

    return MeetingTime(
        weekdays=weekdays,
        start_time=start,
        end_time=end,
        raw=f"{weekdays} {start} - {end}",
    )


def meeting_from_fields(weekdays: str, start_time: str, end_time: str) -> MeetingTime:
    """Build a meeting time from already-separated catalog columns."""
    weekdays, start_time, end_time = weekdays.strip(), start_time.strip(), end_time.strip()
    if weekdays and start_time and end_time:
        return MeetingTime(
            weekdays=weekdays,
            start_time=start_time,
            end_time=end_time,
            raw=f"{weekdays} {start_time} - {end_time}",
        )
    if weekdays and not (start_time or end_time):
        # Older exports put the whole compound string in the weekdays column
        return parse_meeting_time(weekdays)
    return MeetingTime.unscheduled()


# ─────────────────────────────────────────────────────────────────────────────
# Instructor Cleanup
# ─────────────────────────────────────────────────────────────────────────────

# A lone one of these in the instructor field is description text, not a name
STANDALONE_WORDS = (
    "How What This In The A An Is Are Was Were Do Does Did Can Could Will "
    "Would Should May Might Must Shall Big We"
).split()

# Trailing words that bleed in from the start of the description
TRAILING_WORDS = (
    "How What This In The A An Is Are Was Were Do Does Did Field Course "
    "Students Topics Instructor Professor We It For To From With By At On Of "
    "And Or But As Can Could Will Would Big Small Large Many Some All Each "
    "Every Most"
).split()


@dataclass
class InstructorCleaner:
    """
    Strip description words that leaked into instructor names.

    Example:
        >>> InstructorCleaner().clean("David Malan This")
        'David Malan'
    """

    not_listed: str = "Instructor not listed"
    standalone_words: list[str] = field(default_factory=lambda: list(STANDALONE_WORDS))
    trailing_words: list[str] = field(default_factory=lambda: list(TRAILING_WORDS))

    def __post_init__(self) -> None:
        self._standalone = re.compile(
            rf"^(?:{'|'.join(map(re.escape, self.standalone_words))})$", re.IGNORECASE
        )
        self._trailing = re.compile(
            rf"\s+(?:{'|'.join(map(re.escape, self.trailing_words))})$", re.IGNORECASE
        )

    def clean(self, text: Optional[str]) -> str:
        cleaned = (text or "").strip()
        if self._standalone.match(cleaned):
            return self.not_listed
        return self._trailing.sub("", cleaned)


def clean_instructors(text: Optional[str], not_listed: str = "Instructor not listed") -> str:
    """Convenience wrapper around :class:`InstructorCleaner`."""
    return InstructorCleaner(not_listed=not_listed).clean(text)


def strip_wrapping_quotes(text: Optional[str]) -> Optional[str]:
    """Remove one pair of quotes wrapping the whole value."""
    if text is None:
        return None
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1].strip()
    return text
