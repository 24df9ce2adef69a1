"""
Day names, time comparison and display helpers.

Formatting is done by plain functions that take the session/exam as an
argument; the value objects themselves carry no behaviour.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from classpicker.model import EVEN, ODD, DayOfWeek, Exam, Session, Time
from classpicker.text import EMPTY_CELL, normalize

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Day names
# ---------------------------------------------------------------------------

DAY_NAMES = (
    "شنبه",
    "یکشنبه",
    "دوشنبه",
    "سه شنبه",
    "چهارشنبه",
    "پنجشنبه",
    "جمعه",
)

_DAY_SPELLINGS = {
    DayOfWeek.SAT: ("شنبه",),
    DayOfWeek.SUN: ("یکشنبه", "يك شنبه", "یک شنبه", "يك‌شنبه", "يكشنبه"),
    DayOfWeek.MON: ("دو شنبه", "دوشنبه", "دو‌شنبه"),
    DayOfWeek.TUE: ("سه‌شنبه", "سه شنبه", "سهشنبه"),
    DayOfWeek.WED: ("چهار شنبه", "چهارشنبه", "چهار‌شنبه"),
    DayOfWeek.THU: ("پنج‌شنبه", "پنج شنبه", "پنجشنبه"),
    DayOfWeek.FRI: ("جمعه",),
}

# lookups happen on normalized text, so the table is normalized too
_DAY_LOOKUP = {normalize(name): day for day, names in _DAY_SPELLINGS.items() for name in names}

ODD_LABEL = "[فرد]"
EVEN_LABEL = "[زوج]"


def day_from_name(text: Any) -> Optional[DayOfWeek]:
    """
    Map a Persian day name to DayOfWeek.

    Unknown spellings are logged and give None; callers keep None as
    "day unknown" instead of guessing a day.
    """
    day = _DAY_LOOKUP.get(normalize(text))
    if day is None:
        logger.warning("unknown day of week representation: %r", text)
    return day


def day_to_name(day: Optional[int]) -> str:
    if day is None:
        return EMPTY_CELL
    return DAY_NAMES[int(day)]


# ---------------------------------------------------------------------------
# Time helpers
# ---------------------------------------------------------------------------


def _pad(value: int) -> str:
    return f"{value:02d}"


def format_time(hour: int, minute: int, force_minute: bool = False) -> str:
    """
    '9' for 9:00, '9:30' for 9:30, and '09:00' / '09:30' when forced.
    """
    text = _pad(hour or 0) if force_minute else str(hour)
    if minute or force_minute:
        text += ":" + _pad(minute or 0)
    return text


def time_equals(a: Time, b: Time) -> bool:
    return a.hour == b.hour and a.minute == b.minute


def ranges_overlap(a0: float, a1: float, b0: float, b1: float, inclusive: bool = False) -> bool:
    """
    Check whether [a0, a1] and [b0, b1] overlap.

    With inclusive=False touching ranges (9-10 and 10-11) do not overlap.
    """
    if inclusive:
        return a1 >= b0 and a0 <= b1
    return a1 > b0 and a0 < b1


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------


def format_session(session: Session, append_place: bool = False, full_time: bool = False) -> str:
    t0 = format_time(session.starts.hour, session.starts.minute, full_time)
    t1 = format_time(session.ends.hour, session.ends.minute, full_time)
    text = f"{day_to_name(session.day)} {t0} تا {t1}"
    if append_place and session.place:
        text += f" ({session.place})"
    if session.dates == ODD:
        text += " " + ODD_LABEL
    elif session.dates == EVEN:
        text += " " + EVEN_LABEL
    return text


def format_exam(exam: Exam) -> str:
    text = f"{exam.year}/{_pad(exam.month)}/{_pad(exam.day)} {_pad(exam.hour)}:{_pad(exam.minute)}"
    if exam.ends is not None:
        text += f"-{_pad(exam.ends.hour)}:{_pad(exam.ends.minute)}"
    return text
