"""
Golestan dataset dialect.

Column layout (A..N):

    A campus id      B campus         C, D (ignored)
    E "courseId_classId"              F course title    G credit
    H (ignored)      I capacity       J reserved seats (subtracted)
    K, L (ignored)   M teacher        N session or exam description

Every row carries one description in column N, so a class is spread over
several rows with the same column E. Sessions coming from those rows are
merged (back-to-back blocks joined, odd/even pairs folded into "every week").
"""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import Any, Optional, Sequence, Tuple, Union

from classpicker.dialect import DialectParser
from classpicker.model import EVEN, ODD, ClassInfoBuilder, Exam, Session, Time
from classpicker.rowmap import ColumnMapper
from classpicker.text import cell_key, is_empty_cell, normalize, text_or_empty, to_int
from classpicker.timeutil import day_from_name, time_equals

logger = logging.getLogger(__name__)

COMPOSITE_ID_COLUMN = 4

SESSION_PREFIXES = ("درس", "حل")
EXAM_PREFIX = "امتحان"
PLACE_PREFIX = "مکان:"
EVEN_MARK = "ز"
ODD_MARK = "ف"
COURSE_TYPE_SEPARATOR = "،"

_TIME_SPAN = re.compile(r"([0-9]{2}:[0-9]{2})-([0-9]{2}:[0-9]{2})")
_EXAM_TIME = re.compile(r"([0-9]{2}:[0-9]{2})(?:-([0-9]{2}:[0-9]{2}))?")
_EXAM_DATE = re.compile(r"([0-9]{4})\.([0-9]{2})\.([0-9]{2})")

ParseResult = Union[
    Tuple[None, None, None],
    Tuple[str, Exam, None],
    Tuple[str, Session, Optional[str]],
]


def _time_from(text: str) -> Time:
    hour, _, minute = text.partition(":")
    return Time.coerce(hour, minute)


def _parse_session(raw: str) -> ParseResult:
    #  [type id]
    #      |    [day]            [odd/even mark, optional]
    #      v  vvvvvvvvv          v
    # درس(ت): دوشنبه 10:00-12:00 ف مکان: دانشکده فنی 101
    #                ^^^^^^^^^^^   ^^^^^^^^^^^^^^^^^^^^^^ place
    first_colon = raw.find(":")
    span = _TIME_SPAN.search(raw)
    if span is None:
        logger.error("session description without a time span: %r", raw)
        return None, None, None

    # a colon inside the time span means there is no "type:" label
    labelled = 0 <= first_colon < span.start()
    session_type = raw[first_colon - 2].strip() if labelled and first_colon >= 2 else ""
    day_text = raw[first_colon + 1 : span.start()].strip() if labelled else ""

    rest = raw[span.end() :].strip()
    dates: Optional[str] = None
    place: Optional[str] = None
    if rest:
        if rest[0] == EVEN_MARK:
            dates = EVEN
        elif rest[0] == ODD_MARK:
            dates = ODD
        rest = normalize(rest[1:] if dates else rest)
        if rest.startswith(PLACE_PREFIX):
            place = rest[len(PLACE_PREFIX) :].strip() or None

    session = Session(
        starts=_time_from(span.group(1)),
        ends=_time_from(span.group(2)),
        day=day_from_name(day_text),
        dates=dates,
        place=place,
    )
    logger.debug("session_type=%r day=%r session=%r", session_type, day_text, session)
    return "sessions", session, session_type or None


def _parse_exam(raw: str) -> ParseResult:
    year = month = day = 0
    date = _EXAM_DATE.search(raw)
    if date is not None:
        year, month, day = (to_int(g) for g in date.groups())
        after_date = date.end()
    else:
        after_date = 0

    starts = Time()
    ends: Optional[Time] = None
    clock = _EXAM_TIME.search(raw, after_date)
    if clock is not None:
        starts = _time_from(clock.group(1))
        if clock.group(2):
            ends = _time_from(clock.group(2))
    else:
        logger.warning("exam description without a time: %r", raw)

    exam = Exam(year=year, month=month, day=day, hour=starts.hour, minute=starts.minute, ends=ends)
    logger.debug("exam=%r", exam)
    return "exams", exam, None


def parse_exam_or_session(raw: Any) -> ParseResult:
    """
    Parse the description cell of a Golestan row.

    Returns ("sessions", Session, type id), ("exams", Exam, None), or
    (None, None, None) when the cell is empty or not understood.
    """
    if not isinstance(raw, str) or is_empty_cell(raw):
        return None, None, None

    logger.debug("parse_exam_or_session(raw=%r)", raw)

    text = raw.strip()
    if text.startswith(SESSION_PREFIXES):
        return _parse_session(text)
    if text.startswith(EXAM_PREFIX):
        return _parse_exam(text)
    return None, None, None


def merge_session(sessions: list[Session], item: Session) -> None:
    """
    Add a session to a class, merging it into an existing one when possible.

    Only the first matching stored session takes part:

    - same day and the stored session ends when the new one starts
      (WED 12-13 + WED 13-14): the stored one is extended to the new end;
    - same day, start and end: if the odd/even markers differ the stored
      one becomes "every week"; either way the new one is dropped;
    - otherwise the new session is appended.
    """
    for i, existing in enumerate(sessions):
        if existing.day == item.day and time_equals(existing.ends, item.starts):
            sessions[i] = dataclasses.replace(existing, ends=item.ends)
            return

        if (
            existing.day == item.day
            and time_equals(existing.starts, item.starts)
            and time_equals(existing.ends, item.ends)
        ):
            if existing.dates != item.dates:
                sessions[i] = dataclasses.replace(existing, dates=None)
            return

    sessions.append(item)


def add_course_type(o: ClassInfoBuilder, session_type: str) -> None:
    if o.course_type is None:
        o.course_type = session_type
    elif session_type not in o.course_type.split(COURSE_TYPE_SEPARATOR):
        o.course_type += COURSE_TYPE_SEPARATOR + session_type


class GolestanParser(DialectParser):
    name = "golestan"
    column_count = 14

    def row_id(self, values: Sequence[Any]) -> str:
        return cell_key(values[COMPOSITE_ID_COLUMN])

    def assigners(self) -> ColumnMapper:
        def campus_id(value: Any, o: ClassInfoBuilder) -> None:
            o.campus_id = to_int(value)

        def campus(value: Any, o: ClassInfoBuilder) -> None:
            o.campus = text_or_empty(value)

        def composite_id(value: Any, o: ClassInfoBuilder) -> None:
            if not isinstance(value, str):
                return
            course, _, group = value.strip().partition("_")
            o.course_id = to_int(course)
            o.id = to_int(f"{course}{group}")

        def title(value: Any, o: ClassInfoBuilder) -> None:
            o.course_title = text_or_empty(value)

        def credit(value: Any, o: ClassInfoBuilder) -> None:
            o.credit = to_int(value) or None

        def capacity(value: Any, o: ClassInfoBuilder) -> None:
            o.capacity = to_int(value)

        def reserved(value: Any, o: ClassInfoBuilder) -> None:
            o.capacity -= to_int(value)

        def teacher(value: Any, o: ClassInfoBuilder) -> None:
            if isinstance(value, str) and not is_empty_cell(value):
                o.add_teacher(normalize(value))

        def description(value: Any, o: ClassInfoBuilder) -> None:
            kind, item, session_type = parse_exam_or_session(value)
            if kind == "sessions":
                if session_type is not None:
                    add_course_type(o, session_type)
                merge_session(o.sessions, item)
            elif kind == "exams":
                o.add_exam(item)

        return [
            campus_id,  # A
            campus,  # B
            None,  # C
            None,  # D
            composite_id,  # E
            title,  # F
            credit,  # G
            None,  # H
            capacity,  # I
            reserved,  # J
            None,  # K
            None,  # L
            teacher,  # M
            description,  # N
        ]
