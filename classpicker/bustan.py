"""
Bustan dataset dialect.

Column layout of the class list worksheet (A..L):

    A title          B course id      C (ignored)     D course type
    E class id       F capacity       G campus id     H campus
    I teacher        J session text   K exam text     L (ignored)

One row describes one session of a class; rows with the same class id
(column E) are merged into a single record.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Sequence

from classpicker.dialect import DialectParser
from classpicker.model import ClassInfoBuilder, Exam, Session, Time
from classpicker.rowmap import ColumnMapper
from classpicker.text import cell_key, is_empty_cell, normalize, text_or_empty, to_int
from classpicker.timeutil import day_from_name

logger = logging.getLogger(__name__)

CLASS_ID_COLUMN = 4

_TIME = re.compile(r"[0-9]{2}:[0-9]{2}")


def _time_from(text: str) -> Time:
    hour, _, minute = text.partition(":")
    return Time.coerce(hour, minute)


def parse_sessions(raw: Any) -> list[Session]:
    """
    Parse a session cell such as 'دوشنبه10:00-12:00'.

    The day is whatever precedes the first time; start and end are the
    first two HH:MM values. Returns at most one session.
    """
    if not isinstance(raw, str) or is_empty_cell(raw):
        return []

    logger.debug("parse_sessions(raw=%r)", raw)

    times = _TIME.findall(raw)
    if len(times) < 2:
        logger.warning("session text without a time range: %r", raw)
        return []

    day_text = _TIME.split(raw, maxsplit=1)[0]
    day = day_from_name(day_text) if normalize(day_text) else None

    return [Session(starts=_time_from(times[0]), ends=_time_from(times[1]), day=day)]


def parse_exams(raw: Any) -> list[Exam]:
    """
    Parse an exam cell such as '1403/04/12 ساعت 08:30'.

    The first space separated token is the date (Y/M/D), the third the time.
    Missing parts become 0.
    """
    if not isinstance(raw, str) or is_empty_cell(raw):
        return []

    logger.debug("parse_exams(raw=%r)", raw)

    tokens = raw.strip().split(" ")
    date = tokens[0].split("/")
    clock = tokens[2].split(":") if len(tokens) > 2 else []

    def part(values: list[str], i: int) -> int:
        return to_int(values[i]) if i < len(values) else 0

    return [
        Exam(
            year=part(date, 0),
            month=part(date, 1),
            day=part(date, 2),
            hour=part(clock, 0),
            minute=part(clock, 1),
        )
    ]


class BustanParser(DialectParser):
    name = "bustan"
    column_count = 12

    def row_id(self, values: Sequence[Any]) -> str:
        return cell_key(values[CLASS_ID_COLUMN])

    def assigners(self) -> ColumnMapper:
        def title(value: Any, o: ClassInfoBuilder) -> None:
            o.course_title = text_or_empty(value)

        def course_id(value: Any, o: ClassInfoBuilder) -> None:
            o.course_id = to_int(value)

        def course_type(value: Any, o: ClassInfoBuilder) -> None:
            o.course_type = text_or_empty(value)

        def class_id(value: Any, o: ClassInfoBuilder) -> None:
            o.id = to_int(value)

        def capacity(value: Any, o: ClassInfoBuilder) -> None:
            o.capacity = to_int(value)

        def campus_id(value: Any, o: ClassInfoBuilder) -> None:
            o.campus_id = to_int(value)

        def campus(value: Any, o: ClassInfoBuilder) -> None:
            o.campus = text_or_empty(value)

        def teacher(value: Any, o: ClassInfoBuilder) -> None:
            if not is_empty_cell(value):
                o.add_teacher(normalize(str(value)))

        def sessions(value: Any, o: ClassInfoBuilder) -> None:
            for s in parse_sessions(value):
                o.add_session(s)

        def exams(value: Any, o: ClassInfoBuilder) -> None:
            for e in parse_exams(value):
                o.add_exam(e)

        return [
            title,  # A
            course_id,  # B
            None,  # C
            course_type,  # D
            class_id,  # E
            capacity,  # F
            campus_id,  # G
            campus,  # H
            teacher,  # I
            sessions,  # J
            exams,  # K
        ]
