"""
Central data model definitions used across the project.

This module defines the canonical structure of the records built from both
spreadsheet dialects so that:
- parsers, the conflict detector and the CLI share the same field names
- finished records are immutable plain values (no behaviour attached)
- a record under construction lives in a separate mutable builder
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, List, Optional, Tuple

from classpicker.text import to_int

ODD = "odd"
EVEN = "even"


class DayOfWeek(IntEnum):
    """Day of the week, the week starts on Saturday."""

    SAT = 0
    SUN = 1
    MON = 2
    TUE = 3
    WED = 4
    THU = 5
    FRI = 6


@dataclass(frozen=True)
class Time:
    """Time of day in 24-hour format (e.g. 23:15)."""

    hour: int = 0
    minute: int = 0

    @classmethod
    def coerce(cls, hour: Any = 0, minute: Any = 0) -> "Time":
        """Build a Time from raw values; absent or malformed parts become 0."""
        return cls(max(to_int(hour), 0), max(to_int(minute), 0))

    @property
    def minutes(self) -> int:
        return self.hour * 60 + self.minute


@dataclass(frozen=True)
class Epoch:
    """A calendar date in any calendar. Not validated."""

    year: int = 0
    month: int = 0
    day: int = 0

    @classmethod
    def coerce(cls, year: Any = 0, month: Any = 0, day: Any = 0) -> "Epoch":
        return cls(to_int(year), to_int(month), to_int(day))


@dataclass(frozen=True)
class Session:
    """
    One recurring weekly time block of a class.

    dates is "odd", "even" or None. None means every week, not "unknown".
    day None means the day could not be read from the source text.
    """

    starts: Time
    ends: Time
    day: Optional[DayOfWeek] = None
    dates: Optional[str] = None
    place: Optional[str] = None


@dataclass(frozen=True)
class Exam:
    """A final exam: date, start time and an optional end time."""

    year: int = 0
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    ends: Optional[Time] = None

    @property
    def date(self) -> Epoch:
        return Epoch(self.year, self.month, self.day)

    @property
    def starts(self) -> Time:
        return Time(self.hour, self.minute)


@dataclass(frozen=True)
class ClassInfo:
    """
    Canonical record for one offered class (section) of a course.

    id identifies the class, course_id the parent course; several classes
    share one course_id.
    """

    id: int
    course_id: int
    course_title: str
    capacity: int
    campus: str
    campus_id: int
    course_type: Optional[str] = None
    credit: Optional[int] = None
    teachers: Tuple[str, ...] = ()
    sessions: Tuple[Session, ...] = ()
    exams: Tuple[Exam, ...] = ()


@dataclass
class ClassInfoBuilder:
    """
    Mutable record used while the rows of one class are being parsed.

    Column assigners write into it; build() freezes it into a ClassInfo.
    """

    id: int = 0
    course_id: int = 0
    course_title: str = ""
    capacity: int = 0
    campus: str = ""
    campus_id: int = 0
    course_type: Optional[str] = None
    credit: Optional[int] = None
    teachers: List[str] = field(default_factory=list)
    sessions: List[Session] = field(default_factory=list)
    exams: List[Exam] = field(default_factory=list)

    def add_teacher(self, name: str) -> None:
        if name and name not in self.teachers:
            self.teachers.append(name)

    def add_session(self, session: Session) -> None:
        if session not in self.sessions:
            self.sessions.append(session)

    def add_exam(self, exam: Exam) -> None:
        if exam not in self.exams:
            self.exams.append(exam)

    def build(self) -> ClassInfo:
        return ClassInfo(
            id=self.id,
            course_id=self.course_id,
            course_title=self.course_title,
            capacity=self.capacity,
            campus=self.campus,
            campus_id=self.campus_id,
            course_type=self.course_type,
            credit=self.credit,
            teachers=tuple(self.teachers),
            sessions=tuple(self.sessions),
            exams=tuple(self.exams),
        )


def to_dict(record: ClassInfo) -> dict[str, Any]:
    """
    Plain JSON-serializable representation of a record.

    Days are written as their numeric index (None stays None).
    """
    data = dataclasses.asdict(record)
    for session in data["sessions"]:
        if session["day"] is not None:
            session["day"] = int(session["day"])
    return data
