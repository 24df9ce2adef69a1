"""
Conflict detection.

Given the picked classes, detect for every weekday:
- sessions whose hour ranges overlap another picked session
  (same day, compatible odd/even weeks; touching ranges are fine)
- classes whose exam falls on the same date as another picked class's exam
and the total credit against a maximum.

Overlap rule (hours only, minutes ignored):
    start_hour < other_end_hour AND end_hour > other_start_hour
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from classpicker.config import DEFAULT_MAX_CREDIT
from classpicker.model import ClassInfo, DayOfWeek, Session
from classpicker.timeutil import ranges_overlap


@dataclass(frozen=True)
class PlannedSession:
    """One session of a picked class placed on its day, with conflict flags."""

    record: ClassInfo
    session: Session
    time_overlap: bool
    exam_overlap: bool


@dataclass(frozen=True)
class WeeklyPlan:
    days: dict[DayOfWeek, list[PlannedSession]] = field(default_factory=dict)
    total_credit: int = 0
    max_credit: int = DEFAULT_MAX_CREDIT

    @property
    def over_limit(self) -> bool:
        return self.total_credit > self.max_credit

    @property
    def has_conflicts(self) -> bool:
        return any(p.time_overlap or p.exam_overlap for items in self.days.values() for p in items)


def _unique(selected: Iterable[ClassInfo]) -> list[ClassInfo]:
    # picking the same class twice is one pick
    seen: set[int] = set()
    out: list[ClassInfo] = []
    for record in selected:
        if record.id in seen:
            continue
        seen.add(record.id)
        out.append(record)
    return out


def dates_compatible(a: Optional[str], b: Optional[str]) -> bool:
    """Odd/even markers can collide unless one is odd and the other even."""
    return a is None or b is None or a == b


def sessions_overlap(a: Session, b: Session) -> bool:
    if a.day is None or a.day != b.day:
        return False
    if not dates_compatible(a.dates, b.dates):
        return False
    return ranges_overlap(a.starts.hour, a.ends.hour, b.starts.hour, b.ends.hour)


def exam_collides(record: ClassInfo, selected: Sequence[ClassInfo]) -> bool:
    """True if another picked class has an exam on one of this class's exam dates."""
    dates = {e.date for e in record.exams}
    if not dates:
        return False
    for other in selected:
        if other is record or other.id == record.id:
            continue
        if any(e.date in dates for e in other.exams):
            return True
    return False


def plan_day(selected: Sequence[ClassInfo], day: DayOfWeek) -> list[PlannedSession]:
    """
    All sessions of the picked classes on one day, sorted by start time.
    """
    picked = _unique(selected)
    located = [
        (ri, si, record, session)
        for ri, record in enumerate(picked)
        for si, session in enumerate(record.sessions)
        if session.day is not None
    ]

    out: list[PlannedSession] = []
    for ri, si, record, session in located:
        if session.day != day:
            continue
        time_overlap = any(
            sessions_overlap(session, other)
            for rj, sj, _, other in located
            if (rj, sj) != (ri, si)
        )
        out.append(
            PlannedSession(
                record=record,
                session=session,
                time_overlap=time_overlap,
                exam_overlap=exam_collides(record, picked),
            )
        )

    out.sort(key=lambda p: p.session.starts.minutes)
    return out


def total_credit(selected: Iterable[ClassInfo]) -> int:
    return sum(record.credit or 0 for record in _unique(selected))


def plan_week(selected: Sequence[ClassInfo], max_credit: int = DEFAULT_MAX_CREDIT) -> WeeklyPlan:
    """
    Per-day plans for every day that has at least one session.
    """
    days: dict[DayOfWeek, list[PlannedSession]] = {}
    for day in DayOfWeek:
        items = plan_day(selected, day)
        if items:
            days[day] = items
    return WeeklyPlan(days=days, total_credit=total_credit(selected), max_credit=max_credit)


def find_conflicts(selected: Sequence[ClassInfo]) -> list[tuple[ClassInfo, Session, ClassInfo, Session]]:
    """
    Find overlapping session pairs between picked classes, each pair once (i<j).
    """
    picked = _unique(selected)
    flat = [(record, session) for record in picked for session in record.sessions]

    conflicts: list[tuple[ClassInfo, Session, ClassInfo, Session]] = []
    # O(n^2) is fine for a personal schedule
    for i in range(len(flat)):
        r1, s1 = flat[i]
        for j in range(i + 1, len(flat)):
            r2, s2 = flat[j]
            if sessions_overlap(s1, s2):
                conflicts.append((r1, s1, r2, s2))

    return conflicts


def find_exam_conflicts(selected: Sequence[ClassInfo]) -> list[tuple[ClassInfo, ClassInfo]]:
    """Pairs of picked classes whose exams share a date."""
    picked = _unique(selected)
    out: list[tuple[ClassInfo, ClassInfo]] = []
    for i in range(len(picked)):
        dates = {e.date for e in picked[i].exams}
        for j in range(i + 1, len(picked)):
            if any(e.date in dates for e in picked[j].exams):
                out.append((picked[i], picked[j]))
    return out
