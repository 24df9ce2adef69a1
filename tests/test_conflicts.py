"""
Unit tests for conflict detection.

Definitions used here:
- sessions conflict when they are on the same day, their odd/even markers
  are compatible and their hour ranges overlap
- touching hour ranges (9-10 and 10-11) are NOT a conflict
- exams conflict when two picked classes have an exam on the same date
"""

import unittest

from classpicker.conflicts import (
    dates_compatible,
    find_conflicts,
    find_exam_conflicts,
    plan_day,
    plan_week,
    total_credit,
)
from classpicker.model import ClassInfo, DayOfWeek, Exam, Session, Time


def record(class_id, sessions=(), exams=(), credit=None):
    return ClassInfo(
        id=class_id,
        course_id=class_id * 10,
        course_title=f"C{class_id}",
        capacity=30,
        campus="Main",
        campus_id=1,
        credit=credit,
        sessions=tuple(sessions),
        exams=tuple(exams),
    )


def session(start, end, day=DayOfWeek.MON, dates=None, start_minute=0):
    return Session(starts=Time(start, start_minute), ends=Time(end, 0), day=day, dates=dates)


class TestSessionOverlap(unittest.TestCase):
    def test_same_hours_overlap_and_later_session_does_not(self) -> None:
        a = record(1, [session(9, 10)])
        b = record(2, [session(9, 10)])
        c = record(3, [session(11, 12)])
        planned = {p.record.id: p for p in plan_day([a, b, c], DayOfWeek.MON)}
        self.assertTrue(planned[1].time_overlap)
        self.assertTrue(planned[2].time_overlap)
        self.assertFalse(planned[3].time_overlap)

    def test_touching_sessions_do_not_overlap(self) -> None:
        a = record(1, [session(9, 10)])
        b = record(2, [session(10, 11)])
        self.assertFalse(any(p.time_overlap for p in plan_day([a, b], DayOfWeek.MON)))
        self.assertEqual(find_conflicts([a, b]), [])

    def test_odd_and_even_weeks_do_not_overlap(self) -> None:
        a = record(1, [session(9, 11, dates="odd")])
        b = record(2, [session(9, 11, dates="even")])
        self.assertFalse(any(p.time_overlap for p in plan_day([a, b], DayOfWeek.MON)))

    def test_every_week_overlaps_odd_week(self) -> None:
        a = record(1, [session(9, 11)])
        b = record(2, [session(10, 12, dates="odd")])
        self.assertTrue(all(p.time_overlap for p in plan_day([a, b], DayOfWeek.MON)))

    def test_different_days_do_not_overlap(self) -> None:
        a = record(1, [session(9, 11, day=DayOfWeek.MON)])
        b = record(2, [session(9, 11, day=DayOfWeek.TUE)])
        self.assertEqual(find_conflicts([a, b]), [])

    def test_minutes_are_ignored(self) -> None:
        # 10:30-12 against 9-10 compares hours 10-12 and 9-10: touching, no overlap
        a = record(1, [session(10, 12, start_minute=30)])
        b = record(2, [session(9, 10)])
        self.assertEqual(find_conflicts([a, b]), [])

    def test_find_conflicts_lists_each_pair_once(self) -> None:
        a = record(1, [session(9, 11)])
        b = record(2, [session(10, 12)])
        pairs = find_conflicts([a, b])
        self.assertEqual(len(pairs), 1)
        self.assertEqual((pairs[0][0].id, pairs[0][2].id), (1, 2))

    def test_same_class_picked_twice_is_not_a_conflict(self) -> None:
        a = record(1, [session(9, 11)])
        self.assertFalse(plan_day([a, a], DayOfWeek.MON)[0].time_overlap)

    def test_dates_compatible(self) -> None:
        self.assertTrue(dates_compatible(None, "odd"))
        self.assertTrue(dates_compatible("even", None))
        self.assertTrue(dates_compatible("odd", "odd"))
        self.assertFalse(dates_compatible("odd", "even"))


class TestExamOverlap(unittest.TestCase):
    def test_same_date_different_hour_collides(self) -> None:
        a = record(1, [session(9, 10)], exams=[Exam(1403, 4, 12, 8, 0)])
        b = record(2, [session(11, 12)], exams=[Exam(1403, 4, 12, 14, 0)])
        c = record(3, [session(13, 14)], exams=[Exam(1403, 4, 13, 8, 0)])
        planned = {p.record.id: p for p in plan_day([a, b, c], DayOfWeek.MON)}
        self.assertTrue(planned[1].exam_overlap)
        self.assertTrue(planned[2].exam_overlap)
        self.assertFalse(planned[3].exam_overlap)
        self.assertEqual([(x.id, y.id) for x, y in find_exam_conflicts([a, b, c])], [(1, 2)])


class TestPlan(unittest.TestCase):
    def test_sessions_sorted_by_start(self) -> None:
        a = record(1, [session(14, 16)])
        b = record(2, [session(8, 9, start_minute=30), session(8, 9)])
        planned = plan_day([a, b], DayOfWeek.MON)
        self.assertEqual([p.session.starts for p in planned], [Time(8, 0), Time(8, 30), Time(14, 0)])

    def test_unknown_day_sessions_are_not_planned(self) -> None:
        a = record(1, [Session(Time(9, 0), Time(10, 0))])
        self.assertEqual(plan_week([a]).days, {})

    def test_total_credit(self) -> None:
        picks = [record(1, credit=3), record(2, credit=4), record(3, credit=None)]
        self.assertEqual(total_credit(picks), 7)

    def test_over_limit(self) -> None:
        picks = [record(1, [session(9, 10)], credit=3), record(2, credit=4)]
        plan = plan_week(picks, max_credit=6)
        self.assertEqual(plan.total_credit, 7)
        self.assertTrue(plan.over_limit)
        self.assertFalse(plan_week(picks, max_credit=7).over_limit)
        self.assertEqual(list(plan.days), [DayOfWeek.MON])

    def test_has_conflicts(self) -> None:
        a = record(1, [session(9, 11)])
        b = record(2, [session(10, 12)])
        c = record(3, [session(12, 13)], exams=[Exam(1403, 4, 12, 8, 0)])
        d = record(4, [session(8, 9, day=DayOfWeek.SAT)], exams=[Exam(1403, 4, 12, 14, 0)])
        self.assertTrue(plan_week([a, b]).has_conflicts)
        self.assertTrue(plan_week([c, d]).has_conflicts)
        self.assertFalse(plan_week([b, c]).has_conflicts)


if __name__ == "__main__":
    unittest.main()
