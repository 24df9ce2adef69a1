"""
classpicker: course-catalog normalizer and weekly class planner.

Reads Bustan and Golestan spreadsheet exports, turns them into canonical
ClassInfo records and checks a set of picked classes for time, exam and
credit conflicts.
"""

from pathlib import Path

__version__ = (Path(__file__).resolve().parent / "VERSION").read_text(encoding="utf-8").strip()
