"""
Catalog search and lookup over loaded records.
"""

from __future__ import annotations

import json
from typing import Iterable, Optional

from classpicker.model import ClassInfo, to_dict
from classpicker.text import normalize
from classpicker.timeutil import day_to_name

DAY_TAG = "روز:"


def search_text(record: ClassInfo) -> str:
    """
    Text a query is matched against: the JSON form of the record plus a
    'روز:<day>' tag per session so users can search by weekday.
    """
    tags = " ".join(DAY_TAG + day_to_name(s.day) for s in record.sessions)
    return json.dumps(to_dict(record), ensure_ascii=False) + " " + tags


def search(records: Iterable[ClassInfo], query: str) -> list[ClassInfo]:
    """
    Records matching any of the space separated words of the query.
    An empty query matches everything.
    """
    words = [w for w in normalize(query).split(" ") if w]
    if not words:
        return list(records)
    return [r for r in records if any(w in search_text(r) for w in words)]


def find_by_id(records: Iterable[ClassInfo], class_id: int) -> Optional[ClassInfo]:
    for record in records:
        if record.id == class_id:
            return record
    return None
