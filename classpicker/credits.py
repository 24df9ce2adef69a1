"""
courseId -> credit cross reference.

The main Golestan/Bustan sheets do not always carry credits. A separate
"field lessons" worksheet does, and what was learned from it can be kept
in an external key/value preference store so later loads can backfill
credits without the auxiliary sheet.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Protocol, Sequence

from classpicker.rowmap import row_has_values
from classpicker.text import cell_key, to_int

logger = logging.getLogger(__name__)

STORE_KEY = "CreditMappings"

# auxiliary sheet columns (0-based): C = course id, E + F = theory + practical units
COURSE_ID_COLUMN = 2
CREDIT_COLUMNS = (4, 5)


class PreferenceStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class CreditCache:
    """
    In-memory credit mapping, optionally mirrored to a preference store.

    Nothing touches the store until set_store_use(True) is called.
    """

    def __init__(self, store: Optional[PreferenceStore] = None) -> None:
        self._store = store
        self._use_store = False
        self._mappings: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._mappings)

    @property
    def uses_store(self) -> bool:
        return self._use_store

    def set_store_use(self, allowed: bool) -> None:
        """
        Allow or forbid reading/writing the preference store.

        When allowed, previously stored mappings are restored right away.
        """
        logger.debug("set_store_use(allowed=%s)", allowed)
        self._use_store = bool(allowed) and self._store is not None
        if self._use_store:
            self._restore()

    def _restore(self) -> None:
        assert self._store is not None
        stored = self._store.get(STORE_KEY)
        if not stored:
            return
        try:
            data = json.loads(stored)
        except json.JSONDecodeError:
            logger.warning("ignoring unreadable credit mappings in the preference store")
            return
        if not isinstance(data, dict):
            logger.warning("ignoring credit mappings of unexpected type %s", type(data).__name__)
            return
        for course_id, credit in data.items():
            self._mappings[str(course_id)] = to_int(credit)
        logger.debug("restored %d credit mappings", len(data))

    def _persist(self) -> None:
        if self._use_store and self._store is not None:
            self._store.set(STORE_KEY, json.dumps(self._mappings, ensure_ascii=False))

    def get(self, course_id: Any) -> Optional[int]:
        return self._mappings.get(cell_key(course_id))

    def update(self, mappings: dict[Any, Any]) -> None:
        for course_id, credit in mappings.items():
            self._mappings[cell_key(course_id)] = to_int(credit)
        self._persist()

    def update_from_rows(self, rows: Sequence[Sequence[Any]], header_rows: int = 1) -> int:
        """
        Read an auxiliary credit worksheet. Returns the number of rows used.
        """
        width = max(COURSE_ID_COLUMN, *CREDIT_COLUMNS) + 1
        found: dict[str, int] = {}

        for number, values in enumerate(rows, start=1):
            if number <= header_rows or not row_has_values(values):
                continue
            if len(values) < width:
                logger.warning("credit row %d has only %d columns, skipped", number, len(values))
                continue
            course_id = cell_key(values[COURSE_ID_COLUMN])
            if not course_id:
                continue
            credit = sum(to_int(values[i]) for i in CREDIT_COLUMNS)
            logger.debug("course_id=%s credit=%d", course_id, credit)
            found[course_id] = credit

        self.update(found)
        return len(found)
