"""
Common base for the spreadsheet dialect parsers.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from classpicker.credits import CreditCache
from classpicker.model import ClassInfo, ClassInfoBuilder
from classpicker.rowmap import ColumnMapper, map_rows

logger = logging.getLogger(__name__)


class DialectParser:
    """
    Turns the rows of one worksheet into ClassInfo records.

    Subclasses provide the column layout (assigners), the merge key and the
    physical column count used to recognize their worksheets.
    """

    name = "dialect"
    column_count = 0

    def __init__(self, credits: Optional[CreditCache] = None) -> None:
        self.credits = credits if credits is not None else CreditCache()

    def assigners(self) -> ColumnMapper:
        raise NotImplementedError

    def row_id(self, values: Sequence[Any]) -> str:
        raise NotImplementedError

    def backfill_credit(self, item: ClassInfoBuilder) -> None:
        if item.credit:
            return
        credit = self.credits.get(item.course_id)
        if credit is not None:
            logger.debug("course_id=%s has previous credit=%s", item.course_id, credit)
            item.credit = credit

    def parse_rows(self, rows: Sequence[Sequence[Any]]) -> list[ClassInfo]:
        """
        Parse worksheet rows (header row included) into records.

        Each call starts from scratch; only the credit cache is shared.
        """
        logger.debug("[%s] parsing %d rows", type(self).__name__, len(rows))
        builders = map_rows(rows, self.assigners(), self.row_id)
        for item in builders:
            self.backfill_credit(item)
        return [item.build() for item in builders]
