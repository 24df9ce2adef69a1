"""
Row mapper framework.

A dialect is described by an ordered list of "assigners": index i handles
column i of a worksheet row. Each assigner takes the raw cell value and the
record under construction and writes into it. None means the column is
ignored.

Rows that share a merge key (computed by the dialect from the raw row)
describe the same class and are applied to the same builder, so one class
split over several rows ends up as one record.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from classpicker.model import ClassInfoBuilder

logger = logging.getLogger(__name__)

Assigner = Callable[[Any, ClassInfoBuilder], None]
ColumnMapper = Sequence[Optional[Assigner]]
RowIdGenerator = Callable[[Sequence[Any]], str]


def row_has_values(values: Sequence[Any]) -> bool:
    for v in values:
        if v is None:
            continue
        if isinstance(v, str) and not v.strip():
            continue
        return True
    return False


def apply_row(values: Sequence[Any], assigners: ColumnMapper, target: ClassInfoBuilder) -> None:
    """Run every present assigner against its column value."""
    for index, assign in enumerate(assigners):
        if assign is not None:
            assign(values[index], target)


def map_rows(
    rows: Sequence[Sequence[Any]],
    assigners: ColumnMapper,
    get_row_id: RowIdGenerator,
    header_rows: int = 1,
) -> list[ClassInfoBuilder]:
    """
    Map worksheet rows to record builders, merging rows with the same key.

    Returns the builders in order of first appearance. State lives only in
    this call, so repeated calls never share records.
    """
    builders: list[ClassInfoBuilder] = []
    index_by_key: dict[str, int] = {}

    for number, values in enumerate(rows, start=1):
        if number <= header_rows:
            continue

        if not row_has_values(values):
            continue

        if len(values) < len(assigners):
            logger.warning(
                "row %d has length of %d which is less than the %d mapped columns",
                number,
                len(values),
                len(assigners),
            )
            continue

        key = get_row_id(values)
        item_index = index_by_key.get(key)
        if item_index is None:
            item_index = index_by_key[key] = len(builders)
            builders.append(ClassInfoBuilder())

        logger.debug("row=%d key=%r item=%d", number, key, item_index)
        apply_row(values, assigners, builders[item_index])

    return builders
