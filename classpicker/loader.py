"""
Dataset loading (xlsx bytes -> ClassInfo records).

- decodes the workbook with openpyxl
- feeds auxiliary worksheets (second sheet onwards) into the credit cache
- picks the dialect parser by the first worksheet's column count
- raises a DatasetError subclass when the file cannot be used
"""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import Any, Optional, Sequence
from xml.etree.ElementTree import ParseError

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from classpicker.bustan import BustanParser
from classpicker.credits import CreditCache, PreferenceStore
from classpicker.dialect import DialectParser
from classpicker.errors import EmptyResult, MalformedInput, UnrecognizedLayout, UnsupportedFormat
from classpicker.golestan import GolestanParser
from classpicker.model import ClassInfo
from classpicker.rowmap import row_has_values

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSION = "xlsx"

Rows = list[list[Any]]


def _check_extension(extension: str) -> None:
    ext = (extension or "").strip().lstrip(".").lower()
    if ext != SUPPORTED_EXTENSION:
        raise UnsupportedFormat(extension)


def decode_workbook(data: bytes) -> list[Rows]:
    """
    Decode xlsx bytes into a list of worksheets, each a list of rows of
    cell values. Raises MalformedInput on anything openpyxl rejects.
    Broken XML members surface as SyntaxError (ElementTree ParseError, or
    lxml XMLSyntaxError when lxml is installed).
    """
    try:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, ParseError, SyntaxError, KeyError, ValueError, OSError) as e:
        raise MalformedInput(f"malformed excel file: {e}") from e

    try:
        sheets = [[list(row) for row in ws.iter_rows(values_only=True)] for ws in wb.worksheets]
    except (ParseError, SyntaxError, KeyError, ValueError, TypeError) as e:
        raise MalformedInput(f"malformed excel file: {e}") from e
    finally:
        wb.close()

    return sheets


def actual_column_count(rows: Sequence[Sequence[Any]]) -> int:
    """Number of columns holding at least one value."""
    used: set[int] = set()
    for row in rows:
        for index, value in enumerate(row):
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            used.add(index)
    return len(used)


class DatasetLoader:
    """
    Loads catalog workbooks of either dialect.

    Keeps one parser per dialect and a credit cache shared by both. Not safe
    for concurrent use; callers serialize load() calls on one instance.
    """

    def __init__(self, store: Optional[PreferenceStore] = None, use_store: bool = False) -> None:
        self.credits = CreditCache(store)
        self.credits.set_store_use(use_store)
        self.parsers: dict[int, DialectParser] = {
            parser.column_count: parser for parser in (BustanParser(self.credits), GolestanParser(self.credits))
        }

    def set_store_use(self, allowed: bool) -> None:
        self.credits.set_store_use(allowed)

    def parser_for(self, rows: Sequence[Sequence[Any]]) -> DialectParser:
        count = actual_column_count(rows)
        logger.debug("worksheet actual column count=%d", count)
        parser = self.parsers.get(count)
        if parser is None:
            raise UnrecognizedLayout(count)
        return parser

    def load(self, data: bytes, extension: str) -> list[ClassInfo]:
        """
        Parse a catalog workbook into records (insertion ordered).
        """
        _check_extension(extension)
        sheets = decode_workbook(data)

        if not sheets or not any(row_has_values(row) for row in sheets[0]):
            raise EmptyResult("the workbook has no rows")

        main, *auxiliary = sheets
        parser = self.parser_for(main)

        for rows in auxiliary:
            used = self.credits.update_from_rows(rows)
            logger.debug("auxiliary worksheet gave %d credit mappings", used)

        logger.info("parsing %d rows as %s", len(main), parser.name)
        records = parser.parse_rows(main)

        if not records:
            raise EmptyResult("no usable rows found in the worksheet")
        return records

    def load_path(self, path: str | Path) -> list[ClassInfo]:
        p = Path(path)
        return self.load(p.read_bytes(), p.suffix)

    def load_credit_mappings(self, data: bytes, extension: str) -> int:
        """
        Import a companion credit workbook (every worksheet is read).
        Returns the number of known mappings afterwards.
        """
        _check_extension(extension)
        for rows in decode_workbook(data):
            self.credits.update_from_rows(rows)
        return len(self.credits)
