"""
Tests for dataset loading: extension check, decoding, dialect dispatch by
column count, auxiliary credit worksheets and the preference store.

Workbooks are built in memory with openpyxl.
"""

import io
import json
import unittest
import zipfile

from openpyxl import Workbook

from classpicker.credits import STORE_KEY
from classpicker.errors import EmptyResult, MalformedInput, UnrecognizedLayout, UnsupportedFormat
from classpicker.loader import DatasetLoader, actual_column_count

BUSTAN_HEADER = [f"b{i}" for i in range(12)]
GOLESTAN_HEADER = [f"g{i}" for i in range(14)]
CREDIT_HEADER = ["x", "y", "course", "title", "theory", "practical"]


def workbook_bytes(*sheets):
    wb = Workbook()
    wb.remove(wb.active)
    for i, rows in enumerate(sheets, start=1):
        ws = wb.create_sheet(f"Sheet{i}")
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def replace_member(data, name, content):
    src = zipfile.ZipFile(io.BytesIO(data))
    out = io.BytesIO()
    with zipfile.ZipFile(out, "w") as dst:
        for info in src.infolist():
            dst.writestr(info.filename, content if info.filename == name else src.read(info.filename))
    return out.getvalue()


def bustan_row(class_id, course_id=5511, session="دوشنبه10:00-12:00"):
    return ["Calculus 1", course_id, None, "Theory", class_id, 40, 12, "Engineering", "Dr. A", session, "-", None]


def golestan_row(composite, description="درس(ت): دوشنبه 10:00-12:00", credit=3):
    return [10, "Engineering", None, None, composite, "Calculus 1", credit, None, 40, 5, None, None, "Dr. A", description]


class MemoryStore:
    def __init__(self, data=None):
        self.data = dict(data or {})

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value


class TestLoadErrors(unittest.TestCase):
    def test_unsupported_extension(self) -> None:
        with self.assertRaises(UnsupportedFormat):
            DatasetLoader().load(b"whatever", "csv")

    def test_garbage_bytes_are_malformed(self) -> None:
        with self.assertRaises(MalformedInput) as ctx:
            DatasetLoader().load(b"definitely not a zip", "xlsx")
        self.assertIsNotNone(ctx.exception.__cause__)

    def test_empty_bytes_are_malformed(self) -> None:
        with self.assertRaises(MalformedInput):
            DatasetLoader().load(b"", ".XLSX")

    def test_broken_workbook_xml_is_malformed(self) -> None:
        valid = workbook_bytes([BUSTAN_HEADER, bustan_row(1)])
        self.assertIn("xl/workbook.xml", zipfile.ZipFile(io.BytesIO(valid)).namelist())
        data = replace_member(valid, "xl/workbook.xml", b"\x00 not xml")
        with self.assertRaises(MalformedInput) as ctx:
            DatasetLoader().load(data, "xlsx")
        self.assertIsNotNone(ctx.exception.__cause__)

    def test_broken_worksheet_xml_is_malformed(self) -> None:
        valid = workbook_bytes([BUSTAN_HEADER, bustan_row(1)])
        self.assertIn("xl/worksheets/sheet1.xml", zipfile.ZipFile(io.BytesIO(valid)).namelist())
        data = replace_member(valid, "xl/worksheets/sheet1.xml", b"<worksheet><sheetData><row")
        with self.assertRaises(MalformedInput) as ctx:
            DatasetLoader().load(data, "xlsx")
        self.assertIsNotNone(ctx.exception.__cause__)

    def test_unknown_column_count(self) -> None:
        data = workbook_bytes([["a", "b", "c"], [1, 2, 3]])
        with self.assertRaises(UnrecognizedLayout) as ctx:
            DatasetLoader().load(data, "xlsx")
        self.assertEqual(ctx.exception.column_count, 3)

    def test_empty_sheet(self) -> None:
        with self.assertRaises(EmptyResult):
            DatasetLoader().load(workbook_bytes([]), "xlsx")

    def test_header_only_sheet(self) -> None:
        with self.assertRaises(EmptyResult):
            DatasetLoader().load(workbook_bytes([BUSTAN_HEADER]), "xlsx")


class TestLoadDialects(unittest.TestCase):
    def test_bustan_sheet(self) -> None:
        data = workbook_bytes([BUSTAN_HEADER, bustan_row(1234), bustan_row(1234, session="شنبه08:00-10:00"), bustan_row(99)])
        records = DatasetLoader().load(data, "xlsx")
        self.assertEqual([r.id for r in records], [1234, 99])
        self.assertEqual(len(records[0].sessions), 2)

    def test_golestan_sheet(self) -> None:
        data = workbook_bytes(
            [
                GOLESTAN_HEADER,
                golestan_row("1234_01", "درس(ت): چهارشنبه 12:00-13:00"),
                golestan_row("1234_01", "درس(ت): چهارشنبه 13:00-14:00"),
            ]
        )
        records = DatasetLoader().load(data, "xlsx")
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].id, 123401)
        self.assertEqual(len(records[0].sessions), 1)
        self.assertEqual(records[0].sessions[0].ends.hour, 14)

    def test_repeated_loads_are_independent(self) -> None:
        loader = DatasetLoader()
        first = loader.load(workbook_bytes([BUSTAN_HEADER, bustan_row(1)]), "xlsx")
        second = loader.load(workbook_bytes([BUSTAN_HEADER, bustan_row(2)]), "xlsx")
        self.assertEqual([r.id for r in first], [1])
        self.assertEqual([r.id for r in second], [2])

    def test_actual_column_count_ignores_blank_columns(self) -> None:
        self.assertEqual(actual_column_count([[None, "a", ""], [None, None, "  "], [1]]), 2)


class TestCredits(unittest.TestCase):
    def test_auxiliary_sheet_backfills_credit(self) -> None:
        data = workbook_bytes(
            [GOLESTAN_HEADER, golestan_row("1234_01", credit=None)],
            [CREDIT_HEADER, [None, None, 1234, "Calculus 1", 2, 1]],
        )
        records = DatasetLoader().load(data, "xlsx")
        self.assertEqual(records[0].credit, 3)

    def test_companion_workbook_then_load(self) -> None:
        loader = DatasetLoader()
        count = loader.load_credit_mappings(workbook_bytes([CREDIT_HEADER, [None, None, 5511, "t", 3, 0]]), "xlsx")
        self.assertEqual(count, 1)
        records = loader.load(workbook_bytes([BUSTAN_HEADER, bustan_row(1)]), "xlsx")
        self.assertEqual(records[0].credit, 3)

    def test_mappings_are_persisted_and_restored(self) -> None:
        store = MemoryStore()
        DatasetLoader(store=store, use_store=True).load_credit_mappings(
            workbook_bytes([CREDIT_HEADER, [None, None, 5511, "t", 2, 2]]), "xlsx"
        )
        self.assertEqual(json.loads(store.data[STORE_KEY]), {"5511": 4})

        records = DatasetLoader(store=store, use_store=True).load(workbook_bytes([BUSTAN_HEADER, bustan_row(1)]), "xlsx")
        self.assertEqual(records[0].credit, 4)

    def test_store_is_untouched_when_not_allowed(self) -> None:
        store = MemoryStore({STORE_KEY: json.dumps({"5511": 4})})
        loader = DatasetLoader(store=store, use_store=False)
        records = loader.load(workbook_bytes([BUSTAN_HEADER, bustan_row(1)]), "xlsx")
        self.assertIsNone(records[0].credit)
        loader.load_credit_mappings(workbook_bytes([CREDIT_HEADER, [None, None, 7, "t", 1, 0]]), "xlsx")
        self.assertEqual(json.loads(store.data[STORE_KEY]), {"5511": 4})

    def test_corrupt_store_is_ignored(self) -> None:
        store = MemoryStore({STORE_KEY: "{not json"})
        with self.assertLogs("classpicker.credits", level="WARNING"):
            loader = DatasetLoader(store=store, use_store=True)
        self.assertEqual(len(loader.credits), 0)
        records = loader.load(workbook_bytes([BUSTAN_HEADER, bustan_row(1)]), "xlsx")
        self.assertIsNone(records[0].credit)


if __name__ == "__main__":
    unittest.main()
