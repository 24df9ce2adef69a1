"""
Dataset loading errors.

Every error is terminal for the load call that raised it. The caller decides
whether to ask the user for another file; nothing in the core retries.
"""

from __future__ import annotations


class DatasetError(Exception):
    """Base class for all errors raised while loading a dataset."""


class UnsupportedFormat(DatasetError):
    """The declared file extension is not a supported container type."""

    def __init__(self, extension: str) -> None:
        super().__init__(f"file type {extension!r} is not supported")
        self.extension = extension


class MalformedInput(DatasetError):
    """The container bytes could not be decoded (the decode error is the __cause__)."""


class UnrecognizedLayout(DatasetError):
    """The decoded worksheet matches no known dialect column layout."""

    def __init__(self, column_count: int) -> None:
        super().__init__(f"the worksheet does not have a known column count ({column_count})")
        self.column_count = column_count


class EmptyResult(DatasetError):
    """Decoding succeeded but no usable rows were found."""
