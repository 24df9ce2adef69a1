"""
Text and cell helpers shared by both dataset dialects.

- normalize(): canonical form for Persian text coming out of spreadsheets
  (Arabic letter/digit variants, zero-width characters, stray punctuation)
- numeric coercion for raw cell values
"""

from __future__ import annotations

import math
import re
from typing import Any

# placeholder used by the exports for "no data" and by us for unknown text
EMPTY_CELL = "-"

_VARIANTS = str.maketrans(
    {
        "أ": "ا",
        "ة": "ه",
        "ك": "ک",
        "ى": "ی",
        "ي": "ی",
        "ئ": "ی",
        "٠": "۰",
        "١": "۱",
        "٢": "۲",
        "٣": "۳",
        "٤": "۴",
        "٥": "۵",
        "٦": "۶",
        "٧": "۷",
        "٨": "۸",
        "٩": "۹",
        "(": " ",
        ")": " ",
        "-": " ",
        "\u200c": " ",
        "\u200f": " ",
    }
)

# kasra written under these letters is dropped
_KASRA = re.compile("([دبزذشس])\u0650+")
_SPACES = re.compile(r"\s{2,}")


def normalize(value: Any) -> str:
    """
    Return the canonical form of a spreadsheet string.

    Non-string input yields "". Applying it twice gives the same result
    as applying it once.
    """
    if not isinstance(value, str):
        return ""
    out = _KASRA.sub(r"\1", value.translate(_VARIANTS))
    return _SPACES.sub(" ", out).strip()


def text_or_empty(value: Any) -> str:
    """Normalized text, or EMPTY_CELL when the cell holds nothing."""
    out = normalize(value) if isinstance(value, str) else ("" if value is None else normalize(str(value)))
    return out or EMPTY_CELL


def is_empty_cell(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip() or value.strip() == EMPTY_CELL
    return False


def to_int(value: Any) -> int:
    """
    Coerce a raw cell value to int. Anything malformed becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return 0 if math.isnan(value) or math.isinf(value) else int(value)
    text = str(value).strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return 0
    return 0 if math.isnan(number) or math.isinf(number) else int(number)


def cell_key(value: Any) -> str:
    """String form of a raw cell used for row merge keys (1234.0 -> '1234')."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()

