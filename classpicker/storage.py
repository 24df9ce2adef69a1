"""
Persistent storage for user state.

Two JSON files live in the data directory (see config.data_dir()):

    picked_classes.json   the class ids the user picked
    preferences.json      a small key/value store (e.g. cached credit mappings)

A missing or corrupted file reads as empty.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

from classpicker.config import picked_ids_path, preferences_path

logger = logging.getLogger(__name__)


def _read_json_object(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("could not read %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


class JsonFileStore:
    """
    Key/value preference store backed by one JSON object file.

    Values are strings; the file is rewritten on every set().
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else preferences_path()

    def get(self, key: str) -> Optional[str]:
        value = _read_json_object(self.path).get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = _read_json_object(self.path)
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def load_picked_ids(path: str | Path | None = None) -> set[int]:
    """
    Load picked class ids. Returns an empty set if the file does not exist
    or is invalid; non-numeric entries are ignored.
    """
    picked_path = Path(path) if path is not None else picked_ids_path()

    ids = _read_json_object(picked_path).get("picked_class_ids", [])
    if not isinstance(ids, list):
        return set()

    out: set[int] = set()
    for x in ids:
        if isinstance(x, bool):
            continue
        if isinstance(x, int):
            out.add(x)
        elif isinstance(x, str) and x.strip().isdigit():
            out.add(int(x.strip()))
    return out


def save_picked_ids(ids: Iterable[int], path: str | Path | None = None) -> None:
    """
    Save picked class ids (sorted, duplicates removed). Creates parent
    directories if needed.
    """
    picked_path = Path(path) if path is not None else picked_ids_path()
    picked_path.parent.mkdir(parents=True, exist_ok=True)

    payload = {"picked_class_ids": sorted({int(x) for x in ids})}
    picked_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
