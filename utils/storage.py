"""Whole-collection persistence backends.

Each backend stores one JSON array and is always read and written in full.
"""

import json
import os
from typing import Any, Protocol


class Storage(Protocol):
    def read_all(self) -> list: ...

    def write_all(self, items: list) -> None: ...


class JsonFileStorage:
    """A JSON array in a single file.

    ``indent=None`` writes compact JSON, otherwise pretty-printed.
    Writes are not atomic: the file is truncated and rewritten in place.
    """

    def __init__(self, path: str, indent: int | None = None):
        self.path = path
        self.indent = indent

    def ensure_exists(self) -> None:
        if not os.path.exists(self.path):
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            self.write_all([])

    def read_all(self) -> list:
        """Return the stored array.

        A missing file reads as empty. Invalid JSON raises ``ValueError``.
        """
        if not os.path.exists(self.path):
            return []
        with open(self.path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, list):
            raise ValueError(f"{self.path} does not contain a JSON array")
        return data

    def write_all(self, items: list) -> None:
        with open(self.path, "w", encoding="utf-8") as fh:
            json.dump(items, fh, indent=self.indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"JsonFileStorage({self.path!r})"


class MemoryStorage:
    """In-process stand-in for ``JsonFileStorage``.

    Round-trips through JSON so stored values behave like the file backend.
    """

    def __init__(self, items: list[Any] | None = None):
        self._raw = json.dumps(items or [])
        self.writes = 0

    def ensure_exists(self) -> None:
        return None

    def read_all(self) -> list:
        return json.loads(self._raw)

    def write_all(self, items: list) -> None:
        self._raw = json.dumps(items)
        self.writes += 1
