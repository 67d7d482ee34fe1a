"""Read-only accessors over untrusted JSON records from the GitHub API.

GitHub payloads are never assumed to match a schema. Every field read goes
through one of the typed getters, which return None when the field is missing
or holds the wrong type, so each caller has to decide on a default explicitly.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class RawRecord:
    """A single untrusted record (one element of an API list response)."""

    __slots__ = ("_data",)

    def __init__(self, data: Any):
        self._data = data if isinstance(data, Mapping) else None

    @property
    def is_mapping(self) -> bool:
        return self._data is not None

    def get_str(self, key: str) -> str | None:
        value = self._get(key)
        return value if isinstance(value, str) else None

    def get_int(self, key: str) -> int | None:
        value = self._get(key)
        # bool is an int subclass; a JSON true is not a line number.
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    def get_mapping(self, key: str) -> RawRecord | None:
        value = self._get(key)
        if not isinstance(value, Mapping):
            return None
        return RawRecord(value)

    def has_truthy(self, key: str) -> bool:
        return bool(self._get(key))

    def _get(self, key: str) -> Any:
        if self._data is None:
            return None
        return self._data.get(key)

    def __repr__(self) -> str:
        return f"RawRecord({self._data!r})"
