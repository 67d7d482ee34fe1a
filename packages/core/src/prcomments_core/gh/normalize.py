"""Reshape raw review-comment records into Comment objects."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from prcomments_core.gh.records import RawRecord

UNKNOWN_AUTHOR = "unknown"


@dataclass(frozen=True)
class Comment:
    """A normalized PR review comment."""

    path: str
    body: str
    line: int | None
    author: str
    created_at: str

    def to_dict(self) -> dict:
        """JSON shape returned by the HTTP API. ``line`` is omitted when unknown."""
        data: dict[str, Any] = {"path": self.path, "body": self.body}
        if self.line is not None:
            data["line"] = self.line
        data["author"] = self.author
        data["createdAt"] = self.created_at
        return data


def normalize_record(record: RawRecord) -> Comment | None:
    """Return the Comment for one raw record, or None if it is not a review comment."""
    user = record.get_mapping("user")
    if user is None:
        return None

    line = record.get_int("line")
    if line is None:
        # `line` is null once the diff hunk is outdated; the original anchor survives.
        line = record.get_int("original_line")

    return Comment(
        path=record.get_str("path") or "",
        body=record.get_str("body") or "",
        line=line,
        author=user.get_str("login") or UNKNOWN_AUTHOR,
        created_at=record.get_str("created_at") or "",
    )


def normalize(records: Iterable[Any]) -> list[Comment]:
    """Normalize raw records in order, dropping anything without a ``user``."""
    comments = []
    for raw in records:
        record = raw if isinstance(raw, RawRecord) else RawRecord(raw)
        comment = normalize_record(record)
        if comment is not None:
            comments.append(comment)
    return comments
