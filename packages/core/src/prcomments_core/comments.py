"""Fetch-and-normalize entry point shared by the web API and the CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from prcomments_core.config import AppConfig
from prcomments_core.gh.fetcher import fetch_all_pages
from prcomments_core.gh.normalize import Comment, normalize
from prcomments_core.validation import FetchRequest

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Normalized review comments for one pull request.

    Decoupled from prcomments_store: the caller decides what to do with the
    credential when the fetch raises AuthenticationFailed.
    """

    request: FetchRequest
    comments: list[Comment] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.comments)

    def to_dict(self) -> dict:
        return {"comments": [c.to_dict() for c in self.comments], "total": self.total}


def fetch_comments(
    request: FetchRequest,
    token: str,
    config: AppConfig,
    client: httpx.Client | None = None,
) -> FetchResult:
    """Fetch all review comments for ``request`` and normalize them.

    Raises FetchError subclasses unchanged from the fetcher.
    """
    records = fetch_all_pages(request, token, config, client=client)
    comments = normalize(records)
    dropped = len(records) - len(comments)
    if dropped:
        logger.debug("Dropped %d records without a user from %s#%d", dropped, request.slug, request.pr_number)
    return FetchResult(request=request, comments=comments)
