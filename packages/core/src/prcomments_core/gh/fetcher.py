"""Paginated, authenticated fetch of PR review comments from the GitHub REST API.

Pages are requested strictly one after another: each page's URL is only
known once the previous response's ``Link`` header has been read. Two limits
bound a single fetch:

- ``max_pages``: once that many pages have been read the loop stops and the
  records gathered so far are returned as a normal result.
- ``timeout_seconds``: one wall-clock deadline for all pages together. Each
  request gets whatever budget is left and its body is streamed so the
  deadline is checked between chunks; running out closes the connection,
  raises FetchTimeout and discards the records gathered so far.

There are no retries. The first failed page aborts the whole fetch.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from urllib.parse import quote

import httpx

from prcomments_core.config import AppConfig
from prcomments_core.gh.errors import (
    FetchError,
    FetchTimeout,
    ProtocolViolation,
    classify_status,
    classify_transport_error,
)
from prcomments_core.gh.records import RawRecord
from prcomments_core.validation import FetchRequest

logger = logging.getLogger(__name__)


def comments_url(request: FetchRequest, config: AppConfig) -> str:
    """Return the review-comments endpoint for a pull request."""
    owner = quote(request.owner, safe="")
    repo = quote(request.repo, safe="")
    return f"{config.api_base_url}/repos/{owner}/{repo}/pulls/{request.pr_number}/comments"


def build_headers(token: str, config: AppConfig) -> dict[str, str]:
    return {
        "Authorization": f"token {token}",
        "Accept": config.accept_header,
        "User-Agent": config.user_agent,
    }


def next_page_url(response: httpx.Response, config: AppConfig) -> str | None:
    """Return the ``rel="next"`` URL from the Link header, or None on the last page.

    Links pointing anywhere other than the configured API host are ignored so
    the Authorization header is never sent to a third party.
    """
    url = response.links.get("next", {}).get("url")
    if not url:
        return None
    if not url.startswith(config.api_base_url + "/"):
        logger.warning("Ignoring pagination link outside %s: %.100s", config.api_base_url, url)
        return None
    return url


def _read_body(response: httpx.Response, deadline: float, clock: Callable[[], float]) -> bytes:
    """Buffer a streamed body, raising FetchTimeout as soon as the deadline passes.

    httpx timeouts bound each network operation, not the whole transfer, so a
    body trickling in slower than the deadline is cut off here instead.
    """
    chunks = []
    for chunk in response.iter_bytes():
        if clock() > deadline:
            raise FetchTimeout()
        chunks.append(chunk)
    return b"".join(chunks)


def fetch_all_pages(
    request: FetchRequest,
    token: str,
    config: AppConfig,
    client: httpx.Client | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> list[RawRecord]:
    """Fetch every page of review comments for ``request`` (up to ``max_pages``).

    Raises a FetchError subclass on any failure; see prcomments_core.gh.errors.
    """
    if client is None:
        with httpx.Client() as own_client:
            return fetch_all_pages(request, token, config, client=own_client, clock=clock)

    deadline = clock() + config.timeout_seconds
    headers = build_headers(token, config)
    url: str | None = comments_url(request, config)
    params: dict | None = {"per_page": config.per_page}
    records: list[RawRecord] = []
    pages = 0

    try:
        while url is not None:
            if pages >= config.max_pages:
                logger.warning(
                    "Stopped after %d pages for %s#%d; returning %d records",
                    pages,
                    request.slug,
                    request.pr_number,
                    len(records),
                )
                break

            remaining = deadline - clock()
            if remaining <= 0:
                raise FetchTimeout()

            logger.debug("GET %s (page %d)", url, pages + 1)
            with client.stream("GET", url, params=params, headers=headers, timeout=remaining) as response:
                pages += 1
                if clock() > deadline:
                    raise FetchTimeout()
                if not response.is_success:
                    raise classify_status(response.status_code)
                body = _read_body(response, deadline, clock)
                url = next_page_url(response, config)

            try:
                payload = json.loads(body)
            except ValueError as e:
                raise ProtocolViolation() from e
            if not isinstance(payload, list):
                raise ProtocolViolation()

            records.extend(RawRecord(item) for item in payload)
            # The next link already carries every query parameter.
            params = None
    except FetchError as e:
        logger.warning("Fetch for %s#%d failed: %s", request.slug, request.pr_number, e.kind)
        raise
    except Exception as e:
        error = classify_transport_error(e)
        logger.warning(
            "Fetch for %s#%d failed: %s (%s)", request.slug, request.pr_number, error.kind, type(e).__name__
        )
        raise error from e

    return records
