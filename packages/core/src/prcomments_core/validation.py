"""Input validation run before anything is embedded in an API URL.

The bounds mirror GitHub's own limits: owner and repository names are at
most 39 characters of ``[A-Za-z0-9._-]`` and pull request numbers fit in a
signed 32-bit integer. None of the ``validate_*`` helpers raise; they return
``None`` for anything they reject so callers can report all bad fields at once.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from prcomments_core.gh.errors import ValidationError

MAX_PR_NUMBER = 2147483647
TOKEN_PREFIXES = ("ghp_", "github_pat_")
TOKEN_MIN_LENGTH = 20
TOKEN_MAX_LENGTH = 500

_IDENTIFIER_RE = re.compile(r"[A-Za-z0-9._-]{1,39}")
_DIGITS_RE = re.compile(r"[0-9]{1,10}")
_PR_URL_RE = re.compile(r"github\.com/([^/]+)/([^/]+)/pull/(\d+)")

INVALID_URL_MESSAGE = "Invalid URL format. Expected: https://github.com/owner/repo/pull/123"


def validate_identifier(value) -> str | None:
    """Return ``value`` if it is a valid GitHub owner or repository name, else None."""
    if not isinstance(value, str):
        return None
    if not _IDENTIFIER_RE.fullmatch(value):
        return None
    return value


def validate_pr_number(value) -> int | None:
    """Return the PR number as an int, or None if it is not in [1, 2147483647].

    Accepts ints and decimal strings. Integral floats are accepted too since
    JSON clients cannot tell ``3`` and ``3.0`` apart.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        digits = value.strip()
        if not _DIGITS_RE.fullmatch(digits):
            return None
        number = int(digits)
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    else:
        return None

    if number < 1 or number > MAX_PR_NUMBER:
        return None
    return number


def validate_token(value) -> str | None:
    """Return ``value`` if it looks like a GitHub personal access token, else None.

    Classic tokens start with ``ghp_``, fine-grained ones with ``github_pat_``.
    """
    if not isinstance(value, str):
        return None
    if len(value) < TOKEN_MIN_LENGTH or len(value) > TOKEN_MAX_LENGTH:
        return None
    if not value.startswith(TOKEN_PREFIXES):
        return None
    return value


@dataclass(frozen=True)
class FetchRequest:
    """A validated (owner, repo, PR number) triple."""

    owner: str
    repo: str
    pr_number: int

    @classmethod
    def create(cls, owner, repo, pr_number) -> FetchRequest:
        """Validate raw input and build a FetchRequest, or raise ValidationError."""
        valid_owner = validate_identifier(owner)
        valid_repo = validate_identifier(repo)
        valid_number = validate_pr_number(pr_number)
        if valid_owner is None or valid_repo is None or valid_number is None:
            raise ValidationError()
        return cls(owner=valid_owner, repo=valid_repo, pr_number=valid_number)

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_pr_url(url: str) -> FetchRequest:
    """Extract a FetchRequest from a pull request URL.

    The scheme is optional and anything after the PR number (``/files``,
    ``#discussion_r1``) is ignored:

        https://github.com/octo/hello/pull/12/files → octo/hello #12
    """
    match = _PR_URL_RE.search(url or "")
    if not match:
        raise ValidationError(INVALID_URL_MESSAGE)
    owner, repo, number = match.groups()
    return FetchRequest.create(owner, repo, number)
