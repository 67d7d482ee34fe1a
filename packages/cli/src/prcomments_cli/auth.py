"""GitHub token resolution for command-line use.

The web API keeps the token in an encrypted cookie; the CLI has no session,
so it resolves a token once per invocation:
  1. GITHUB_TOKEN environment variable
  2. `gh auth token` (GitHub CLI session, works after `gh auth login`)
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedToken:
    value: str
    source: str  # "env" | "gh"

    def __repr__(self) -> str:
        return f"ResolvedToken(source={self.source!r})"


def resolve_github_token() -> ResolvedToken | None:
    """Return the first available token, or None if no source provides one.

    Never raises; callers should check for None and emit a UsageError.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return ResolvedToken(token, "env")

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired):
        # gh is not installed or hung.
        return None

    if result.returncode == 0:
        gh_token = result.stdout.strip()
        if gh_token:
            logger.debug("Resolved GitHub token via gh CLI session.")
            return ResolvedToken(gh_token, "gh")
    return None
