"""Markdown export of fetched review comments.

The document is meant to be pasted into an AI assistant or a tracking issue:
a short header, a standing instruction block, then one numbered section per
comment with its file, line and suggestion.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from prcomments_core.gh.normalize import Comment
from prcomments_core.validation import FetchRequest


def export_filename(request: FetchRequest) -> str:
    return f"comments-{request.owner}-{request.repo}-pr{request.pr_number}.md"


def render_markdown(
    request: FetchRequest,
    comments: Sequence[Comment],
    generated_at: datetime | None = None,
) -> str:
    """Render ``comments`` as a Markdown document."""
    generated_at = generated_at or datetime.now(timezone.utc)

    lines = [
        "# PR Review Comments\n",
        f"**Repository:** {request.slug}",
        f"**Pull Request:** #{request.pr_number}",
        f"**Total Comments:** {len(comments)}",
        f"**Generated:** {generated_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}\n",
        "---\n",
        "## Instructions for AI\n",
        "Please review the following review comments and provide implementation guidance "
        "or code fixes for each item.\n",
        "---\n",
    ]

    for index, comment in enumerate(comments, start=1):
        lines.append(f"## {index}. {comment.path}\n")
        lines.append(f"**File:** `{comment.path}`\n")
        if comment.line is not None:
            lines.append(f"**Line:** {comment.line}\n")
        lines.append(f"**Author:** {comment.author}\n")
        lines.append("**Suggestion:**\n")
        lines.append(f"{comment.body}\n")
        lines.append("**Action Required:**")
        lines.append("Please provide a code solution or implementation guidance for this suggestion.\n")
        lines.append("---\n")

    return "\n".join(lines)
