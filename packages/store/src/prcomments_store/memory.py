"""In-memory credential store.

A drop-in for the cookie store wherever the token never has to leave the
process, such as tests of the web routes.
"""

from __future__ import annotations

from prcomments_store.base import BaseCredentialStore


class InMemoryCredentialStore(BaseCredentialStore):
    def __init__(self, token: str | None = None):
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None

    def __repr__(self) -> str:
        # Never include the token itself.
        return f"InMemoryCredentialStore(has_token={self.has_token()})"
