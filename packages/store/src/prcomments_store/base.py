"""Abstract credential store interface.

A credential store holds at most one secret, the user's GitHub token, for
one session. The web API and the CLI depend on BaseCredentialStore, not on a
concrete backend, so the cookie-backed store used by the server and the
in-memory store used by the CLI and tests are interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseCredentialStore(ABC):
    """A single mutable slot holding a session's access token.

    Implementations never log or expose the token other than through get().
    """

    @abstractmethod
    def get(self) -> str | None:
        """Return the stored token, or None if there is none."""

    @abstractmethod
    def set(self, token: str) -> None:
        """Store ``token``, replacing any existing one."""

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored token. Safe to call when nothing is stored."""

    def has_token(self) -> bool:
        return self.get() is not None

    def commit(self, response) -> None:
        """Persist pending changes onto an outgoing HTTP response.

        Stores that keep their state server-side have nothing to write.
        """
