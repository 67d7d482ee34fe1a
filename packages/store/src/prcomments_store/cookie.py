"""EncryptedCookieStore: the token lives only in the user's browser.

The server keeps no session table. The token is sealed into a JWE compact
token (direct key agreement, AES-256-GCM) and handed back to the client as an
HttpOnly cookie; every request carries it back in. Anything that fails to
decrypt, fails authentication or has outlived ``cookie_max_age`` reads as an
empty store rather than an error, so a rotated secret simply logs users out.

Cookie payload (before encryption):

    {"github_token": "<token>", "iat": <unix seconds>}

One store instance is a view over one request's cookie. Mutations are
buffered and written out by commit(response), which the route calls on the
response it is about to return.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from jose import jwe
from jose.exceptions import JOSEError

from prcomments_store.base import BaseCredentialStore

if TYPE_CHECKING:
    from prcomments_core.config import AppConfig

logger = logging.getLogger(__name__)

_ALGORITHM = "dir"
_ENCRYPTION = "A256GCM"


def derive_key(secret: str) -> bytes:
    """Derive the 256-bit content encryption key from the session secret."""
    return hashlib.sha256(secret.encode("utf-8")).digest()


class EncryptedCookieStore(BaseCredentialStore):
    """Credential store backed by one encrypted session cookie."""

    def __init__(
        self,
        config: AppConfig,
        cookie_value: str | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._config = config
        self._key = derive_key(config.session_secret)
        self._clock = clock
        self._token = self._open(cookie_value) if cookie_value else None
        self._dirty = False

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token
        self._dirty = True

    def clear(self) -> None:
        self._token = None
        self._dirty = True

    def commit(self, response) -> None:
        """Write pending changes to ``response`` as Set-Cookie headers.

        ``response`` is any object with Starlette's set_cookie/delete_cookie
        signature. Does nothing when the store was only read.
        """
        if not self._dirty:
            return
        cookie_kwargs = {
            "path": "/",
            "secure": self._config.production,
            "httponly": True,
            "samesite": "lax",
        }
        if self._token is None:
            response.delete_cookie(self._config.cookie_name, **cookie_kwargs)
        else:
            response.set_cookie(
                self._config.cookie_name,
                self.seal(self._token),
                max_age=self._config.cookie_max_age,
                **cookie_kwargs,
            )
        self._dirty = False

    def seal(self, token: str) -> str:
        """Encrypt ``token`` into a cookie value."""
        payload = json.dumps({"github_token": token, "iat": int(self._clock())})
        return jwe.encrypt(payload, self._key, algorithm=_ALGORITHM, encryption=_ENCRYPTION).decode("ascii")

    def _open(self, cookie_value: str) -> str | None:
        """Decrypt a cookie value, returning None for anything unusable."""
        try:
            data = json.loads(jwe.decrypt(cookie_value, self._key))
        except (JOSEError, ValueError) as e:
            logger.debug("Discarding unreadable session cookie (%s)", type(e).__name__)
            return None

        if not isinstance(data, dict):
            return None
        token = data.get("github_token")
        issued_at = data.get("iat")
        if not isinstance(token, str) or not isinstance(issued_at, int):
            return None
        if self._clock() - issued_at > self._config.cookie_max_age:
            logger.debug("Discarding expired session cookie")
            return None
        return token
