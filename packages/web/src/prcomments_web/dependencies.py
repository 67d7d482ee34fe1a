from typing import Iterator

import httpx
from fastapi import Depends, Request

from prcomments_core.config import AppConfig
from prcomments_store.base import BaseCredentialStore
from prcomments_store.cookie import EncryptedCookieStore


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_credential_store(request: Request, config: AppConfig = Depends(get_config)) -> BaseCredentialStore:
    store = EncryptedCookieStore(config, request.cookies.get(config.cookie_name))
    # Exception handlers need the same instance to purge the credential on a 401.
    request.state.credential_store = store
    return store


def get_http_client() -> Iterator[httpx.Client]:
    with httpx.Client() as client:
        yield client
