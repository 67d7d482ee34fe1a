import logging

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response

from prcomments_core.comments import FetchResult, fetch_comments
from prcomments_core.config import AppConfig
from prcomments_core.export import export_filename, render_markdown
from prcomments_core.validation import FetchRequest
from prcomments_store.base import BaseCredentialStore

from .. import schemas
from ..dependencies import get_config, get_credential_store, get_http_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"])

NO_TOKEN_MESSAGE = "No token found. Please authenticate first."


def _fetch(
    body: schemas.CommentsRequest,
    store: BaseCredentialStore,
    config: AppConfig,
    client: httpx.Client,
) -> FetchResult:
    """Validate the request body and fetch comments with the stored token.

    FetchErrors propagate to the app's exception handler, which also purges
    the credential when the error calls for it.
    """
    request = FetchRequest.create(body.owner, body.repo, body.pr_number)
    return fetch_comments(request, store.get(), config, client=client)


@router.post("", response_model=schemas.CommentsResponse)
def get_comments(
    body: schemas.CommentsRequest,
    store: BaseCredentialStore = Depends(get_credential_store),
    config: AppConfig = Depends(get_config),
    client: httpx.Client = Depends(get_http_client),
):
    if not store.has_token():
        return JSONResponse({"error": NO_TOKEN_MESSAGE}, status_code=401)

    result = _fetch(body, store, config, client)
    logger.info("Fetched %d comments for %s#%d", result.total, result.request.slug, result.request.pr_number)
    return JSONResponse(result.to_dict())


@router.post("/export")
def export_comments(
    body: schemas.CommentsRequest,
    store: BaseCredentialStore = Depends(get_credential_store),
    config: AppConfig = Depends(get_config),
    client: httpx.Client = Depends(get_http_client),
):
    if not store.has_token():
        return JSONResponse({"error": NO_TOKEN_MESSAGE}, status_code=401)

    result = _fetch(body, store, config, client)
    filename = export_filename(result.request)
    return Response(
        content=render_markdown(result.request, result.comments),
        media_type="text/markdown",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
