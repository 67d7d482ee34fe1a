import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from prcomments_core.config import AppConfig, load_config
from prcomments_core.gh.errors import FetchError, UnknownFailure

from .routers import comments, credential

logger = logging.getLogger(__name__)


async def handle_fetch_error(request: Request, exc: FetchError) -> JSONResponse:
    response = JSONResponse({"error": exc.message}, status_code=exc.status_code)
    if exc.clears_credential:
        store = getattr(request.state, "credential_store", None)
        if store is not None:
            logger.info("Clearing stored credential after %s", exc.kind)
            store.clear()
            store.commit(response)
    return response


async def handle_invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": UnknownFailure.default_message}, status_code=500)


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the API app. ``config`` is loaded from the environment when omitted."""
    app = FastAPI(title="PR Comments API")
    app.state.config = config or load_config()

    app.include_router(credential.router)
    app.include_router(comments.router)

    app.add_exception_handler(FetchError, handle_fetch_error)
    app.add_exception_handler(RequestValidationError, handle_invalid_body)
    app.add_exception_handler(Exception, handle_unexpected_error)
    return app
