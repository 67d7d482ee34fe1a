from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from prcomments_core.gh.errors import ValidationError
from prcomments_core.validation import validate_token
from prcomments_store.base import BaseCredentialStore

from .. import schemas
from ..dependencies import get_credential_store

router = APIRouter(prefix="/credential", tags=["credential"])


@router.post("", response_model=schemas.SuccessResponse)
def store_credential(body: schemas.TokenRequest, store: BaseCredentialStore = Depends(get_credential_store)):
    if not body.token or not isinstance(body.token, str):
        raise ValidationError("Token is required")
    if validate_token(body.token) is None:
        raise ValidationError("Invalid token format")

    store.set(body.token)
    response = JSONResponse({"success": True})
    store.commit(response)
    return response


@router.get("", response_model=schemas.TokenStatus)
def credential_status(store: BaseCredentialStore = Depends(get_credential_store)):
    # Only ever report presence, never the value.
    return {"hasToken": store.has_token()}


@router.delete("", response_model=schemas.SuccessResponse)
def delete_credential(store: BaseCredentialStore = Depends(get_credential_store)):
    store.clear()
    response = JSONResponse({"success": True})
    store.commit(response)
    return response
