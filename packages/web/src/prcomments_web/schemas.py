from typing import Any, List, Optional

from pydantic import BaseModel, Field

# Fields accept any JSON type; prcomments_core.validation owns the rules and
# answers a wrong type with the same 400 as a wrong value.


class TokenRequest(BaseModel):
    token: Any = None


class CommentsRequest(BaseModel):
    owner: Any = None
    repo: Any = None
    pr_number: Any = Field(default=None, alias="prNumber")


class CommentSchema(BaseModel):
    path: str
    body: str
    line: Optional[int] = None
    author: str
    createdAt: str


class CommentsResponse(BaseModel):
    comments: List[CommentSchema] = []
    total: int


class TokenStatus(BaseModel):
    hasToken: bool


class SuccessResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
