# app/routers/dependencies.py
from fastapi import Header, HTTPException

from ..core.errors import AssessmentError, InvalidStateError, NotFoundError, ValidationError


def get_current_user_id(x_user_id: str = Header(...)) -> str:
    """User id established by the upstream auth layer and forwarded in X-User-Id."""
    user_id = x_user_id.strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing user id")
    return user_id


def to_http_exception(error: AssessmentError) -> HTTPException:
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=error.message)
    if isinstance(error, InvalidStateError):
        return HTTPException(status_code=409, detail=error.message)
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=422,
            detail={"message": error.message, "field": error.field},
        )
    return HTTPException(status_code=400, detail=error.message)
