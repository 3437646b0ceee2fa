"""Admin callable endpoints."""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends

import userpurge.api.deps as deps
from userpurge.api.schemas import (
    CallableErrorResponse,
    DeleteUserResponse,
    DeleteUserResultOut,
)
from userpurge.api.security import get_caller
from userpurge.domain.usecase.admin import CallerContext, DeleteUserAndData

router = APIRouter(prefix="/v1/admin", tags=["Admin"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": CallableErrorResponse} for code in (400, 401, 403, 404, 500)
}


@router.post(
    "/deleteUserAndData",
    response_model=DeleteUserResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def delete_user_and_data(
    body: Any = Body(default=None),
    caller: Optional[CallerContext] = Depends(get_caller),
    usecase: DeleteUserAndData = Depends(deps.get_delete_user_usecase),
) -> DeleteUserResponse:
    """Delete a user and every record referencing them. Admin callers only."""
    data = body.get("data") if isinstance(body, dict) else None
    outcome = await usecase.execute(caller, data)
    return DeleteUserResponse(result=DeleteUserResultOut(**outcome.to_payload()))
