from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

# --- Callable envelope ---


class DeleteUserResultOut(BaseModel):
    success: bool
    message: str
    warnings: Optional[List[str]] = None


class DeleteUserResponse(BaseModel):
    result: DeleteUserResultOut


class CallableError(BaseModel):
    status: str
    message: str
    details: Optional[Dict[str, Any]] = None


class CallableErrorResponse(BaseModel):
    error: CallableError
