from userpurge.domain.usecase.admin.audit import RecordUserDeletion
from userpurge.domain.usecase.admin.authorize_admin import AuthorizeAdmin, CallerContext
from userpurge.domain.usecase.admin.cascade import (
    DEPENDENT_SWEEPS,
    CascadeDeleteUser,
    CascadeError,
    CascadeReport,
    IdentityOutcome,
)
from userpurge.domain.usecase.admin.delete_user import (
    DeleteUserAndData,
    DeleteUserPayload,
    DeleteUserResult,
    Stage,
    parse_payload,
)

__all__ = [
    "AuthorizeAdmin",
    "CallerContext",
    "CascadeDeleteUser",
    "CascadeError",
    "CascadeReport",
    "DEPENDENT_SWEEPS",
    "DeleteUserAndData",
    "DeleteUserPayload",
    "DeleteUserResult",
    "IdentityOutcome",
    "RecordUserDeletion",
    "Stage",
    "parse_payload",
]
