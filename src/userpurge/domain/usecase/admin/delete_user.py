"""Admin operation that removes a user together with all of their data.

The run moves through ``Stage`` values in order and never re-enters one:

    START -> AUTHORIZING -> VALIDATING -> CASCADING -> AUDITING -> DONE

Any stage may end in ``FAILED``. Errors raised before ``CASCADING`` leave
the store untouched; an ``internal`` error afterwards may leave it partially
modified.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from userpurge.domain.usecase.admin.audit import RecordUserDeletion
from userpurge.domain.usecase.admin.authorize_admin import AuthorizeAdmin, CallerContext
from userpurge.domain.usecase.admin.cascade import CascadeDeleteUser, CascadeError
from userpurge.domain.usecase.errors import ErrorKind, OperationError
from userpurge.domain.usecase.ports import DocumentStore, IdentityStore

log = logging.getLogger(__name__)

SUCCESS_MESSAGE = "User and all related data deleted successfully"


class DeleteUserPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    userId: StrictStr = Field(min_length=1)


def parse_payload(payload: Any) -> DeleteUserPayload:
    """Validate the raw call payload, mapping every problem to ``invalid-argument``."""
    if not isinstance(payload, Mapping) or not _has_user_id(payload):
        raise OperationError(ErrorKind.INVALID_ARGUMENT, "userId is required.")
    try:
        return DeleteUserPayload.model_validate(dict(payload))
    except ValidationError as err:
        problems = sorted(
            {".".join(str(part) for part in e["loc"]) or "payload" for e in err.errors()}
        )
        raise OperationError(
            ErrorKind.INVALID_ARGUMENT,
            f"Invalid payload: {', '.join(problems)}",
            details={"fields": problems},
        ) from err


def _has_user_id(payload: Mapping[Any, Any]) -> bool:
    value = payload.get("userId")
    if value is None:
        return False
    return not (isinstance(value, str) and not value.strip())


class Stage(str, Enum):
    START = "start"
    AUTHORIZING = "authorizing"
    VALIDATING = "validating"
    CASCADING = "cascading"
    AUDITING = "auditing"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class _Run:
    stage: Stage = Stage.START
    failed_at: Optional[Stage] = None

    def enter(self, stage: Stage) -> None:
        log.debug("deleteUserAndData %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    def fail(self, kind: ErrorKind) -> None:
        self.failed_at = self.stage
        log.debug(
            "deleteUserAndData %s -> failed(%s)", self.stage.value, kind.value
        )
        self.stage = Stage.FAILED


@dataclass(frozen=True, slots=True)
class DeleteUserResult:
    success: bool
    message: str
    audit_id: Optional[str] = None
    warnings: tuple[str, ...] = ()

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {"success": self.success, "message": self.message}
        if self.warnings:
            payload["warnings"] = list(self.warnings)
        return payload


@dataclass(slots=True)
class DeleteUserAndData:
    authorize: AuthorizeAdmin
    cascade: CascadeDeleteUser
    audit: RecordUserDeletion

    @classmethod
    def build(
        cls,
        store: DocumentStore,
        identity: IdentityStore,
        *,
        max_concurrent_writes: int = 10,
    ) -> "DeleteUserAndData":
        return cls(
            authorize=AuthorizeAdmin(store),
            cascade=CascadeDeleteUser(
                store, identity, max_concurrent_writes=max_concurrent_writes
            ),
            audit=RecordUserDeletion(store),
        )

    async def execute(
        self, caller: Optional[CallerContext], payload: Any
    ) -> DeleteUserResult:
        run = _Run()
        try:
            run.enter(Stage.AUTHORIZING)
            admin = await self.authorize.execute(caller)

            run.enter(Stage.VALIDATING)
            request = parse_payload(payload)
            log.info(
                "Deleting user",
                extra={"admin_uid": admin.user_id, "target_user_id": request.userId},
            )

            run.enter(Stage.CASCADING)
            report = await self.cascade.execute(request.userId)

            run.enter(Stage.AUDITING)
            audit_id = await self.audit.execute(admin, report)
        except OperationError as err:
            run.fail(err.kind)
            err.details.setdefault("stage", run.failed_at.value)
            raise
        except CascadeError as exc:
            run.fail(ErrorKind.INTERNAL)
            log.error("Error deleting user: %s", exc, extra=exc.details())
            raise OperationError(
                ErrorKind.INTERNAL,
                f"Failed to delete user: {exc}",
                details={"stage": Stage.CASCADING.value, **exc.details()},
            ) from exc
        except Exception as exc:
            stage = run.stage
            run.fail(ErrorKind.INTERNAL)
            log.exception("Error deleting user")
            raise OperationError(
                ErrorKind.INTERNAL,
                f"Failed to delete user: {exc}",
                details={"stage": stage.value},
            ) from exc

        run.enter(Stage.DONE)
        for warning in report.warnings:
            log.warning("%s", warning, extra={"target_user_id": request.userId})
        log.info(
            "User deletion completed successfully",
            extra={"target_user_id": request.userId, "audit_id": audit_id},
        )
        return DeleteUserResult(
            success=True,
            message=SUCCESS_MESSAGE,
            audit_id=audit_id,
            warnings=tuple(report.warnings),
        )
