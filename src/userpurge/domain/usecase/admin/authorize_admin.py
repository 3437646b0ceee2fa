from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from userpurge.domain.models.UserModel import USERS_COLLECTION, User
from userpurge.domain.usecase.errors import ErrorKind, OperationError
from userpurge.domain.usecase.ports import DocumentStore

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CallerContext:
    """Authenticated identity delivered by the transport."""

    uid: str
    claims: Mapping[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class AuthorizeAdmin:
    store: DocumentStore

    async def execute(self, caller: Optional[CallerContext]) -> User:
        """Return the caller's ``User`` if they are an administrator."""
        if caller is None or not caller.uid:
            log.info("Rejected unauthenticated admin call")
            raise OperationError(
                ErrorKind.UNAUTHENTICATED, "User must be authenticated."
            )

        doc = await self.store.get(USERS_COLLECTION, caller.uid)
        if doc is None:
            log.info("Admin document not found", extra={"admin_uid": caller.uid})
            raise OperationError(
                ErrorKind.PERMISSION_DENIED, "Admin user not found in database."
            )

        admin = User.from_document(doc)
        if not admin.is_admin:
            log.info("Caller is not an admin", extra={"admin_uid": caller.uid})
            raise OperationError(
                ErrorKind.PERMISSION_DENIED, "Only admins can delete users."
            )
        return admin
