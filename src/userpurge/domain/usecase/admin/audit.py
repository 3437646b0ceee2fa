from __future__ import annotations

import logging
from dataclasses import dataclass

from userpurge.domain.models.AuditLogModel import (
    ADMIN_LOGS_COLLECTION,
    TIMESTAMP_FIELD,
    AuditLogEntry,
)
from userpurge.domain.models.UserModel import User
from userpurge.domain.usecase.admin.cascade import CascadeReport
from userpurge.domain.usecase.ports import DocumentStore

log = logging.getLogger(__name__)

DELETE_USER_ACTION = "deleteUser"


@dataclass(slots=True)
class RecordUserDeletion:
    store: DocumentStore

    async def execute(self, admin: User, report: CascadeReport) -> str:
        """Append the audit entry for a finished cascade and return its key."""
        entry = AuditLogEntry(
            action=DELETE_USER_ACTION,
            admin_uid=admin.user_id,
            admin_email=admin.email,
            target_user_id=report.target.user_id,
            target_user_email=report.target.email,
            details=report.audit_details(),
        )
        entry_id = await self.store.append(
            ADMIN_LOGS_COLLECTION,
            entry.to_document(),
            timestamp_field=TIMESTAMP_FIELD,
        )
        log.info(
            "Recorded audit entry",
            extra={"audit_id": entry_id, "target_user_id": entry.target_user_id},
        )
        return entry_id
