from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

ADMIN_LOGS_COLLECTION = "adminLogs"
TIMESTAMP_FIELD = "timestamp"


@dataclass(slots=True)
class AuditLogEntry:
    """Append-only record of one privileged operation.

    ``timestamp`` is left to the store clock, so it is not a field here.
    """

    action: str
    admin_uid: str
    admin_email: Optional[str]
    target_user_id: str
    target_user_email: Optional[str]
    details: Mapping[str, object] = field(default_factory=dict)

    def to_document(self) -> dict[str, object]:
        return {
            "action": self.action,
            "adminUid": self.admin_uid,
            "adminEmail": self.admin_email,
            "targetUserId": self.target_user_id,
            "targetUserEmail": self.target_user_email,
            "details": dict(self.details),
        }
