from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from userpurge.domain.usecase.ports import StoredDocument

USERS_COLLECTION = "users"


@dataclass(slots=True)
class User:
    user_id: str
    email: Optional[str] = None
    is_admin: bool = False

    @classmethod
    def from_document(cls, doc: StoredDocument) -> "User":
        email = doc.get("email")
        return cls(
            user_id=str(doc.key),
            email=str(email) if email is not None else None,
            # Only a literal boolean true grants admin; "true" or 1 do not.
            is_admin=doc.get("isAdmin") is True,
        )
