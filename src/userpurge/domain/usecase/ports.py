from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Hashable, Mapping, Protocol, Sequence

# Whatever the store uses as a primary key; opaque to callers.
DocumentKey = Hashable


@dataclass(frozen=True, slots=True)
class StoredDocument:
    """A document read from a named collection, addressed by its key.

    ``key`` is the store's own key value, so it can be handed back to
    ``update``/``delete`` unchanged.
    """

    collection: str
    key: DocumentKey
    data: Mapping[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.data.get(name, default)


class DocumentStore(Protocol):
    async def get(self, collection: str, key: DocumentKey) -> StoredDocument | None: ...

    async def query(
        self, collection: str, field: str, value: object
    ) -> list[StoredDocument]: ...

    async def scan(
        self, collection: str, fields: Sequence[str] | None = None
    ) -> list[StoredDocument]: ...

    async def update(
        self, collection: str, key: DocumentKey, changes: Mapping[str, object]
    ) -> bool: ...

    async def delete(self, collection: str, key: DocumentKey) -> bool: ...

    async def append(
        self,
        collection: str,
        data: Mapping[str, object],
        *,
        timestamp_field: str | None = None,
    ) -> str: ...


class IdentityStoreError(Exception):
    """The identity provider rejected or failed a request."""


class IdentityNotFoundError(IdentityStoreError):
    """No identity exists for the requested user id."""


class IdentityStore(Protocol):
    async def delete_user(self, user_id: str) -> None: ...
