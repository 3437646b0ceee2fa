from __future__ import annotations

import asyncio
import copy
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

import pytest

from userpurge.domain.usecase.admin import CallerContext, DeleteUserAndData
from userpurge.domain.usecase.ports import IdentityNotFoundError, StoredDocument

ADMIN_ID = "admin-a"
TARGET_ID = "user-u"


class InMemoryDocumentStore:
    """Async document store stub; ``fail_on``/``delay`` key on (operation, collection)."""

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.calls: list[tuple[str, str]] = []
        self.fail_on: dict[tuple[str, str], Exception] = {}
        self.delay: dict[tuple[str, str], float] = {}
        self._seq = 0

    def seed(self, collection: str, key: str, **data: Any) -> None:
        self.collections[collection][key] = data

    def docs(self, collection: str) -> dict[str, dict[str, Any]]:
        return self.collections.get(collection, {})

    def touched(self, *ops: str) -> set[str]:
        return {coll for op, coll in self.calls if not ops or op in ops}

    async def _enter(self, op: str, collection: str) -> None:
        self.calls.append((op, collection))
        delay = self.delay.get((op, collection))
        if delay:
            await asyncio.sleep(delay)
        exc = self.fail_on.get((op, collection))
        if exc is not None:
            raise exc

    def _stored(self, collection: str, key: str, data: Mapping[str, Any]) -> StoredDocument:
        return StoredDocument(collection=collection, key=key, data=copy.deepcopy(dict(data)))

    async def get(self, collection: str, key: str) -> StoredDocument | None:
        await self._enter("get", collection)
        data = self.docs(collection).get(key)
        return self._stored(collection, key, data) if data is not None else None

    async def query(self, collection: str, field: str, value: object) -> list[StoredDocument]:
        await self._enter("query", collection)
        return [
            self._stored(collection, key, data)
            for key, data in self.docs(collection).items()
            if data.get(field) == value
        ]

    async def scan(
        self, collection: str, fields: Sequence[str] | None = None
    ) -> list[StoredDocument]:
        await self._enter("scan", collection)
        out = []
        for key, data in self.docs(collection).items():
            if fields:
                data = {name: data[name] for name in fields if name in data}
            out.append(self._stored(collection, key, data))
        return out

    async def update(self, collection: str, key: str, changes: Mapping[str, object]) -> bool:
        await self._enter("update", collection)
        doc = self.docs(collection).get(key)
        if doc is None:
            return False
        doc.update(copy.deepcopy(dict(changes)))
        return True

    async def delete(self, collection: str, key: str) -> bool:
        await self._enter("delete", collection)
        return self.docs(collection).pop(key, None) is not None

    async def append(
        self,
        collection: str,
        data: Mapping[str, object],
        *,
        timestamp_field: str | None = None,
    ) -> str:
        await self._enter("append", collection)
        self._seq += 1
        key = f"{collection}-{self._seq}"
        doc = copy.deepcopy(dict(data))
        if timestamp_field:
            doc[timestamp_field] = datetime.now(timezone.utc)
        self.collections[collection][key] = doc
        return key


class InMemoryIdentityStore:
    def __init__(self, users: Sequence[str] = ()) -> None:
        self.users = set(users)
        self.deleted: list[str] = []
        self.error: Exception | None = None

    async def delete_user(self, user_id: str) -> None:
        if self.error is not None:
            raise self.error
        if user_id not in self.users:
            raise IdentityNotFoundError(f"No identity for {user_id}")
        self.users.remove(user_id)
        self.deleted.append(user_id)


@pytest.fixture()
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture()
def identity() -> InMemoryIdentityStore:
    return InMemoryIdentityStore(users=[ADMIN_ID, TARGET_ID])


@pytest.fixture()
def usecase(store: InMemoryDocumentStore, identity: InMemoryIdentityStore) -> DeleteUserAndData:
    return DeleteUserAndData.build(store, identity, max_concurrent_writes=2)


@pytest.fixture()
def admin_caller() -> CallerContext:
    return CallerContext(uid=ADMIN_ID)


@pytest.fixture()
def populated(store: InMemoryDocumentStore) -> InMemoryDocumentStore:
    """Admin A plus user U with 2 posts, 1 comment, 0 likes and membership in group G."""
    store.seed("users", ADMIN_ID, email="admin@example.com", isAdmin=True)
    store.seed("users", TARGET_ID, email="u@example.com", isAdmin=False)
    store.seed("users", "user-x", email="x@example.com")

    store.seed("posts", "p1", userId=TARGET_ID, body="first")
    store.seed("posts", "p2", userId=TARGET_ID, body="second")
    store.seed("posts", "p3", userId="user-x", body="someone else")
    store.seed("comments", "c1", userId=TARGET_ID, postId="p3")
    store.seed("likes", "l1", userId="user-x", postId="p1")
    store.seed("notifications", "n1", userId=TARGET_ID)
    store.seed("friends", "f1", userId=TARGET_ID, friendId="user-x")

    store.seed("groups", "group-g", name="G", members=[TARGET_ID, "user-x"])
    store.seed("groups", "group-h", name="H", members=["user-x"])
    store.seed("groups", "group-empty", name="E")
    return store
