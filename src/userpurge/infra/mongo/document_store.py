from __future__ import annotations

from typing import Any, Mapping, Sequence

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

from userpurge.domain.usecase.ports import DocumentKey, StoredDocument

MongoDocument = dict[str, Any]
MongoCollection = AsyncIOMotorCollection[MongoDocument]
MongoDatabase = AsyncIOMotorDatabase[MongoDocument]


def _to_stored(collection: str, doc: MongoDocument) -> StoredDocument:
    data = {k: v for k, v in doc.items() if k != "_id"}
    return StoredDocument(collection=collection, key=doc["_id"], data=data)


class MongoDocumentStore:
    """``DocumentStore`` over a Motor database; document keys live in ``_id``.

    Keys are returned and filtered on as stored. Mongo compares ``_id`` by
    type, so an ``ObjectId`` key must not be turned into its hex string.
    """

    def __init__(self, db: MongoDatabase) -> None:
        self._db = db

    def _coll(self, name: str) -> MongoCollection:
        return self._db[name]

    async def get(self, collection: str, key: DocumentKey) -> StoredDocument | None:
        doc = await self._coll(collection).find_one({"_id": key})
        return _to_stored(collection, doc) if doc else None

    async def query(
        self, collection: str, field: str, value: object
    ) -> list[StoredDocument]:
        cursor = self._coll(collection).find({field: value})
        return [_to_stored(collection, doc) async for doc in cursor]

    async def scan(
        self, collection: str, fields: Sequence[str] | None = None
    ) -> list[StoredDocument]:
        projection = {name: 1 for name in fields} if fields else None
        cursor = self._coll(collection).find({}, projection)
        return [_to_stored(collection, doc) async for doc in cursor]

    async def update(
        self, collection: str, key: DocumentKey, changes: Mapping[str, object]
    ) -> bool:
        res = await self._coll(collection).update_one(
            {"_id": key}, {"$set": dict(changes)}
        )
        return res.matched_count == 1

    async def delete(self, collection: str, key: DocumentKey) -> bool:
        res = await self._coll(collection).delete_one({"_id": key})
        return res.deleted_count == 1

    async def append(
        self,
        collection: str,
        data: Mapping[str, object],
        *,
        timestamp_field: str | None = None,
    ) -> str:
        key = str(ObjectId())
        if timestamp_field is None:
            await self._coll(collection).insert_one({"_id": key, **data})
            return key
        # Upsert so the server clock fills the timestamp via $currentDate.
        await self._coll(collection).update_one(
            {"_id": key},
            {
                "$setOnInsert": dict(data),
                "$currentDate": {timestamp_field: True},
            },
            upsert=True,
        )
        return key
