"""Shared dependency providers for FastAPI routers."""

from __future__ import annotations

from userpurge.core.settings import Settings, load_settings
from userpurge.domain.usecase.admin import DeleteUserAndData
from userpurge.infra import db as db_module
from userpurge.infra.identity.fusionauth import FusionAuthIdentityStore
from userpurge.infra.mongo.document_store import MongoDocumentStore

settings = load_settings()
db_module.configure(settings)

document_store = MongoDocumentStore(db_module.get_db())
identity_store = FusionAuthIdentityStore.from_settings(settings)
delete_user_usecase = DeleteUserAndData.build(
    document_store,
    identity_store,
    max_concurrent_writes=settings.max_concurrent_writes,
)


async def get_settings() -> Settings:
    return settings


async def get_delete_user_usecase() -> DeleteUserAndData:
    """Expose the singleton deletion use case for dependency injection."""
    return delete_user_usecase
