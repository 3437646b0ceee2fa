# userpurge/infra/db.py
from __future__ import annotations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from userpurge.core.settings import Settings, load_settings

log = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_settings: Optional[Settings] = None


def configure(settings: Settings) -> None:
    """Bind the process-wide client to ``settings``; drops any cached client."""
    global _client, _settings
    if _client is not None:
        _client.close()
        _client = None
    _settings = settings


def _current_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def get_client() -> AsyncIOMotorClient:
    """Return a cached AsyncIOMotorClient (lazy init)."""
    global _client
    if _client is None:
        settings = _current_settings()
        _client = AsyncIOMotorClient(
            settings.mongodb_uri,
            appname=settings.mongo_appname,
            serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
            socketTimeoutMS=settings.mongo_op_timeout_ms,
            connectTimeoutMS=settings.mongo_op_timeout_ms,
            uuidRepresentation="standard",
        )
    return _client


def get_db() -> AsyncIOMotorDatabase:
    return get_client()[_current_settings().db_name]


async def ping() -> bool:
    try:
        # admin DB per official examples
        await get_client().admin.command("ping")
        return True
    except Exception as exc:
        log.warning("Mongo ping failed: %s", exc)
        return False


async def close_client() -> None:
    """Close the cached client (useful for app shutdown / tests)."""
    global _client
    if _client is not None:
        _client.close()
        _client = None
