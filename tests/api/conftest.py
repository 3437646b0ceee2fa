from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from userpurge.api import deps
from userpurge.api.main import app
from userpurge.api.security import create_access_token
from userpurge.core.settings import Settings

TEST_JWT_SECRET = "test-jwt-secret"


@pytest.fixture()
def api_settings() -> Settings:
    return Settings(jwt_secret=TEST_JWT_SECRET)


@pytest_asyncio.fixture()
async def api_client(usecase, api_settings) -> AsyncIterator[AsyncClient]:
    async def _settings() -> Settings:
        return api_settings

    async def _usecase():
        return usecase

    app.dependency_overrides[deps.get_settings] = _settings
    app.dependency_overrides[deps.get_delete_user_usecase] = _usecase
    transport: Any = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def bearer() -> Callable[[str], dict[str, str]]:
    def _headers(uid: str) -> dict[str, str]:
        token = create_access_token(sub=uid, secret=TEST_JWT_SECRET)
        return {"Authorization": f"Bearer {token}"}

    return _headers
