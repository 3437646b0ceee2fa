"""Identity store backed by the FusionAuth user API.

https://fusionauth.io/docs/apis/users#delete-a-user
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

import aiohttp

from userpurge.core.settings import Settings
from userpurge.domain.usecase.ports import IdentityNotFoundError, IdentityStoreError

log = logging.getLogger(__name__)

SessionFactory = Callable[[], aiohttp.ClientSession]


class FusionAuthIdentityStore:
    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        *,
        tenant_id: Optional[str] = None,
        timeout_seconds: float = 10.0,
        session_factory: Optional[SessionFactory] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._tenant_id = tenant_id
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session_factory = session_factory or self._default_session

    @classmethod
    def from_settings(cls, settings: Settings) -> "FusionAuthIdentityStore":
        return cls(
            settings.identity_base_url,
            settings.identity_api_key,
            tenant_id=settings.identity_tenant_id,
            timeout_seconds=settings.identity_timeout_seconds,
        )

    def _default_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(timeout=self._timeout)

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._api_key:
            headers["Authorization"] = self._api_key
        if self._tenant_id:
            headers["X-FusionAuth-TenantId"] = self._tenant_id
        return headers

    async def delete_user(self, user_id: str) -> None:
        if not self._base_url:
            raise IdentityStoreError("Identity store is not configured")

        url = f"{self._base_url}/api/user/{user_id}"
        try:
            async with self._session_factory() as session:
                async with session.delete(
                    url, headers=self._headers(), params={"hardDelete": "true"}
                ) as resp:
                    if resp.status == 404:
                        raise IdentityNotFoundError(f"No identity for user {user_id}")
                    if resp.status >= 300:
                        text = await resp.text()
                        raise IdentityStoreError(
                            f"Identity delete failed with {resp.status}: {text}"
                        )
        except aiohttp.ClientError as exc:
            raise IdentityStoreError(f"Identity store unreachable: {exc}") from exc
        log.debug("Identity delete accepted", extra={"user_id": user_id})
