from __future__ import annotations

from http import HTTPStatus
from typing import Any

import pytest

from userpurge.api.security import create_access_token

pytestmark = pytest.mark.asyncio

URL = "/v1/admin/deleteUserAndData"


async def test_delete_user_success(api_client: Any, populated, bearer) -> None:
    response = await api_client.post(
        URL, json={"data": {"userId": "user-u"}}, headers=bearer("admin-a")
    )

    assert response.status_code == HTTPStatus.OK, response.text
    assert response.json() == {
        "result": {
            "success": True,
            "message": "User and all related data deleted successfully",
        }
    }
    assert "user-u" not in populated.docs("users")
    assert len(populated.docs("adminLogs")) == 1


async def test_missing_token_is_unauthenticated(api_client: Any, populated) -> None:
    response = await api_client.post(URL, json={"data": {"userId": "user-u"}})

    assert response.status_code == HTTPStatus.UNAUTHORIZED, response.text
    assert response.json()["error"]["status"] == "UNAUTHENTICATED"
    assert populated.calls == []


async def test_token_signed_with_other_secret_is_unauthenticated(
    api_client: Any, populated
) -> None:
    token = create_access_token(sub="admin-a", secret="someone-elses-secret")

    response = await api_client.post(
        URL,
        json={"data": {"userId": "user-u"}},
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == HTTPStatus.UNAUTHORIZED, response.text
    assert populated.calls == []


async def test_non_admin_is_forbidden(api_client: Any, populated, bearer) -> None:
    response = await api_client.post(
        URL, json={"data": {"userId": "user-u"}}, headers=bearer("user-x")
    )

    assert response.status_code == HTTPStatus.FORBIDDEN, response.text
    error = response.json()["error"]
    assert error["status"] == "PERMISSION_DENIED"
    assert error["message"] == "Only admins can delete users."


@pytest.mark.parametrize("body", [{}, {"data": {}}, {"data": None}, ["user-u"]])
async def test_missing_user_id_is_bad_request(
    api_client: Any, populated, bearer, body
) -> None:
    response = await api_client.post(URL, json=body, headers=bearer("admin-a"))

    assert response.status_code == HTTPStatus.BAD_REQUEST, response.text
    error = response.json()["error"]
    assert error["status"] == "INVALID_ARGUMENT"
    assert error["message"] == "userId is required."


async def test_malformed_json_is_bad_request(api_client: Any, bearer) -> None:
    response = await api_client.post(
        URL,
        content=b"{not json",
        headers={**bearer("admin-a"), "Content-Type": "application/json"},
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST, response.text
    assert response.json()["error"]["status"] == "INVALID_ARGUMENT"


async def test_unknown_user_is_not_found(api_client: Any, populated, bearer) -> None:
    response = await api_client.post(
        URL, json={"data": {"userId": "nobody"}}, headers=bearer("admin-a")
    )

    assert response.status_code == HTTPStatus.NOT_FOUND, response.text
    assert response.json()["error"]["status"] == "NOT_FOUND"


async def test_store_failure_is_internal(api_client: Any, populated, bearer) -> None:
    populated.fail_on[("scan", "groups")] = RuntimeError("groups unavailable")

    response = await api_client.post(
        URL, json={"data": {"userId": "user-u"}}, headers=bearer("admin-a")
    )

    assert response.status_code == HTTPStatus.INTERNAL_SERVER_ERROR, response.text
    error = response.json()["error"]
    assert error["status"] == "INTERNAL"
    assert error["message"] == "Failed to delete user: groups unavailable"
    assert error["details"]["step"] == "groups"


async def test_healthz(api_client: Any) -> None:
    response = await api_client.get("/healthz")

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {"ok": True}


async def test_openapi_names_the_response_schema_apart_from_the_domain_result(
    api_client: Any,
) -> None:
    response = await api_client.get("/openapi.json")

    assert response.status_code == HTTPStatus.OK, response.text
    schemas = response.json()["components"]["schemas"]
    assert "DeleteUserResultOut" in schemas
    assert "DeleteUserResult" not in schemas
