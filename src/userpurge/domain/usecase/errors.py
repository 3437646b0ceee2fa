"""Caller-facing error taxonomy for admin operations."""

from __future__ import annotations

from enum import Enum
from http import HTTPStatus
from typing import Any, Mapping


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    PERMISSION_DENIED = "permission-denied"
    INVALID_ARGUMENT = "invalid-argument"
    NOT_FOUND = "not-found"
    INTERNAL = "internal"

    @property
    def status_name(self) -> str:
        """Canonical upper-case status, e.g. ``PERMISSION_DENIED``."""
        return self.value.replace("-", "_").upper()

    @property
    def http_status(self) -> HTTPStatus:
        return _HTTP_STATUS[self]


_HTTP_STATUS: dict[ErrorKind, HTTPStatus] = {
    ErrorKind.UNAUTHENTICATED: HTTPStatus.UNAUTHORIZED,
    ErrorKind.PERMISSION_DENIED: HTTPStatus.FORBIDDEN,
    ErrorKind.INVALID_ARGUMENT: HTTPStatus.BAD_REQUEST,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}


class OperationError(Exception):
    """Raised to the caller with one of the ``ErrorKind`` values.

    Every kind except ``INTERNAL`` is raised before any mutation happens.
    ``INTERNAL`` means the store may have been partially modified.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.details: dict[str, Any] = dict(details or {})

    def __repr__(self) -> str:
        return f"OperationError({self.kind.value!r}, {self.message!r})"

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": self.kind.status_name,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


__all__ = ["ErrorKind", "OperationError"]
