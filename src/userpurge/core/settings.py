from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_str(name: str, default: str = "") -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip()


def _env_optional_str(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the user purge service."""

    mongodb_uri: str = "mongodb://localhost:27017"
    db_name: str = "userpurge"
    mongo_appname: str = "userpurge"
    mongo_op_timeout_ms: int = 5000
    mongo_server_selection_timeout_ms: int = 5000

    identity_base_url: str = ""
    identity_api_key: Optional[str] = None
    identity_tenant_id: Optional[str] = None
    identity_timeout_seconds: float = 10.0

    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"

    max_concurrent_writes: int = 10

    log_dir: Optional[str] = None
    log_format: str = ""


def load_settings() -> Settings:
    """Construct Settings from environment variables."""
    return Settings(
        mongodb_uri=_env_str("MONGODB_URI", "mongodb://localhost:27017"),
        db_name=_env_str("DB_NAME", "userpurge"),
        mongo_appname=_env_str("MONGO_APPNAME", "userpurge"),
        mongo_op_timeout_ms=_env_int("MONGO_OP_TIMEOUT_MS", 5000),
        mongo_server_selection_timeout_ms=_env_int(
            "MONGO_SERVER_SELECTION_TIMEOUT_MS", 5000
        ),
        identity_base_url=_env_str("IDENTITY_BASE_URL").rstrip("/"),
        identity_api_key=_env_optional_str("IDENTITY_API_KEY"),
        identity_tenant_id=_env_optional_str("IDENTITY_TENANT_ID"),
        identity_timeout_seconds=_env_float("IDENTITY_TIMEOUT_SECONDS", 10.0),
        jwt_secret=_env_optional_str("JWT_SECRET"),
        jwt_algorithm=_env_str("JWT_ALGORITHM", "HS256"),
        max_concurrent_writes=_env_int("MAX_CONCURRENT_WRITES", 10),
        log_dir=_env_optional_str("LOG_DIR"),
        log_format=_env_str("LOG_FORMAT").lower(),
    )


__all__ = ["Settings", "load_settings"]
