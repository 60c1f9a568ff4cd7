"""
autoparts_admin.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Select the identity/document backends (built-in SQL or Firebase).
- Hide secrets from repr/logging (JWT secret, Firebase private key).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration. Defaults are safe for local dev:
    SQLite files for both backends and a throwaway JWT secret.
    """

    model_config = SettingsConfigDict(env_prefix="AUTOPARTS_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and the dev router.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "autoparts-admin"
    log_level: str = "INFO"
    log_json: bool = True

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Which authentication service / document store pair to talk to.
    backend: Literal["sql", "firebase"] = "sql"

    # Credentials issued by the built-in identity directory
    jwt_alg: str = "HS256"
    jwt_issuer: str = "autoparts-admin"
    jwt_audience: str = "autoparts-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    jwt_ttl_minutes: int = 60

    # Built-in backends live in separate databases, like the hosted services they stand in for.
    identity_database_url: str = "sqlite+aiosqlite:///./identities.db"
    document_database_url: str = "sqlite+aiosqlite:///./documents.db"

    users_collection: str = "users"

    # Firebase Admin service account
    firebase_app_name: str = "autoparts-admin"
    firebase_project_id: str | None = None
    firebase_client_email: str | None = None
    firebase_private_key: str | None = Field(default=None, repr=False)
    firebase_credentials_file: str | None = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Alembic's env.py reads the same Settings so migrations target the same databases
# as the running service.
