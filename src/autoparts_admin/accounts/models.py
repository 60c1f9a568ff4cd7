"""
autoparts_admin.accounts.models

Typed user profile and permission records.

Responsibilities:
- Parse loosely-shaped profile documents into `UserProfile`.
- Keep capability checks fail-closed: only a literal `true` grants a
  capability; missing or malformed permissions grant nothing.
- Provide the per-role default permission sets.
"""

from __future__ import annotations

import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

MANAGE_USERS = "canManageUsers"


class Role(enum.StrEnum):
    admin = "admin"
    manager = "manager"
    viewer = "viewer"


class Permissions(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore"
    )

    can_create_products: bool = False
    can_edit_products: bool = False
    can_delete_products: bool = False
    can_manage_categories: bool = False
    can_manage_users: bool = False
    can_export_data: bool = False
    can_import_data: bool = False
    can_view_stats: bool = False

    @model_validator(mode="before")
    @classmethod
    def _only_literal_true(cls, data: Any) -> dict[str, bool]:
        if isinstance(data, Permissions):
            data = data.model_dump()
        if not isinstance(data, dict):
            return {}
        normalized: dict[str, bool] = {}
        for name, info in cls.model_fields.items():
            value = data.get(info.alias, data.get(name)) if info.alias else data.get(name)
            # "true", 1, {"enabled": true} ... are all denials.
            normalized[name] = value is True
        return normalized

    def grants(self, capability: str) -> bool:
        for name, info in type(self).model_fields.items():
            if capability in (name, info.alias):
                return bool(getattr(self, name))
        return False

    def to_document(self) -> dict[str, bool]:
        return self.model_dump(by_alias=True)


_ALL = {name: True for name in Permissions.model_fields}

DEFAULT_PERMISSIONS: dict[Role, Permissions] = {
    Role.admin: Permissions(**_ALL),
    Role.manager: Permissions(
        can_create_products=True,
        can_edit_products=True,
        can_export_data=True,
        can_import_data=True,
        can_view_stats=True,
    ),
    Role.viewer: Permissions(can_view_stats=True),
}


class UserProfile(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    email: str = ""
    display_name: str = ""
    photo_url: str | None = Field(default=None, alias="photoURL")
    role: Role = Role.viewer
    permissions: Permissions = Field(default_factory=Permissions)
    is_active: bool = True
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> UserProfile:
        # The document key is authoritative for the id, whatever the body says.
        return cls.model_validate({**data, "id": doc_id})

    def to_document(self) -> dict[str, Any]:
        # Timestamps stay `datetime` so Firestore stores them as Timestamp values.
        doc = self.model_dump(by_alias=True, exclude={"id"})
        doc["role"] = self.role.value
        return doc


# --- Module Notes -----------------------------------------------------------
# Field names on the wire are camelCase (`displayName`, `permissions.canManageUsers`)
# and timestamps are `datetime` values (Firestore Timestamps) to stay compatible with
# documents written by the storefront. The SQL document store keeps them as ISO strings.
