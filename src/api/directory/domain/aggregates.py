"""Directory user aggregate and its write models.

Records are persisted as flat items in a key-value store. The attribute
names below are the stored names; they are kept stable so existing items
remain readable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from directory.domain.value_objects import ExternalId, Role, UserUuid

UUID_ATTRIBUTE = "uuid"
EXTERNAL_ID_ATTRIBUTE = "id"
USERNAME_ATTRIBUTE = "username"
ROLE_ATTRIBUTE = "role"
API_KEY_ATTRIBUTE = "apiKey"
CREATED_AT_ATTRIBUTE = "createdAt"
UPDATED_AT_ATTRIBUTE = "updatedAt"


@dataclass(frozen=True)
class DirectoryUser:
    """A user record of the directory.

    Business rules:
    - uuid is generated at creation and never changes
    - external_id is expected to be unique among records, which the store
      does not enforce
    - role and api_key change only through privileged operations
    - created_at never changes, updated_at moves on every mutation

    Timestamps are milliseconds since the Unix epoch.
    """

    uuid: UserUuid
    external_id: ExternalId | None
    username: str = ""
    role: Role = Role.USER
    api_key: str | None = None
    created_at: int = 0
    updated_at: int = 0

    @property
    def has_api_key(self) -> bool:
        """True when an API key has been issued to this user."""
        return bool(self.api_key)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> DirectoryUser:
        """Rebuild a user from a stored item.

        Missing optional attributes fall back to their defaults.

        Raises:
            KeyError: If the item has no uuid attribute
            ValueError: If the stored role is not a known role
        """
        return cls(
            uuid=UserUuid(value=str(item[UUID_ATTRIBUTE])),
            external_id=item.get(EXTERNAL_ID_ATTRIBUTE),
            username=item.get(USERNAME_ATTRIBUTE) or "",
            role=Role(item.get(ROLE_ATTRIBUTE) or Role.USER),
            api_key=item.get(API_KEY_ATTRIBUTE) or None,
            created_at=int(item.get(CREATED_AT_ATTRIBUTE) or 0),
            updated_at=int(item.get(UPDATED_AT_ATTRIBUTE) or 0),
        )

    def to_item(self) -> dict[str, Any]:
        """Convert to a stored item, leaving out unset optional attributes."""
        item: dict[str, Any] = {
            UUID_ATTRIBUTE: self.uuid.value,
            USERNAME_ATTRIBUTE: self.username,
            ROLE_ATTRIBUTE: self.role.value,
            CREATED_AT_ATTRIBUTE: self.created_at,
            UPDATED_AT_ATTRIBUTE: self.updated_at,
        }
        if self.external_id is not None:
            item[EXTERNAL_ID_ATTRIBUTE] = self.external_id
        if self.api_key:
            item[API_KEY_ATTRIBUTE] = self.api_key
        return item


@dataclass(frozen=True)
class NewDirectoryUser:
    """Input for creating a directory user.

    role is honoured only by privileged creation.
    """

    external_id: ExternalId | None
    username: str | None = None
    role: Role | None = None


@dataclass(frozen=True)
class UserPatch:
    """Partial update of a directory user.

    uuid identifies the record and is required by the update operations.
    Ordinary updates read only username. Privileged updates also read
    external_id, role and api_key; an unset api_key clears the stored key.
    """

    uuid: UserUuid | None
    username: str | None = None
    external_id: ExternalId | None = None
    role: Role | None = None
    api_key: str | None = None
