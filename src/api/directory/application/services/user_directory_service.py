"""User directory application service.

Owns the lifecycle of directory records: lookup by uuid, lookup by external
id, creation, partial updates and removal. Updates are compiled into a
field-level update expression and applied by the record store.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from directory.application.observability import (
    DefaultUserDirectoryServiceProbe,
    UserDirectoryServiceProbe,
)
from directory.domain.aggregates import (
    API_KEY_ATTRIBUTE,
    EXTERNAL_ID_ATTRIBUTE,
    ROLE_ATTRIBUTE,
    UPDATED_AT_ATTRIBUTE,
    USERNAME_ATTRIBUTE,
    UUID_ATTRIBUTE,
    DirectoryUser,
    NewDirectoryUser,
    UserPatch,
)
from directory.domain.value_objects import ExternalId, Role, UserUuid
from directory.ports.exceptions import (
    DirectoryIntegrityError,
    InvalidUserArgumentError,
    UserNotFoundError,
)
from directory.ports.store import IRecordStore, Item
from shared_kernel.update_expression import compile_update_expression


def current_millis() -> int:
    """Current time in milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


class UserDirectoryService:
    """Application service for directory records.

    Ordinary and privileged operations are separate methods: only
    ``create_as_admin`` and ``update_as_admin`` may set role, external id
    and API key. The service holds no state between calls.
    """

    def __init__(
        self,
        store: IRecordStore,
        probe: UserDirectoryServiceProbe | None = None,
        clock: Callable[[], int] = current_millis,
    ):
        """Initialize UserDirectoryService with dependencies.

        Args:
            store: Record store holding directory items
            probe: Optional domain probe for observability
            clock: Returns the current time in epoch milliseconds
        """
        self._store = store
        self._probe = probe or DefaultUserDirectoryServiceProbe()
        self._clock = clock

    async def get(self, uuid: UserUuid) -> DirectoryUser | None:
        """Retrieve a user by uuid.

        Returns:
            The user, or None if no record exists

        Raises:
            DirectoryIntegrityError: If the stored record has no uuid
        """
        item = await self._store.get(uuid.value)
        if item is None:
            return None
        return self._to_user(item)

    async def get_by_external_id(self, external_id: ExternalId) -> DirectoryUser | None:
        """Retrieve the user carrying an external id.

        Scans the store projecting only uuid and external id, then reads the
        full record of the single match.

        Returns:
            The user, or None if no record carries the external id

        Raises:
            DirectoryIntegrityError: If more than one record carries it
        """
        matches = await self._store.scan(
            filter={EXTERNAL_ID_ATTRIBUTE: external_id},
            projection=(UUID_ATTRIBUTE, EXTERNAL_ID_ATTRIBUTE),
        )

        if not matches:
            self._probe.external_id_not_found(str(external_id))
            return None

        if len(matches) > 1:
            self._probe.duplicate_external_id(str(external_id), len(matches))
            raise DirectoryIntegrityError(
                f"{len(matches)} directory records share external id {external_id}"
            )

        uuid = matches[0].get(UUID_ATTRIBUTE)
        if not uuid:
            raise DirectoryIntegrityError(
                f"Directory record for external id {external_id} has no uuid"
            )
        return await self.get(UserUuid(value=str(uuid)))

    async def create(self, new_user: NewDirectoryUser) -> DirectoryUser:
        """Create a user with the default role.

        Any role on new_user is ignored.
        """
        return await self._create(new_user, as_admin=False)

    async def create_as_admin(self, new_user: NewDirectoryUser) -> DirectoryUser:
        """Create a user with the role given on new_user."""
        return await self._create(new_user, as_admin=True)

    async def update(self, patch: UserPatch) -> DirectoryUser:
        """Apply an ordinary update.

        Sets username (empty when omitted) and resets the role to the
        default. External id and API key are left untouched.
        """
        return await self._update(patch, as_admin=False)

    async def update_as_admin(self, patch: UserPatch) -> DirectoryUser:
        """Apply a privileged update.

        Besides username, writes external id and role when the patch sets
        them, and always writes the API key: an unset api_key clears it.
        """
        return await self._update(patch, as_admin=True)

    async def remove(self, uuid: UserUuid) -> None:
        """Delete a user. Removing a missing user is not an error."""
        await self._store.delete(uuid.value)
        self._probe.user_removed(uuid.value)

    async def _create(self, new_user: NewDirectoryUser, as_admin: bool) -> DirectoryUser:
        try:
            timestamp = self._clock()
            uuid = UserUuid.generate()
            role = (new_user.role or Role.USER) if as_admin else Role.USER
            user = DirectoryUser(
                uuid=uuid,
                external_id=new_user.external_id,
                username=new_user.username or "",
                role=role,
                created_at=timestamp,
                updated_at=timestamp,
            )
            await self._store.put(user.to_item())

            created = await self._read_back(uuid)
        except Exception as e:
            self._probe.user_creation_failed(error=str(e))
            raise

        self._probe.user_created(uuid=uuid.value, role=role.value, as_admin=as_admin)
        return created

    async def _update(self, patch: UserPatch, as_admin: bool) -> DirectoryUser:
        uuid_value = patch.uuid.value if patch.uuid else None
        try:
            if patch.uuid is None or not patch.uuid.value:
                raise InvalidUserArgumentError("Update requires the user's uuid")

            current = await self._store.get(patch.uuid.value)
            if current is None:
                raise UserNotFoundError(f"Directory user {patch.uuid.value} not found")

            key = current.get(UUID_ATTRIBUTE)
            if not key:
                raise DirectoryIntegrityError(
                    f"Directory record {patch.uuid.value} has no uuid"
                )

            record = self._merge(current, patch, as_admin)
            # The key is the record's identity, not a mutable attribute
            record.pop(UUID_ATTRIBUTE, None)

            update = compile_update_expression(record)
            await self._store.update(str(key), update)

            updated = await self._read_back(UserUuid(value=str(key)))
        except Exception as e:
            self._probe.user_update_failed(uuid=uuid_value, error=str(e))
            raise

        self._probe.user_updated(
            uuid=str(key),
            as_admin=as_admin,
            set_fields=update.set_fields,
            removed_fields=update.remove_fields,
        )
        return updated

    def _merge(self, current: Item, patch: UserPatch, as_admin: bool) -> dict[str, Any]:
        """Build the record to write: the stored item overlaid with the allowed patch fields."""
        record: dict[str, Any] = {
            **current,
            USERNAME_ATTRIBUTE: patch.username or "",
            UPDATED_AT_ATTRIBUTE: self._clock(),
        }

        if as_admin:
            if patch.external_id is not None:
                record[EXTERNAL_ID_ATTRIBUTE] = patch.external_id
            if patch.role is not None:
                record[ROLE_ATTRIBUTE] = patch.role.value
            record[API_KEY_ATTRIBUTE] = patch.api_key or ""
        else:
            record[ROLE_ATTRIBUTE] = Role.USER.value
        return record

    async def _read_back(self, uuid: UserUuid) -> DirectoryUser:
        user = await self.get(uuid)
        if user is None:
            raise DirectoryIntegrityError(
                f"Directory user {uuid.value} missing right after it was written"
            )
        return user

    def _to_user(self, item: Item) -> DirectoryUser:
        if not item.get(UUID_ATTRIBUTE):
            raise DirectoryIntegrityError("Stored directory record has no uuid")
        try:
            return DirectoryUser.from_item(item)
        except ValueError as e:
            raise DirectoryIntegrityError(f"Malformed directory record: {e}") from e
