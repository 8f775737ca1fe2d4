"""Value objects for the user directory domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias

# Identifier supplied by the external system (Telegram user ids are integers,
# other callers use strings).
ExternalId: TypeAlias = str | int


@dataclass(frozen=True)
class UserUuid:
    """Internal key of a directory record.

    Generated once at creation as a UUID4 string and never changed.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> UserUuid:
        """Generate a new random UserUuid."""
        return cls(value=str(uuid.uuid4()))

    @classmethod
    def from_string(cls, value: str) -> UserUuid:
        """Create UserUuid from string value.

        Args:
            value: UUID string

        Returns:
            UserUuid instance

        Raises:
            ValueError: If value is not a valid UUID
        """
        try:
            uuid.UUID(value)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid UserUuid: {value}") from e

        return cls(value=value)


class Role(StrEnum):
    """Directory role of a user."""

    USER = "user"
    ADMIN = "admin"
