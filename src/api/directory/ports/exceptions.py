"""Exceptions for the user directory context.

The directory performs no silent recovery: each failure is raised with a
distinguishable type. status_code is the HTTP status the presentation
layer answers with when the error reaches it.
"""

from http import HTTPStatus


class DirectoryError(Exception):
    """Base class for user directory errors."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR


class InvalidUserArgumentError(DirectoryError):
    """Raised when a caller omits a required identity field.

    For example, an update without the uuid of the record to change.
    """

    status_code = HTTPStatus.BAD_REQUEST


class UserNotFoundError(DirectoryError):
    """Raised when an operation references a record that does not exist."""

    status_code = HTTPStatus.NOT_FOUND


class DirectoryIntegrityError(DirectoryError):
    """Raised when stored data violates an invariant the directory relies on.

    Either more than one record carries the same external id, or a stored
    record is missing its own uuid. Signals an inconsistent store rather
    than a caller mistake.
    """

    status_code = HTTPStatus.BAD_GATEWAY


class RecordStoreError(DirectoryError):
    """Raised when the backing record store call fails.

    Wraps the driver error; callers do not retry.
    """

    pass


class ChatDeliveryError(DirectoryError):
    """Raised when a chat notice could not be delivered."""

    pass
