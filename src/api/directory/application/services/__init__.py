"""Application services for the user directory context.

Application services orchestrate domain objects, the record store and the
chat notifier to fulfill use cases.
"""

from directory.application.services.api_key_issuance_service import (
    APIKeyIssuanceService,
)
from directory.application.services.user_directory_service import (
    UserDirectoryService,
)

__all__ = [
    "APIKeyIssuanceService",
    "UserDirectoryService",
]
