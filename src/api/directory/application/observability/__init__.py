"""Domain-Oriented Observability for the directory application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from directory.application.observability.api_key_issuance_probe import (
    APIKeyIssuanceProbe,
    DefaultAPIKeyIssuanceProbe,
)
from directory.application.observability.user_directory_service_probe import (
    DefaultUserDirectoryServiceProbe,
    UserDirectoryServiceProbe,
)

__all__ = [
    "APIKeyIssuanceProbe",
    "DefaultAPIKeyIssuanceProbe",
    "UserDirectoryServiceProbe",
    "DefaultUserDirectoryServiceProbe",
]
