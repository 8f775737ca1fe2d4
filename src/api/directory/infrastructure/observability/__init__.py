"""Domain-Oriented Observability for directory infrastructure."""

from directory.infrastructure.observability.chat_notifier_probe import (
    ChatNotifierProbe,
    DefaultChatNotifierProbe,
)
from directory.infrastructure.observability.record_store_probe import (
    DefaultRecordStoreProbe,
    RecordStoreProbe,
)

__all__ = [
    "ChatNotifierProbe",
    "DefaultChatNotifierProbe",
    "DefaultRecordStoreProbe",
    "RecordStoreProbe",
]
