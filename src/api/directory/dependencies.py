"""FastAPI dependency providers for the user directory context."""

from __future__ import annotations

import uuid
from functools import lru_cache
from typing import Annotated, AsyncGenerator

from fastapi import Depends, Request

from directory.application.observability import (
    APIKeyIssuanceProbe,
    DefaultAPIKeyIssuanceProbe,
    DefaultUserDirectoryServiceProbe,
    UserDirectoryServiceProbe,
)
from directory.application.services import (
    APIKeyIssuanceService,
    UserDirectoryService,
)
from directory.infrastructure.in_memory_record_store import InMemoryRecordStore
from directory.infrastructure.observability import (
    ChatNotifierProbe,
    DefaultChatNotifierProbe,
    DefaultRecordStoreProbe,
    RecordStoreProbe,
)
from directory.infrastructure.postgres_record_store import PostgresRecordStore
from directory.infrastructure.telegram_notifier import TelegramNotifier
from directory.ports.notifier import IChatNotifier
from directory.ports.store import IRecordStore
from infrastructure.database.dependencies import session_scope
from infrastructure.settings import (
    DirectorySettings,
    TelegramSettings,
    get_directory_settings,
    get_telegram_settings,
)
from shared_kernel.observability_context import ObservationContext

REQUEST_ID_HEADER = "X-Request-ID"


def get_observation_context(request: Request) -> ObservationContext:
    """Build the observation context shared by all probes of a request.

    Reuses the caller's X-Request-ID when present.
    """
    return ObservationContext(
        request_id=request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4()),
        extra={"path": request.url.path},
    )


def get_record_store_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> RecordStoreProbe:
    """Get RecordStoreProbe instance.

    Returns:
        DefaultRecordStoreProbe bound to the request context
    """
    return DefaultRecordStoreProbe().with_context(context)


def get_chat_notifier_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> ChatNotifierProbe:
    """Get ChatNotifierProbe instance."""
    return DefaultChatNotifierProbe().with_context(context)


def get_user_directory_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> UserDirectoryServiceProbe:
    """Get UserDirectoryServiceProbe instance."""
    return DefaultUserDirectoryServiceProbe().with_context(context)


def get_api_key_issuance_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> APIKeyIssuanceProbe:
    """Get APIKeyIssuanceProbe instance."""
    return DefaultAPIKeyIssuanceProbe().with_context(context)


@lru_cache
def get_in_memory_record_store(table_name: str) -> InMemoryRecordStore:
    """Get the process-wide in-memory store for a table.

    Cached so every request of the process sees the same records.
    """
    return InMemoryRecordStore(table_name=table_name)


async def get_record_store(
    settings: Annotated[DirectorySettings, Depends(get_directory_settings)],
    probe: Annotated[RecordStoreProbe, Depends(get_record_store_probe)],
) -> AsyncGenerator[IRecordStore, None]:
    """Get the record store selected by configuration.

    The PostgreSQL store gets a request-scoped session that is closed once
    the response is sent.

    Args:
        settings: Directory settings (table name and backend)
        probe: Record store probe for observability

    Yields:
        IRecordStore bound to the configured table
    """
    if settings.store_backend == "memory":
        yield get_in_memory_record_store(settings.table_name)
        return

    async with session_scope() as session:
        yield PostgresRecordStore(
            session=session,
            table_name=settings.table_name,
            probe=probe,
        )


def get_chat_notifier(
    settings: Annotated[TelegramSettings, Depends(get_telegram_settings)],
    probe: Annotated[ChatNotifierProbe, Depends(get_chat_notifier_probe)],
) -> IChatNotifier:
    """Get the Telegram notifier."""
    return TelegramNotifier(settings=settings, probe=probe)


def get_user_directory_service(
    store: Annotated[IRecordStore, Depends(get_record_store)],
    probe: Annotated[
        UserDirectoryServiceProbe, Depends(get_user_directory_service_probe)
    ],
) -> UserDirectoryService:
    """Get UserDirectoryService instance.

    Args:
        store: Record store (shares the request session via dependency caching)
        probe: Directory service probe for observability

    Returns:
        UserDirectoryService instance
    """
    return UserDirectoryService(store=store, probe=probe)


def get_api_key_issuance_service(
    directory: Annotated[UserDirectoryService, Depends(get_user_directory_service)],
    notifier: Annotated[IChatNotifier, Depends(get_chat_notifier)],
    probe: Annotated[APIKeyIssuanceProbe, Depends(get_api_key_issuance_probe)],
) -> APIKeyIssuanceService:
    """Get APIKeyIssuanceService instance.

    Args:
        directory: Directory service used to find and update the sender
        notifier: Chat notifier for replies
        probe: Issuance probe for observability

    Returns:
        APIKeyIssuanceService instance
    """
    return APIKeyIssuanceService(directory=directory, notifier=notifier, probe=probe)
