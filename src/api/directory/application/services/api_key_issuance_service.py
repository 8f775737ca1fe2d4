"""API key issuance workflow.

Issues a one-time API key to the directory user behind an inbound chat
command. Keys are only handed out in private chats and never rotated: a
user who already holds a key is turned away.
"""

from __future__ import annotations

from collections.abc import Callable

from directory.application.observability import (
    APIKeyIssuanceProbe,
    DefaultAPIKeyIssuanceProbe,
)
from directory.application.security import generate_api_key_secret
from directory.application.services.user_directory_service import (
    UserDirectoryService,
)
from directory.application.value_objects import (
    ChatCommand,
    IssuanceResult,
    IssuanceStatus,
)
from directory.domain.aggregates import UserPatch
from directory.ports.notifier import ChatNotice, IChatNotifier, ParseMode

PRIVATE_CHAT_REQUIRED_TEXT = "Please request your new API KEY in a private message!"
ALREADY_ISSUED_TEXT = "You already have an API KEY!"
ISSUED_TEXT_TEMPLATE = (
    "Here is your new API KEY, keep it secret:\n\n<code>{secret}</code>"
)


class APIKeyIssuanceService:
    """Runs the API key issuance workflow for one chat command.

    The existence check and the write are not atomic: two concurrent
    requests from the same sender can both pass the check.
    """

    def __init__(
        self,
        directory: UserDirectoryService,
        notifier: IChatNotifier,
        probe: APIKeyIssuanceProbe | None = None,
        secret_factory: Callable[[], str] = generate_api_key_secret,
    ):
        """Initialize APIKeyIssuanceService with dependencies.

        Args:
            directory: Directory service used to find and update the sender
            notifier: Sends notices back to the chat
            probe: Optional domain probe for observability
            secret_factory: Generates new API key secrets
        """
        self._directory = directory
        self._notifier = notifier
        self._probe = probe or DefaultAPIKeyIssuanceProbe()
        self._secret_factory = secret_factory

    async def issue(self, command: ChatCommand) -> IssuanceResult:
        """Issue an API key to the sender of a chat command.

        Order of checks:
        1. the sender's directory record is looked up
        2. non-private chats are refused
        3. unknown senders get NOT_FOUND without a notice
        4. senders that already hold a key are refused
        5. otherwise a key is generated, stored and sent back

        Args:
            command: The inbound chat command

        Returns:
            IssuanceResult with the outcome and the notice that was sent

        Raises:
            DirectoryIntegrityError: If the sender's external id is ambiguous
            RecordStoreError: If the record store fails
            ChatDeliveryError: If the notice cannot be sent
        """
        sender_id = str(command.sender_id)
        try:
            user = await self._directory.get_by_external_id(command.sender_id)

            if not command.is_private:
                self._probe.issuance_rejected(sender_id, reason="not_private_chat")
                return await self._reply(
                    IssuanceStatus.FORBIDDEN,
                    ChatNotice(
                        chat_id=command.chat_id,
                        text=PRIVATE_CHAT_REQUIRED_TEXT,
                        reply_to_message_id=command.message_id,
                    ),
                )

            if user is None:
                self._probe.issuance_rejected(sender_id, reason="user_not_found")
                return IssuanceResult(status=IssuanceStatus.NOT_FOUND)

            if user.has_api_key:
                self._probe.issuance_rejected(sender_id, reason="already_issued")
                return await self._reply(
                    IssuanceStatus.FORBIDDEN,
                    ChatNotice(
                        chat_id=command.chat_id,
                        text=ALREADY_ISSUED_TEXT,
                        reply_to_message_id=command.message_id,
                    ),
                )

            secret = self._secret_factory()
            await self._directory.update_as_admin(
                UserPatch(uuid=user.uuid, username=user.username, api_key=secret)
            )
            result = await self._reply(
                IssuanceStatus.OK,
                ChatNotice(
                    chat_id=command.chat_id,
                    text=ISSUED_TEXT_TEMPLATE.format(secret=secret),
                    reply_to_message_id=command.message_id,
                    protect_content=True,
                    parse_mode=ParseMode.HTML,
                ),
            )
        except Exception as e:
            self._probe.issuance_failed(sender_id, error=str(e))
            raise

        self._probe.api_key_issued(uuid=user.uuid.value, sender_id=sender_id)
        return result

    async def _reply(self, status: IssuanceStatus, notice: ChatNotice) -> IssuanceResult:
        await self._notifier.send_message(notice)
        return IssuanceResult(status=status, notice=notice)
