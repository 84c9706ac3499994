"""Slack messaging service."""

import logging

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from hibiki.domain.exceptions import ChannelNotAccessibleError, TransportError

logger = logging.getLogger(__name__)

# Error codes that indicate the channel is not accessible
_CHANNEL_NOT_ACCESSIBLE_ERRORS = frozenset(
    {
        "not_in_channel",
        "channel_not_found",
        "is_archived",
    }
)


def _to_transport_error(channel_id: str, e: SlackApiError) -> TransportError:
    error_code = e.response.get("error", "") if e.response is not None else ""
    if error_code in _CHANNEL_NOT_ACCESSIBLE_ERRORS:
        return ChannelNotAccessibleError(
            channel_id, f"Cannot access channel {channel_id}: {error_code}"
        )
    return TransportError(f"Slack API error in {channel_id}: {error_code or e}")


class SlackMessagingService:
    """Slack implementation of MessagingService.

    Messages are posted with chat.postMessage and edited with chat.update.
    Replies are posted into the thread of the message they answer.
    """

    def __init__(self, client: AsyncWebClient) -> None:
        """Initialize the service.

        Args:
            client: Slack AsyncWebClient instance.
        """
        self._client = client
        self._bot_user_id: str | None = None
        self._bot_user_name: str | None = None

    async def send_message(
        self,
        chat_id: str,
        text: str,
        reply_to: str | None = None,
    ) -> str:
        """Send a message to a Slack channel.

        Args:
            chat_id: Target channel ID.
            text: Message content (mrkdwn).
            reply_to: Message ts to reply to (becomes thread_ts).

        Returns:
            ts of the posted message.

        Raises:
            ChannelNotAccessibleError: If the channel is not accessible
                (not_in_channel, channel_not_found, is_archived).
            TransportError: If the API call fails for other reasons.
        """
        try:
            response = await self._client.chat_postMessage(
                channel=chat_id,
                text=text,
                thread_ts=reply_to,
            )
        except SlackApiError as e:
            raise _to_transport_error(chat_id, e) from e
        return response["ts"]

    async def edit_message(self, chat_id: str, message_id: str, text: str) -> None:
        """Replace the text of a posted message.

        Raises:
            ChannelNotAccessibleError: If the channel is not accessible.
            TransportError: If the API call fails for other reasons.
        """
        try:
            await self._client.chat_update(channel=chat_id, ts=message_id, text=text)
        except SlackApiError as e:
            raise _to_transport_error(chat_id, e) from e

    async def get_bot_user_id(self) -> str:
        """Get the bot's user ID (cached after the first call)."""
        if self._bot_user_id is None:
            await self._load_identity()
        assert self._bot_user_id is not None
        return self._bot_user_id

    async def get_bot_user_name(self) -> str:
        """Get the bot's handle (cached after the first call)."""
        if self._bot_user_name is None:
            await self._load_identity()
        assert self._bot_user_name is not None
        return self._bot_user_name

    async def _load_identity(self) -> None:
        response = await self._client.auth_test()
        self._bot_user_id = response["user_id"]
        self._bot_user_name = response.get("user", "")
        logger.info("Bot identity: %s (%s)", self._bot_user_name, self._bot_user_id)
