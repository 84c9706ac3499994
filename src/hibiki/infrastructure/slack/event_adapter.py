"""Slack event adapter."""

import logging
import re
from datetime import datetime, timezone

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from hibiki.domain.entities import Message, MessageOrigin, User

logger = logging.getLogger(__name__)


class SlackEventAdapter:
    """Convert Slack events to domain entities.

    User profiles are cached in memory to minimize users.info calls.
    """

    MENTION_PATTERN = re.compile(r"<@([A-Z0-9]+)(?:\|[^>]*)?>")

    def __init__(self, client: AsyncWebClient, bot_user_id: str | None = None) -> None:
        """Initialize the adapter.

        Args:
            client: Slack AsyncWebClient for fetching user info.
            bot_user_id: The bot's user ID, used to tag the bot's own messages.
        """
        self._client = client
        self._bot_user_id = bot_user_id
        self._users: dict[str, User] = {}

    async def to_message(self, event: dict) -> Message:
        """Convert a Slack message event to a Message entity.

        Args:
            event: Slack message event payload.

        Returns:
            Message entity. user is None when the event has no user.
        """
        user_id = event.get("user")
        user = await self.get_user(user_id) if user_id else None

        ts = event["ts"]
        text = event.get("text") or ""
        origin = (
            MessageOrigin.ASSISTANT
            if user_id is not None and user_id == self._bot_user_id
            else MessageOrigin.USER
        )

        return Message(
            id=ts,
            chat_id=event["channel"],
            user=user,
            text=text,
            timestamp=datetime.fromtimestamp(float(ts), tz=timezone.utc),
            origin=origin,
            thread_ts=event.get("thread_ts"),
            parent_user_id=event.get("parent_user_id"),
            mentions=self.extract_mentions(text),
            has_attachments=bool(event.get("files") or event.get("attachments")),
        )

    async def get_user(self, user_id: str) -> User:
        """Get a user from cache or fetch it from the Slack API.

        A failed lookup yields a user known only by ID.

        Args:
            user_id: Slack user ID.

        Returns:
            User entity.
        """
        cached = self._users.get(user_id)
        if cached is not None:
            return cached

        try:
            user_info = await self._client.users_info(user=user_id)
        except SlackApiError as e:
            logger.warning("Failed to fetch user %s: %s", user_id, e)
            return User(id=user_id, name="", display_name=user_id)

        user_data = user_info["user"]
        profile = user_data.get("profile") or {}
        user = User(
            id=user_data["id"],
            name=user_data.get("name", ""),
            display_name=(
                profile.get("display_name")
                or profile.get("real_name")
                or user_data.get("real_name")
                or user_data.get("name", "")
            ),
            is_bot=user_data.get("is_bot", False),
        )
        self._users[user_id] = user
        return user

    def extract_mentions(self, text: str) -> list[str]:
        """Extract user mentions from message text.

        Args:
            text: Message text.

        Returns:
            List of mentioned user IDs.
        """
        return self.MENTION_PATTERN.findall(text)
