"""Slack infrastructure."""

from hibiki.infrastructure.slack.client import SlackConnection
from hibiki.infrastructure.slack.event_adapter import SlackEventAdapter
from hibiki.infrastructure.slack.messaging import SlackMessagingService
from hibiki.infrastructure.slack.mrkdwn import escape, render_mrkdwn

__all__ = [
    "SlackConnection",
    "SlackEventAdapter",
    "SlackMessagingService",
    "escape",
    "render_mrkdwn",
]
