"""hibiki - Slack group-chat automation agent."""

__version__ = "0.1.0"
