"""User entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """User entity (platform-independent).

    Attributes:
        id: Platform-specific user ID.
        name: Handle (user name without "@"). May be empty.
        display_name: Human-readable display name.
        is_bot: Whether the user is a bot.
    """

    id: str
    name: str
    display_name: str = ""
    is_bot: bool = False

    @property
    def mention_label(self) -> str:
        """Label used when addressing this user in text.

        Returns:
            "@handle" when a handle is known, otherwise the display name.
        """
        if self.name:
            return f"@{self.name}"
        return self.display_name
