"""Prompt construction for response generation."""

import json

from hibiki.domain.entities import CachedMessage, ChatTurn, MemoryNote, MessageOrigin
from hibiki.infrastructure.llm.templates import get_template

EXEC_EXAMPLE = {
    "kind": "auto_reply",
    "when": "^hello$",
    "message": "こんにちは、$username さん！",
}


class JinjaPromptBuilder:
    """Builds the system prompt and role-tagged turns from chat state."""

    def __init__(self, persona_name: str = "") -> None:
        """Initialize the builder.

        Args:
            persona_name: Persona display name shown to the model.
        """
        self._persona_name = persona_name
        self._system_template = get_template("response_system.j2")

    def build_system_prompt(
        self,
        prompt: str,
        bot_name: str,
        memories: list[MemoryNote],
    ) -> str:
        """Render the system prompt.

        Args:
            prompt: Per-chat prompt or the default persona prompt.
            bot_name: Bot handle.
            memories: Memories of the chat, newest first.

        Returns:
            System prompt text.
        """
        return self._system_template.render(
            prompt=prompt.strip(),
            bot_name=bot_name,
            persona_name=self._persona_name,
            memories=memories,
            exec_example=json.dumps(EXEC_EXAMPLE, ensure_ascii=False),
        )

    def build_turns(self, messages: list[CachedMessage]) -> list[ChatTurn]:
        """Convert cached messages to role-tagged turns.

        Bot messages become assistant turns. User messages carry the sender
        so the model can tell participants apart.

        Args:
            messages: Cached messages, oldest first.

        Returns:
            Turns in the same order.
        """
        turns = []
        for message in messages:
            if message.origin is MessageOrigin.ASSISTANT:
                turns.append(ChatTurn(role="assistant", content=message.text))
                continue
            label = (
                f"@{message.sender_handle}"
                if message.sender_handle
                else message.sender_name
            )
            turns.append(
                ChatTurn(
                    role="user",
                    content=f"{label} ({message.sender_name}) のメッセージ: {message.text}",
                )
            )
        return turns
