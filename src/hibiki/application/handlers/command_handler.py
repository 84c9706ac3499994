"""Chat commands (/prompt, /rules, /memories, /setkv, ...)."""

import logging
import shlex
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from hibiki.application.services.auto_reply import AutoReplyService
from hibiki.domain.entities import KeyUsage
from hibiki.domain.repositories import (
    ChatSettingRepository,
    MemoryRepository,
    PromptRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandSpec:
    """Name, usage and description of a command."""

    name: str
    usage: str
    description: str


COMMANDS = (
    CommandSpec(
        "prompt",
        "/prompt [新しいプロンプト]",
        "このチャットのプロンプトを表示・設定する（空ならデフォルトに戻す）",
    ),
    CommandSpec("rules", "/rules", "自動返信ルールの一覧を表示する"),
    CommandSpec("unrule", "/unrule <id|all>", "自動返信ルールを削除する"),
    CommandSpec("memories", "/memories", "このチャットのメモを表示する"),
    CommandSpec("forget", "/forget <id|all>", "メモを削除する"),
    CommandSpec(
        "setkv",
        "/setkv <key> <value>",
        "チャット設定を保存する（message_window, model など）",
    ),
    CommandSpec("listkv", "/listkv", "チャット設定の一覧を表示する"),
    CommandSpec("deletekv", "/deletekv <key>", "チャット設定を削除する"),
    CommandSpec("usage", "/usage", "API キーの使用状況を表示する"),
    CommandSpec("help", "/help", "このヘルプを表示する"),
)

UsageFetcher = Callable[[], Awaitable[KeyUsage]]


class ChatCommandHandler:
    """Executes chat commands and returns markdown replies."""

    def __init__(
        self,
        *,
        rule_service: AutoReplyService,
        memory_repository: MemoryRepository,
        prompt_repository: PromptRepository,
        chat_setting_repository: ChatSettingRepository,
        default_prompt: str,
        usage_fetcher: UsageFetcher | None = None,
    ) -> None:
        """Initialize the handler.

        Args:
            rule_service: Auto-reply rules.
            memory_repository: Chat memories.
            prompt_repository: Per-chat prompts.
            chat_setting_repository: Per-chat key/value settings.
            default_prompt: Prompt used when a chat has no override.
            usage_fetcher: Async callable returning API key usage.
                /usage is unavailable when None.
        """
        self._rule_service = rule_service
        self._memory_repository = memory_repository
        self._prompt_repository = prompt_repository
        self._settings = chat_setting_repository
        self._default_prompt = default_prompt
        self._usage_fetcher = usage_fetcher
        self._handlers: dict[str, Callable[[str, str], Awaitable[str]]] = {
            "prompt": self.prompt,
            "rules": self.rules,
            "unrule": self.unrule,
            "memories": self.memories,
            "forget": self.forget,
            "setkv": self.setkv,
            "listkv": self.listkv,
            "deletekv": self.deletekv,
            "usage": self.usage,
            "help": self.help,
        }

    async def handle(self, command: str, chat_id: str, text: str) -> str:
        """Run a command.

        Args:
            command: Command name with or without the leading "/".
            chat_id: Chat where the command was issued.
            text: Arguments.

        Returns:
            Markdown reply.
        """
        name = command.lstrip("/")
        handler = self._handlers.get(name)
        if handler is None:
            return f"不明なコマンドです: /{name}\n\n" + await self.help(chat_id, "")
        logger.info("Running /%s in %s", name, chat_id)
        return await handler(chat_id, text.strip())

    async def prompt(self, chat_id: str, text: str) -> str:
        current = await self._prompt_repository.get(chat_id) or self._default_prompt
        if text:
            await self._prompt_repository.set(chat_id, text)
            result = f"プロンプトを次の内容に更新しました:\n\n{text}"
        else:
            await self._prompt_repository.reset(chat_id)
            result = "プロンプトをデフォルトに戻しました。"
        return f"以前のプロンプト:\n\n{current}\n\n{result}"

    async def rules(self, chat_id: str, text: str) -> str:
        listings = await self._rule_service.list_rules(chat_id)
        if not listings:
            return "自動返信ルールはありません。"

        lines = []
        for listing in listings:
            rule = listing.rule
            if listing.is_valid:
                lines.append(f"- ✔ #{rule.id} `{rule.pattern}` ➡ {rule.template}")
            else:
                lines.append(f"- ✖ #{rule.id} `{rule.pattern}` ({listing.error})")
        return "自動返信ルール:\n\n" + "\n".join(lines)

    async def unrule(self, chat_id: str, text: str) -> str:
        if text == "all":
            removed = await self._rule_service.remove_rule(chat_id, "all")
            return f"自動返信ルールを {removed} 件削除しました。"

        rule_id = _parse_id(text)
        if rule_id is None:
            return "使い方: /unrule <id|all>"
        if await self._rule_service.remove_rule(chat_id, rule_id):
            return f"自動返信ルール #{rule_id} を削除しました。"
        return f"自動返信ルール #{rule_id} は見つかりませんでした。"

    async def memories(self, chat_id: str, text: str) -> str:
        notes = await self._memory_repository.find_recent(chat_id)
        if not notes:
            return "メモはありません。"
        lines = [
            f"- #{note.id} ({note.created_at:%Y-%m-%d}) {note.content}" for note in notes
        ]
        return "メモ:\n\n" + "\n".join(lines)

    async def forget(self, chat_id: str, text: str) -> str:
        if text == "all":
            removed = await self._memory_repository.delete_by_chat(chat_id)
            return f"メモを {removed} 件削除しました。"

        memory_id = _parse_id(text)
        if memory_id is None:
            return "使い方: /forget <id|all>"
        if await self._memory_repository.delete(chat_id, memory_id):
            return f"メモ #{memory_id} を削除しました。"
        return f"メモ #{memory_id} は見つかりませんでした。"

    async def setkv(self, chat_id: str, text: str) -> str:
        try:
            args = shlex.split(text)
        except ValueError:
            args = text.split()
        if len(args) < 2:
            return "使い方: /setkv <key> <value>"

        key, value = args[0], " ".join(args[1:])
        if key == "message_window":
            window = _parse_id(value)
            if window is None or window < 1:
                return "message_window には 1 以上の整数を指定してください。"

        await self._settings.set(chat_id, key, value)
        return f"{key} を {value} に設定しました。"

    async def listkv(self, chat_id: str, text: str) -> str:
        settings = await self._settings.list(chat_id)
        if not settings:
            return "設定はありません。"
        lines = [f"- {key}: {value}" for key, value in settings.items()]
        return "設定:\n\n" + "\n".join(lines)

    async def deletekv(self, chat_id: str, text: str) -> str:
        if not text:
            return "使い方: /deletekv <key>"
        if await self._settings.delete(chat_id, text):
            return f"{text} を削除しました。"
        return f"{text} は設定されていません。"

    async def usage(self, chat_id: str, text: str) -> str:
        if self._usage_fetcher is None:
            return "使用状況の取得は設定されていません。"
        try:
            key_usage = await self._usage_fetcher()
        except Exception:
            logger.exception("Failed to fetch API usage")
            return "使用状況を取得できませんでした。しばらくしてから再度お試しください。"

        lines = [
            "API の使用状況:",
            f"- 残りクレジット: ${key_usage.credits:.4f}",
            f"- 使用額: ${key_usage.usage:.4f}",
            f"- 上限: ${key_usage.limit:.4f}",
        ]
        if key_usage.usage_ratio is not None:
            lines.append(f"- 使用率: {key_usage.usage_ratio * 100:.2f}%")
        return "\n".join(lines)

    async def help(self, chat_id: str, text: str) -> str:
        lines = [f"- `{spec.usage}` {spec.description}" for spec in COMMANDS]
        return "# ヘルプ\n\n" + "\n".join(lines)


def _parse_id(text: str) -> int | None:
    try:
        return int(text.strip().lstrip("#"))
    except ValueError:
        return None
