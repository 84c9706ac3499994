"""Effect tools for strands-agents.

モデルが自動返信・遅延返信・メモを登録するためのツール群。
実際の検証と実行は ToolEffectDispatcher に委ねる。
"""

import logging
from typing import Any

from strands import tool
from strands.types.tools import ToolContext

from hibiki.application.services.effect_dispatcher import ToolEffectDispatcher
from hibiki.domain.entities import Message

logger = logging.getLogger(__name__)

EFFECT_DISPATCHER_KEY = "effect_dispatcher"
TRIGGER_MESSAGE_KEY = "trigger_message"


def get_dispatcher(tool_context: ToolContext) -> ToolEffectDispatcher:
    """ToolContext から ToolEffectDispatcher を取得する。

    Raises:
        RuntimeError: invocation_state に存在しない場合
    """
    dispatcher = tool_context.invocation_state.get(EFFECT_DISPATCHER_KEY)
    if dispatcher is None:
        raise RuntimeError("ToolEffectDispatcher not found in invocation_state")
    return dispatcher


def get_trigger(tool_context: ToolContext) -> Message:
    """ToolContext から応答対象のメッセージを取得する。

    Raises:
        RuntimeError: invocation_state に存在しない場合
    """
    trigger = tool_context.invocation_state.get(TRIGGER_MESSAGE_KEY)
    if trigger is None:
        raise RuntimeError("Trigger message not found in invocation_state")
    return trigger


async def _run(tool_context: ToolContext, kind: str, **fields: Any) -> str:
    # 型の検証は parse_effect_payload に任せ、不正な入力もチャットに報告する
    arguments: dict[str, Any] = {"kind": kind}
    arguments.update({key: value for key, value in fields.items() if value is not None})
    dispatcher = get_dispatcher(tool_context)
    trigger = get_trigger(tool_context)
    try:
        outcome = await dispatcher.run_tool(trigger, arguments)
    except Exception as e:
        logger.exception("Effect tool %s failed", arguments.get("kind"))
        return f"ツールの実行に失敗しました: {e}"
    return outcome.summary


@tool(context=True)
async def auto_reply(
    tool_context: ToolContext, when: Any = None, message: Any = None
) -> str:
    """今後 when の正規表現に一致するメッセージを受け取ったら、message を自動で返信する。

    正規表現は大文字小文字を区別しない。message では $1, $2 などで
    キャプチャグループを、$username で送信者を参照できる。

    Args:
        when: メッセージに対してマッチさせる正規表現（文字列）
        message: 返信テンプレート（文字列）
        tool_context: ツールコンテキスト

    Returns:
        登録結果メッセージ
    """
    return await _run(tool_context, "auto_reply", when=when, message=message)


@tool(context=True)
async def reply_after(
    tool_context: ToolContext, timeout: Any = None, message: Any = None
) -> str:
    """timeout ミリ秒後に message を返信する。

    Args:
        timeout: 返信までの待ち時間（ミリ秒、1 以上の数値）
        message: 返信テンプレート（$username で送信者を参照できる）
        tool_context: ツールコンテキスト

    Returns:
        登録結果メッセージ
    """
    return await _run(tool_context, "reply_after", timeout=timeout, message=message)


@tool(context=True)
async def remember(tool_context: ToolContext, message: Any = None) -> str:
    """message の内容をこのチャットのメモとして覚える。

    Args:
        message: 覚える内容（文字列）
        tool_context: ツールコンテキスト

    Returns:
        登録結果メッセージ
    """
    return await _run(tool_context, "remember", message=message)


EFFECT_TOOLS = [auto_reply, reply_after, remember]


class EffectToolsFactory:
    """Provides the effect tools and their invocation state."""

    def __init__(self, dispatcher: ToolEffectDispatcher) -> None:
        """初期化

        Args:
            dispatcher: ツール入力を実行するディスパッチャ
        """
        self._dispatcher = dispatcher

    def get_invocation_state(self, trigger: Message) -> dict[str, Any]:
        """Agent 呼び出し時に渡す invocation_state を取得する。

        Args:
            trigger: 応答対象のメッセージ

        Returns:
            invocation_state 辞書
        """
        return {
            EFFECT_DISPATCHER_KEY: self._dispatcher,
            TRIGGER_MESSAGE_KEY: trigger,
        }

    @property
    def tools(self) -> list:
        """ツールリストを取得する。"""
        return EFFECT_TOOLS
