"""AutoReplyRule entity."""

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class AutoReplyRule:
    """正規表現で発火する自動返信ルール

    Attributes:
        id: ルール ID（永続化前は None）
        chat_id: ルールを所有するチャット ID
        pattern: 正規表現（大文字小文字を区別せずにマッチ）
        template: 返信テンプレート（$1, $2 ... と $username を置換）
        created_at: 作成日時
    """

    id: int | None
    chat_id: str
    pattern: str
    template: str
    created_at: datetime


@dataclass(frozen=True)
class AutoReplyMatch:
    """マッチしたルールと、置換済みの返信テキスト"""

    rule: AutoReplyRule
    reply: str


@dataclass(frozen=True)
class RuleDiagnostic:
    """コンパイルできなかったルールの診断情報"""

    rule: AutoReplyRule
    error: str


@dataclass(frozen=True)
class RuleEvaluation:
    """1 メッセージに対するルール評価結果

    Attributes:
        matches: 発火したルール（保存順）
        diagnostics: コンパイルに失敗したルール
    """

    matches: list[AutoReplyMatch]
    diagnostics: list[RuleDiagnostic]


@dataclass(frozen=True)
class RuleListing:
    """一覧表示用のルールとコンパイル状態"""

    rule: AutoReplyRule
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        """パターンがコンパイルできるかどうか"""
        return self.error is None


def create_auto_reply_rule(chat_id: str, pattern: str, template: str) -> AutoReplyRule:
    """未保存の AutoReplyRule を生成する

    Args:
        chat_id: 所有チャット ID
        pattern: 正規表現
        template: 返信テンプレート

    Returns:
        id が None の AutoReplyRule
    """
    return AutoReplyRule(
        id=None,
        chat_id=chat_id,
        pattern=pattern,
        template=template,
        created_at=datetime.now(timezone.utc),
    )
