"""Domain exceptions."""


class HibikiError(Exception):
    """アプリケーション例外の基底クラス"""


class EffectValidationError(HibikiError):
    """ツール入力や exec ブロックがスキーマに合致しない場合の例外

    Attributes:
        raw: 検証に失敗した生のペイロード
        detail: 検証エラーの説明
    """

    def __init__(self, raw: str, detail: str) -> None:
        """初期化

        Args:
            raw: 検証に失敗した生のペイロード
            detail: 検証エラーの説明
        """
        self.raw = raw
        self.detail = detail
        super().__init__(f"Invalid effect payload {raw}: {detail}")


class RuleCompileError(HibikiError):
    """自動返信ルールの正規表現がコンパイルできない場合の例外

    Attributes:
        pattern: コンパイルに失敗したパターン
    """

    def __init__(self, pattern: str, detail: str) -> None:
        """初期化

        Args:
            pattern: コンパイルに失敗したパターン
            detail: re.error のメッセージ
        """
        self.pattern = pattern
        self.detail = detail
        super().__init__(f"Invalid regex {pattern!r}: {detail}")


class TransportError(HibikiError):
    """チャットへの送信・編集に失敗した場合の例外"""


class ChannelNotAccessibleError(TransportError):
    """チャンネルにアクセスできない場合に発生する例外

    ボットがチャンネルから退出した場合や、
    チャンネルがアーカイブされた場合などに発生する。
    """

    def __init__(self, channel_id: str, message: str = "") -> None:
        """初期化

        Args:
            channel_id: アクセスできないチャンネルのID
            message: エラーメッセージ（オプション）
        """
        self.channel_id = channel_id
        super().__init__(message or f"Channel {channel_id} is not accessible")


class GenerationError(HibikiError):
    """生成サービスの呼び出しやストリームが失敗した場合の例外"""
