"""LiteLLMModel provider for strands agents."""

import logging

from strands.models.litellm import LiteLLMModel

from hibiki.config.models import AgentConfig

logger = logging.getLogger(__name__)


class StrandsModelProvider:
    """モデル ID ごとに LiteLLMModel を作成して使い回す

    チャット設定の model で上書きされた場合も、同じ ID のモデルは再利用する。
    """

    def __init__(self, config: AgentConfig) -> None:
        self._config = config
        self._models: dict[str, LiteLLMModel] = {}

    @property
    def default_model_id(self) -> str:
        return self._config.model_id

    def get(self, model_id: str | None = None) -> LiteLLMModel:
        """モデルを取得する

        Args:
            model_id: 上書きするモデル ID。None なら設定のモデル

        Returns:
            LiteLLMModel インスタンス
        """
        key = model_id or self._config.model_id
        model = self._models.get(key)
        if model is None:
            if key != self._config.model_id:
                logger.info("Creating model for per-chat override: %s", key)
            model = LiteLLMModel(
                model_id=key,
                params=self._config.params,
                client_args=self._config.client_args,
            )
            self._models[key] = model
        return model
