"""Tests for StrandsModelProvider."""

from unittest.mock import MagicMock, patch

import pytest

from hibiki.config.models import AgentConfig
from hibiki.infrastructure.llm.strands import StrandsModelProvider

FACTORY_MODULE = "hibiki.infrastructure.llm.strands.factory"


@pytest.fixture
def agent_config() -> AgentConfig:
    return AgentConfig(
        model_id="openrouter/openai/gpt-4o-mini",
        params={"temperature": 0.7},
        client_args={"api_key": "k"},
    )


class TestStrandsModelProvider:
    """StrandsModelProvider.get のテスト"""

    def test_default_model(self, agent_config: AgentConfig) -> None:
        """設定のモデルを作成する"""
        with patch(f"{FACTORY_MODULE}.LiteLLMModel") as model_class:
            StrandsModelProvider(agent_config).get()

        model_class.assert_called_once_with(
            model_id="openrouter/openai/gpt-4o-mini",
            params={"temperature": 0.7},
            client_args={"api_key": "k"},
        )

    def test_override_shares_params(self, agent_config: AgentConfig) -> None:
        """上書きモデルも設定の params を使う"""
        with patch(f"{FACTORY_MODULE}.LiteLLMModel") as model_class:
            StrandsModelProvider(agent_config).get("openrouter/other")

        kwargs = model_class.call_args.kwargs
        assert kwargs["model_id"] == "openrouter/other"
        assert kwargs["params"] == {"temperature": 0.7}

    def test_models_are_reused(self, agent_config: AgentConfig) -> None:
        """同じモデル ID では同じインスタンスを返す"""
        with patch(
            f"{FACTORY_MODULE}.LiteLLMModel",
            side_effect=lambda **kwargs: MagicMock(),
        ) as model_class:
            provider = StrandsModelProvider(agent_config)
            default = provider.get()
            assert provider.get(None) is default
            assert provider.get("openrouter/openai/gpt-4o-mini") is default
            other = provider.get("openrouter/other")
            assert provider.get("openrouter/other") is other

        assert other is not default
        assert model_class.call_count == 2
