"""Tests for LLMQuestionJudgment."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from hibiki.infrastructure.llm import LLMError, LLMQuestionJudgment


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.complete = AsyncMock(return_value="yes")
    return client


class TestLLMQuestionJudgment:
    """LLMQuestionJudgment のテスト"""

    @pytest.mark.parametrize("answer", ["yes", "Yes", " YES. ", "yes\n"])
    async def test_yes(self, mock_client: MagicMock, answer: str) -> None:
        mock_client.complete.return_value = answer
        assert await LLMQuestionJudgment(mock_client).is_question("元気？") is True

    @pytest.mark.parametrize("answer", ["no", "maybe", "yes, it is", ""])
    async def test_anything_else_is_no(self, mock_client: MagicMock, answer: str) -> None:
        mock_client.complete.return_value = answer
        assert await LLMQuestionJudgment(mock_client).is_question("元気？") is False

    async def test_error_is_no(self, mock_client: MagicMock) -> None:
        mock_client.complete.side_effect = LLMError("down")
        assert await LLMQuestionJudgment(mock_client).is_question("元気？") is False

    async def test_prompt_shape(self, mock_client: MagicMock) -> None:
        await LLMQuestionJudgment(mock_client).is_question("元気？")

        messages = mock_client.complete.call_args.args[0]
        assert messages[0]["role"] == "system"
        assert "yes" in messages[0]["content"]
        assert messages[1] == {"role": "user", "content": "元気？"}
