"""Yes/no judgment of whether a message asks for help."""

import logging

from hibiki.infrastructure.llm.client import LLMClient
from hibiki.infrastructure.llm.exceptions import LLMError
from hibiki.infrastructure.llm.templates import get_template

logger = logging.getLogger(__name__)


class LLMQuestionJudgment:
    """QuestionJudgment backed by a small completion model.

    The model is asked to answer only "yes" or "no". Anything other than
    "yes" (including an error) counts as "no".
    """

    def __init__(self, client: LLMClient) -> None:
        """Initialize the judgment.

        Args:
            client: LLM client configured for the judgment model.
        """
        self._client = client
        self._system_prompt = (
            get_template("question_judgment_system.j2").render()
        )

    async def is_question(self, text: str) -> bool:
        """Judge a message.

        Args:
            text: Message text.

        Returns:
            True only when the model answered "yes".
        """
        try:
            answer = await self._client.complete(
                [
                    {"role": "system", "content": self._system_prompt},
                    {"role": "user", "content": text},
                ]
            )
        except LLMError:
            logger.warning("Question judgment failed; treating as not a question")
            return False

        result = answer.strip().lower().rstrip(".") == "yes"
        logger.debug("Question judgment: %r -> %s", answer, result)
        return result
