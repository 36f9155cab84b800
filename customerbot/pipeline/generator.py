"""
Answer generation from a query and its retrieved facts.

The prompt is deliberately plain: the question, a blank line, a label and
the facts one per line. Everything after prompt construction belongs to
the language model provider.
"""

from typing import List, Optional, Sequence

from customerbot.core.llm import LLMProvider, Message
from customerbot.errors import GenerationFailed
from customerbot.logger import get_logger
from customerbot.messages import msg

logger = get_logger(__name__)


def build_augmented_prompt(query: str, facts: Sequence[str], label: Optional[str] = None) -> str:
    """
    Combine a query with its supporting facts.

    Example:
        >>> build_augmented_prompt("Refund time?", ["Refunds take 5 days."])
        'Refund time?\\n\\nSupport Info:\\nRefunds take 5 days.'
    """
    label = label or msg("facts.label.query")
    return f"{query}\n\n{label}:\n" + "\n".join(facts)


class AnswerGenerator:
    """Produces a grounded answer for a query and its facts."""

    def __init__(self, llm_provider: LLMProvider):
        self.llm_provider = llm_provider

    async def generate(
        self,
        query: str,
        facts: List[str],
        label: Optional[str] = None
    ) -> str:
        """
        Ask the model to answer the query using the facts.

        Raises:
            GenerationFailed: If the model call fails or returns no text
        """
        prompt = build_augmented_prompt(query, facts, label)
        response = await self.llm_provider.chat([Message(role="user", content=prompt)])

        answer = response.content.strip()
        if not answer:
            raise GenerationFailed("Model returned an empty answer")

        logger.debug(f"Generated answer of {len(answer)} chars from {len(facts)} facts")
        return answer
