"""
Follow-up question suggestions.

Suggestions are a best-effort extra: any failure yields an empty list and
never affects the answer that was already generated.
"""

import re
from typing import List, Optional

from customerbot.config import settings
from customerbot.core.llm import LLMProvider, Message
from customerbot.errors import FollowUpGenerationFailed
from customerbot.logger import get_logger

logger = get_logger(__name__)

FOLLOWUP_PROMPT_TEMPLATE = """
Given the following customer support response, suggest {count} helpful follow-up questions or next steps the user might ask. Only return the list:
\"\"\"{answer}\"\"\"
"""

# Leading list markers ("1.", "-", "*", "10.") and the space after them
_LIST_MARKER = re.compile(r"^[-*\d.]+\s*")


def build_followup_prompt(answer: str, count: int = 2) -> str:
    """Wrap an answer in the fixed suggestion prompt."""
    # Keep the answer from closing the delimited block early
    safe_answer = answer.replace('"""', "'''")
    return FOLLOWUP_PROMPT_TEMPLATE.format(count=count, answer=safe_answer)


def parse_suggestions(raw: str, max_suggestions: int = 2) -> List[str]:
    """
    Turn free-form model output into a clean list of questions.

    Each line is trimmed and stripped of its list marker; empty lines are
    dropped and only the first max_suggestions are kept.
    """
    if max_suggestions <= 0:
        return []

    suggestions = []
    for line in raw.splitlines():
        cleaned = _LIST_MARKER.sub("", line.strip()).strip()
        if cleaned:
            suggestions.append(cleaned)
        if len(suggestions) == max_suggestions:
            break
    return suggestions


class FollowUpSuggester:
    """Asks the model for a short list of follow-up questions."""

    def __init__(self, llm_provider: LLMProvider, max_suggestions: Optional[int] = None):
        self.llm_provider = llm_provider
        self.max_suggestions = (
            max_suggestions if max_suggestions is not None else settings.llm.followup_suggestions
        )

    async def suggest(self, answer: str) -> List[str]:
        """
        Suggest follow-up questions for an answer.

        Returns:
            Up to max_suggestions questions, or an empty list on failure
        """
        if not answer.strip() or self.max_suggestions <= 0:
            return []

        try:
            raw = await self._request(answer)
        except FollowUpGenerationFailed as e:
            logger.warning(f"Failed to generate follow-up suggestions: {e}")
            return []

        suggestions = parse_suggestions(raw, self.max_suggestions)
        logger.debug(f"Parsed {len(suggestions)} follow-up suggestions")
        return suggestions

    async def _request(self, answer: str) -> str:
        prompt = build_followup_prompt(answer, self.max_suggestions)
        try:
            response = await self.llm_provider.chat([Message(role="user", content=prompt)])
        except Exception as e:
            raise FollowUpGenerationFailed(f"{type(e).__name__}: {e}") from e
        return response.content
