"""
Error taxonomy for the support bot.

Failures with a safe degraded behaviour (a sentence that cannot be embedded,
an unreadable knowledge base, missing follow-up suggestions) are absorbed and
logged where they happen. ``RequestFailed`` subclasses have no fallback and
propagate to the outer surface, which answers with a generic message.
"""

from typing import Optional


class CustomerBotError(Exception):
    """Base class for all bot errors."""


class EmbeddingUnavailable(CustomerBotError):
    """The embedding service could not produce a vector for a text."""


class CorpusUnavailable(CustomerBotError):
    """The knowledge base could not be read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Knowledge base unavailable at {path}: {reason}")
        self.path = path
        self.reason = reason


class FollowUpGenerationFailed(CustomerBotError):
    """The model could not propose follow-up questions."""


class DimensionMismatchError(CustomerBotError, ValueError):
    """Two embedding vectors have different dimensionality."""

    def __init__(self, left: int, right: int):
        super().__init__(f"Cannot compare vectors of dimension {left} and {right}")
        self.left = left
        self.right = right


class RequestFailed(CustomerBotError):
    """A request could not be answered at all."""


class QueryEmbeddingFailed(RequestFailed):
    """The user's query could not be embedded, so nothing can be ranked."""

    def __init__(self, query: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to embed query: {query[:50]!r}")
        self.query = query
        self.cause = cause


class GenerationFailed(RequestFailed):
    """The language model did not return an answer."""
