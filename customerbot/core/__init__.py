"""
Core Module Package

This package contains the provider abstractions and the ranking math:
- Azure: Shared HTTP transport for Azure OpenAI deployments
- Embeddings: Converting text to vector representations
- Similarity: Cosine scoring and top-K ranking
- LLM: Language model interactions for answers and suggestions
"""

from customerbot.core.embeddings import EmbeddingProvider, AzureEmbeddingProvider, EmbeddingVector
from customerbot.core.similarity import ScoredCandidate, cosine_similarity, rank_candidates
from customerbot.core.llm import LLMProvider, AzureLLMProvider, Message, ChatResponse

__all__ = [
    "EmbeddingProvider",
    "AzureEmbeddingProvider",
    "EmbeddingVector",
    "ScoredCandidate",
    "cosine_similarity",
    "rank_candidates",
    "LLMProvider",
    "AzureLLMProvider",
    "Message",
    "ChatResponse",
]
