"""
Retriever Module

This module provides the retrieval component of the RAG pipeline.
It combines the embedding provider, the knowledge source and the
similarity ranker to find the facts most relevant to a query.

Architecture:
- Retriever: Embeds the query, re-embeds the corpus, ranks sentences
- RetrievalResult: Ordered fact texts plus load/embedding diagnostics

There is no index. Each call re-reads the knowledge base and embeds every
sentence concurrently; sentences whose embedding fails are skipped, while a
failed query embedding fails the whole retrieval.

Usage:
    from customerbot.pipeline.retriever import Retriever

    retriever = Retriever(embedding_provider, knowledge_source)
    result = await retriever.retrieve("How long does a refund take?", top_k=1)
    print(result.facts)
"""

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from customerbot.config import settings
from customerbot.core.embeddings import EmbeddingProvider, EmbeddingVector
from customerbot.core.similarity import rank_candidates
from customerbot.errors import CorpusUnavailable, EmbeddingUnavailable, QueryEmbeddingFailed
from customerbot.logger import get_logger
from customerbot.pipeline.knowledge import KnowledgeSource, KnowledgeUnit

logger = get_logger(__name__)


@dataclass
class RetrievalResult:
    """
    Container for retrieval results.

    Attributes:
        query: Original query text
        facts: Selected fact texts, most relevant first
        corpus_errors: Knowledge base read failures, if any
        candidates_scored: Sentences that were embedded and scored
        embedding_failures: Sentences skipped because embedding failed
    """
    query: str
    facts: List[str] = field(default_factory=list)
    corpus_errors: List[CorpusUnavailable] = field(default_factory=list)
    candidates_scored: int = 0
    embedding_failures: int = 0

    def __iter__(self):
        return iter(self.facts)

    def __len__(self):
        return len(self.facts)

    @property
    def has_results(self) -> bool:
        """Check if any facts were found."""
        return len(self.facts) > 0

    def format_facts(self, separator: str = "\n") -> str:
        """Join facts for inclusion in a prompt."""
        return separator.join(self.facts)


class Retriever:
    """
    Semantic fact retriever over a small, re-read knowledge base.

    Example:
        retriever = Retriever(
            embedding_provider=AzureEmbeddingProvider(session),
            knowledge_source=TextKnowledgeSource("data/faq.txt")
        )
        result = await retriever.retrieve("Is shipping free?")
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        knowledge_source: KnowledgeSource,
        default_top_k: Optional[int] = None,
        min_similarity: Optional[float] = None,
        max_concurrency: Optional[int] = None
    ):
        """
        Initialize the retriever.

        Args:
            embedding_provider: Provider for query and sentence embeddings
            knowledge_source: Corpus to search
            default_top_k: Default number of facts to return
            min_similarity: Default similarity threshold
            max_concurrency: Cap on simultaneous embedding calls (0 = unbounded)
        """
        self.embedding_provider = embedding_provider
        self.knowledge_source = knowledge_source
        self.default_top_k = default_top_k if default_top_k is not None else settings.retrieval.top_k
        self.min_similarity = min_similarity if min_similarity is not None else settings.retrieval.min_similarity
        self.max_concurrency = max_concurrency if max_concurrency is not None else settings.retrieval.max_concurrency

        logger.info(
            f"Initialized Retriever with top_k={self.default_top_k}, "
            f"min_similarity={self.min_similarity}"
        )

    async def _embed_units(
        self,
        units: List[KnowledgeUnit]
    ) -> List[Tuple[KnowledgeUnit, object]]:
        """Embed every unit concurrently; each outcome is a vector or an exception."""
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency > 0 else None

        async def embed_one(unit: KnowledgeUnit) -> EmbeddingVector:
            if semaphore is None:
                return await self.embedding_provider.embed(unit.text)
            async with semaphore:
                return await self.embedding_provider.embed(unit.text)

        outcomes = await asyncio.gather(
            *(embed_one(unit) for unit in units),
            return_exceptions=True
        )
        return list(zip(units, outcomes))

    async def retrieve(
        self,
        query: str,
        top_k: Optional[int] = None,
        min_similarity: Optional[float] = None
    ) -> RetrievalResult:
        """
        Retrieve the facts most relevant to a query.

        Args:
            query: Query text
            top_k: Maximum number of facts to return
            min_similarity: Minimum cosine similarity for a fact

        Returns:
            RetrievalResult with at most top_k facts, highest score first

        Raises:
            QueryEmbeddingFailed: If the query itself cannot be embedded
        """
        top_k = top_k if top_k is not None else self.default_top_k
        threshold = min_similarity if min_similarity is not None else self.min_similarity

        if top_k <= 0:
            return RetrievalResult(query=query)

        logger.debug(f"Retrieving top {top_k} facts for query: {query[:50]}...")

        try:
            query_vector = await self.embedding_provider.embed(query)
        except EmbeddingUnavailable as e:
            logger.error(f"Query embedding failed: {e}")
            raise QueryEmbeddingFailed(query, e) from e

        loaded = self.knowledge_source.load()
        if not loaded.units:
            logger.info("Knowledge base is empty; no facts to rank")
            return RetrievalResult(query=query, corpus_errors=loaded.errors)

        embedded = []
        failures = 0
        for unit, outcome in await self._embed_units(loaded.units):
            if isinstance(outcome, Exception):
                failures += 1
                logger.warning(f"Skipping sentence {unit.source}:{unit.line}: {outcome}")
                continue
            if isinstance(outcome, BaseException):
                # Cancellation of the enclosing request
                raise outcome
            if len(outcome) != len(query_vector):
                failures += 1
                logger.warning(
                    f"Skipping sentence {unit.source}:{unit.line}: dimension "
                    f"{len(outcome)} does not match query dimension {len(query_vector)}"
                )
                continue
            embedded.append((unit.text, outcome))

        ranked = rank_candidates(query_vector, embedded, top_k=top_k, min_similarity=threshold)

        logger.info(
            f"Retrieved {len(ranked)} facts from {len(embedded)} scored sentences "
            f"({failures} skipped, threshold={threshold})"
        )

        return RetrievalResult(
            query=query,
            facts=[c.text for c in ranked],
            corpus_errors=loaded.errors,
            candidates_scored=len(embedded),
            embedding_failures=failures
        )
