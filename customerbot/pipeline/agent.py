"""
Support Agent Module

This module provides the request-level orchestration of the bot:
retrieval, grounded answer generation and follow-up suggestions.

Architecture:
- SupportAgent: Main orchestrator, built from injected components
- QueryAnswer / FollowUpAnswer: Results handed to the outer surface
- create_agent: Wires the Azure providers onto one shared HTTP session

Flow for a new question:
1. Retrieve facts (a failed query embedding aborts the request)
2. Generate an answer from the question and facts
3. Suggest follow-up questions (best effort)

A follow-up question runs steps 1 and 2 only.

Usage:
    async with aiohttp.ClientSession() as session:
        agent = create_agent(session)
        result = await agent.handle_query("How long does a refund take?")
        print(result.answer, result.follow_up_suggestions)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import aiohttp

from customerbot.config import Settings, settings as default_settings
from customerbot.core.embeddings import AzureEmbeddingProvider
from customerbot.core.llm import AzureLLMProvider
from customerbot.logger import get_logger
from customerbot.messages import msg
from customerbot.pipeline.followup import FollowUpSuggester
from customerbot.pipeline.generator import AnswerGenerator
from customerbot.pipeline.knowledge import TextKnowledgeSource
from customerbot.pipeline.retriever import Retriever

logger = get_logger(__name__)


@dataclass
class QueryAnswer:
    """
    Answer to a new question.

    Attributes:
        query: Original question
        facts: Facts the answer was grounded on
        answer: Generated answer text
        follow_up_suggestions: Suggested next questions (may be empty)
    """
    query: str
    facts: List[str] = field(default_factory=list)
    answer: str = ""
    follow_up_suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "query": self.query,
            "facts": self.facts,
            "response": self.answer,
            "followUpSuggestions": self.follow_up_suggestions,
        }


@dataclass
class FollowUpAnswer:
    """
    Answer to a follow-up question.

    Attributes:
        follow_up_query: The follow-up question
        facts: Facts the answer was grounded on
        answer: Generated answer text
    """
    follow_up_query: str
    facts: List[str] = field(default_factory=list)
    answer: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "followUpQuery": self.follow_up_query,
            "facts": self.facts,
            "followUpResponse": self.answer,
        }


class SupportAgent:
    """
    Customer support agent answering questions from the knowledge base.

    Raises QueryEmbeddingFailed or GenerationFailed (both RequestFailed)
    when a request cannot be answered. Unreadable knowledge base files,
    sentences that fail to embed and failed suggestions only shrink the
    result.

    Example:
        agent = SupportAgent(retriever, AnswerGenerator(llm), FollowUpSuggester(llm))
        result = await agent.handle_query("Is shipping free?")
        follow_up = await agent.handle_follow_up(result.follow_up_suggestions[0])
    """

    def __init__(
        self,
        retriever: Retriever,
        generator: AnswerGenerator,
        suggester: FollowUpSuggester
    ):
        self.retriever = retriever
        self.generator = generator
        self.suggester = suggester

    async def handle_query(
        self,
        query: str,
        top_k: Optional[int] = None,
        min_similarity: Optional[float] = None
    ) -> QueryAnswer:
        """
        Answer a new question and suggest follow-ups.

        Raises:
            QueryEmbeddingFailed: If the question cannot be embedded
            GenerationFailed: If no answer could be generated
        """
        logger.info(f"Processing query: {query[:50]}...")

        retrieval = await self.retriever.retrieve(query, top_k=top_k, min_similarity=min_similarity)
        if retrieval.corpus_errors:
            logger.warning(f"Answering with a degraded knowledge base ({len(retrieval.corpus_errors)} read errors)")

        answer = await self.generator.generate(query, retrieval.facts, msg("facts.label.query"))
        suggestions = await self.suggester.suggest(answer)

        logger.info(
            f"Answered query: {len(answer)} chars, {len(retrieval.facts)} facts, "
            f"{len(suggestions)} suggestions"
        )
        return QueryAnswer(
            query=query,
            facts=retrieval.facts,
            answer=answer,
            follow_up_suggestions=suggestions
        )

    async def handle_follow_up(
        self,
        follow_up_query: str,
        top_k: Optional[int] = None,
        min_similarity: Optional[float] = None
    ) -> FollowUpAnswer:
        """
        Answer a follow-up question. No further suggestions are made.

        Raises:
            QueryEmbeddingFailed: If the question cannot be embedded
            GenerationFailed: If no answer could be generated
        """
        logger.info(f"Processing follow-up: {follow_up_query[:50]}...")

        retrieval = await self.retriever.retrieve(
            follow_up_query, top_k=top_k, min_similarity=min_similarity
        )
        answer = await self.generator.generate(
            follow_up_query, retrieval.facts, msg("facts.label.followup")
        )

        return FollowUpAnswer(
            follow_up_query=follow_up_query,
            facts=retrieval.facts,
            answer=answer
        )


def create_agent(
    session: aiohttp.ClientSession,
    settings: Optional[Settings] = None
) -> SupportAgent:
    """
    Build a SupportAgent backed by Azure OpenAI and the configured corpus.

    Args:
        session: HTTP session shared by both providers; owned by the caller
        settings: Configuration (defaults to the global settings)
    """
    settings = settings or default_settings

    embeddings = AzureEmbeddingProvider(
        session,
        api_key=settings.azure.api_key,
        endpoint=settings.azure.endpoint,
        deployment=settings.azure.embedding_deployment,
        api_version=settings.azure.api_version,
        timeout_s=settings.retrieval.embedding_timeout_s
    )
    llm = AzureLLMProvider(
        session,
        api_key=settings.azure.api_key,
        endpoint=settings.azure.endpoint,
        deployment=settings.azure.chat_deployment,
        api_version=settings.azure.api_version,
        temperature=settings.llm.temperature,
        max_tokens=settings.llm.max_tokens,
        timeout_s=settings.llm.timeout_s
    )
    retriever = Retriever(
        embedding_provider=embeddings,
        knowledge_source=TextKnowledgeSource(settings.knowledge.location),
        default_top_k=settings.retrieval.top_k,
        min_similarity=settings.retrieval.min_similarity,
        max_concurrency=settings.retrieval.max_concurrency
    )

    return SupportAgent(
        retriever=retriever,
        generator=AnswerGenerator(llm),
        suggester=FollowUpSuggester(llm, max_suggestions=settings.llm.followup_suggestions)
    )
