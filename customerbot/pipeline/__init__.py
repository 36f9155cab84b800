"""
Pipeline Package

This package contains the question answering pipeline:
- Knowledge: Load and segment the support corpus
- Retriever: Rank corpus sentences against a query
- Generator / FollowUp: Grounded answers and suggested next questions
- Agent: Orchestrate the full request flow
"""

from customerbot.pipeline.knowledge import KnowledgeSource, TextKnowledgeSource, KnowledgeUnit, KnowledgeLoad
from customerbot.pipeline.retriever import Retriever, RetrievalResult
from customerbot.pipeline.generator import AnswerGenerator, build_augmented_prompt
from customerbot.pipeline.followup import FollowUpSuggester, parse_suggestions
from customerbot.pipeline.agent import SupportAgent, QueryAnswer, FollowUpAnswer, create_agent

__all__ = [
    "KnowledgeSource",
    "TextKnowledgeSource",
    "KnowledgeUnit",
    "KnowledgeLoad",
    "Retriever",
    "RetrievalResult",
    "AnswerGenerator",
    "build_augmented_prompt",
    "FollowUpSuggester",
    "parse_suggestions",
    "SupportAgent",
    "QueryAnswer",
    "FollowUpAnswer",
    "create_agent",
]
