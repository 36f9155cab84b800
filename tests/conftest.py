"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
Providers are replaced by in-memory fakes; no test touches the network.
"""

import os
import sys
from pathlib import Path

import pytest
from unittest.mock import AsyncMock

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ["APP_ENV"] = "test"
os.environ["AZURE_OPENAI_API_KEY"] = "test-key"
os.environ["AZURE_OPENAI_ENDPOINT"] = "https://test.openai.azure.com"

from customerbot.core.llm import ChatResponse  # noqa: E402
from tests.fakes import FakeEmbeddingProvider, StaticKnowledgeSource  # noqa: E402


REFUND = "Refunds take 5 days."
SHIPPING = "Shipping is free over $50."
CONTACT = "Contact support at help@example.com."
REFUND_QUERY = "How long does a refund take?"


@pytest.fixture
def faq_sentences():
    """Sample FAQ sentences in corpus order."""
    return [REFUND, SHIPPING, CONTACT]


@pytest.fixture
def faq_vectors():
    """Vectors where the refund sentence is closest to the refund query."""
    return {
        REFUND_QUERY: [1.0, 0.0, 0.0],
        REFUND: [0.9, 0.1, 0.0],
        SHIPPING: [0.7, 0.7, 0.1],
        CONTACT: [0.0, 0.0, 1.0],
    }


@pytest.fixture
def fake_embeddings(faq_vectors):
    """Fake embedding provider over the FAQ vectors."""
    return FakeEmbeddingProvider(faq_vectors)


@pytest.fixture
def static_source(faq_sentences):
    """Knowledge source over the FAQ sentences."""
    return StaticKnowledgeSource(faq_sentences)


@pytest.fixture
def faq_file(tmp_path, faq_sentences):
    """FAQ written to disk with blank lines and stray whitespace."""
    path = tmp_path / "faq.txt"
    path.write_text(
        f"  {faq_sentences[0]}\n\n\r\n{faq_sentences[1]}   \n\n{faq_sentences[2]}\n",
        encoding="utf-8"
    )
    return path


@pytest.fixture
def mock_llm_provider():
    """Mock LLM provider returning a fixed answer."""
    provider = AsyncMock()
    provider.chat.return_value = ChatResponse(
        content="Refunds usually take 5 days.",
        model="gpt-4o-mini",
        usage={"prompt_tokens": 100, "completion_tokens": 50, "total_tokens": 150}
    )
    return provider
