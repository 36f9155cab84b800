"""
Embedding Provider Module

Turns a piece of text into a vector for similarity ranking.

Architecture:
- EmbeddingProvider: Interface used by the retriever
- AzureEmbeddingProvider: Azure OpenAI embeddings deployment over aiohttp

Every call is a single outbound request. There is no retry and no cache;
the knowledge base is re-embedded for each query. Any failure (HTTP status,
network, timeout, malformed payload) surfaces as EmbeddingUnavailable.

Usage:
    async with aiohttp.ClientSession() as session:
        provider = AzureEmbeddingProvider(session)
        vector = await provider.embed("How long does a refund take?")
"""

import asyncio
import math
import numbers
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import aiohttp

from customerbot.config import settings
from customerbot.core.azure import AzureDeploymentClient
from customerbot.errors import EmbeddingUnavailable
from customerbot.logger import get_logger

logger = get_logger(__name__)

EmbeddingVector = List[float]


class EmbeddingProvider(ABC):
    """
    Interface for embedding backends.

    Implementations raise EmbeddingUnavailable for every kind of failure so
    that callers only ever handle one outcome.
    """

    @abstractmethod
    async def embed(self, text: str) -> EmbeddingVector:
        """
        Embed a single non-empty text.

        Raises:
            EmbeddingUnavailable: If no vector could be produced
        """


class AzureEmbeddingProvider(AzureDeploymentClient, EmbeddingProvider):
    """
    Azure OpenAI embeddings deployment.

    Example:
        provider = AzureEmbeddingProvider(session, timeout_s=10)
        vector = await provider.embed("Shipping is free over $50.")
    """

    operation = "embeddings"

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        deployment: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout_s: Optional[float] = None
    ):
        """
        Args:
            session: Shared HTTP session, owned by the caller
            api_key, endpoint, deployment, api_version: Azure settings overrides
            timeout_s: Per-call timeout in seconds (EMBEDDING_TIMEOUT_S by default)
        """
        super().__init__(
            session,
            deployment=deployment or settings.azure.embedding_deployment,
            timeout_s=timeout_s or settings.retrieval.embedding_timeout_s,
            api_key=api_key,
            endpoint=endpoint,
            api_version=api_version
        )
        logger.info(
            f"Initialized AzureEmbeddingProvider: deployment={self.deployment}, "
            f"timeout={self.timeout_s}s"
        )

    @staticmethod
    def _extract_vector(data: Any) -> EmbeddingVector:
        """Pull the first vector out of an embeddings response."""
        try:
            vector = data["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError):
            raise EmbeddingUnavailable("Embedding response is missing the vector payload")

        if not isinstance(vector, list) or not vector:
            raise EmbeddingUnavailable("Embedding response contains an empty vector")
        if not all(isinstance(x, numbers.Real) and not isinstance(x, bool) for x in vector):
            raise EmbeddingUnavailable("Embedding response contains non-numeric values")
        if not all(math.isfinite(x) for x in vector):
            raise EmbeddingUnavailable("Embedding response contains NaN or infinite values")

        return [float(x) for x in vector]

    async def embed(self, text: str) -> EmbeddingVector:
        try:
            data = await self._post({"input": [text]})
        except asyncio.TimeoutError as e:
            raise EmbeddingUnavailable(f"Embedding request timed out after {self.timeout_s}s") from e
        except aiohttp.ClientError as e:
            raise EmbeddingUnavailable(f"Embedding request failed: {e}") from e
        except ValueError as e:
            raise EmbeddingUnavailable(f"Embedding response is not valid JSON: {e}") from e
        except RuntimeError as e:
            # aiohttp refuses requests on a closed session
            raise EmbeddingUnavailable(f"Embedding request could not be sent: {e}") from e

        return self._extract_vector(data)
