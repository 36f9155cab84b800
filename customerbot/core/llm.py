"""
LLM Provider Module

Chat completions used for grounded answers and follow-up suggestions.

Architecture:
- Message / ChatResponse: request and reply records
- LLMProvider: Interface used by the answer generator and the suggester
- AzureLLMProvider: Azure OpenAI chat deployment over aiohttp

Calls are never retried. Provider, network, timeout and payload failures
all surface as GenerationFailed.

Usage:
    llm = AzureLLMProvider(session)
    reply = await llm.chat([Message(role="user", content="Is shipping free?")])
    print(reply.content)
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import aiohttp

from customerbot.config import settings
from customerbot.core.azure import AzureDeploymentClient
from customerbot.errors import GenerationFailed
from customerbot.logger import get_logger

logger = get_logger(__name__)


@dataclass
class Message:
    """One chat message; role is "system", "user" or "assistant"."""
    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatResponse:
    """
    Text returned by a chat completion.

    Attributes:
        content: Reply text
        model: Model that produced it
        usage: Token counts as reported by the service
        finish_reason: "stop", "length", ...
    """
    content: str
    model: str = ""
    usage: Dict[str, int] = field(default_factory=dict)
    finish_reason: str = ""

    @property
    def total_tokens(self) -> int:
        return self.usage.get("total_tokens", 0)

    @classmethod
    def from_payload(cls, data: Any, default_model: str = "") -> "ChatResponse":
        """
        Read the first choice of a chat completions payload.

        Raises:
            GenerationFailed: If the payload carries no text content
        """
        try:
            choice = data["choices"][0]
            content = choice["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise GenerationFailed("Chat response is missing the message content")

        if not isinstance(content, str):
            raise GenerationFailed("Chat response content is not text")

        return cls(
            content=content,
            model=data.get("model") or default_model,
            usage=data.get("usage") or {},
            finish_reason=choice.get("finish_reason") or ""
        )


class LLMProvider(ABC):
    """Interface for chat completion backends."""

    @abstractmethod
    async def chat(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> ChatResponse:
        """
        Complete a conversation.

        Raises:
            GenerationFailed: If no completion could be obtained
        """


class AzureLLMProvider(AzureDeploymentClient, LLMProvider):
    """
    Azure OpenAI chat deployment.

    Example:
        llm = AzureLLMProvider(session, temperature=0.2)
        reply = await llm.chat([Message(role="user", content="Refund time?")])
        logger.debug(f"{reply.total_tokens} tokens")
    """

    operation = "chat/completions"

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        deployment: Optional[str] = None,
        api_version: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout_s: Optional[float] = None
    ):
        """
        Args:
            session: Shared HTTP session, owned by the caller
            api_key, endpoint, deployment, api_version: Azure settings overrides
            temperature: Default sampling temperature (LLM_TEMPERATURE)
            max_tokens: Default reply budget (LLM_MAX_TOKENS)
            timeout_s: Per-call timeout in seconds (LLM_TIMEOUT_S)
        """
        super().__init__(
            session,
            deployment=deployment or settings.azure.chat_deployment,
            timeout_s=timeout_s or settings.llm.timeout_s,
            api_key=api_key,
            endpoint=endpoint,
            api_version=api_version
        )
        self.temperature = settings.llm.temperature if temperature is None else temperature
        self.max_tokens = settings.llm.max_tokens if max_tokens is None else max_tokens

        logger.info(
            f"Initialized AzureLLMProvider: deployment={self.deployment}, "
            f"temperature={self.temperature}, max_tokens={self.max_tokens}"
        )

    async def chat(
        self,
        messages: List[Message],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> ChatResponse:
        body = {
            "messages": [m.to_dict() for m in messages],
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": self.max_tokens if max_tokens is None else max_tokens,
        }

        try:
            data = await self._post(body)
        except asyncio.TimeoutError as e:
            raise GenerationFailed(f"Chat request timed out after {self.timeout_s}s") from e
        except aiohttp.ClientError as e:
            raise GenerationFailed(f"Chat request failed: {e}") from e
        except ValueError as e:
            raise GenerationFailed(f"Chat response is not valid JSON: {e}") from e
        except RuntimeError as e:
            # aiohttp refuses requests on a closed session
            raise GenerationFailed(f"Chat request could not be sent: {e}") from e

        reply = ChatResponse.from_payload(data, default_model=self.deployment)
        logger.debug(
            f"Chat completion: {len(reply.content)} chars, "
            f"{reply.total_tokens} tokens, finish_reason={reply.finish_reason}"
        )
        return reply
