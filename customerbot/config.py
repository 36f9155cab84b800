"""
Configuration Module

Every tunable of the bot comes from an environment variable, optionally
provided through a .env file in the working directory. Values already set
in the process environment win over the .env file.

Usage:
    from customerbot.config import settings
    print(settings.retrieval.top_k, settings.retrieval.min_similarity)

Sections:
- azure: Azure OpenAI resource and the two deployments it serves
- knowledge: Where the FAQ lives
- retrieval: Top-K, similarity threshold and embedding fan-out
- llm: Generation parameters and number of follow-up suggestions
- server / logging: Outer surfaces
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def get_env(key: str, default: str = "", required: bool = False) -> str:
    """
    Read an environment variable.

    Raises:
        ValueError: If required and unset or empty
    """
    value = os.getenv(key, default)
    if required and not value:
        raise ValueError(f"Required environment variable '{key}' is not set")
    return value


def get_env_int(key: str, default: int) -> int:
    return int(get_env(key, str(default)))


def get_env_float(key: str, default: float) -> float:
    return float(get_env(key, str(default)))


def get_env_bool(key: str, default: bool) -> bool:
    """True for "true", "1", "yes" or "on" (any case)."""
    return get_env(key, str(default)).strip().lower() in ("true", "1", "yes", "on")


def get_env_list(key: str, default: str = "") -> List[str]:
    """Comma-separated values, trimmed, empty items dropped."""
    return [item.strip() for item in get_env(key, default).split(",") if item.strip()]


def azure_deployment_url(endpoint: str, deployment: str, operation: str, api_version: str) -> str:
    """REST URL of one operation on an Azure OpenAI deployment."""
    return (
        f"{endpoint.rstrip('/')}/openai/deployments/{deployment}/{operation}"
        f"?api-version={api_version}"
    )


@dataclass
class AzureOpenAIConfig:
    """
    Azure OpenAI resource.

    One resource hosts both the embedding deployment used for retrieval and
    the chat deployment used for answers and follow-up suggestions.
    """
    api_key: str = field(default_factory=lambda: get_env("AZURE_OPENAI_API_KEY"))
    endpoint: str = field(default_factory=lambda: get_env("AZURE_OPENAI_ENDPOINT"))
    api_version: str = field(default_factory=lambda: get_env("AZURE_OPENAI_API_VERSION", "2024-08-01-preview"))
    chat_deployment: str = field(default_factory=lambda: get_env("AZURE_OPENAI_CHAT_DEPLOYMENT", "chat-model"))
    embedding_deployment: str = field(
        default_factory=lambda: get_env("AZURE_OPENAI_EMBEDDING_DEPLOYMENT", "embedding-model")
    )

    def validate(self) -> bool:
        """Both the key and the endpoint must be set before any call is made."""
        if not self.api_key:
            raise ValueError("AZURE_OPENAI_API_KEY is required")
        if not self.endpoint:
            raise ValueError("AZURE_OPENAI_ENDPOINT is required")
        return True

    @property
    def embedding_url(self) -> str:
        return azure_deployment_url(self.endpoint, self.embedding_deployment, "embeddings", self.api_version)

    @property
    def chat_url(self) -> str:
        return azure_deployment_url(self.endpoint, self.chat_deployment, "chat/completions", self.api_version)


@dataclass
class KnowledgeConfig:
    """
    Knowledge base location.

    Attributes:
        path: A text file, or a directory of .txt/.md files, one fact per line
    """
    path: str = field(default_factory=lambda: get_env("KNOWLEDGE_BASE_PATH", "./data/faq.txt"))

    @property
    def location(self) -> Path:
        return Path(self.path)


@dataclass
class RetrievalConfig:
    """
    Fact retrieval.

    Attributes:
        top_k: Maximum number of facts per query
        min_similarity: Inclusive cosine similarity threshold
        max_concurrency: Simultaneous sentence embeddings (0 = no cap)
        embedding_timeout_s: Per-call timeout for the embedding deployment
    """
    top_k: int = field(default_factory=lambda: get_env_int("RETRIEVAL_TOP_K", 3))
    min_similarity: float = field(default_factory=lambda: get_env_float("RETRIEVAL_MIN_SIMILARITY", 0.6))
    max_concurrency: int = field(default_factory=lambda: get_env_int("EMBEDDING_MAX_CONCURRENCY", 0))
    embedding_timeout_s: float = field(default_factory=lambda: get_env_float("EMBEDDING_TIMEOUT_S", 30.0))

    def validate(self) -> bool:
        if not -1.0 <= self.min_similarity <= 1.0:
            raise ValueError("RETRIEVAL_MIN_SIMILARITY must be between -1 and 1")
        if self.max_concurrency < 0:
            raise ValueError("EMBEDDING_MAX_CONCURRENCY cannot be negative")
        if self.embedding_timeout_s <= 0:
            raise ValueError("EMBEDDING_TIMEOUT_S must be positive")
        return True


@dataclass
class LLMConfig:
    """
    Answer and suggestion generation.

    Attributes:
        temperature: Sampling temperature
        max_tokens: Reply budget per call
        timeout_s: Per-call timeout for the chat deployment
        followup_suggestions: How many follow-up questions to offer
    """
    temperature: float = field(default_factory=lambda: get_env_float("LLM_TEMPERATURE", 0.7))
    max_tokens: int = field(default_factory=lambda: get_env_int("LLM_MAX_TOKENS", 2048))
    timeout_s: float = field(default_factory=lambda: get_env_float("LLM_TIMEOUT_S", 60.0))
    followup_suggestions: int = field(default_factory=lambda: get_env_int("FOLLOWUP_MAX_SUGGESTIONS", 2))


@dataclass
class ServerConfig:
    """HTTP server bind address and allowed CORS origins."""
    host: str = field(default_factory=lambda: get_env("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: get_env_int("PORT", 5000))
    cors_origins: List[str] = field(default_factory=lambda: get_env_list("CORS_ORIGINS", "*"))


@dataclass
class LoggingConfig:
    """
    Logging output.

    Attributes:
        level: Root log level name
        file: Optional log file path
        use_colors: Colour console output when attached to a terminal
    """
    level: str = field(default_factory=lambda: get_env("LOG_LEVEL", "INFO"))
    file: Optional[str] = field(default_factory=lambda: get_env("LOG_FILE") or None)
    use_colors: bool = field(default_factory=lambda: get_env_bool("LOG_COLORS", True))


@dataclass
class Settings:
    """
    All configuration sections.

    Example:
        from customerbot.config import settings

        settings.validate_all()
        threshold = settings.retrieval.min_similarity
    """
    azure: AzureOpenAIConfig = field(default_factory=AzureOpenAIConfig)
    knowledge: KnowledgeConfig = field(default_factory=KnowledgeConfig)
    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    app_env: str = field(default_factory=lambda: get_env("APP_ENV", "development"))

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    def validate_all(self) -> bool:
        """
        Check the sections the server needs at startup.

        Raises:
            ValueError: On the first invalid setting
        """
        self.azure.validate()
        self.retrieval.validate()
        return True


settings = Settings()
