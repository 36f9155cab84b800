"""
Tests for Configuration Module

Tests the Settings and configuration management.
"""

import os
import pytest
from unittest.mock import patch


class TestGetEnv:
    """Tests for environment variable helpers."""
    
    def test_get_env_with_default(self):
        """Test getting env var with default."""
        from customerbot.config import get_env
        
        result = get_env("NONEXISTENT_VAR", "default_value")
        assert result == "default_value"
    
    def test_get_env_existing(self):
        """Test getting existing env var."""
        from customerbot.config import get_env
        
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            result = get_env("TEST_VAR")
            assert result == "test_value"
    
    def test_get_env_required_missing(self):
        """Test required env var raises error when missing."""
        from customerbot.config import get_env
        
        with pytest.raises(ValueError):
            get_env("DEFINITELY_NOT_SET", required=True)

    def test_get_env_required_empty(self):
        """An empty API key counts as unset."""
        from customerbot.config import get_env

        with patch.dict(os.environ, {"AZURE_OPENAI_API_KEY": ""}):
            with pytest.raises(ValueError, match="AZURE_OPENAI_API_KEY"):
                get_env("AZURE_OPENAI_API_KEY", required=True)


class TestGetEnvTyped:
    """Tests for typed environment variable helpers."""
    
    def test_get_env_int(self):
        """Test getting int from env."""
        from customerbot.config import get_env_int
        
        with patch.dict(os.environ, {"INT_VAR": "42"}):
            result = get_env_int("INT_VAR", 0)
            assert result == 42
            assert isinstance(result, int)
    
    def test_get_env_float(self):
        """Test getting float from env."""
        from customerbot.config import get_env_float
        
        with patch.dict(os.environ, {"FLOAT_VAR": "3.14"}):
            result = get_env_float("FLOAT_VAR", 0.0)
            assert result == 3.14
            assert isinstance(result, float)
    
    def test_get_env_bool_true(self):
        """Test getting bool true from env."""
        from customerbot.config import get_env_bool
        
        for true_value in ["true", "True", "TRUE", "1", "yes", "on"]:
            with patch.dict(os.environ, {"BOOL_VAR": true_value}):
                result = get_env_bool("BOOL_VAR", False)
                assert result is True
    
    def test_get_env_bool_false(self):
        """Test getting bool false from env."""
        from customerbot.config import get_env_bool
        
        for false_value in ["false", "False", "0", "no", "off"]:
            with patch.dict(os.environ, {"BOOL_VAR": false_value}):
                result = get_env_bool("BOOL_VAR", True)
                assert result is False

    def test_get_env_bool_padded(self):
        """LOG_COLORS copied from a .env file may carry whitespace."""
        from customerbot.config import get_env_bool

        with patch.dict(os.environ, {"LOG_COLORS": " yes \n"}):
            assert get_env_bool("LOG_COLORS", False) is True

    def test_retrieval_defaults(self):
        """Threshold and top-K fall back to 0.6 and 3."""
        from customerbot.config import RetrievalConfig

        with patch.dict(os.environ, {}, clear=True):
            config = RetrievalConfig()

        assert config.top_k == 3
        assert config.min_similarity == 0.6
        assert isinstance(config.min_similarity, float)


class TestAzureOpenAIConfig:
    """Tests for Azure OpenAI configuration."""
    
    def test_embedding_url(self):
        """Test embedding URL construction."""
        from customerbot.config import AzureOpenAIConfig
        
        config = AzureOpenAIConfig(
            api_key="test",
            endpoint="https://test.openai.azure.com",
            api_version="2024-08-01-preview",
            embedding_deployment="embedding-model"
        )
        
        url = config.embedding_url
        assert "test.openai.azure.com" in url
        assert "embedding-model" in url
        assert "embeddings" in url
        assert "2024-08-01-preview" in url
    
    def test_chat_url(self):
        """Test chat URL construction."""
        from customerbot.config import AzureOpenAIConfig
        
        config = AzureOpenAIConfig(
            api_key="test",
            endpoint="https://test.openai.azure.com/",  # Trailing slash
            api_version="2024-08-01-preview",
            chat_deployment="chat-model"
        )
        
        url = config.chat_url
        assert "chat-model" in url
        assert "chat/completions" in url
        # Should not have double slashes
        assert "//" not in url.replace("https://", "")
    
    def test_validate_missing_key(self):
        """Test validation fails without API key."""
        from customerbot.config import AzureOpenAIConfig
        
        config = AzureOpenAIConfig(
            api_key="",
            endpoint="https://test.openai.azure.com"
        )
        
        with pytest.raises(ValueError, match="API_KEY"):
            config.validate()

    def test_embedding_url_trailing_slash(self):
        """A trailing slash on the endpoint yields the exact deployment URL."""
        from customerbot.config import AzureOpenAIConfig

        config = AzureOpenAIConfig(
            api_key="test",
            endpoint="https://test.openai.azure.com/",
            api_version="2024-08-01-preview",
            embedding_deployment="embedding-model"
        )

        assert config.embedding_url == (
            "https://test.openai.azure.com/openai/deployments/embedding-model"
            "/embeddings?api-version=2024-08-01-preview"
        )

    def test_validate_missing_endpoint(self):
        from customerbot.config import AzureOpenAIConfig

        config = AzureOpenAIConfig(api_key="test", endpoint="")

        with pytest.raises(ValueError, match="ENDPOINT"):
            config.validate()


class TestSettings:
    """Tests for main Settings class."""
    
    def test_settings_singleton(self):
        """Test settings is accessible."""
        from customerbot.config import settings
        
        assert settings is not None
        assert hasattr(settings, "azure")
        assert hasattr(settings, "retrieval")
        assert hasattr(settings, "knowledge")
    
    def test_is_development(self):
        """Test development mode detection."""
        from customerbot.config import Settings
        
        settings = Settings()
        settings.app_env = "development"
        assert settings.is_development is True
        assert settings.is_production is False
    
    def test_is_production(self):
        """Test production mode detection."""
        from customerbot.config import Settings
        
        settings = Settings()
        settings.app_env = "production"
        assert settings.is_production is True
        assert settings.is_development is False

    def test_validate_all_checks_retrieval(self):
        """Startup validation rejects a threshold outside [-1, 1]."""
        from customerbot.config import Settings

        settings = Settings()
        settings.azure.api_key = "test"
        settings.azure.endpoint = "https://test.openai.azure.com"
        settings.retrieval.min_similarity = 2.0

        with pytest.raises(ValueError, match="RETRIEVAL_MIN_SIMILARITY"):
            settings.validate_all()


class TestGetEnvList:
    """Tests for comma-separated list helper."""

    def test_splits_and_trims(self):
        from customerbot.config import get_env_list

        with patch.dict(os.environ, {"LIST_VAR": " http://a.com , ,http://b.com "}):
            assert get_env_list("LIST_VAR") == ["http://a.com", "http://b.com"]

    def test_default(self):
        from customerbot.config import get_env_list

        assert get_env_list("NONEXISTENT_LIST_VAR", "*") == ["*"]
        assert get_env_list("NONEXISTENT_LIST_VAR") == []


class TestRetrievalConfig:
    """Tests for retrieval configuration."""

    def test_defaults(self):
        """Defaults match the documented retrieval behaviour."""
        from customerbot.config import RetrievalConfig

        with patch.dict(os.environ, {}, clear=False):
            for key in ("RETRIEVAL_TOP_K", "RETRIEVAL_MIN_SIMILARITY", "EMBEDDING_MAX_CONCURRENCY"):
                os.environ.pop(key, None)
            config = RetrievalConfig()

        assert config.top_k == 3
        assert config.min_similarity == 0.6
        assert config.max_concurrency == 0
        assert config.validate() is True

    def test_env_override(self):
        from customerbot.config import RetrievalConfig

        with patch.dict(os.environ, {"RETRIEVAL_TOP_K": "5", "RETRIEVAL_MIN_SIMILARITY": "0.75"}):
            config = RetrievalConfig()

        assert config.top_k == 5
        assert config.min_similarity == 0.75

    def test_validate_threshold_range(self):
        from customerbot.config import RetrievalConfig

        config = RetrievalConfig()
        config.min_similarity = 1.5

        with pytest.raises(ValueError, match="RETRIEVAL_MIN_SIMILARITY"):
            config.validate()

    def test_validate_negative_concurrency(self):
        from customerbot.config import RetrievalConfig

        config = RetrievalConfig()
        config.max_concurrency = -1

        with pytest.raises(ValueError, match="negative"):
            config.validate()


class TestServerConfig:
    """Tests for server configuration."""

    def test_cors_origins(self):
        from customerbot.config import ServerConfig

        with patch.dict(os.environ, {"CORS_ORIGINS": "http://localhost:3000,https://shop.example.com"}):
            config = ServerConfig()

        assert config.cors_origins == ["http://localhost:3000", "https://shop.example.com"]


class TestKnowledgeConfig:
    """Tests for knowledge base configuration."""

    def test_location(self):
        from pathlib import Path
        from customerbot.config import KnowledgeConfig

        assert KnowledgeConfig(path="data/faq.txt").location == Path("data/faq.txt")


class TestAzureDeploymentUrl:
    """Tests for azure_deployment_url."""

    def test_joins_without_double_slash(self):
        from customerbot.config import azure_deployment_url

        url = azure_deployment_url("https://res.openai.azure.com/", "emb", "embeddings", "2024-08-01-preview")

        assert url == "https://res.openai.azure.com/openai/deployments/emb/embeddings?api-version=2024-08-01-preview"
