"""
Agentic CustomerBot

A customer support assistant that answers questions from a small FAQ
knowledge base using Azure OpenAI embeddings and chat completions.

This package provides:
- Per-query semantic retrieval over the FAQ (no vector database)
- Grounded answer generation with follow-up suggestions
- A FastAPI server (api_server.py) and a command line interface
"""

__version__ = "1.0.0"

from customerbot.config import settings

__all__ = ["settings", "__version__"]
