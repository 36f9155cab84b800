"""
Test Package Initialization

This package contains all unit and integration tests for the
Agentic CustomerBot project. No test reaches the network: providers are
replaced by the fakes in fakes.py or by mocks.

Test Structure:
- test_config.py: Configuration tests
- test_similarity.py: Cosine similarity and ranking tests
- test_knowledge.py: Knowledge base loading tests
- test_embeddings.py / test_llm.py: Azure provider tests
- test_retriever.py: Retrieval tests
- test_generator.py / test_followup.py: Prompt and suggestion tests
- test_agent.py: Query and follow-up orchestration tests
- test_api_server.py: REST endpoint tests
- test_diagnostics.py / test_cli.py: Tooling tests

Run tests with:
    pytest tests/ -v
"""
