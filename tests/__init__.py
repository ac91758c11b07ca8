"""
Curator Test Suite
==================

Test organization mirrors the source code structure:
    tests/
    ├── test_core/          → Tests for curator.core (config, config store, models)
    ├── test_infrastructure/→ Tests for curator.infrastructure (codec, store clients)
    ├── test_orchestration/ → Tests for curator.orchestration (publisher, verifier, cache)
    ├── test_integrations/  → Tests for curator.integrations (describers)
    ├── test_integration/   → End-to-end publish scenarios
    ├── test_facade.py      → Tests for the Curator facade
    └── conftest.py         → Shared pytest fixtures

Running Tests:
    pytest                          # Run all tests
    pytest tests/test_orchestration # Run only orchestration tests
    pytest --cov=curator            # Run with coverage report
"""
