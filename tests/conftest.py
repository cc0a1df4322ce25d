"""Pytest configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from referral_assistant.masking.term_protector import EMPTY_TERMS
from referral_assistant.terms.loader import term_list_loader


@pytest.fixture
def client():
    """Create a FastAPI test client (lifespan not started)."""
    from referral_assistant.main import app

    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_shared_state():
    """Reset the process-wide allow-list and dependency overrides."""
    from referral_assistant.main import app

    term_list_loader.terms = EMPTY_TERMS
    term_list_loader.loaded = False
    app.dependency_overrides.clear()
    yield
    term_list_loader.terms = EMPTY_TERMS
    term_list_loader.loaded = False
    app.dependency_overrides.clear()
