"""Test configuration and fixtures for the API."""
import pytest
from fastapi.testclient import TestClient

from portfolio.app.dependencies import get_blob_store, get_db, get_identity_provider, get_wizard_registry
from portfolio.app.main import app
from portfolio.features.wizard import WizardRegistry


@pytest.fixture
def registry(provider, store):
    registry = WizardRegistry(provider, store)
    yield registry
    registry.close()


@pytest.fixture
def client(session_factory, provider, registry, blobs):
    """Create test client with the database, identity and storage dependencies overridden."""
    app.dependency_overrides[get_db] = lambda: session_factory
    app.dependency_overrides[get_identity_provider] = lambda: provider
    app.dependency_overrides[get_wizard_registry] = lambda: registry
    app.dependency_overrides[get_blob_store] = lambda: blobs

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(auth_session):
    return {"Authorization": f"Bearer {auth_session.access_token}"}
