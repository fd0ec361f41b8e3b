"""Root conftest.py to configure test environment."""
import os
import sys
from pathlib import Path

# Add the root directory to Python path for proper imports
root_dir = Path(__file__).parent
if str(root_dir) not in sys.path:
    sys.path.insert(0, str(root_dir))

# Settings are read once; point them at throwaway resources before any import
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from sqlalchemy.orm import sessionmaker

from portfolio.core.auth import IdentityProvider
from portfolio.core.database import build_engine, create_tables_if_missing
from portfolio.core.storage import StorageError, StorageResult
from portfolio.core.store import RecordStore
from portfolio.features.session import SessionContext

TEST_SECRET = "test-secret-key"
TEST_EMAIL = "ada@example.com"
TEST_PASSWORD = "secret1"


def pytest_configure(config):
    config.addinivalue_line("markers", "api: tests that go through the HTTP API")


class FakeBlobStore:
    """In-memory stand-in for ``GCSBlobStore``."""

    def __init__(self):
        self.files = {}
        self.fail_with = None

    def upload(self, path, data, overwrite=False, content_type=None):
        if self.fail_with:
            return StorageResult(error=StorageError(message=self.fail_with))
        if path in self.files and not overwrite:
            return StorageResult(error=StorageError(message="The resource already exists", code="exists"))
        self.files[path] = (data, content_type)
        return StorageResult(path=path)

    def get_public_url(self, path):
        return f"https://storage.googleapis.com/test-bucket/{path}"


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite://")
    create_tables_if_missing(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def store(session_factory):
    return RecordStore(session_factory)


@pytest.fixture
def provider(session_factory):
    return IdentityProvider(session_factory, secret_key=TEST_SECRET, expire_minutes=5)


@pytest.fixture
def user(provider):
    """A registered identity with a seeded profile."""
    return provider.sign_up(TEST_EMAIL, TEST_PASSWORD, {'full_name': "Ada Lovelace"}).user


@pytest.fixture
def auth_session(provider, user):
    return provider.sign_in_with_password(TEST_EMAIL, TEST_PASSWORD).session


@pytest.fixture
def context(provider, auth_session):
    ctx = SessionContext(provider, auth_session.access_token)
    yield ctx
    ctx.close()


@pytest.fixture
def blobs():
    return FakeBlobStore()
