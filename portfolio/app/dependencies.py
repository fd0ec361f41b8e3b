"""Request dependencies: store, identity provider, blob store and session."""
from functools import lru_cache
from typing import Iterator, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import sessionmaker

from portfolio.core.auth import IdentityProvider
from portfolio.core.config import Settings, get_settings
from portfolio.core.database import get_session_factory
from portfolio.core.errors import SessionRequiredError
from portfolio.core.storage import GCSBlobStore
from portfolio.core.store import RecordStore
from portfolio.features.session import AuthGate, SessionContext
from portfolio.features.wizard import WizardRegistry

# Tokens come from the Authorization header or, for page routes, a cookie
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/sign-in", auto_error=False)


def get_app_settings() -> Settings:
    return get_settings()


def get_db() -> sessionmaker:
    """Session factory of the record store database."""
    return get_session_factory()


def get_store(factory: sessionmaker = Depends(get_db)) -> RecordStore:
    return RecordStore(factory)


@lru_cache(maxsize=1)
def get_identity_provider() -> IdentityProvider:
    """The process-wide identity provider (it holds revocations and listeners)."""
    settings = get_settings()
    return IdentityProvider(
        get_session_factory(),
        secret_key=settings.secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )


@lru_cache(maxsize=1)
def get_wizard_registry() -> WizardRegistry:
    return WizardRegistry(get_identity_provider(), RecordStore(get_session_factory()))


def get_blob_store(settings: Settings = Depends(get_app_settings)) -> GCSBlobStore:
    if not settings.gcs_bucket_name:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Avatar storage is not configured",
        )
    return _blob_store(settings.gcs_bucket_name)


@lru_cache(maxsize=4)
def _blob_store(bucket_name: str) -> GCSBlobStore:
    return GCSBlobStore(bucket_name)


def get_access_token(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    settings: Settings = Depends(get_app_settings),
) -> Optional[str]:
    return bearer or request.cookies.get(settings.session_cookie_name)


def get_session_context(
    token: Optional[str] = Depends(get_access_token),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Iterator[SessionContext]:
    """A session context for this request, detached from the provider afterwards."""
    context = SessionContext(provider, token)
    try:
        yield context
    finally:
        context.close()


def get_current_identity(context: SessionContext = Depends(get_session_context)) -> str:
    """Identity of the signed-in caller; 401 without a live session."""
    try:
        return AuthGate().require(context)
    except SessionRequiredError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
