"""Identity and session provider.

Issues signed session tokens for registered identities and lets components
observe sign-in/sign-out through ``on_session_change``.

Example:
    ```python
    provider = IdentityProvider(get_session_factory(), secret_key='...')
    provider.sign_up('ada@example.com', 'secret1', {'full_name': 'Ada Lovelace'})
    result = provider.sign_in_with_password('ada@example.com', 'secret1')
    unsubscribe = provider.on_session_change(lambda event, session: print(event))
    provider.sign_out(result.session.access_token)
    unsubscribe()
    ```
"""
import itertools
import threading
import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Dict, Optional

import jwt
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from werkzeug.security import check_password_hash, generate_password_hash

from portfolio.core.database import get_session
from portfolio.core.errors import FormValidationError, RemoteCallError
from portfolio.core.logging import setup_logging
from portfolio.core.models import Profile, User
from portfolio.core.monitoring import setup_monitoring
from portfolio.core.schemas import validate_credentials

logger = setup_logging('auth')
monitoring = setup_monitoring('auth')


class SessionEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


class AuthUser(BaseModel):
    id: str
    email: str


class AuthSession(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: AuthUser


class AuthError(BaseModel):
    message: str
    code: str = "auth_error"


class AuthResult(BaseModel):
    user: Optional[AuthUser] = None
    session: Optional[AuthSession] = None
    error: Optional[AuthError] = None

    def raise_for_error(self) -> "AuthResult":
        if self.error is not None:
            raise RemoteCallError(self.error.message, code=self.error.code)
        return self


SessionCallback = Callable[[SessionEvent, Optional[AuthSession]], None]


class IdentityProvider:
    """Registers identities, signs them in and out, and publishes session changes.

    Attributes:
        session_factory: SQLAlchemy session factory for the identity tables
        secret_key: Key used to sign tokens
        algorithm: JWT signing algorithm
        expire_minutes: Token lifetime
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: int = 60,
    ):
        self.session_factory = session_factory
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self._revoked = set()
        self._listeners: Dict[int, SessionCallback] = {}
        self._listener_ids = itertools.count(1)
        self._lock = threading.Lock()

    def sign_up(self, email: str, password: str, profile_seed: Optional[dict] = None) -> AuthResult:
        """Register an identity and seed its profile row. Does not sign in."""
        try:
            validate_credentials(email, password)
        except FormValidationError as e:
            monitoring.track_failure('sign_up')
            return AuthResult(error=AuthError(message=next(iter(e.errors.values())), code="validation_failed"))

        seed = profile_seed or {}
        try:
            monitoring.increment('sign_up')
            with get_session(self.session_factory) as session:
                if session.query(User).filter(User.email == email).first():
                    monitoring.track_failure('sign_up')
                    return AuthResult(error=AuthError(message="User already registered", code="user_exists"))

                now = datetime.now(timezone.utc)
                user = User(
                    id=str(uuid.uuid4()),
                    email=email,
                    password_hash=generate_password_hash(password),
                    created_at=now,
                )
                session.add(user)
                session.add(Profile(
                    id=user.id,
                    full_name=seed.get('full_name'),
                    email=email,
                    created_at=now,
                    updated_at=now,
                ))
                auth_user = AuthUser(id=user.id, email=user.email)

            logger.info(f"Registered identity {auth_user.id}")
            monitoring.track_success('sign_up')
            return AuthResult(user=auth_user)

        except SQLAlchemyError as e:
            monitoring.track_error('sign_up', str(e))
            logger.error(f"Error registering identity: {str(e)}")
            return AuthResult(error=AuthError(message=str(e)))

    def sign_in_with_password(self, email: str, password: str) -> AuthResult:
        """Check credentials and start a session."""
        try:
            monitoring.increment('sign_in')
            with get_session(self.session_factory) as session:
                user = session.query(User).filter(User.email == email).first()
                valid = user is not None and check_password_hash(user.password_hash, password or "")
                auth_user = AuthUser(id=user.id, email=user.email) if valid else None

        except SQLAlchemyError as e:
            monitoring.track_error('sign_in', str(e))
            logger.error(f"Error signing in: {str(e)}")
            return AuthResult(error=AuthError(message=str(e)))

        if auth_user is None:
            monitoring.track_failure('sign_in')
            return AuthResult(error=AuthError(message="Invalid login credentials", code="invalid_credentials"))

        auth_session = self._issue(auth_user)
        monitoring.track_success('sign_in')
        logger.info(f"Identity {auth_user.id} signed in")
        self._emit(SessionEvent.SIGNED_IN, auth_session)
        return AuthResult(user=auth_user, session=auth_session)

    def get_session(self, access_token: Optional[str]) -> Optional[AuthSession]:
        """Return the live session for a token, or None."""
        if not access_token:
            return None
        try:
            payload = jwt.decode(access_token, self.secret_key, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            return None

        with self._lock:
            if payload.get('jti') in self._revoked:
                return None

        return AuthSession(
            access_token=access_token,
            expires_at=datetime.fromtimestamp(payload['exp'], tz=timezone.utc),
            user=AuthUser(id=payload['sub'], email=payload.get('email', '')),
        )

    def sign_out(self, access_token: Optional[str]) -> AuthResult:
        """End the session for a token. Signing out twice is harmless."""
        auth_session = self.get_session(access_token)
        if auth_session is None:
            return AuthResult()

        payload = jwt.decode(access_token, self.secret_key, algorithms=[self.algorithm])
        with self._lock:
            self._revoked.add(payload['jti'])

        logger.info(f"Identity {auth_session.user.id} signed out")
        self._emit(SessionEvent.SIGNED_OUT, auth_session)
        return AuthResult(user=auth_session.user)

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        """Subscribe to session events; returns the unsubscribe function."""
        with self._lock:
            listener_id = next(self._listener_ids)
            self._listeners[listener_id] = callback

        def unsubscribe():
            with self._lock:
                self._listeners.pop(listener_id, None)

        return unsubscribe

    def _issue(self, user: AuthUser) -> AuthSession:
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        token = jwt.encode(
            {
                'sub': user.id,
                'email': user.email,
                'exp': expires_at,
                'iat': datetime.now(timezone.utc),
                'jti': uuid.uuid4().hex,
            },
            self.secret_key,
            algorithm=self.algorithm,
        )
        return AuthSession(access_token=token, expires_at=expires_at, user=user)

    def _emit(self, event: SessionEvent, auth_session: Optional[AuthSession]):
        with self._lock:
            listeners = list(self._listeners.values())

        for callback in listeners:
            try:
                callback(event, auth_session)
            except Exception as e:
                logger.error(f"Session listener failed on {event.value}: {str(e)}")
