"""Explicit session context handed to components.

Components never read a global session. They receive a ``SessionContext``,
subscribe to its changes and unsubscribe when they go away. A fetch started
under one identity is checked with a ``StaleGuard`` before its result is
applied, so a response that arrives after sign-out or after the component
was unmounted is dropped.
"""
import itertools
import threading
from typing import Callable, Dict, Optional

from portfolio.core.auth import AuthSession, IdentityProvider, SessionEvent
from portfolio.core.logging import setup_logging

logger = setup_logging('session_context')

SessionListener = Callable[[Optional[AuthSession]], None]


class StaleGuard:
    """Remembers the identity generation a fetch started under."""

    def __init__(self, context: "SessionContext"):
        self._context = context
        self._generation = context.generation
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def accept(self) -> bool:
        """True while the owner is mounted and the identity is unchanged."""
        return not self._cancelled and self._context.generation == self._generation


class SessionContext:
    """The session of one client, observable through ``subscribe``.

    Attributes:
        provider: Identity provider the session belongs to
        access_token: Token the session was resolved from
        session: Current session, or None when signed out
        generation: Incremented every time the identity changes
    """

    def __init__(self, provider: IdentityProvider, access_token: Optional[str] = None):
        self.provider = provider
        self.access_token = access_token
        self.session = provider.get_session(access_token)
        self.generation = 0
        self._listeners: Dict[int, SessionListener] = {}
        self._listener_ids = itertools.count(1)
        self._lock = threading.Lock()
        self._unsubscribe_provider = provider.on_session_change(self._on_provider_event)

    @property
    def identity(self) -> Optional[str]:
        return self.session.user.id if self.session else None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    def subscribe(self, on_change: SessionListener) -> Callable[[], None]:
        """Register ``on_change(session)``; returns the unsubscribe function."""
        with self._lock:
            listener_id = next(self._listener_ids)
            self._listeners[listener_id] = on_change

        def unsubscribe():
            with self._lock:
                self._listeners.pop(listener_id, None)

        return unsubscribe

    def guard(self) -> StaleGuard:
        return StaleGuard(self)

    def sign_in(self, email: str, password: str):
        """Sign in through the provider and adopt the new session."""
        result = self.provider.sign_in_with_password(email, password)
        if result.session is not None:
            self.access_token = result.session.access_token
            self._set_session(result.session)
        return result

    def sign_out(self):
        """Sign out the current token; listeners see ``None``."""
        result = self.provider.sign_out(self.access_token)
        if self.session is not None:
            self._set_session(None)
        return result

    def close(self):
        """Detach from the provider and drop all listeners."""
        self._unsubscribe_provider()
        with self._lock:
            self._listeners.clear()

    def _on_provider_event(self, event: SessionEvent, session: Optional[AuthSession]):
        # Only the token this context was built from concerns it
        if event == SessionEvent.SIGNED_OUT and session is not None \
                and self.session is not None and session.access_token == self.access_token:
            self._set_session(None)

    def _set_session(self, session: Optional[AuthSession]):
        previous = self.identity
        self.session = session
        if self.identity != previous:
            self.generation += 1
            logger.info(f"Session identity changed ({previous} -> {self.identity})")

        with self._lock:
            listeners = list(self._listeners.values())
        for listener in listeners:
            listener(session)
