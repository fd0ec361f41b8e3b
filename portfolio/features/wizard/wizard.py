"""The guided setup flow: profile, projects, skills, then the resume.

A ``Wizard`` moves forward only when the current step's submit succeeds or
the user skips the step. A failed submit leaves the position unchanged so
the same step can be resubmitted. Once complete, the only thing left is the
link to the public portfolio; editing operations raise
``WizardCompleteError``.
"""
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Sequence

from portfolio.core.auth import AuthSession, IdentityProvider, SessionEvent
from portfolio.core.errors import FormValidationError, WizardCompleteError, WizardStepError
from portfolio.core.logging import setup_logging
from portfolio.core.notifications import Notification
from portfolio.core.store import RecordStore
from portfolio.features.wizard.sequencer import DEFAULT_STEPS, StepDescriptor, StepSequencer
from portfolio.features.wizard.steps import STEP_REGISTRY, StepHandler, StepId, StepOutcome

logger = setup_logging('wizard')

PORTFOLIO_PATH = "/portfolio/{identity}"


class Wizard:
    """One owner's pass through the setup steps.

    Attributes:
        store: Record store the step bodies write to
        identity: Owner being set up
        sequencer: Current position
        last_notification: Notification from the last action
    """

    def __init__(self, store: RecordStore, identity: str, steps: Sequence[StepDescriptor] = DEFAULT_STEPS):
        self.store = store
        self.identity = identity
        self.sequencer = StepSequencer(steps)
        self.last_notification: Optional[Notification] = None

    @property
    def is_complete(self) -> bool:
        return self.sequencer.is_complete

    def _handler(self) -> StepHandler:
        if self.is_complete:
            raise WizardCompleteError("The wizard is complete")
        return STEP_REGISTRY[StepId(self.sequencer.current_step.id)]

    def _completed(self):
        self.last_notification = Notification.success(
            "Portfolio complete!", "Your portfolio has been successfully created.",
        )
        logger.info(f"Wizard complete for {self.identity}")

    def _move(self, move: Callable[[], Any]):
        was_complete = self.is_complete
        move()
        if self.is_complete and not was_complete:
            self._completed()

    def submit(self, values: Optional[Dict[str, Any]] = None) -> StepOutcome:
        """Submit the current step; success advances, failure stays put."""
        handler = self._handler()
        values = values or {}
        try:
            handler.validator(values)
        except FormValidationError as e:
            return StepOutcome(ok=False, errors=e.errors)

        outcome = handler.submit(self, values)
        self.last_notification = outcome.notification
        if not outcome.ok:
            logger.info(f"Wizard step {self.sequencer.current_step.id} failed for {self.identity}")
            return outcome

        if handler.on_success is not None:
            self._move(lambda: handler.on_success(self))
        return outcome

    def advance(self):
        self._move(self.sequencer.advance)
        return self.state()

    def skip(self):
        self._move(self.sequencer.skip)
        return self.state()

    def retreat(self):
        self.sequencer.retreat()
        return self.state()

    def complete(self):
        """Finish from the last step."""
        if self.is_complete:
            raise WizardCompleteError("The wizard is already complete")
        if not self.sequencer.is_last_step:
            raise WizardStepError("The wizard can only be completed from its last step")
        self._move(self.sequencer.advance)
        return self.state()

    def result_url(self) -> Optional[str]:
        """Where "View My Portfolio" leads; None until complete."""
        if not self.is_complete:
            return None
        return PORTFOLIO_PATH.format(identity=self.identity)

    def render(self) -> Dict[str, Any]:
        if self.is_complete:
            return {
                'heading': "All Done!",
                'intro': "Your portfolio has been created successfully.",
                'action': {'label': "View My Portfolio", 'url': self.result_url()},
            }
        return self._handler().renderer(self)

    def state(self) -> Dict[str, Any]:
        step = self.sequencer.current_step
        return {
            'state': self.sequencer.state.value,
            'index': self.sequencer.index,
            'step': step._asdict() if step is not None else None,
            'steps': self.sequencer.progress(),
            'can_retreat': self.sequencer.can_retreat,
            'is_last_step': self.sequencer.is_last_step,
            'complete': self.is_complete,
            'result_url': self.result_url(),
        }


class WizardRegistry:
    """One wizard per signed-in identity.

    A wizard is discarded when its identity signs out, or once the session
    it was last used under has expired.
    """

    def __init__(self, provider: IdentityProvider, store: RecordStore):
        self.provider = provider
        self.store = store
        self._wizards: Dict[str, Wizard] = {}
        self._expires: Dict[str, datetime] = {}
        self._lock = threading.Lock()
        self._unsubscribe = provider.on_session_change(self._on_session_change)

    def get(self, identity: str, expires_at: Optional[datetime] = None) -> Wizard:
        """The identity's wizard; ``expires_at`` is the expiry of the caller's session."""
        with self._lock:
            self._evict_expired(datetime.now(timezone.utc), keep=identity)
            wizard = self._wizards.get(identity)
            if wizard is None:
                wizard = Wizard(self.store, identity)
                self._wizards[identity] = wizard
            if expires_at is not None:
                self._expires[identity] = expires_at
            return wizard

    def discard(self, identity: str) -> bool:
        with self._lock:
            self._expires.pop(identity, None)
            return self._wizards.pop(identity, None) is not None

    def __contains__(self, identity: str) -> bool:
        with self._lock:
            return identity in self._wizards

    def __len__(self) -> int:
        with self._lock:
            return len(self._wizards)

    def close(self):
        self._unsubscribe()
        with self._lock:
            self._wizards.clear()
            self._expires.clear()

    def _evict_expired(self, now: datetime, keep: Optional[str] = None):
        # Caller holds the lock
        expired = [key for key, expires_at in self._expires.items() if expires_at <= now and key != keep]
        for key in expired:
            self._expires.pop(key, None)
            self._wizards.pop(key, None)
        if expired:
            logger.info(f"Discarded {len(expired)} wizard(s) with expired sessions")

    def _on_session_change(self, event: SessionEvent, session: Optional[AuthSession]):
        if event == SessionEvent.SIGNED_OUT and session is not None:
            if self.discard(session.user.id):
                logger.info(f"Discarded wizard for {session.user.id} after sign-out")
