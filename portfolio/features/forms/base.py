"""Common submit cycle for entity forms.

A submit validates first and never reaches the store with invalid input.
While a submission is in flight the form refuses another one. A store error
is reported with the store's own message and the entered values are kept so
the user can fix and resubmit. On success the form resets (when the form
type does) and the optional ``on_success`` callback fires; that callback is
the only link between a form and whoever embeds it.
"""
import threading
from typing import Any, Callable, Dict, Optional, Type

from pydantic import BaseModel, Field

from portfolio.core.errors import FormValidationError
from portfolio.core.logging import setup_logging
from portfolio.core.notifications import Notification
from portfolio.core.schemas import validate_input
from portfolio.core.store import RecordStore, StoreResult

logger = setup_logging('forms')


class FormResult(BaseModel):
    """Outcome of one submit."""
    ok: bool
    errors: Dict[str, str] = Field(default_factory=dict)
    notification: Optional[Notification] = None
    record: Optional[Dict[str, Any]] = None
    busy: bool = False


class EntityForm:
    """Base class; subclasses set the input model, defaults and ``persist``.

    Attributes:
        store: Record store the form writes to
        identity: Acting identity (owner of the written record)
        on_success: Called after a successful submit
        values: Current field values
        errors: Field errors from the last validation
        submitting: True while a submission is in flight
        last_notification: Notification produced by the last submit
    """
    input_model: Type[BaseModel]
    defaults: Dict[str, Any] = {}
    reset_on_success: bool = True
    success_title: str = "Saved"
    success_description: str = ""
    failure_title: str = "Error saving"

    def __init__(
        self,
        store: RecordStore,
        identity: str,
        on_success: Optional[Callable[[], None]] = None,
    ):
        self.store = store
        self.identity = identity
        self.on_success = on_success
        self.values: Dict[str, Any] = dict(self.defaults)
        self.errors: Dict[str, str] = {}
        self.submitting = False
        self.last_notification: Optional[Notification] = None
        self._submit_lock = threading.Lock()

    def validate(self, values: Optional[Dict[str, Any]] = None) -> BaseModel:
        """Validate ``values`` (or the current values); records field errors."""
        if values is not None:
            self.values = {**self.values, **values}
        try:
            validated = validate_input(self.input_model, self.values)
        except FormValidationError as e:
            self.errors = e.errors
            raise
        self.errors = {}
        return validated

    def reset(self):
        self.values = dict(self.defaults)
        self.errors = {}

    def persist(self, data: BaseModel) -> StoreResult:
        raise NotImplementedError

    def submit(self, values: Optional[Dict[str, Any]] = None) -> FormResult:
        """Validate then write; see the module docstring for the cycle."""
        with self._submit_lock:
            if self.submitting:
                return FormResult(ok=False, busy=True)
            self.submitting = True

        try:
            try:
                data = self.validate(values)
            except FormValidationError as e:
                return FormResult(ok=False, errors=e.errors)

            result = self.persist(data)
            if result.error is not None:
                logger.warning(f"{type(self).__name__} submit failed: {result.error.message}")
                self.last_notification = Notification.failure(self.failure_title, result.error.message)
                return FormResult(ok=False, notification=self.last_notification)

            self.last_notification = Notification.success(self.success_title, self.success_description)
            if self.reset_on_success:
                self.reset()
            record = result.data if isinstance(result.data, dict) else None
        finally:
            self.submitting = False

        if self.on_success is not None:
            self.on_success()
        return FormResult(ok=True, notification=self.last_notification, record=record)
