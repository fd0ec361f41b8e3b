"""Ordered step sequencing for the portfolio wizard.

States are ``Step[0] .. Step[n-1]`` and ``Complete``. ``advance`` and
``skip`` move forward (from the last step into ``Complete``), ``retreat``
moves back and is a no-op on the first step. ``Complete`` is terminal.
"""
import threading
from enum import Enum
from typing import List, NamedTuple, Optional, Sequence

from portfolio.core.errors import WizardCompleteError
from portfolio.core.logging import setup_logging

logger = setup_logging('wizard')


class StepDescriptor(NamedTuple):
    id: str
    title: str
    description: str


DEFAULT_STEPS: Sequence[StepDescriptor] = (
    StepDescriptor('profile', "Personal Information", "Enter your basic information to get started"),
    StepDescriptor('projects', "Add Projects", "Showcase your best work"),
    StepDescriptor('skills', "Add Skills", "Highlight your expertise"),
    StepDescriptor('resume', "Build Resume", "Create your professional resume"),
)


class WizardState(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class StepStatus(str, Enum):
    DONE = "done"
    CURRENT = "current"
    PENDING = "pending"


class StepSequencer:
    """Position within a fixed, non-empty list of steps."""

    def __init__(self, steps: Sequence[StepDescriptor] = DEFAULT_STEPS):
        if not steps:
            raise ValueError("A wizard needs at least one step")
        ids = [step.id for step in steps]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate step ids: {ids}")
        self.steps = tuple(steps)
        self.index = 0
        self.state = WizardState.IN_PROGRESS
        self._lock = threading.Lock()

    @property
    def is_complete(self) -> bool:
        return self.state == WizardState.COMPLETE

    @property
    def current_step(self) -> Optional[StepDescriptor]:
        """The current step, or None once complete."""
        if self.is_complete:
            return None
        return self.steps[self.index]

    @property
    def is_last_step(self) -> bool:
        return self.index == len(self.steps) - 1

    @property
    def can_retreat(self) -> bool:
        return not self.is_complete and self.index > 0

    def _ensure_open(self, action: str):
        if self.is_complete:
            raise WizardCompleteError(f"Cannot {action}: the wizard is complete")

    def advance(self) -> WizardState:
        """Next step, or ``Complete`` from the last step."""
        with self._lock:
            self._ensure_open('advance')
            if self.index < len(self.steps) - 1:
                self.index += 1
                logger.info(f"Wizard advanced to step {self.index} ({self.steps[self.index].id})")
            else:
                self.state = WizardState.COMPLETE
                logger.info("Wizard complete")
            return self.state

    def skip(self) -> WizardState:
        return self.advance()

    def retreat(self) -> int:
        with self._lock:
            self._ensure_open('retreat')
            if self.index > 0:
                self.index -= 1
                logger.info(f"Wizard moved back to step {self.index} ({self.steps[self.index].id})")
            return self.index

    def progress(self) -> List[dict]:
        """Per-step status for the step indicator."""
        result = []
        for i, step in enumerate(self.steps):
            if self.is_complete or i < self.index:
                status = StepStatus.DONE
            elif i == self.index:
                status = StepStatus.CURRENT
            else:
                status = StepStatus.PENDING
            result.append({'id': step.id, 'title': step.title, 'status': status.value})
        return result
