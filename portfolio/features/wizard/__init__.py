"""Multi-step portfolio setup wizard."""
from portfolio.features.wizard.sequencer import (
    DEFAULT_STEPS,
    StepDescriptor,
    StepSequencer,
    StepStatus,
    WizardState,
)
from portfolio.features.wizard.steps import STEP_REGISTRY, StepHandler, StepId, StepOutcome
from portfolio.features.wizard.wizard import Wizard, WizardRegistry

__all__ = [
    'DEFAULT_STEPS',
    'STEP_REGISTRY',
    'StepDescriptor',
    'StepHandler',
    'StepId',
    'StepOutcome',
    'StepSequencer',
    'StepStatus',
    'Wizard',
    'WizardRegistry',
    'WizardState',
]
