from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from ..dependencies import get_current_identity, get_session_context, get_wizard_registry
from ..errors import NotificationError

from portfolio.core.errors import FormValidationError
from portfolio.features.session import SessionContext
from portfolio.features.wizard import Wizard, WizardRegistry

router = APIRouter()


def get_wizard(
    identity: str = Depends(get_current_identity),
    context: SessionContext = Depends(get_session_context),
    registry: WizardRegistry = Depends(get_wizard_registry),
) -> Wizard:
    return registry.get(identity, expires_at=context.session.expires_at)


def _payload(wizard: Wizard, **extra) -> Dict[str, Any]:
    notification = wizard.last_notification
    return {
        **wizard.state(),
        'body': wizard.render(),
        'notification': notification.model_dump(mode='json') if notification else None,
        **extra,
    }


@router.get("")
async def get_wizard_state(wizard: Wizard = Depends(get_wizard)):
    """Current step, progress and step body"""
    return _payload(wizard)


@router.post("/submit")
async def submit_step(values: Optional[Dict[str, Any]] = Body(default=None), wizard: Wizard = Depends(get_wizard)):
    """Submit the current step; the wizard advances only on success"""
    outcome = wizard.submit(values or {})
    if outcome.errors:
        raise FormValidationError(outcome.errors)
    if not outcome.ok:
        raise NotificationError(outcome.notification)
    return _payload(wizard, outcome=outcome.model_dump(mode='json', exclude={'notification'}))


@router.post("/advance")
async def advance(wizard: Wizard = Depends(get_wizard)):
    wizard.advance()
    return _payload(wizard)


@router.post("/skip")
async def skip(wizard: Wizard = Depends(get_wizard)):
    """Leave the current step empty and move on"""
    wizard.skip()
    return _payload(wizard)


@router.post("/retreat")
async def retreat(wizard: Wizard = Depends(get_wizard)):
    wizard.retreat()
    return _payload(wizard)


@router.post("/complete")
async def complete(wizard: Wizard = Depends(get_wizard)):
    """Finish the wizard from its last step"""
    wizard.complete()
    return _payload(wizard)
