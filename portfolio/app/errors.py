"""Mapping of portfolio errors onto HTTP responses.

* validation errors: 422 ``{"errors": {field: message}}``
* remote call failures: 400 ``{"notification": {...}}``
* no session on an API route: 401
* edits to a finished wizard: 409
"""
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from portfolio.core.errors import (
    FormValidationError,
    RemoteCallError,
    SessionRequiredError,
    WizardCompleteError,
    WizardStepError,
)
from portfolio.core.logging import setup_logging
from portfolio.core.notifications import Notification
from portfolio.features.forms import FormResult

logger = setup_logging('api_errors')


class NotificationError(Exception):
    """An action failed and the user should see ``notification``."""

    def __init__(self, notification: Notification, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.notification = notification
        self.status_code = status_code
        super().__init__(notification.description or notification.title)


def check_form_result(result: FormResult, failure_title: Optional[str] = None) -> FormResult:
    """Raise for a failed submit so the handlers below shape the response."""
    if result.ok:
        return result
    if result.busy:
        raise NotificationError(
            Notification.failure(failure_title or "Please wait", "A submission is already in progress."),
            status_code=status.HTTP_409_CONFLICT,
        )
    if result.errors:
        raise FormValidationError(result.errors)
    raise NotificationError(result.notification or Notification.failure(failure_title or "Request failed"))


def _request_errors(exc: RequestValidationError) -> Dict[str, Any]:
    errors: Dict[str, Any] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get('loc', ()) if part != 'body']
        errors.setdefault(".".join(loc) or "body", error.get('msg'))
    return errors


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(FormValidationError)
    async def form_validation_handler(request: Request, exc: FormValidationError):
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"errors": exc.errors})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"errors": _request_errors(exc)})

    @app.exception_handler(NotificationError)
    async def notification_handler(request: Request, exc: NotificationError):
        return JSONResponse(status_code=exc.status_code, content={"notification": exc.notification.model_dump(mode='json')})

    @app.exception_handler(RemoteCallError)
    async def remote_call_handler(request: Request, exc: RemoteCallError):
        logger.error(f"Remote call failed on {request.url.path}: {exc.message}")
        notification = Notification.failure("Request failed", exc.message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"notification": notification.model_dump(mode='json')})

    @app.exception_handler(SessionRequiredError)
    async def session_required_handler(request: Request, exc: SessionRequiredError):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": str(exc), "redirect_to": exc.redirect_to},
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(WizardCompleteError)
    async def wizard_complete_handler(request: Request, exc: WizardCompleteError):
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    @app.exception_handler(WizardStepError)
    async def wizard_step_handler(request: Request, exc: WizardStepError):
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})
