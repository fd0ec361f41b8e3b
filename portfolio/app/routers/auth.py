from fastapi import APIRouter, Depends, Response, status

from ..dependencies import get_app_settings, get_identity_provider, get_session_context
from ..errors import NotificationError
from ..models.auth import SessionResponse, SignInRequest, SignUpRequest

from portfolio.core.auth import IdentityProvider
from portfolio.core.config import Settings
from portfolio.core.notifications import Notification
from portfolio.core.schemas import LoginInput, RegistrationInput, validate_input
from portfolio.features.session import SessionContext

router = APIRouter()

AFTER_SIGN_IN = "/dashboard"
AFTER_SIGN_OUT = "/"


def _session_response(context: SessionContext, **extra) -> SessionResponse:
    session = context.session
    if session is None:
        return SessionResponse(authenticated=False, **extra)
    return SessionResponse(
        authenticated=True,
        user_id=session.user.id,
        email=session.user.email,
        access_token=session.access_token,
        token_type=session.token_type,
        expires_at=session.expires_at,
        **extra,
    )


@router.post("/sign-up", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(payload: SignUpRequest, provider: IdentityProvider = Depends(get_identity_provider)):
    """Register a new identity; the caller signs in afterwards"""
    data = validate_input(RegistrationInput, payload.model_dump())
    result = provider.sign_up(data.email, data.password, {'full_name': data.full_name})
    if result.error is not None:
        raise NotificationError(Notification.failure("Registration failed", result.error.message))

    return SessionResponse(
        authenticated=False,
        user_id=result.user.id,
        email=result.user.email,
        notification=Notification.success(
            "Registration successful", "Welcome to your new portfolio! Sign in to get started.",
        ),
    )


@router.post("/sign-in", response_model=SessionResponse)
async def sign_in(
    payload: SignInRequest,
    response: Response,
    context: SessionContext = Depends(get_session_context),
    settings: Settings = Depends(get_app_settings),
):
    """Sign in with email and password; the token is also set as a cookie"""
    data = validate_input(LoginInput, payload.model_dump())
    result = context.sign_in(data.email, data.password)
    if result.error is not None:
        raise NotificationError(Notification.failure("Login failed", result.error.message))

    response.set_cookie(
        settings.session_cookie_name,
        result.session.access_token,
        httponly=True,
        max_age=settings.access_token_expire_minutes * 60,
        samesite="lax",
    )
    return _session_response(
        context,
        redirect_to=AFTER_SIGN_IN,
        notification=Notification.success("Login successful", "Welcome back to your portfolio dashboard!"),
    )


@router.post("/sign-out", response_model=SessionResponse)
async def sign_out(
    response: Response,
    context: SessionContext = Depends(get_session_context),
    settings: Settings = Depends(get_app_settings),
):
    """End the current session"""
    context.sign_out()
    response.delete_cookie(settings.session_cookie_name)
    return SessionResponse(
        authenticated=False,
        redirect_to=AFTER_SIGN_OUT,
        notification=Notification.success("Signed out", "You have been signed out."),
    )


@router.get("/session", response_model=SessionResponse)
async def current_session(context: SessionContext = Depends(get_session_context)):
    """The caller's session, if any"""
    return _session_response(context)
