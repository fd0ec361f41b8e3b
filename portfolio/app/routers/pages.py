from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from ..dependencies import get_session_context, get_store

from portfolio.core.errors import SessionRequiredError
from portfolio.core.store import RecordStore
from portfolio.features.dashboard import Dashboard, DashboardTab
from portfolio.features.session import SessionContext
from portfolio.features.wizard import DEFAULT_STEPS

router = APIRouter()


@router.get("/")
async def landing(context: SessionContext = Depends(get_session_context)):
    """Landing page payload"""
    start = "/dashboard" if context.is_authenticated else "/auth"
    return {
        "title": "Build your developer portfolio",
        "description": "Collect your profile, projects and skills in one place and share them with a single link.",
        "authenticated": context.is_authenticated,
        "steps": [step._asdict() for step in DEFAULT_STEPS],
        "actions": [
            {"label": "Get Started", "url": start},
            {"label": "Build with the wizard", "url": "/api/wizard"},
        ],
    }


@router.get("/auth")
async def auth_page(context: SessionContext = Depends(get_session_context)):
    """Sign-in / registration page payload"""
    return {
        "authenticated": context.is_authenticated,
        "tabs": ["sign-in", "sign-up"],
        "endpoints": {
            "sign-in": "/api/auth/sign-in",
            "sign-up": "/api/auth/sign-up",
        },
        "fields": {
            "sign-in": ["email", "password"],
            "sign-up": ["full_name", "email", "password"],
        },
    }


@router.get("/dashboard")
async def dashboard(
    tab: DashboardTab = DashboardTab.PROJECTS,
    context: SessionContext = Depends(get_session_context),
    store: RecordStore = Depends(get_store),
):
    """Projects and skills of the signed-in owner; redirects to /auth when signed out"""
    board = Dashboard(context, store)
    try:
        board.mount()
    except SessionRequiredError as e:
        return RedirectResponse(e.redirect_to, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    try:
        board.select_tab(tab)
        return board.to_dict()
    finally:
        board.unmount()
