"""Auth request and response models."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel

from portfolio.core.notifications import Notification


class SignUpRequest(BaseModel):
    """Registration form; validated by ``RegistrationInput``."""
    email: Any = None
    password: Any = None
    full_name: Any = None


class SignInRequest(BaseModel):
    email: Any = None
    password: Any = None


class SessionResponse(BaseModel):
    authenticated: bool
    user_id: Optional[str] = None
    email: Optional[str] = None
    access_token: Optional[str] = None
    token_type: str = "bearer"
    expires_at: Optional[datetime] = None
    redirect_to: Optional[str] = None
    notification: Optional[Notification] = None
