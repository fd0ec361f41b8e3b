"""FastAPI application models."""

from .auth import SessionResponse, SignInRequest, SignUpRequest
from .entities import (
    EntityResponse,
    NotificationResponse,
    ProfileRequest,
    ProfileResponse,
    ProjectListResponse,
    ProjectRequest,
    SkillListResponse,
    SkillRequest,
)

__all__ = [
    'EntityResponse',
    'NotificationResponse',
    'ProfileRequest',
    'ProfileResponse',
    'ProjectListResponse',
    'ProjectRequest',
    'SessionResponse',
    'SignInRequest',
    'SignUpRequest',
    'SkillListResponse',
    'SkillRequest',
]
