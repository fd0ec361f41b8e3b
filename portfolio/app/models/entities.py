"""Profile, project and skill request/response models.

Request fields are loosely typed because they carry raw form text; the
validation rules live in ``portfolio.core.schemas``.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from portfolio.core.notifications import Notification
from portfolio.core.schemas import ProjectRecord, SkillRecord


class ProfileRequest(BaseModel):
    full_name: Any = None
    headline: Any = None
    bio: Any = None
    location: Any = None
    email: Any = None
    phone: Any = None
    website: Any = None
    github: Any = None
    linkedin: Any = None


class ProjectRequest(BaseModel):
    title: Any = None
    description: Any = None
    image_url: Any = None
    project_url: Any = None
    github_url: Any = None
    tech_stack: Any = None


class SkillRequest(BaseModel):
    name: Any = None
    proficiency: Any = None


class ProfileResponse(BaseModel):
    values: Dict[str, str]
    avatar_url: Optional[str] = None
    exists: bool = True


class EntityResponse(BaseModel):
    """Outcome of a create/update: the stored record and the notification."""
    record: Optional[Dict[str, Any]] = None
    notification: Optional[Notification] = None


class ProjectListResponse(BaseModel):
    items: List[ProjectRecord] = Field(default_factory=list)


class SkillListResponse(BaseModel):
    items: List[SkillRecord] = Field(default_factory=list)


class NotificationResponse(BaseModel):
    notification: Notification
