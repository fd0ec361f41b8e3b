"""Pydantic models for records, form input and the resume draft.

This module defines the typed shapes used throughout the application:

1. Boundary records (``ProfileRecord``, ``SkillRecord``, ``ProjectRecord``)
   that coerce loosely typed store rows as soon as they are received
2. Form inputs (``ProfileInput``, ``ProjectInput``, ``SkillInput``,
   ``LoginInput``, ``RegistrationInput``) that hold the validation rules
3. The transient resume draft (``ResumeDraft`` and its entries)

Example:
    ```python
    from portfolio.core.schemas import SkillInput, validate_input

    skill = validate_input(SkillInput, {'name': 'Go', 'proficiency': '4'})
    skill.proficiency  # 4
    ```
"""
import re
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, EmailStr, Field, HttpUrl, TypeAdapter, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from portfolio.core.errors import FormValidationError

MIN_PROFICIENCY = 1
MAX_PROFICIENCY = 5
MIN_PASSWORD_LENGTH = 6

_url_adapter = TypeAdapter(HttpUrl)
_email_adapter = TypeAdapter(EmailStr)
_integer_pattern = re.compile(r'^[+-]?\d+$')

ModelT = TypeVar('ModelT', bound=BaseModel)


def split_tech_stack(raw: Optional[str]) -> List[str]:
    """Split comma separated tags, trimming each and dropping empty ones."""
    if not raw:
        return []
    return [item.strip() for item in raw.split(',') if item.strip()]


def _min_length(value: Optional[str], length: int, error_type: str, message: str) -> str:
    if value is None:
        value = ""
    if not isinstance(value, str) or len(value) < length:
        raise PydanticCustomError(error_type, message)
    return value


def is_web_url(value: Any) -> bool:
    """True for an http(s) URL; other schemes (javascript:, data:, ...) are rejected."""
    if not isinstance(value, str) or not value:
        return False
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def _url_or_empty(value: Optional[str]) -> str:
    if value is None or value == "":
        return ""
    if not is_web_url(value):
        raise PydanticCustomError('invalid_url', 'Please enter a valid URL')
    return value


def _empty_if_none(value: Any) -> Any:
    return "" if value is None else value


def errors_from_validation(exc: ValidationError) -> Dict[str, str]:
    """Map a pydantic error to ``{field: first message}``."""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        loc = error.get('loc') or ('__root__',)
        field = ".".join(str(part) for part in loc)
        errors.setdefault(field, error['msg'])
    return errors


def validate_input(model: Type[ModelT], values: Any) -> ModelT:
    """Validate raw form values, raising ``FormValidationError`` on failure."""
    if isinstance(values, model):
        values = values.model_dump()
    try:
        return model.model_validate(values or {})
    except ValidationError as e:
        raise FormValidationError(errors_from_validation(e))


# ---------------------------------------------------------------------------
# Form input
# ---------------------------------------------------------------------------

class SkillInput(BaseModel):
    """Skill form: a name and a 1-5 proficiency entered as text."""
    name: str = ""
    proficiency: int = 3

    @field_validator('name', mode='before')
    @classmethod
    def check_name(cls, value):
        return _min_length(value, 2, 'skill_name', 'Skill name must be at least 2 characters')

    @field_validator('proficiency', mode='before')
    @classmethod
    def coerce_proficiency(cls, value):
        if isinstance(value, bool):
            raise PydanticCustomError('proficiency_type', 'Proficiency must be a whole number between 1 and 5')
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        elif isinstance(value, str) and _integer_pattern.match(value.strip()):
            value = int(value.strip())
        if not isinstance(value, int):
            raise PydanticCustomError('proficiency_type', 'Proficiency must be a whole number between 1 and 5')
        if not MIN_PROFICIENCY <= value <= MAX_PROFICIENCY:
            raise PydanticCustomError('proficiency_range', 'Proficiency must be between 1 and 5')
        return value


class ProjectInput(BaseModel):
    """Project form. ``tech_stack`` accepts the raw comma separated text."""
    title: str = ""
    description: str = ""
    image_url: str = ""
    project_url: str = ""
    github_url: str = ""
    tech_stack: List[str] = Field(default_factory=list)

    @field_validator('title', mode='before')
    @classmethod
    def check_title(cls, value):
        return _min_length(value, 2, 'project_title', 'Project title must be at least 2 characters')

    @field_validator('description', mode='before')
    @classmethod
    def default_description(cls, value):
        return _empty_if_none(value)

    @field_validator('image_url', 'project_url', 'github_url', mode='before')
    @classmethod
    def check_url(cls, value):
        return _url_or_empty(value)

    @field_validator('tech_stack', mode='before')
    @classmethod
    def parse_tech_stack(cls, value):
        if value is None or isinstance(value, str):
            return split_tech_stack(value)
        return [str(item).strip() for item in value if str(item).strip()]


class ProfileInput(BaseModel):
    """Profile editor form."""
    full_name: str = ""
    headline: str = ""
    bio: str = ""
    location: str = ""
    email: str = ""
    phone: str = ""
    website: str = ""
    github: str = ""
    linkedin: str = ""

    @field_validator('full_name', mode='before')
    @classmethod
    def check_full_name(cls, value):
        return _min_length(value, 2, 'full_name', 'Name must be at least 2 characters')

    @field_validator('headline', 'bio', 'location', 'phone', mode='before')
    @classmethod
    def default_text(cls, value):
        return _empty_if_none(value)

    @field_validator('email', mode='before')
    @classmethod
    def check_email(cls, value):
        if value is None or value == "":
            return ""
        try:
            _email_adapter.validate_python(value)
        except ValidationError:
            raise PydanticCustomError('invalid_email', 'Please enter a valid email')
        return value

    @field_validator('website', 'github', 'linkedin', mode='before')
    @classmethod
    def check_url(cls, value):
        return _url_or_empty(value)


class LoginInput(BaseModel):
    email: str
    password: str

    @field_validator('email', mode='before')
    @classmethod
    def check_email(cls, value):
        try:
            _email_adapter.validate_python(value)
        except ValidationError:
            raise PydanticCustomError('invalid_email', 'Please enter a valid email')
        return value

    @field_validator('password', mode='before')
    @classmethod
    def check_password(cls, value):
        return _min_length(
            value, MIN_PASSWORD_LENGTH, 'password_length',
            f'Password must be at least {MIN_PASSWORD_LENGTH} characters',
        )


class RegistrationInput(LoginInput):
    full_name: str

    @field_validator('full_name', mode='before')
    @classmethod
    def check_full_name(cls, value):
        return _min_length(value, 2, 'full_name', 'Full name is required')


def validate_credentials(email: str, password: str) -> LoginInput:
    return validate_input(LoginInput, {'email': email, 'password': password})


# ---------------------------------------------------------------------------
# Boundary records
# ---------------------------------------------------------------------------

class ProfileRecord(BaseModel):
    """A stored profile, with missing text columns coerced to ``""``."""
    id: str
    full_name: str = ""
    headline: str = ""
    bio: str = ""
    location: str = ""
    email: str = ""
    phone: str = ""
    website: str = ""
    github: str = ""
    linkedin: str = ""
    avatar_url: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator(
        'full_name', 'headline', 'bio', 'location', 'email', 'phone',
        'website', 'github', 'linkedin', 'avatar_url', mode='before',
    )
    @classmethod
    def none_to_empty(cls, value):
        return _empty_if_none(value)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ProfileRecord":
        return cls.model_validate(row)


class SkillRecord(BaseModel):
    id: str
    user_id: str
    name: str
    proficiency: Optional[int] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SkillRecord":
        return cls.model_validate(row)


class ProjectRecord(BaseModel):
    id: str
    user_id: str
    title: str
    description: str = ""
    image_url: str = ""
    project_url: str = ""
    github_url: str = ""
    tech_stack: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None

    @field_validator('description', 'image_url', 'project_url', 'github_url', mode='before')
    @classmethod
    def none_to_empty(cls, value):
        return _empty_if_none(value)

    @field_validator('tech_stack', mode='before')
    @classmethod
    def none_to_list(cls, value):
        return [] if value is None else value

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ProjectRecord":
        return cls.model_validate(row)


# ---------------------------------------------------------------------------
# Resume draft
# ---------------------------------------------------------------------------

class EducationEntry(BaseModel):
    school: str = ""
    degree: str = ""
    field_of_study: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""

    def is_blank(self) -> bool:
        return not any(value.strip() for value in self.model_dump().values())


class WorkExperienceEntry(BaseModel):
    company: str = ""
    position: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""

    def is_blank(self) -> bool:
        return not any(value.strip() for value in self.model_dump().values())


class ResumeDraft(BaseModel):
    """Resume-only fields edited alongside the stored profile. Never persisted."""
    objective: str = ""
    education: List[EducationEntry] = Field(default_factory=lambda: [EducationEntry()])
    work_experience: List[WorkExperienceEntry] = Field(default_factory=lambda: [WorkExperienceEntry()])
