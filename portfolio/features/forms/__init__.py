"""Validated entity forms that write one record to the store."""

from .base import EntityForm, FormResult
from .profile import ProfileForm
from .project import ProjectForm
from .skill import SkillForm

__all__ = ['EntityForm', 'FormResult', 'ProfileForm', 'ProjectForm', 'SkillForm']
