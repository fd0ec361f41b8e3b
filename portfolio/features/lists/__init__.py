"""Per-owner record lists with delete and "add new" flows."""

from .base import EntityList
from .projects import ProjectsList
from .skills import SkillsList

__all__ = ['EntityList', 'ProjectsList', 'SkillsList']
