"""Skills list, alphabetical."""
from portfolio.core.schemas import SkillRecord
from portfolio.features.forms.skill import SkillForm
from portfolio.features.lists.base import EntityList


class SkillsList(EntityList[SkillRecord]):
    table = 'skills'
    record_type = SkillRecord
    form_class = SkillForm
    order_by = 'name'
    descending = False
    noun = 'skill'
