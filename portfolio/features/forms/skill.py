"""Skill form."""
from portfolio.core.schemas import SkillInput
from portfolio.core.store import StoreResult
from portfolio.features.forms.base import EntityForm


class SkillForm(EntityForm):
    input_model = SkillInput
    defaults = {'name': '', 'proficiency': 3}
    success_title = "Skill added"
    success_description = "Your skill has been added to your portfolio!"
    failure_title = "Error adding skill"

    def persist(self, data: SkillInput) -> StoreResult:
        return self.store.insert('skills', {
            'user_id': self.identity,
            'name': data.name,
            'proficiency': data.proficiency,
        }, identity=self.identity)
