"""Project form."""
from portfolio.core.schemas import ProjectInput
from portfolio.core.store import StoreResult
from portfolio.features.forms.base import EntityForm


class ProjectForm(EntityForm):
    input_model = ProjectInput
    defaults = {
        'title': '',
        'description': '',
        'image_url': '',
        'project_url': '',
        'github_url': '',
        'tech_stack': '',
    }
    success_title = "Project added"
    success_description = "Your project has been added to your portfolio!"
    failure_title = "Error adding project"

    def persist(self, data: ProjectInput) -> StoreResult:
        return self.store.insert('projects', {
            'user_id': self.identity,
            'title': data.title,
            'description': data.description,
            'image_url': data.image_url,
            'project_url': data.project_url,
            'github_url': data.github_url,
            'tech_stack': list(data.tech_stack),
        }, identity=self.identity)
