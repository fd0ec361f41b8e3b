"""Projects list, newest first."""
from portfolio.core.schemas import ProjectRecord
from portfolio.features.forms.project import ProjectForm
from portfolio.features.lists.base import EntityList


class ProjectsList(EntityList[ProjectRecord]):
    table = 'projects'
    record_type = ProjectRecord
    form_class = ProjectForm
    order_by = 'created_at'
    descending = True
    noun = 'project'
