"""Editing the transient resume draft."""
from typing import Any, Dict, Optional

from pydantic import ValidationError

from portfolio.core.errors import FormValidationError
from portfolio.core.schemas import EducationEntry, ResumeDraft, WorkExperienceEntry, errors_from_validation


class ResumeDraftEditor:
    """Add/remove rows on a ``ResumeDraft`` without ever emptying a list.

    The education and work experience lists always hold at least one row
    (possibly blank) so the row editor has something to show.
    """

    def __init__(self, draft: Optional[ResumeDraft] = None):
        self.draft = draft if draft is not None else ResumeDraft()
        if not self.draft.education:
            self.draft.education.append(EducationEntry())
        if not self.draft.work_experience:
            self.draft.work_experience.append(WorkExperienceEntry())

    @classmethod
    def from_values(cls, values: Optional[Dict[str, Any]]) -> "ResumeDraftEditor":
        try:
            draft = ResumeDraft.model_validate(values or {})
        except ValidationError as e:
            raise FormValidationError(errors_from_validation(e))
        return cls(draft)

    def set_objective(self, objective: str):
        self.draft.objective = objective or ""

    def add_education(self) -> int:
        self.draft.education.append(EducationEntry())
        return len(self.draft.education) - 1

    def remove_education(self, index: int) -> bool:
        """Remove one education row; refused when it is the only one."""
        if len(self.draft.education) <= 1 or not 0 <= index < len(self.draft.education):
            return False
        del self.draft.education[index]
        return True

    def update_education(self, index: int, **fields) -> EducationEntry:
        entry = self.draft.education[index].model_copy(update=fields)
        self.draft.education[index] = entry
        return entry

    def add_work_experience(self) -> int:
        self.draft.work_experience.append(WorkExperienceEntry())
        return len(self.draft.work_experience) - 1

    def remove_work_experience(self, index: int) -> bool:
        """Remove one work experience row; refused when it is the only one."""
        if len(self.draft.work_experience) <= 1 or not 0 <= index < len(self.draft.work_experience):
            return False
        del self.draft.work_experience[index]
        return True

    def update_work_experience(self, index: int, **fields) -> WorkExperienceEntry:
        entry = self.draft.work_experience[index].model_copy(update=fields)
        self.draft.work_experience[index] = entry
        return entry

    def validate(self) -> ResumeDraft:
        """Check every non-blank row; blank rows are allowed.

        Raises:
            FormValidationError: keyed ``education.<i>.<field>`` or
                ``work_experience.<i>.<field>``
        """
        errors: Dict[str, str] = {}
        for i, edu in enumerate(self.draft.education):
            if edu.is_blank():
                continue
            if len(edu.school.strip()) < 2:
                errors[f"education.{i}.school"] = "School must be at least 2 characters"
            if len(edu.degree.strip()) < 2:
                errors[f"education.{i}.degree"] = "Degree must be at least 2 characters"

        for i, job in enumerate(self.draft.work_experience):
            if job.is_blank():
                continue
            if len(job.company.strip()) < 2:
                errors[f"work_experience.{i}.company"] = "Company must be at least 2 characters"
            if len(job.position.strip()) < 2:
                errors[f"work_experience.{i}.position"] = "Position must be at least 2 characters"

        if errors:
            raise FormValidationError(errors)
        return self.draft
