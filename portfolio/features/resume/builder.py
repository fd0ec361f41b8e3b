"""Resume builder: load the owner's data, preview and export."""
from typing import List, Optional, Tuple

from portfolio.core.errors import RemoteCallError
from portfolio.core.logging import setup_logging
from portfolio.core.schemas import ProfileRecord, ProjectRecord, ResumeDraft, SkillRecord
from portfolio.core.store import NOT_FOUND, RecordStore
from portfolio.features.resume.draft import ResumeDraftEditor
from portfolio.features.resume.generator import export_filename, generate_resume

logger = setup_logging('resume_builder')


class ResumeBuilder:
    """Holds the fetched snapshot and the current preview for one owner.

    Attributes:
        store: Record store to read from
        identity: Owner whose resume is built
        profile: Stored profile, None if the owner has not saved one yet
        skills: Skills by proficiency, highest first
        projects: Projects, newest first
        preview: Last generated document, cleared by ``edit``
    """

    def __init__(self, store: RecordStore, identity: str):
        self.store = store
        self.identity = identity
        self.profile: Optional[ProfileRecord] = None
        self.skills: List[SkillRecord] = []
        self.projects: List[ProjectRecord] = []
        self.editor = ResumeDraftEditor()
        self.preview: Optional[str] = None
        self.loaded = False

    def load(self) -> "ResumeBuilder":
        """Fetch profile, skills and projects; any store error is raised."""
        profile = self.store.select_one('profiles', {'id': self.identity})
        if profile.error is not None and profile.error.code != NOT_FOUND:
            raise RemoteCallError(profile.error.message, code=profile.error.code)
        self.profile = ProfileRecord.from_row(profile.data) if profile.ok else None

        skills = self.store.select(
            'skills', {'user_id': self.identity}, order_by='proficiency', descending=True,
        ).raise_for_error()
        projects = self.store.select(
            'projects', {'user_id': self.identity}, order_by='created_at', descending=True,
        ).raise_for_error()

        self.skills = [SkillRecord.from_row(row) for row in skills]
        self.projects = [ProjectRecord.from_row(row) for row in projects]
        self.loaded = True
        return self

    def generate(self, draft: Optional[ResumeDraft] = None) -> str:
        """Validate the draft and render the preview."""
        if draft is not None:
            self.editor = ResumeDraftEditor(draft)
        validated = self.editor.validate()
        if not self.loaded:
            self.load()
        self.preview = generate_resume(self.profile, self.skills, self.projects, validated)
        return self.preview

    def export(self) -> Tuple[str, str]:
        """``(filename, document)`` for the current preview, generating it if needed."""
        document = self.preview if self.preview is not None else self.generate()
        filename = export_filename(self.profile)
        logger.info(f"Exporting resume for {self.identity} as {filename}")
        return filename, document

    def edit(self):
        """Back to editing; the preview is discarded."""
        self.preview = None
