"""Step bodies of the wizard, keyed by step id.

Each ``StepHandler`` bundles the step's validator, the submit that performs
its store round-trip, a renderer describing the step body and the handler
run after a successful submit. ``STEP_REGISTRY`` must cover every
``StepId``; this is checked when the module is imported.
"""
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, NamedTuple, Optional

from pydantic import BaseModel, Field

from portfolio.core.errors import FormValidationError, RemoteCallError
from portfolio.core.notifications import Notification
from portfolio.core.schemas import ProfileInput, ProjectInput, ResumeDraft, SkillInput, validate_input
from portfolio.features.forms import EntityForm, ProfileForm, ProjectForm, SkillForm
from portfolio.features.resume import ResumeBuilder, ResumeDraftEditor
from portfolio.features.wizard.sequencer import DEFAULT_STEPS

if TYPE_CHECKING:
    from portfolio.features.wizard.wizard import Wizard


class StepId(str, Enum):
    PROFILE = "profile"
    PROJECTS = "projects"
    SKILLS = "skills"
    RESUME = "resume"


class StepOutcome(BaseModel):
    """Result of submitting one step body."""
    ok: bool
    errors: Dict[str, str] = Field(default_factory=dict)
    notification: Optional[Notification] = None
    record: Optional[Dict[str, Any]] = None
    document: Optional[str] = None
    filename: Optional[str] = None


class StepHandler(NamedTuple):
    validator: Callable[[Dict[str, Any]], Any]
    submit: Callable[["Wizard", Dict[str, Any]], StepOutcome]
    renderer: Callable[["Wizard"], Dict[str, Any]]
    on_success: Optional[Callable[["Wizard"], Any]]


def _advance(wizard: "Wizard"):
    return wizard.sequencer.advance()


def _form_submit(form_class) -> Callable[["Wizard", Dict[str, Any]], StepOutcome]:
    def submit(wizard: "Wizard", values: Dict[str, Any]) -> StepOutcome:
        form: EntityForm = form_class(wizard.store, wizard.identity)
        result = form.submit(values)
        return StepOutcome(
            ok=result.ok,
            errors=result.errors,
            notification=result.notification,
            record=result.record,
        )
    return submit


def _validate_draft(values: Dict[str, Any]) -> ResumeDraft:
    return ResumeDraftEditor.from_values(values).validate()


def _submit_resume(wizard: "Wizard", values: Dict[str, Any]) -> StepOutcome:
    builder = ResumeBuilder(wizard.store, wizard.identity)
    try:
        builder.generate(_validate_draft(values))
    except FormValidationError as e:
        return StepOutcome(ok=False, errors=e.errors)
    except RemoteCallError as e:
        return StepOutcome(ok=False, notification=Notification.failure("Error generating resume", e.message))

    filename, document = builder.export()
    return StepOutcome(
        ok=True,
        notification=Notification.success("Resume generated", "Your resume is ready to download."),
        document=document,
        filename=filename,
    )


def _render_profile(wizard: "Wizard") -> Dict[str, Any]:
    form = ProfileForm(wizard.store, wizard.identity)
    form.load()
    return {
        'heading': "Personal Information",
        'intro': "Tell visitors who you are.",
        'values': form.values,
        'avatar_url': form.avatar_url,
        'skippable': False,
    }


def _render_projects(wizard: "Wizard") -> Dict[str, Any]:
    return {
        'heading': "Add Your Projects",
        'intro': "Showcase your work by adding projects to your portfolio.",
        'values': dict(ProjectForm.defaults),
        'skippable': True,
    }


def _render_skills(wizard: "Wizard") -> Dict[str, Any]:
    return {
        'heading': "Add Your Skills",
        'intro': "Add skills to showcase your expertise.",
        'values': dict(SkillForm.defaults),
        'skippable': True,
    }


def _render_resume(wizard: "Wizard") -> Dict[str, Any]:
    return {
        'heading': "Build Your Resume",
        'intro': "Create a professional resume based on your portfolio information.",
        'values': ResumeDraft().model_dump(),
        'skippable': True,
    }


STEP_REGISTRY: Dict[StepId, StepHandler] = {
    StepId.PROFILE: StepHandler(
        validator=lambda values: validate_input(ProfileInput, values),
        submit=_form_submit(ProfileForm),
        renderer=_render_profile,
        on_success=_advance,
    ),
    StepId.PROJECTS: StepHandler(
        validator=lambda values: validate_input(ProjectInput, values),
        submit=_form_submit(ProjectForm),
        renderer=_render_projects,
        on_success=_advance,
    ),
    StepId.SKILLS: StepHandler(
        validator=lambda values: validate_input(SkillInput, values),
        submit=_form_submit(SkillForm),
        renderer=_render_skills,
        on_success=_advance,
    ),
    StepId.RESUME: StepHandler(
        validator=_validate_draft,
        submit=_submit_resume,
        renderer=_render_resume,
        on_success=_advance,
    ),
}


def check_registry(registry: Dict[StepId, StepHandler] = STEP_REGISTRY):
    """Every step id has a handler and every default step has an id."""
    missing = [step.value for step in StepId if step not in registry]
    if missing:
        raise RuntimeError(f"No handler registered for wizard step(s): {', '.join(missing)}")
    unknown = [step.id for step in DEFAULT_STEPS if step.id not in {s.value for s in StepId}]
    if unknown:
        raise RuntimeError(f"Wizard step(s) without a StepId: {', '.join(unknown)}")


check_registry()
