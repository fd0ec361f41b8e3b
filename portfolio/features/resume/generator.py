"""Resume document generation.

``generate_resume`` merges a profile, skills, projects and the resume draft
into one self-contained HTML document. It makes no store calls and does not
touch its inputs, and the same inputs always give byte-identical output.

Example:
    ```python
    html = generate_resume(profile, skills, projects, ResumeDraft(objective="Backend engineer"))
    filename = export_filename(profile)  # "ada-lovelace.html"
    ```
"""
from typing import Optional, Sequence

from slugify import slugify

from portfolio.core.logging import setup_logging
from portfolio.core.schemas import ProfileRecord, ProjectRecord, ResumeDraft, SkillRecord
from portfolio.features.resume.sections import SECTIONS, ResumeContext, env

logger = setup_logging('resume')

DEFAULT_TITLE = "Resume"
DEFAULT_FILENAME = "resume"

RESUME_CSS = """
    body {
      font-family: Arial, sans-serif;
      line-height: 1.6;
      color: #333;
      max-width: 800px;
      margin: 0 auto;
      padding: 20px;
    }
    .header { text-align: center; margin-bottom: 20px; }
    .header h1 { margin-bottom: 5px; }
    .contact-info { text-align: center; margin-bottom: 20px; }
    .section { margin-bottom: 25px; }
    .section-title {
      border-bottom: 2px solid #333;
      padding-bottom: 5px;
      margin-bottom: 15px;
      font-size: 18px;
    }
    .item { margin-bottom: 15px; }
    .item-header { display: flex; justify-content: space-between; }
    .item-title { font-weight: bold; }
    .item-date { color: #666; }
    .skills-list { display: flex; flex-wrap: wrap; gap: 10px; }
    .skill-item { background-color: #f0f0f0; padding: 5px 10px; border-radius: 3px; }
    .projects-list { display: grid; grid-template-columns: 1fr; gap: 15px; }
    .project-item { border: 1px solid #ddd; padding: 10px; border-radius: 5px; }
"""

DOCUMENT_TEMPLATE = env.from_string(
    '<!DOCTYPE html>\n'
    '<html lang="en">\n'
    '<head>\n'
    '  <meta charset="UTF-8">\n'
    '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
    '  <title>Resume - {{ title }}</title>\n'
    '  <style>{{ css|safe }}  </style>\n'
    '</head>\n'
    '<body>\n'
    '{% for block in blocks %}\n'
    '{{ block|safe }}\n'
    '{% endfor %}\n'
    '</body>\n'
    '</html>\n'
)


def _context(profile, skills, projects, draft) -> ResumeContext:
    return ResumeContext(
        profile=profile if profile is not None else ProfileRecord(id=""),
        skills=tuple(skills),
        projects=tuple(projects),
        draft=draft if draft is not None else ResumeDraft(),
    )


def generate_resume(
    profile: Optional[ProfileRecord],
    skills: Sequence[SkillRecord],
    projects: Sequence[ProjectRecord],
    draft: Optional[ResumeDraft] = None,
) -> str:
    """Render the resume document.

    Args:
        profile: The owner's profile; None renders as an empty profile
        skills: Skills in display order
        projects: Projects in display order
        draft: Objective, education and work experience; defaults to empty

    Returns:
        The complete HTML document
    """
    ctx = _context(profile, skills, projects, draft)

    blocks = [section.renderer(ctx) for section in SECTIONS if section.predicate(ctx)]
    document = DOCUMENT_TEMPLATE.render(
        title=ctx.profile.full_name or DEFAULT_TITLE,
        css=RESUME_CSS,
        blocks=blocks,
    )
    logger.info(f"Generated resume for {ctx.profile.id or 'anonymous profile'} with {len(blocks)} section(s)")
    return document


def rendered_sections(
    profile: Optional[ProfileRecord],
    skills: Sequence[SkillRecord],
    projects: Sequence[ProjectRecord],
    draft: Optional[ResumeDraft] = None,
) -> list:
    """Names of the sections ``generate_resume`` would emit, in order."""
    ctx = _context(profile, skills, projects, draft)
    return [section.name for section in SECTIONS if section.predicate(ctx)]


def export_filename(profile: Optional[ProfileRecord]) -> str:
    """``<slugified full name>.html``, or ``resume.html`` without a usable name."""
    name = profile.full_name if profile is not None else ""
    return f"{slugify(name) or DEFAULT_FILENAME}.html"
