"""Resume sections: each a name, a predicate and a renderer.

Sections are rendered in the fixed order of ``SECTIONS``; a section whose
predicate is false contributes nothing, so missing data never produces a
placeholder.
"""
from typing import Callable, List, NamedTuple, Sequence

from jinja2 import DictLoader, Environment

from portfolio.core.schemas import (
    EducationEntry,
    ProfileRecord,
    ProjectRecord,
    ResumeDraft,
    SkillRecord,
    WorkExperienceEntry,
    is_web_url,
)

CONTACT_SEPARATOR = " | "
TECH_STACK_SEPARATOR = ", "
DATE_SEPARATOR = " – "
PRESENT = "Present"

TEMPLATES = {
    'header.html': (
        '<div class="header">\n'
        '{% if profile.full_name %}\n'
        '  <h1>{{ profile.full_name }}</h1>\n'
        '{% endif %}\n'
        '{% if profile.headline %}\n'
        '  <p>{{ profile.headline }}</p>\n'
        '{% endif %}\n'
        '</div>'
    ),
    'contact.html': '<div class="contact-info">{{ items|join(separator) }}</div>',
    'links.html': '<div class="contact-info links">{{ items|join(separator) }}</div>',
    'summary.html': (
        '<div class="section">\n'
        '  <h2 class="section-title">Professional Summary</h2>\n'
        '  <p>{{ objective }}</p>\n'
        '</div>'
    ),
    'skills.html': (
        '<div class="section">\n'
        '  <h2 class="section-title">Skills</h2>\n'
        '  <div class="skills-list">\n'
        '{% for label in labels %}\n'
        '    <div class="skill-item">{{ label }}</div>\n'
        '{% endfor %}\n'
        '  </div>\n'
        '</div>'
    ),
    'entries.html': (
        '<div class="section">\n'
        '  <h2 class="section-title">{{ heading }}</h2>\n'
        '{% for entry in entries %}\n'
        '  <div class="item">\n'
        '    <div class="item-header">\n'
        '      <span class="item-title">{{ entry.title }}</span>\n'
        '{% if entry.dates %}\n'
        '      <span class="item-date">{{ entry.dates }}</span>\n'
        '{% endif %}\n'
        '    </div>\n'
        '{% if entry.description %}\n'
        '    <p>{{ entry.description }}</p>\n'
        '{% endif %}\n'
        '  </div>\n'
        '{% endfor %}\n'
        '</div>'
    ),
    'projects.html': (
        '<div class="section">\n'
        '  <h2 class="section-title">Projects</h2>\n'
        '  <div class="projects-list">\n'
        '{% for project in projects %}\n'
        '    <div class="project-item">\n'
        '      <div class="item-header"><span class="item-title">{{ project.title }}</span></div>\n'
        '{% if project.description %}\n'
        '      <p>{{ project.description }}</p>\n'
        '{% endif %}\n'
        '{% if project.tech_stack %}\n'
        '      <div><small><strong>Technologies:</strong> {{ project.tech_stack|join(tech_separator) }}</small></div>\n'
        '{% endif %}\n'
        '{% set project_url = project.project_url|web_url %}\n'
        '{% set github_url = project.github_url|web_url %}\n'
        '{% if project_url or github_url %}\n'
        '      <div><small>'
        '{% if project_url %}<a href="{{ project_url }}">View Project</a>{% endif %}'
        '{% if project_url and github_url %}{{ link_separator }}{% endif %}'
        '{% if github_url %}<a href="{{ github_url }}">GitHub</a>{% endif %}'
        '</small></div>\n'
        '{% endif %}\n'
        '    </div>\n'
        '{% endfor %}\n'
        '  </div>\n'
        '</div>'
    ),
}

env = Environment(
    loader=DictLoader(TEMPLATES),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
)
env.filters['web_url'] = lambda value: value if is_web_url(value) else ""


class ResumeContext(NamedTuple):
    profile: ProfileRecord
    skills: Sequence[SkillRecord]
    projects: Sequence[ProjectRecord]
    draft: ResumeDraft


class Section(NamedTuple):
    name: str
    predicate: Callable[[ResumeContext], bool]
    renderer: Callable[[ResumeContext], str]


def format_date_range(start: str, end: str) -> str:
    """``start – end``, ``start – Present``, ``end`` alone, or nothing."""
    start, end = (start or "").strip(), (end or "").strip()
    if start and end:
        return f"{start}{DATE_SEPARATOR}{end}"
    if start:
        return f"{start}{DATE_SEPARATOR}{PRESENT}"
    return end


def skill_label(skill: SkillRecord) -> str:
    if skill.proficiency is None:
        return skill.name
    return f"{skill.name} ({skill.proficiency}/5)"


def job_title(job: WorkExperienceEntry) -> str:
    position, company = job.position.strip(), job.company.strip()
    if position and company:
        return f"{position} at {company}"
    return position or company


def education_title(edu: EducationEntry) -> str:
    degree = edu.degree.strip()
    if edu.field_of_study.strip():
        degree = f"{degree} in {edu.field_of_study.strip()}".strip()
    school = edu.school.strip()
    if degree and school:
        return f"{degree}{DATE_SEPARATOR}{school}"
    return degree or school


def _contact_items(profile: ProfileRecord) -> List[str]:
    return [value for value in (profile.email, profile.phone, profile.location) if value]


def _link_items(profile: ProfileRecord) -> List[str]:
    labelled = (("Website", profile.website), ("GitHub", profile.github), ("LinkedIn", profile.linkedin))
    return [f"{label}: {value}" for label, value in labelled if value]


def _first_entry_has(entries: Sequence, field: str) -> bool:
    """Entry sections are gated on the first row only."""
    return bool(entries) and bool(getattr(entries[0], field).strip())


def _work_entries(ctx: ResumeContext) -> List[dict]:
    return [
        {
            'title': job_title(job),
            'dates': format_date_range(job.start_date, job.end_date),
            'description': job.description.strip(),
        }
        for job in ctx.draft.work_experience if not job.is_blank()
    ]


def _education_entries(ctx: ResumeContext) -> List[dict]:
    return [
        {
            'title': education_title(edu),
            'dates': format_date_range(edu.start_date, edu.end_date),
            'description': edu.description.strip(),
        }
        for edu in ctx.draft.education if not edu.is_blank()
    ]


def _render(template: str, **values) -> str:
    return env.get_template(template).render(**values)


SECTIONS: Sequence[Section] = (
    Section(
        'header',
        lambda ctx: bool(ctx.profile.full_name or ctx.profile.headline),
        lambda ctx: _render('header.html', profile=ctx.profile),
    ),
    Section(
        'contact',
        lambda ctx: bool(_contact_items(ctx.profile)),
        lambda ctx: _render('contact.html', items=_contact_items(ctx.profile), separator=CONTACT_SEPARATOR),
    ),
    Section(
        'links',
        lambda ctx: bool(_link_items(ctx.profile)),
        lambda ctx: _render('links.html', items=_link_items(ctx.profile), separator=CONTACT_SEPARATOR),
    ),
    Section(
        'summary',
        lambda ctx: bool(ctx.draft.objective.strip()),
        lambda ctx: _render('summary.html', objective=ctx.draft.objective.strip()),
    ),
    Section(
        'skills',
        lambda ctx: len(ctx.skills) > 0,
        lambda ctx: _render('skills.html', labels=[skill_label(s) for s in ctx.skills]),
    ),
    Section(
        'work_experience',
        lambda ctx: _first_entry_has(ctx.draft.work_experience, 'company'),
        lambda ctx: _render('entries.html', heading='Work Experience', entries=_work_entries(ctx)),
    ),
    Section(
        'education',
        lambda ctx: _first_entry_has(ctx.draft.education, 'school'),
        lambda ctx: _render('entries.html', heading='Education', entries=_education_entries(ctx)),
    ),
    Section(
        'projects',
        lambda ctx: len(ctx.projects) > 0,
        lambda ctx: _render(
            'projects.html',
            projects=ctx.projects,
            tech_separator=TECH_STACK_SEPARATOR,
            link_separator=CONTACT_SEPARATOR,
        ),
    ),
)
