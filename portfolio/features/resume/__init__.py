"""Resume generation, draft editing and export."""
from portfolio.features.resume.builder import ResumeBuilder
from portfolio.features.resume.draft import ResumeDraftEditor
from portfolio.features.resume.generator import export_filename, generate_resume, rendered_sections
from portfolio.features.resume.sections import SECTIONS, Section, format_date_range

__all__ = [
    'ResumeBuilder',
    'ResumeDraftEditor',
    'SECTIONS',
    'Section',
    'export_filename',
    'format_date_range',
    'generate_resume',
    'rendered_sections',
]
