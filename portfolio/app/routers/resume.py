from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import HTMLResponse

from ..dependencies import get_current_identity, get_store

from portfolio.core.store import RecordStore
from portfolio.features.resume import ResumeBuilder, ResumeDraftEditor, export_filename, rendered_sections

router = APIRouter()


def _build(store: RecordStore, identity: str, values: Optional[Dict[str, Any]]) -> ResumeBuilder:
    builder = ResumeBuilder(store, identity).load()
    builder.generate(ResumeDraftEditor.from_values(values or {}).draft)
    return builder


@router.post("/preview")
async def preview_resume(
    values: Optional[Dict[str, Any]] = Body(default=None),
    identity: str = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    """Generate the resume from the stored data and the submitted draft"""
    builder = _build(store, identity, values)
    return {
        'document': builder.preview,
        'sections': rendered_sections(builder.profile, builder.skills, builder.projects, builder.editor.draft),
        'filename': export_filename(builder.profile),
    }


@router.post("/export", response_class=HTMLResponse)
async def export_resume(
    values: Optional[Dict[str, Any]] = Body(default=None),
    identity: str = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    """Download the resume as a standalone HTML file"""
    filename, document = _build(store, identity, values).export()
    return HTMLResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
