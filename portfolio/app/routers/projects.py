from fastapi import APIRouter, Depends, status

from ..dependencies import get_current_identity, get_store
from ..errors import NotificationError, check_form_result
from ..models.entities import EntityResponse, NotificationResponse, ProjectListResponse, ProjectRequest

from portfolio.core.store import RecordStore
from portfolio.features.lists import ProjectsList

router = APIRouter()


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    identity: str = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    """List the caller's projects, newest first"""
    return ProjectListResponse(items=ProjectsList(store, identity).fetch())


@router.post("", response_model=EntityResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    payload: ProjectRequest,
    identity: str = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    """Add a project"""
    form = ProjectsList(store, identity).add_form()
    result = check_form_result(form.submit(payload.model_dump(exclude_unset=True)))
    return EntityResponse(record=result.record, notification=result.notification)


@router.delete("/{project_id}", response_model=NotificationResponse)
async def delete_project(
    project_id: str,
    identity: str = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    """Delete one of the caller's projects"""
    notification = ProjectsList(store, identity).delete(project_id)
    if notification.is_error:
        raise NotificationError(notification)
    return NotificationResponse(notification=notification)
