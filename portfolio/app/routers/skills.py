from fastapi import APIRouter, Depends, status

from ..dependencies import get_current_identity, get_store
from ..errors import NotificationError, check_form_result
from ..models.entities import EntityResponse, NotificationResponse, SkillListResponse, SkillRequest

from portfolio.core.store import RecordStore
from portfolio.features.lists import SkillsList

router = APIRouter()


@router.get("", response_model=SkillListResponse)
async def list_skills(
    identity: str = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    """List the caller's skills by name"""
    return SkillListResponse(items=SkillsList(store, identity).fetch())


@router.post("", response_model=EntityResponse, status_code=status.HTTP_201_CREATED)
async def create_skill(
    payload: SkillRequest,
    identity: str = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    """Add a skill"""
    form = SkillsList(store, identity).add_form()
    result = check_form_result(form.submit(payload.model_dump(exclude_unset=True)))
    return EntityResponse(record=result.record, notification=result.notification)


@router.delete("/{skill_id}", response_model=NotificationResponse)
async def delete_skill(
    skill_id: str,
    identity: str = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    """Delete one of the caller's skills"""
    notification = SkillsList(store, identity).delete(skill_id)
    if notification.is_error:
        raise NotificationError(notification)
    return NotificationResponse(notification=notification)
