from fastapi import APIRouter, Depends, File, UploadFile

from ..dependencies import get_app_settings, get_blob_store, get_current_identity, get_store
from ..errors import NotificationError, check_form_result
from ..models.entities import EntityResponse, ProfileRequest, ProfileResponse

from portfolio.core.config import Settings
from portfolio.core.storage import GCSBlobStore
from portfolio.core.store import RecordStore
from portfolio.features.avatar import AvatarUploadResult, upload_avatar
from portfolio.features.forms import ProfileForm

router = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_profile(
    identity: str = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    """Profile editor values, pre-filled from the stored profile"""
    form = ProfileForm(store, identity)
    record = form.load()
    return ProfileResponse(values=form.values, avatar_url=form.avatar_url, exists=record is not None)


@router.put("", response_model=EntityResponse)
async def update_profile(
    payload: ProfileRequest,
    identity: str = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
):
    """Save the profile, creating it if it does not exist yet"""
    form = ProfileForm(store, identity)
    form.load()
    result = check_form_result(form.submit(payload.model_dump(exclude_unset=True)))
    return EntityResponse(record=result.record, notification=result.notification)


@router.post("/avatar", response_model=AvatarUploadResult)
async def update_avatar(
    file: UploadFile = File(...),
    identity: str = Depends(get_current_identity),
    store: RecordStore = Depends(get_store),
    blobs: GCSBlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_app_settings),
):
    """Upload a profile picture and point the profile at it"""
    content = await file.read()
    result = upload_avatar(store, blobs, identity, file.filename or "", content, prefix=settings.avatar_prefix)
    if not result.ok:
        raise NotificationError(result.notification)
    return result
