"""Avatar upload: store the image, then point the profile at it.

These are two separate calls. When the profile update fails the image
stays in the bucket and the profile keeps its old ``avatar_url``; this is
logged and reported, not rolled back.
"""
import mimetypes
from typing import Optional

from pydantic import BaseModel
from werkzeug.utils import secure_filename

from portfolio.core.errors import FormValidationError
from portfolio.core.logging import setup_logging
from portfolio.core.notifications import Notification
from portfolio.core.storage import GCSBlobStore
from portfolio.core.store import RecordStore

logger = setup_logging('avatar')

DEFAULT_AVATAR_PREFIX = "avatars"


class AvatarUploadResult(BaseModel):
    ok: bool
    notification: Notification
    path: Optional[str] = None
    avatar_url: Optional[str] = None


def avatar_path(identity: str, filename: str, prefix: str = DEFAULT_AVATAR_PREFIX) -> str:
    """``<prefix>/<identity>.<ext>``, the extension taken from the sanitized ``filename``."""
    safe_name = secure_filename(filename or '')
    ext = safe_name.rsplit('.', 1)[-1].lower() if '.' in safe_name else ''
    if not ext.isalnum():
        ext = ''
    name = f"{identity}.{ext}" if ext else identity
    return f"{prefix.strip('/')}/{name}" if prefix else name


def upload_avatar(
    store: RecordStore,
    blobs: GCSBlobStore,
    identity: str,
    filename: str,
    data: bytes,
    prefix: str = DEFAULT_AVATAR_PREFIX,
) -> AvatarUploadResult:
    """Upload (replacing any previous image) and update ``avatar_url``."""
    if not data:
        raise FormValidationError({'file': 'Please choose an image to upload'})

    path = avatar_path(identity, filename or '', prefix)
    content_type = mimetypes.guess_type(filename or '')[0]

    uploaded = blobs.upload(path, data, overwrite=True, content_type=content_type)
    if uploaded.error is not None:
        return AvatarUploadResult(
            ok=False,
            notification=Notification.failure("Error uploading image", uploaded.error.message),
        )

    url = blobs.get_public_url(path)
    updated = store.update('profiles', {'id': identity}, {'avatar_url': url}, identity=identity)
    if updated.error is not None:
        logger.error(f"Avatar stored at {path} but profile update failed for {identity}: {updated.error.message}")
        return AvatarUploadResult(
            ok=False,
            path=path,
            notification=Notification.failure("Error uploading image", updated.error.message),
        )

    return AvatarUploadResult(
        ok=True,
        path=path,
        avatar_url=url,
        notification=Notification.success(
            "Profile picture updated", "Your profile picture has been updated successfully!",
        ),
    )
