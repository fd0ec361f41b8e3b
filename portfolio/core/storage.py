"""Google Cloud Storage blob store for avatar images.

Example:
    ```python
    from portfolio.core.storage import GCSBlobStore

    blobs = GCSBlobStore('my-portfolio-bucket')
    result = blobs.upload('avatars/123.png', data, overwrite=True, content_type='image/png')
    url = blobs.get_public_url('avatars/123.png')
    ```
"""
from typing import Optional

from google.api_core.exceptions import GoogleAPIError, PreconditionFailed
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage
from pydantic import BaseModel

from portfolio.core.errors import RemoteCallError
from portfolio.core.logging import setup_logging
from portfolio.core.monitoring import setup_monitoring

logger = setup_logging('storage')
monitoring = setup_monitoring('storage')


class StorageError(BaseModel):
    message: str
    code: str = "storage_error"


class StorageResult(BaseModel):
    path: Optional[str] = None
    error: Optional[StorageError] = None

    def raise_for_error(self) -> str:
        if self.error is not None:
            raise RemoteCallError(self.error.message, code=self.error.code)
        return self.path


class GCSBlobStore:
    """Stores binary objects in a single GCS bucket.

    The client is created on first use so constructing the store needs no
    credentials.

    Attributes:
        bucket_name: Name of the GCS bucket
    """

    def __init__(self, bucket_name: str, client: Optional[storage.Client] = None):
        if not bucket_name:
            raise ValueError("GCS bucket name is not configured (set GCS_BUCKET_NAME)")
        self.bucket_name = bucket_name
        self._client = client
        self._bucket = None

    @property
    def bucket(self) -> storage.Bucket:
        if self._bucket is None:
            if self._client is None:
                self._client = storage.Client()
            self._bucket = self._client.bucket(self.bucket_name)
        return self._bucket

    def upload(
        self,
        path: str,
        data: bytes,
        overwrite: bool = False,
        content_type: Optional[str] = None,
    ) -> StorageResult:
        """Upload ``data`` to ``path``; refuses to replace an object unless ``overwrite``."""
        try:
            monitoring.increment('upload')
            blob = self.bucket.blob(path)
            kwargs = {} if overwrite else {'if_generation_match': 0}
            blob.upload_from_string(
                data,
                content_type=content_type or 'application/octet-stream',
                **kwargs,
            )
            monitoring.track_success('upload')
            logger.info(f"Uploaded {path} to bucket {self.bucket_name}")
            return StorageResult(path=path)

        except PreconditionFailed:
            monitoring.track_failure('upload')
            return StorageResult(error=StorageError(message="The resource already exists", code="exists"))

        except (GoogleAPIError, GoogleAuthError) as e:
            monitoring.track_error('upload', str(e))
            logger.error(f"Error uploading {path}: {str(e)}")
            return StorageResult(error=StorageError(message=str(e)))

    def get_public_url(self, path: str) -> str:
        return self.bucket.blob(path).public_url
