"""Upload service brokering multipart uploads to the object store."""

from typing import List, Optional
from ..config import settings
from ..config.settings import Settings
from ..core.exceptions import StorageError
from ..repositories.storage_repo import StorageRepository
from ..schemas.upload import CompletedPart, GenericResponse, PresignedUrlResponse
from ..utils.constants import ABORTED_MESSAGE
from ..utils.helpers import generate_object_key
from ..utils.logger import get_logger

logger = get_logger(__name__)


class UploadService:
    """Service for multipart upload sessions.

    Holds no session state: the client keeps the upload id and object key
    between calls.
    """

    def __init__(
        self,
        storage_repo: Optional[StorageRepository] = None,
        config: Optional[Settings] = None,
    ):
        self.storage_repo = storage_repo or StorageRepository()
        self.config = config or settings

    async def create_upload(self, filename: str, parts: int) -> PresignedUrlResponse:
        """Open a multipart upload and presign a URL for each part."""
        key = generate_object_key(
            filename,
            randomize=self.config.randomize_object_keys,
            prefix_length=self.config.object_key_prefix_length,
        )

        try:
            upload_id = await self.storage_repo.initiate_multipart_upload(key)
        except StorageError as e:
            logger.error("Failed to initiate multipart upload", key=key, error=e.message)
            raise

        try:
            urls = await self.storage_repo.generate_multipart_presigned_urls(
                key=key,
                upload_id=upload_id,
                total_parts=parts,
                expiration=self.config.presign_expiration_seconds,
            )
        except StorageError as e:
            logger.error(
                "Failed to presign part URLs", key=key, upload_id=upload_id, error=e.message
            )
            await self._discard(key, upload_id)
            raise

        logger.info("Multipart upload initiated", key=key, upload_id=upload_id, parts=parts)
        return PresignedUrlResponse(filename=key, presigned_urls=urls, upload_id=upload_id)

    async def complete_upload(
        self, upload_id: str, filename: str, completed_parts: List[CompletedPart]
    ) -> GenericResponse:
        """Assemble the object from the uploaded parts."""
        try:
            key = await self.storage_repo.complete_multipart_upload(
                key=filename,
                upload_id=upload_id,
                parts=[{"part_number": p.part_number, "etag": p.etag} for p in completed_parts],
            )
        except StorageError as e:
            logger.error(
                "Failed to complete multipart upload",
                key=filename,
                upload_id=upload_id,
                error=e.message,
            )
            raise

        logger.info(
            "Multipart upload completed", key=key, upload_id=upload_id, parts=len(completed_parts)
        )
        return GenericResponse(code=200, message=key)

    async def abort_upload(self, upload_id: str, filename: str) -> GenericResponse:
        """Abort an upload. An upload the store no longer knows counts as aborted."""
        try:
            await self.storage_repo.abort_multipart_upload(key=filename, upload_id=upload_id)
        except StorageError as e:
            logger.error(
                "Failed to abort multipart upload", key=filename, upload_id=upload_id, error=e.message
            )
            raise

        logger.info("Multipart upload aborted", key=filename, upload_id=upload_id)
        return GenericResponse(code=200, message=ABORTED_MESSAGE)

    async def _discard(self, key: str, upload_id: str) -> None:
        """Best-effort abort of a session opened by a failed create_upload call."""
        try:
            await self.storage_repo.abort_multipart_upload(key=key, upload_id=upload_id)
        except StorageError as e:
            logger.warning(
                "Could not discard multipart upload", key=key, upload_id=upload_id, error=e.message
            )
