"""Storage repository for multipart upload operations."""

import asyncio
from typing import Dict, List, Optional
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from ..config.storage import get_storage_client, get_bucket_name
from ..core.exceptions import StorageError
from ..utils.constants import NO_SUCH_UPLOAD
from ..utils.helpers import as_completed_parts, part_numbers
from ..utils.logger import get_logger

logger = get_logger(__name__)


def _to_storage_error(operation: str, exc: Exception) -> StorageError:
    """Wrap a botocore failure, keeping the provider error text."""
    error_code = None
    if isinstance(exc, ClientError):
        error_code = exc.response.get("Error", {}).get("Code")
    return StorageError(str(exc), operation=operation, error_code=error_code)


class StorageRepository:
    """Repository for multipart operations against the object store.

    boto3 calls block, so each one runs in a worker thread.
    """

    def __init__(self, client: Optional[BaseClient] = None, bucket_name: Optional[str] = None):
        self.client: Optional[BaseClient] = client
        self.bucket_name: Optional[str] = bucket_name

    async def _get_client(self) -> BaseClient:
        """Get or create storage client."""
        if self.client is None:
            self.client = get_storage_client()
        if self.bucket_name is None:
            self.bucket_name = get_bucket_name()
        return self.client

    async def initiate_multipart_upload(self, key: str) -> str:
        """
        Open a multipart upload.
        Args:
            key: Object key the parts will be assembled into
        Returns:
            Upload ID issued by the store
        """
        client = await self._get_client()
        try:
            response = await asyncio.to_thread(
                client.create_multipart_upload,
                Bucket=self.bucket_name,
                Key=key,
            )
        except (ClientError, BotoCoreError) as e:
            raise _to_storage_error("create_multipart_upload", e)

        upload_id = response.get("UploadId")
        if not upload_id:
            raise StorageError(
                "Object store returned no upload id",
                operation="create_multipart_upload",
            )
        return upload_id

    async def generate_part_presigned_url(
        self, key: str, upload_id: str, part_number: int, expiration: int
    ) -> str:
        """Presign an ``upload_part`` request for a single part."""
        client = await self._get_client()
        try:
            return await asyncio.to_thread(
                client.generate_presigned_url,
                "upload_part",
                Params={
                    "Bucket": self.bucket_name,
                    "Key": key,
                    "UploadId": upload_id,
                    "PartNumber": part_number,
                },
                ExpiresIn=expiration,
            )
        except (ClientError, BotoCoreError) as e:
            raise _to_storage_error("generate_presigned_url", e)

    async def generate_multipart_presigned_urls(
        self, key: str, upload_id: str, total_parts: int, expiration: int
    ) -> Dict[int, str]:
        """
        Generate presigned URLs for each part.
        Returns:
            Mapping of part number (1..total_parts) to URL
        """
        urls: Dict[int, str] = {}
        for part_number in part_numbers(total_parts):
            urls[part_number] = await self.generate_part_presigned_url(
                key, upload_id, part_number, expiration
            )
        return urls

    async def complete_multipart_upload(self, key: str, upload_id: str, parts: List[Dict]) -> str:
        """
        Complete multipart upload by combining all parts.
        Args:
            parts: Dicts with ``part_number`` and ``etag``
        Returns:
            Key of the assembled object
        """
        client = await self._get_client()
        try:
            response = await asyncio.to_thread(
                client.complete_multipart_upload,
                Bucket=self.bucket_name,
                Key=key,
                UploadId=upload_id,
                MultipartUpload={"Parts": as_completed_parts(parts)},
            )
        except (ClientError, BotoCoreError) as e:
            raise _to_storage_error("complete_multipart_upload", e)
        return response.get("Key", key)

    async def abort_multipart_upload(self, key: str, upload_id: str) -> bool:
        """
        Abort multipart upload and release uploaded parts.
        Returns:
            True if aborted, False if the store no longer knows the upload
        """
        client = await self._get_client()
        try:
            await asyncio.to_thread(
                client.abort_multipart_upload,
                Bucket=self.bucket_name,
                Key=key,
                UploadId=upload_id,
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == NO_SUCH_UPLOAD:
                logger.info("Multipart upload already gone", key=key, upload_id=upload_id)
                return False
            raise _to_storage_error("abort_multipart_upload", e)
        except BotoCoreError as e:
            raise _to_storage_error("abort_multipart_upload", e)
        return True
