"""Reusable FastAPI dependencies."""

from typing import AsyncGenerator
from fastapi import Depends
from ..repositories.storage_repo import StorageRepository
from ..services.upload_service import UploadService


async def get_storage_repo() -> AsyncGenerator[StorageRepository, None]:
    """Dependency to get storage repository."""
    yield StorageRepository()


async def get_upload_service(
    storage_repo: StorageRepository = Depends(get_storage_repo),
) -> AsyncGenerator[UploadService, None]:
    """Dependency to get upload service."""
    yield UploadService(storage_repo)
