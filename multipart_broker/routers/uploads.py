"""Multipart upload routes."""

from fastapi import APIRouter, Depends
from ..core.dependencies import get_upload_service
from ..schemas.upload import (
    AbortRequest,
    CompleteRequest,
    GenericResponse,
    PresignedUrlRequest,
    PresignedUrlResponse,
)
from ..services.upload_service import UploadService

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("", response_model=PresignedUrlResponse)
async def generate_presigned_urls(
    request: PresignedUrlRequest,
    upload_service: UploadService = Depends(get_upload_service),
):
    """
    Open a multipart upload and return a presigned URL for every part.

    URLs expire after a short window; the client uploads each part directly
    to the object store with a PUT and keeps the returned ETag.
    """
    return await upload_service.create_upload(filename=request.filename, parts=request.parts)


@router.post("/{upload_id}/abort", response_model=GenericResponse)
async def abort_multipart_upload(
    upload_id: str,
    request: AbortRequest,
    upload_service: UploadService = Depends(get_upload_service),
):
    """Abort a multipart upload and release its uploaded parts."""
    return await upload_service.abort_upload(upload_id=upload_id, filename=request.filename)


@router.post("/{upload_id}/complete", response_model=GenericResponse)
async def complete_multipart_upload(
    upload_id: str,
    request: CompleteRequest,
    upload_service: UploadService = Depends(get_upload_service),
):
    """Complete a multipart upload from the parts' ETags."""
    return await upload_service.complete_upload(
        upload_id=upload_id,
        filename=request.filename,
        completed_parts=request.completed_parts,
    )
