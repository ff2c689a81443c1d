"""Multipart upload schemas."""

from typing import Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from ..utils.constants import MAX_PART_NUMBER, MIN_PART_NUMBER


class PresignedUrlRequest(BaseModel):
    """Request to open a multipart upload and presign its parts."""

    filename: str = Field(..., min_length=1, description="Name of the file to upload")
    parts: int = Field(
        ...,
        ge=MIN_PART_NUMBER,
        le=MAX_PART_NUMBER,
        description="Number of parts the client will upload",
    )
    # Accepted for compatibility with existing clients, not used
    filesize: Optional[Union[int, str]] = Field(None, description="Total file size")


class PresignedUrlResponse(BaseModel):
    """Response carrying one presigned URL per part."""

    model_config = ConfigDict(populate_by_name=True)

    filename: str = Field(..., description="Object key the parts are uploaded to")
    presigned_urls: Dict[int, str] = Field(
        ...,
        alias="preSignedUrls",
        description="Presigned upload URL keyed by part number",
    )
    upload_id: str = Field(..., alias="uploadId", description="Multipart upload ID")


class AbortRequest(BaseModel):
    """Request to abort a multipart upload."""

    filename: str = Field(..., min_length=1, description="Object key of the upload")


class CompletedPart(BaseModel):
    """A part the client finished uploading."""

    model_config = ConfigDict(populate_by_name=True)

    etag: str = Field(..., alias="eTag", description="ETag returned by the store for the part")
    part_number: int = Field(
        ...,
        alias="partNumber",
        ge=MIN_PART_NUMBER,
        le=MAX_PART_NUMBER,
        description="Part number (1-indexed)",
    )


class CompleteRequest(BaseModel):
    """Request to complete a multipart upload."""

    model_config = ConfigDict(populate_by_name=True)

    filename: str = Field(..., min_length=1, description="Object key of the upload")
    completed_parts: List[CompletedPart] = Field(
        ...,
        alias="completedParts",
        description="Uploaded parts with their ETags",
    )


class GenericResponse(BaseModel):
    """Envelope used for abort/complete results and errors."""

    code: int
    message: str
