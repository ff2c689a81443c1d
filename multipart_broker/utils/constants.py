"""Application constants and enums."""

from enum import Enum


class StorageProvider(str, Enum):
    """Storage provider enum."""

    S3 = "s3"
    WASABI = "wasabi"
    MINIO = "minio"


# S3 multipart limits
MIN_PART_NUMBER = 1
MAX_PART_NUMBER = 10000

# Default chunk size used by the upload client (10MB per part)
DEFAULT_CHUNK_SIZE = 10 * 1024 * 1024

ABORTED_MESSAGE = "Aborted"
BAD_REQUEST_MESSAGE = "Bad Request"
INTERNAL_ERROR_MESSAGE = "Internal Server Error"
TOO_MANY_REQUESTS_MESSAGE = "Too Many Requests"

# Provider error code returned when an upload id is unknown or already gone
NO_SUCH_UPLOAD = "NoSuchUpload"
