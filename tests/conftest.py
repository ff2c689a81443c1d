"""Pytest configuration and fixtures."""

import os

# Settings are read at import time, so the environment is prepared first
os.environ["AWS_REGION"] = "us-east-1"
os.environ["S3_BUCKET"] = "test-bucket"
os.environ["STORAGE_PROVIDER"] = "s3"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("S3_ENDPOINT_URL", None)

import itertools
from typing import AsyncGenerator
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.config import Config
from httpx import AsyncClient, ASGITransport

from multipart_broker.main import app
from multipart_broker.core.dependencies import get_storage_repo
from multipart_broker.repositories.storage_repo import StorageRepository

TEST_BUCKET = "test-bucket"


@pytest.fixture(scope="session")
def presign_client():
    """Real boto3 client; presigning is local and needs no network."""
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        config=Config(signature_version="s3v4"),
    )


@pytest.fixture
def storage_client(presign_client):
    """Mock S3 client issuing a new upload id per session."""
    counter = itertools.count(1)
    client = MagicMock()
    client.create_multipart_upload.side_effect = lambda **kwargs: {
        "Bucket": kwargs["Bucket"],
        "Key": kwargs["Key"],
        "UploadId": f"upload-{next(counter)}",
    }
    client.generate_presigned_url.side_effect = presign_client.generate_presigned_url
    client.complete_multipart_upload.side_effect = lambda **kwargs: {
        "Bucket": kwargs["Bucket"],
        "Key": kwargs["Key"],
        "ETag": '"final-etag-3"',
    }
    client.abort_multipart_upload.return_value = {}
    return client


@pytest.fixture
def storage_repo(storage_client) -> StorageRepository:
    """Storage repository bound to the mock client."""
    return StorageRepository(client=storage_client, bucket_name=TEST_BUCKET)


@pytest.fixture(scope="function")
async def client(storage_repo: StorageRepository) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    async def override_get_storage_repo():
        yield storage_repo

    app.dependency_overrides[get_storage_repo] = override_get_storage_repo

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
