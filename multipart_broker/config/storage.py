"""Storage configuration for S3 and S3-compatible providers."""

from functools import lru_cache
from typing import Any, Dict

import boto3
from botocore.client import BaseClient
from botocore.config import Config

from ..core.exceptions import StorageConfigurationError
from ..utils.constants import StorageProvider
from .settings import Settings, settings

WASABI_DEFAULT_ENDPOINT = "https://s3.{region}.wasabisys.com"


def build_client_kwargs(config: Settings) -> Dict[str, Any]:
    """
    Build boto3 client keyword arguments for the configured provider.
    Credentials are only passed when both halves are set, otherwise boto3
    resolves them through its standard credential chain.
    """
    try:
        provider = StorageProvider(config.storage_provider)
    except ValueError:
        raise StorageConfigurationError(
            f"Unsupported storage provider: {config.storage_provider}"
        )

    kwargs: Dict[str, Any] = {
        "region_name": config.aws_region,
        "config": Config(signature_version="s3v4"),
    }

    if config.aws_access_key_id and config.aws_secret_access_key:
        kwargs["aws_access_key_id"] = config.aws_access_key_id
        kwargs["aws_secret_access_key"] = config.aws_secret_access_key

    if provider == StorageProvider.WASABI:
        kwargs["endpoint_url"] = config.s3_endpoint_url or WASABI_DEFAULT_ENDPOINT.format(
            region=config.aws_region
        )
    elif provider == StorageProvider.MINIO:
        if not config.s3_endpoint_url:
            raise StorageConfigurationError("S3_ENDPOINT_URL is required for minio")
        kwargs["endpoint_url"] = config.s3_endpoint_url
        # MinIO deployments are usually addressed by path, not virtual host
        kwargs["config"] = Config(signature_version="s3v4", s3={"addressing_style": "path"})
    elif config.s3_endpoint_url:
        kwargs["endpoint_url"] = config.s3_endpoint_url

    return kwargs


@lru_cache(maxsize=1)
def get_storage_client() -> BaseClient:
    """
    Get storage client based on configured provider.
    The client is created once per process and shared across requests.
    """
    return boto3.client("s3", **build_client_kwargs(settings))


def get_bucket_name() -> str:
    """Get bucket name for the configured storage provider."""
    return settings.s3_bucket
