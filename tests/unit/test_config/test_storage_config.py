"""Unit tests for settings and storage client configuration."""

import pytest
from multipart_broker.config.settings import Settings, load_settings
from multipart_broker.config.storage import build_client_kwargs
from multipart_broker.core.exceptions import StorageConfigurationError


def make_settings(**overrides) -> Settings:
    values = {"AWS_REGION": "eu-west-1", "S3_BUCKET": "bucket"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_defaults():
    """Test multipart defaults."""
    config = make_settings()
    assert config.presign_expiration_seconds == 120
    assert config.randomize_object_keys is True
    assert config.object_key_prefix_length == 5


def test_allowed_origins_parsed():
    """Test comma-separated origins."""
    config = make_settings(ALLOWED_ORIGINS="http://a.test, http://b.test")
    assert config.allowed_origins == ["http://a.test", "http://b.test"]


def test_blank_bucket_rejected():
    """Test bucket must not be blank."""
    with pytest.raises(ValueError):
        make_settings(S3_BUCKET="  ")


def test_load_settings_exits_on_invalid_config(monkeypatch):
    """Test bad startup configuration terminates the process."""
    monkeypatch.setenv("PRESIGN_EXPIRATION_SECONDS", "not-a-number")
    with pytest.raises(SystemExit) as exc_info:
        load_settings()
    assert exc_info.value.code == 1


def test_s3_kwargs_use_explicit_credentials():
    """Test explicit credentials are passed through."""
    config = make_settings(AWS_ACCESS_KEY_ID="key", AWS_SECRET_ACCESS_KEY="secret")
    kwargs = build_client_kwargs(config)
    assert kwargs["region_name"] == "eu-west-1"
    assert kwargs["aws_access_key_id"] == "key"
    assert kwargs["aws_secret_access_key"] == "secret"
    assert "endpoint_url" not in kwargs


def test_s3_kwargs_fall_back_to_credential_chain():
    """Test blank credentials are left to boto3."""
    config = make_settings(AWS_ACCESS_KEY_ID="", AWS_SECRET_ACCESS_KEY="")
    kwargs = build_client_kwargs(config)
    assert "aws_access_key_id" not in kwargs
    assert "aws_secret_access_key" not in kwargs


def test_wasabi_default_endpoint():
    """Test wasabi endpoint derived from region."""
    config = make_settings(STORAGE_PROVIDER="Wasabi")
    kwargs = build_client_kwargs(config)
    assert kwargs["endpoint_url"] == "https://s3.eu-west-1.wasabisys.com"


def test_minio_requires_endpoint():
    """Test minio without endpoint is a configuration error."""
    config = make_settings(STORAGE_PROVIDER="minio", S3_ENDPOINT_URL="")
    with pytest.raises(StorageConfigurationError):
        build_client_kwargs(config)


def test_minio_endpoint():
    """Test minio endpoint is used."""
    config = make_settings(STORAGE_PROVIDER="minio", S3_ENDPOINT_URL="http://localhost:9000")
    assert build_client_kwargs(config)["endpoint_url"] == "http://localhost:9000"


def test_unsupported_provider():
    """Test unknown providers are rejected."""
    config = make_settings(STORAGE_PROVIDER="ftp")
    with pytest.raises(StorageConfigurationError, match="Unsupported storage provider"):
        build_client_kwargs(config)
