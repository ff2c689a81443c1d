"""Multipart upload broker issuing presigned part URLs for object storage."""

__version__ = "1.0.0"
