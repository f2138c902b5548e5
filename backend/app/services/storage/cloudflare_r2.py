"""Cloudflare R2 storage service (S3-compatible) for export files.

Stores export bytes under a key and hands back a presigned download URL.
"""
from __future__ import annotations
import boto3
from botocore.client import Config
from typing import Optional
from app.config import settings
from app.utils.logging import logger


class CloudflareR2Storage:
    def __init__(self, *, access_key_id: str, secret_access_key: str, endpoint_url: str, bucket: str, presign_expiry: int = 3600, client=None):
        self.bucket = bucket
        self.presign_expiry = presign_expiry
        # region_name can be 'auto' for R2; disable signature version guessing
        self.client = client or boto3.client(
            's3',
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            region_name='auto',
            config=Config(signature_version='s3v4')
        )

    def store_bytes(self, key: str, data: bytes, content_type: str, filename: Optional[str] = None) -> str:
        """Store bytes at key and return a presigned GET URL."""
        extra = {}
        if filename:
            extra['ContentDisposition'] = f'attachment; filename="{filename}"'
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type, **extra)
            url = self.client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket, 'Key': key},
                ExpiresIn=self.presign_expiry
            )
            logger.info("Stored export in R2", extra={"bucket": self.bucket, "key": key, "bytes": len(data)})
            return url
        except Exception:
            logger.exception("Failed to store bytes in R2", extra={"bucket": self.bucket, "key": key})
            raise


_R2_CACHE: Optional[CloudflareR2Storage] = None


def get_r2_storage() -> CloudflareR2Storage:
    """Get or create a singleton CloudflareR2Storage instance."""
    global _R2_CACHE
    if _R2_CACHE is None:
        if not (settings.r2_access_key_id and settings.r2_secret_access_key and settings.r2_bucket and settings.r2_endpoint_url):
            raise RuntimeError("R2 storage not configured")
        _R2_CACHE = CloudflareR2Storage(
            access_key_id=settings.r2_access_key_id,
            secret_access_key=settings.r2_secret_access_key,
            endpoint_url=settings.r2_endpoint_url,
            bucket=settings.r2_bucket,
            presign_expiry=settings.r2_presign_expiry,
        )
    return _R2_CACHE


__all__ = ["CloudflareR2Storage", "get_r2_storage"]
