"""Delivery channels: hand a named export payload to the user.

Every channel takes (data, filename, content_type) and may report where the
file ended up (a path or a URL). Channels never rename files.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, NamedTuple, Optional, Protocol

from app.config import settings
from app.services.storage.cloudflare_r2 import CloudflareR2Storage, get_r2_storage
from app.utils.logging import logger
from app.utils.metrics import EXPORT_R2_FAILURES, EXPORT_R2_STORE_SECONDS


class Delivery(Protocol):
    def deliver(self, data: bytes, filename: str, content_type: str) -> Optional[str]:
        ...


class DeliveredFile(NamedTuple):
    data: bytes
    filename: str
    content_type: str


class InMemoryDelivery:
    """Keeps delivered files for the caller (HTTP streaming, tests)."""

    def __init__(self):
        self.files: List[DeliveredFile] = []

    def deliver(self, data: bytes, filename: str, content_type: str) -> Optional[str]:
        self.files.append(DeliveredFile(data, filename, content_type))
        return None

    @property
    def last(self) -> Optional[DeliveredFile]:
        return self.files[-1] if self.files else None


class FileSystemDelivery:
    """Writes files into a directory (settings.export_dir by default)."""

    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory) if directory else settings.export_dir

    def deliver(self, data: bytes, filename: str, content_type: str) -> Optional[str]:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / filename
        path.write_bytes(data)
        logger.info("Wrote export file", extra={"path": str(path), "bytes": len(data), "content_type": content_type})
        return str(path)


class R2Delivery:
    """Stores files in Cloudflare R2 and returns a presigned URL."""

    def __init__(self, storage: Optional[CloudflareR2Storage] = None, prefix: str = "exports"):
        self.storage = storage or get_r2_storage()
        self.prefix = prefix.strip("/")

    def deliver(self, data: bytes, filename: str, content_type: str) -> Optional[str]:
        key = f"{self.prefix}/{filename}" if self.prefix else filename
        with EXPORT_R2_STORE_SECONDS.time():
            try:
                return self.storage.store_bytes(key, data, content_type, filename=filename)
            except Exception:
                EXPORT_R2_FAILURES.inc()
                raise


def get_delivery(mode: Optional[str] = None) -> Delivery:
    """Build the delivery channel named by `mode` (defaults to settings.export_delivery)."""
    mode = (mode or settings.export_delivery).lower()
    if mode == "memory":
        return InMemoryDelivery()
    if mode == "filesystem":
        return FileSystemDelivery()
    if mode == "r2":
        return R2Delivery()
    raise ValueError(f"Unknown export delivery mode: {mode}")


__all__ = [
    "Delivery",
    "DeliveredFile",
    "InMemoryDelivery",
    "FileSystemDelivery",
    "R2Delivery",
    "get_delivery",
]
