"""
Storage abstraction for check-area evidence photos.

Photos land under ``uploads/<person_id>/<location_id>-<timestamp>.<ext>``
either on local disk or in an S3-compatible bucket (Cloudflare R2,
DomaiNesia object storage).
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..core.config import settings
from ..core.errors import StorageError

ALLOWED_CONTENT_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

LOCAL_MEDIA_PREFIX = "/media/evidence"
_KEY_SEGMENT = re.compile(r"^[A-Za-z0-9_-]+$")


@dataclass
class StorageResult:
    storage_path: str
    public_url: str


def extension_for(content_type: Optional[str]) -> str:
    ext = ALLOWED_CONTENT_TYPES.get((content_type or "").split(";")[0].strip().lower())
    if ext is None:
        raise ValueError(f"Unsupported photo type: {content_type or 'unknown'}")
    return ext


def build_object_key(person_id: str, location_id: str, content_type: Optional[str], *, now_ms: Optional[int] = None) -> str:
    for segment in (person_id, location_id):
        if not _KEY_SEGMENT.match(segment or ""):
            raise ValueError(f"Invalid storage key segment: {segment!r}")
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"uploads/{person_id}/{location_id}-{stamp}.{extension_for(content_type)}"


def default_local_root() -> Path:
    return Path(__file__).resolve().parents[2] / "data" / "evidence"


class StorageProvider:
    def save_bytes(self, *, data: bytes, content_type: Optional[str], key: str) -> StorageResult:
        raise NotImplementedError


class LocalStorageProvider(StorageProvider):
    def __init__(self, root: Optional[str] = None, base_url: Optional[str] = None) -> None:
        base_dir = root or settings.evidence_storage_dir
        self.root = Path(base_dir).expanduser() if base_dir else default_local_root()
        self.root.mkdir(parents=True, exist_ok=True)
        self.base_url = (base_url or settings.evidence_base_url or LOCAL_MEDIA_PREFIX).rstrip("/")

    def save_bytes(self, *, data: bytes, content_type: Optional[str], key: str) -> StorageResult:
        out_path = (self.root / key).resolve()
        if not out_path.is_relative_to(self.root.resolve()):
            raise StorageError(f"Key escapes evidence root: {key}")
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Failed to write {key}: {exc}") from exc
        return StorageResult(storage_path=str(out_path), public_url=f"{self.base_url}/{key}")


class S3StorageProvider(StorageProvider):
    def __init__(self) -> None:
        import boto3

        self.bucket = settings.evidence_s3_bucket or ""
        if not self.bucket:
            raise StorageError("EVIDENCE_S3_BUCKET is required for s3 storage")
        self.endpoint_url = settings.evidence_s3_endpoint
        self.public_url = settings.evidence_s3_public_url
        self.client = boto3.client(
            "s3",
            endpoint_url=self.endpoint_url,
            region_name=settings.evidence_s3_region or "auto",
            aws_access_key_id=settings.evidence_s3_access_key,
            aws_secret_access_key=settings.evidence_s3_secret_key,
        )

    def _public_base(self) -> str:
        if self.public_url:
            return self.public_url.rstrip("/")
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}"
        return f"https://{self.bucket}.s3.amazonaws.com"

    def save_bytes(self, *, data: bytes, content_type: Optional[str], key: str) -> StorageResult:
        extra = {}
        if content_type:
            extra["ContentType"] = content_type
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        except Exception as exc:
            raise StorageError(f"Upload of {key} to bucket {self.bucket} failed: {exc}") from exc
        return StorageResult(storage_path=key, public_url=f"{self._public_base()}/{key}")


def get_storage_provider() -> StorageProvider:
    backend = (settings.evidence_storage_backend or "local").lower()
    if backend == "s3":
        return S3StorageProvider()
    return LocalStorageProvider()
