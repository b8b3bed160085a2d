"""Request size limits for evidence photos and roster uploads."""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request, UploadFile

from .config import env_int, settings


def _max_photo_bytes() -> int:
    return max(settings.evidence_max_bytes, 1024)


def _max_roster_bytes() -> int:
    return max(env_int("MAX_ROSTER_BYTES", 5 * 1024 * 1024), 1024)


def _content_length_too_large(request: Request, max_bytes: int) -> bool:
    length = request.headers.get("content-length")
    if not length:
        return False
    try:
        return int(length) > max_bytes
    except Exception:
        return False


def enforce_upload_limit(request: Request) -> None:
    # multipart overhead is small next to a photo, allow one extra 64 KiB
    if _content_length_too_large(request, _max_photo_bytes() + 65536):
        raise HTTPException(status_code=413, detail="Payload too large")


async def read_upload_bytes_async(upload: UploadFile, *, max_bytes: Optional[int] = None) -> bytes:
    limit = max_bytes or _max_photo_bytes()
    data = await upload.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(status_code=413, detail="Upload too large")
    return data


async def read_roster_bytes_async(upload: UploadFile) -> bytes:
    return await read_upload_bytes_async(upload, max_bytes=_max_roster_bytes())
