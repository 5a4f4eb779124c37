"""Element screenshot capture and upload."""

from __future__ import annotations

import asyncio
import io
import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from PIL import Image

from ..errors import CaptureError, UploadError

if TYPE_CHECKING:
    from playwright.async_api import ElementHandle

    from ...adapters.artifact_store import ArtifactStore
    from ..context import StorageConfig

CONTENT_TYPE = "image/png"

_UNSAFE = re.compile(r"[^A-Za-z0-9-]")


def iso_timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def artifact_filename(config: StorageConfig, now: datetime | None = None) -> str:
    """Build ``[prefix-]slug-<timestamp>.png``; the stem is filesystem/URL safe."""
    parts = [p for p in (config.filename_prefix, config.slug, iso_timestamp(now)) if p]
    return _UNSAFE.sub("-", "-".join(parts)) + ".png"


def describe_image(data: bytes) -> str:
    try:
        with Image.open(io.BytesIO(data)) as img:
            return f"{img.width}x{img.height} {img.format or 'image'}, {len(data)} bytes"
    except Exception:
        return f"{len(data)} bytes"


async def capture(handle: ElementHandle, scratch_path: str | None = None) -> bytes:
    """Screenshot exactly the element's bounding box."""
    try:
        if scratch_path:
            data = await handle.screenshot(path=scratch_path, type="png")
        else:
            data = await handle.screenshot(type="png")
    except Exception as e:
        raise CaptureError("capture_screenshot", f"Screenshot failed: {e}") from e
    if not data:
        raise CaptureError("capture_screenshot", "Screenshot produced no data")
    return data


async def store(
    artifact_store: ArtifactStore,
    data: bytes,
    config: StorageConfig,
    now: datetime | None = None,
) -> str:
    """Upload ``data`` and return the public URL of the stored object."""
    key = f"{config.key_prefix}/{artifact_filename(config, now)}"
    try:
        await asyncio.to_thread(artifact_store.put, config.bucket, key, data, CONTENT_TYPE)
    except Exception as e:
        raise UploadError(
            "upload_screenshot", f"Upload to s3://{config.bucket}/{key} failed: {e}"
        ) from e
    return f"{config.public_base_url}/{key}"
