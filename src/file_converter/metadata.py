"""Best-effort metadata about an uploaded file; never fails the request."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from .categories import Category
from .codecs import CodecError, probe_image
from .logging import get_logger

logger = get_logger(__name__)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def extract_metadata(
    payload: bytes,
    file_name: str,
    media_type: str,
    category: Category | None = None,
) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {
        "file_name": file_name,
        "original_mime_type": media_type,
        "size": len(payload),
        "converted_at": utc_timestamp(),
    }

    if category is Category.IMAGE or (media_type or "").startswith("image/"):
        try:
            metadata["dimensions"] = probe_image(payload)
        except CodecError as exc:
            logger.warning("metadata_probe_failed", file_name=file_name, error=str(exc))

    return metadata


__all__ = ["extract_metadata", "utc_timestamp"]
