"""In-memory artifact store keyed by download handle, with time-based expiry."""

from __future__ import annotations

import base64
import re
import secrets
import threading
import time
from typing import Callable, Dict, Optional

from .models import ArtifactRecord

_UNSAFE_CHARS = re.compile(r"[^\w\s.-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+", re.ASCII)


def sanitize_download_name(name: str, max_length: int = 100) -> str:
    """Make ``name`` safe for a Content-Disposition header, keeping its extension."""

    safe = _WHITESPACE.sub("_", _UNSAFE_CHARS.sub("_", name))
    if len(safe) <= max_length:
        return safe
    stem, dot, extension = safe.rpartition(".")
    if not dot or len(extension) + 1 >= max_length:
        return safe[:max_length]
    return stem[: max_length - len(extension) - 1] + "." + extension


class ArtifactStore:
    """Thread-safe store; every ``put`` sweeps records older than the retention."""

    def __init__(
        self,
        retention_sec: float = 3600,
        *,
        clock: Callable[[], float] = time.time,
        handle_strategy: str = "name",
    ) -> None:
        self.retention_sec = retention_sec
        self.handle_strategy = handle_strategy
        self._clock = clock
        self._records: Dict[str, ArtifactRecord] = {}
        self._lock = threading.Lock()

    def make_handle(self, file_name: str) -> str:
        if self.handle_strategy == "random":
            return secrets.token_urlsafe(16)
        return base64.urlsafe_b64encode(file_name.encode("utf-8")).decode("ascii")

    def put(self, handle: str, payload: bytes, media_type: str, file_name: str) -> ArtifactRecord:
        now = self._clock()
        record = ArtifactRecord(
            handle=handle,
            payload=payload,
            media_type=media_type,
            file_name=file_name,
            created_at=now,
        )
        with self._lock:
            self._records[handle] = record
            self._sweep_locked(now)
        return record

    def get(self, handle: str) -> Optional[ArtifactRecord]:
        with self._lock:
            return self._records.get(handle)

    def sweep(self, now: float | None = None) -> int:
        with self._lock:
            return self._sweep_locked(self._clock() if now is None else now)

    def _sweep_locked(self, now: float) -> int:
        cutoff = now - self.retention_sec
        expired = [handle for handle, record in self._records.items() if record.created_at < cutoff]
        for handle in expired:
            del self._records[handle]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = ["ArtifactStore", "sanitize_download_name"]
