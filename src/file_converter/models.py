"""Value objects passed between the conversion stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .categories import Category, file_stem, file_suffix


@dataclass(frozen=True)
class SourceFile:
    name: str
    media_type: str
    payload: bytes = field(repr=False)
    category: Category = Category.UNKNOWN

    @property
    def suffix(self) -> str:
        return file_suffix(self.name)

    @property
    def stem(self) -> str:
        return file_stem(self.name)

    @property
    def size(self) -> int:
        return len(self.payload)


@dataclass(frozen=True)
class ConversionRequest:
    source: SourceFile
    target_format: str
    quality: int = 90
    include_metadata: bool = False


@dataclass(frozen=True)
class ConversionResult:
    payload: bytes = field(repr=False)
    media_type: str
    extension: str
    file_name: str
    size: int
    original_size: int
    compression_ratio: str
    source_category: Category
    target_format: str
    download_id: str
    metadata: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class ArtifactRecord:
    handle: str
    payload: bytes = field(repr=False)
    media_type: str
    file_name: str
    created_at: float


__all__ = ["ArtifactRecord", "ConversionRequest", "ConversionResult", "SourceFile"]
