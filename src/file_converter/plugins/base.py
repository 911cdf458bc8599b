"""Base classes for conversion plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..models import SourceFile


@dataclass
class ConversionInput:
    source: SourceFile
    target_format: str
    quality: int = 90
    include_metadata: bool = False
    metadata: Optional[Dict[str, Any]] = None


@dataclass
class ConversionOutput:
    payload: bytes = field(repr=False)
    media_type: str
    extension: str


class ConversionPlugin(ABC):
    """One output-format strategy; a plugin may serve several target tokens."""

    slug: str = ""
    target_formats: tuple[str, ...] = ()
    media_type: str = "application/octet-stream"

    def __init__(self) -> None:
        self.slug = self.slug or f"to-{'-'.join(self.target_formats)}"

    @abstractmethod
    def convert(self, payload: ConversionInput) -> ConversionOutput:
        """Execute the conversion and return the encoded output."""

    def output(self, data: bytes | str, extension: str, media_type: str | None = None) -> ConversionOutput:
        if isinstance(data, str):
            data = data.encode("utf-8")
        return ConversionOutput(payload=data, media_type=media_type or self.media_type, extension=extension)

    def describe(self) -> Dict[str, Any]:
        return {
            "slug": self.slug,
            "targets": list(self.target_formats),
            "media_type": self.media_type,
        }
