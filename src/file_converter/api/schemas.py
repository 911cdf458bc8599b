"""Response models for the conversion API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..models import ConversionResult


class ConversionResponse(BaseModel):
    success: bool = True
    file_name: str = Field(..., description="Display name of the converted file")
    content_type: str
    size: int = Field(..., ge=0, description="Converted size in bytes")
    original_size: int = Field(..., ge=0)
    compression_ratio: str = Field(..., description='Size reduction, e.g. "12.34%"')
    source_category: str
    target_format: str
    download_id: str = Field(..., description="Handle accepted by the download endpoints")
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def from_result(cls, result: ConversionResult) -> "ConversionResponse":
        return cls(
            file_name=result.file_name,
            content_type=result.media_type,
            size=result.size,
            original_size=result.original_size,
            compression_ratio=result.compression_ratio,
            source_category=result.source_category.value,
            target_format=result.target_format,
            download_id=result.download_id,
            metadata=result.metadata,
        )


class RuleDescriptor(BaseModel):
    allowed: List[str]
    forbidden: List[str]


class FormatsResponse(BaseModel):
    targets: List[str] = Field(..., description="Target tokens with a registered plugin")
    categories: Dict[str, List[str]] = Field(..., description="Recognised source suffixes by group")
    rules: Dict[str, RuleDescriptor]


class AdmissionState(BaseModel):
    state: Literal["open", "throttled"] = "open"
    reason: Optional[str] = None
    time_remaining: Optional[int] = None


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"] = "ok"
    timestamp: datetime
    admission: AdmissionState
    artifacts: int = 0
