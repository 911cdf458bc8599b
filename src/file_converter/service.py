"""Conversion orchestration: admission, classification, policy, dispatch, storage."""

from __future__ import annotations

from typing import Any, Dict, Optional

from .admission import AdmissionGate
from .categories import classify
from .codecs import CodecError, remediation_hint
from .config import Settings
from .dispatcher import ConversionDispatcher
from .errors import (
    ArtifactNotFoundError,
    ConversionError,
    ConversionFailedError,
    ConversionRejectedError,
    FileMissingError,
    FileTooLargeError,
    ServiceThrottledError,
)
from .logging import get_logger
from .metadata import extract_metadata, utc_timestamp
from .models import ArtifactRecord, ConversionRequest, ConversionResult, SourceFile
from .monitoring import record_artifacts, record_conversion, record_rejection
from .policy import DEFAULT_POLICY, RulesTable
from .storage import ArtifactStore

logger = get_logger(__name__)


def normalize_target(target_format: Optional[str], default: str = "png") -> str:
    target = (target_format or "").strip().lower()
    return target or default


def normalize_quality(quality: Any, default: int = 90, maximum: int = 100) -> int:
    """Parse ``quality`` leniently: junk or non-positive values fall back to ``default``."""

    try:
        value = int(str(quality).strip())
    except (TypeError, ValueError):
        return default
    if value <= 0:
        return default
    return min(value, maximum)


def compression_ratio(original_size: int, new_size: int) -> str:
    if original_size <= 0:
        return "0.00%"
    return f"{(1 - new_size / original_size) * 100:.2f}%"


class ConversionService:
    def __init__(
        self,
        settings: Settings,
        store: ArtifactStore,
        gate: AdmissionGate,
        dispatcher: ConversionDispatcher | None = None,
        policy: RulesTable | None = None,
    ) -> None:
        self.settings = settings
        self.store = store
        self.gate = gate
        self.dispatcher = dispatcher or ConversionDispatcher()
        self.policy = policy or DEFAULT_POLICY

    def convert(
        self,
        file_name: Optional[str],
        media_type: Optional[str],
        payload: Optional[bytes],
        target_format: Optional[str] = None,
        quality: Any = None,
        include_metadata: bool = False,
    ) -> ConversionResult:
        conversion = self.settings.conversion
        target = normalize_target(target_format, conversion.default_target_format)
        quality_value = normalize_quality(quality, conversion.default_quality, conversion.max_quality)
        media_type = media_type or "application/octet-stream"

        try:
            self.gate.admit()
        except ServiceThrottledError:
            record_rejection("throttled")
            raise

        if payload is None or not file_name:
            raise FileMissingError("No file provided")
        max_bytes = self.settings.file_limits.max_upload_size_mb * 1024 * 1024
        if len(payload) > max_bytes:
            record_rejection("too_large")
            raise FileTooLargeError(
                f"File exceeds the {self.settings.file_limits.max_upload_size_mb} MB upload limit",
                context={"size": len(payload), "max_size": max_bytes},
            )

        category = classify(file_name, media_type)
        source = SourceFile(name=file_name, media_type=media_type, payload=payload, category=category)
        log = logger.bind(file_name=file_name, category=category.value, target=target)

        decision = self.policy.evaluate(category, target)
        if not decision.allowed:
            record_rejection("policy")
            log.info("conversion_rejected")
            raise ConversionRejectedError(
                f"Invalid conversion: {category.value} files cannot be converted to {target}",
                context={"suggestion": decision.suggestion},
            )

        metadata = extract_metadata(payload, file_name, media_type, category) if include_metadata else None
        request = ConversionRequest(
            source=source,
            target_format=target,
            quality=quality_value,
            include_metadata=include_metadata,
        )

        try:
            output = self.dispatcher.dispatch(request, metadata)
        except ConversionError:
            record_conversion(target, "unsupported")
            raise
        except (CodecError, ValueError, TypeError, OSError) as exc:
            record_conversion(target, "failed")
            log.error("conversion_failed", error=str(exc))
            context: Dict[str, Any] = {
                "details": {
                    "file_name": file_name,
                    "file_type": media_type,
                    "target_format": target,
                    "timestamp": utc_timestamp(),
                }
            }
            hint = remediation_hint(exc)
            if hint:
                context["suggestion"] = hint
            raise ConversionFailedError(f"Conversion failed: {exc}", context=context) from exc

        display_name = f"{source.stem}.{output.extension}"
        handle = self.store.make_handle(display_name)
        self.store.put(handle, output.payload, output.media_type, display_name)
        record_artifacts(len(self.store))
        record_conversion(target, "success")
        log.info("conversion_succeeded", size=len(output.payload), download_id=handle)

        return ConversionResult(
            payload=output.payload,
            media_type=output.media_type,
            extension=output.extension,
            file_name=display_name,
            size=len(output.payload),
            original_size=source.size,
            compression_ratio=compression_ratio(source.size, len(output.payload)),
            source_category=category,
            target_format=target,
            download_id=handle,
            metadata=metadata,
        )

    def fetch(self, handle: str) -> ArtifactRecord:
        record = self.store.get(handle)
        if record is None:
            raise ArtifactNotFoundError("File not found or expired")
        return record


__all__ = ["ConversionService", "compression_ratio", "normalize_quality", "normalize_target"]
