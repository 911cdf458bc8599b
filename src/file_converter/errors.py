"""Error code registry, domain exceptions and helpers for consistent API responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, NoReturn, Optional

from fastapi import HTTPException, status


@dataclass(frozen=True)
class ErrorCodeSpec:
    code: str
    zh: str
    en: str
    status: int
    http_status: int


class ErrorRegistry:
    def __init__(self) -> None:
        self._codes: Dict[str, ErrorCodeSpec] = {}

    def register(self, spec: ErrorCodeSpec) -> None:
        if spec.code in self._codes:
            raise ValueError(f"Error code {spec.code} already registered")
        self._codes[spec.code] = spec

    def get(self, code: str) -> ErrorCodeSpec:
        if code not in self._codes:
            raise KeyError(f"Unknown error code: {code}")
        return self._codes[code]

    def to_dict(self) -> Dict[str, ErrorCodeSpec]:
        return dict(self._codes)


ERRORS = ErrorRegistry()


def register_default_errors() -> None:
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_FILE_MISSING",
            zh="未提供上传文件",
            en="No file provided",
            status=4001,
            http_status=status.HTTP_400_BAD_REQUEST,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_CONVERSION_FORBIDDEN",
            zh="该文件类别不允许转换为目标格式",
            en="Invalid conversion for this file category",
            status=4002,
            http_status=status.HTTP_400_BAD_REQUEST,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_FORMAT_UNSUPPORTED",
            zh="目标格式暂不支持",
            en="Unsupported output format",
            status=4003,
            http_status=status.HTTP_400_BAD_REQUEST,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_ARTIFACT_NOT_FOUND",
            zh="文件不存在或已过期",
            en="File not found or expired",
            status=4041,
            http_status=status.HTTP_404_NOT_FOUND,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_FILE_TOO_LARGE",
            zh="上传文件大小超出限制",
            en="Uploaded file exceeds size limit",
            status=4131,
            http_status=status.HTTP_413_CONTENT_TOO_LARGE,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_CONVERSION_FAILED",
            zh="转换失败",
            en="Conversion failed",
            status=5001,
            http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_SERVICE_THROTTLED",
            zh="系统暂时不可用，请稍后重试",
            en="System temporarily unavailable",
            status=5031,
            http_status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    )


register_default_errors()


def raise_error(
    code: str,
    *,
    detail: Optional[str] = None,
    context: Optional[Mapping[str, Any]] = None,
) -> NoReturn:
    spec = ERRORS.get(code)
    payload: Dict[str, Any] = {
        "status": "failure",
        "error_code": spec.code,
        "error_status": spec.status,
        "message": detail or spec.en,
        "zh_message": spec.zh,
    }
    if context:
        payload.update(context)
    raise HTTPException(status_code=spec.http_status, detail=payload)


class ConversionError(Exception):
    """Base class for failures surfaced to the caller with an error code."""

    code = "ERR_CONVERSION_FAILED"

    def __init__(self, message: str, *, context: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = dict(context or {})


class FileMissingError(ConversionError):
    code = "ERR_FILE_MISSING"


class FileTooLargeError(ConversionError):
    code = "ERR_FILE_TOO_LARGE"


class ConversionRejectedError(ConversionError):
    code = "ERR_CONVERSION_FORBIDDEN"


class UnsupportedFormatError(ConversionError):
    code = "ERR_FORMAT_UNSUPPORTED"


class ServiceThrottledError(ConversionError):
    code = "ERR_SERVICE_THROTTLED"

    def __init__(self, message: str, *, time_remaining: int, reason: str) -> None:
        super().__init__(
            message,
            context={"rate_limited": True, "time_remaining": time_remaining, "reason": reason},
        )
        self.time_remaining = time_remaining
        self.reason = reason


class ConversionFailedError(ConversionError):
    code = "ERR_CONVERSION_FAILED"


class ArtifactNotFoundError(ConversionError):
    code = "ERR_ARTIFACT_NOT_FOUND"


def raise_conversion_error(exc: ConversionError) -> NoReturn:
    raise_error(exc.code, detail=exc.message, context=exc.context)
