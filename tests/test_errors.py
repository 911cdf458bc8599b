"""Unit tests for the centralized error helpers."""

from __future__ import annotations

import pytest
from fastapi import HTTPException, status

from file_converter.errors import (
    ERRORS,
    ConversionRejectedError,
    ErrorCodeSpec,
    ErrorRegistry,
    ServiceThrottledError,
    raise_conversion_error,
    raise_error,
)


def test_raise_error_returns_structured_payload():
    with pytest.raises(HTTPException) as exc:
        raise_error("ERR_FILE_MISSING", detail="custom detail")

    assert exc.value.status_code == status.HTTP_400_BAD_REQUEST
    detail = exc.value.detail
    assert detail["status"] == "failure"
    assert detail["error_code"] == "ERR_FILE_MISSING"
    assert detail["error_status"] == 4001
    assert detail["message"] == "custom detail"
    assert detail["zh_message"]


def test_raise_error_defaults_to_english_message():
    with pytest.raises(HTTPException) as exc:
        raise_error("ERR_ARTIFACT_NOT_FOUND")

    assert exc.value.status_code == status.HTTP_404_NOT_FOUND
    assert exc.value.detail["message"] == "File not found or expired"


def test_error_registry_rejects_duplicate_code():
    registry = ErrorRegistry()
    spec = ErrorCodeSpec(
        code="ERR_DUPLICATED",
        zh="重复",
        en="duplicate",
        status=4000,
        http_status=status.HTTP_400_BAD_REQUEST,
    )

    registry.register(spec)
    with pytest.raises(ValueError):
        registry.register(spec)


def test_error_registry_unknown_code():
    with pytest.raises(KeyError):
        ERRORS.get("ERR_NOPE")


def test_conversion_error_context_is_merged():
    error = ConversionRejectedError("Invalid conversion", context={"suggestion": "Try txt"})

    with pytest.raises(HTTPException) as exc:
        raise_conversion_error(error)

    assert exc.value.detail["error_code"] == "ERR_CONVERSION_FORBIDDEN"
    assert exc.value.detail["suggestion"] == "Try txt"
    assert exc.value.detail["message"] == "Invalid conversion"


def test_throttled_error_maps_to_503():
    error = ServiceThrottledError("busy", time_remaining=7, reason="High system load")

    with pytest.raises(HTTPException) as exc:
        raise_conversion_error(error)

    assert exc.value.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert exc.value.detail["rate_limited"] is True
    assert exc.value.detail["time_remaining"] == 7


def test_oversize_upload_maps_to_413():
    assert ERRORS.get("ERR_FILE_TOO_LARGE").http_status == 413
