"""Tests for the conversion orchestration service."""

from __future__ import annotations

import base64
import json

import pytest

from file_converter.categories import Category
from file_converter.codecs import REMEDIATION_HINTS
from file_converter.dispatcher import ConversionDispatcher
from file_converter.errors import (
    ArtifactNotFoundError,
    ConversionFailedError,
    ConversionRejectedError,
    FileMissingError,
    FileTooLargeError,
    ServiceThrottledError,
    UnsupportedFormatError,
)
from file_converter.service import ConversionService, compression_ratio, normalize_quality, normalize_target


class _SpyDispatcher(ConversionDispatcher):
    def __init__(self) -> None:
        super().__init__()
        self.calls = []

    def dispatch(self, request, metadata=None):
        self.calls.append(request)
        return super().dispatch(request, metadata)


@pytest.fixture()
def spy_service(test_settings, store, gate):
    return ConversionService(test_settings, store, gate, _SpyDispatcher())


def test_text_to_json_scenario(service, store):
    payload = ("word " * 24).encode("utf-8")
    assert len(payload) == 120

    result = service.convert("notes.txt", "text/plain", payload, "JSON")

    document = json.loads(result.payload)
    assert document["characterCount"] == 120
    assert document["wordCount"] == 24
    assert result.file_name == "notes.json"
    assert result.media_type == "application/json"
    assert result.original_size == 120
    assert result.size == len(result.payload)
    assert result.compression_ratio == f"{(1 - result.size / 120) * 100:.2f}%"
    assert result.source_category is Category.DOCUMENT
    assert result.target_format == "json"
    assert base64.urlsafe_b64decode(result.download_id).decode() == "notes.json"
    assert store.get(result.download_id).payload == result.payload
    assert result.metadata is None


def test_default_target_is_png(service, png_bytes):
    result = service.convert("dot.png", "image/png", png_bytes)

    assert result.target_format == "png"
    assert result.file_name == "dot.png"


def test_metadata_only_when_requested(service, png_bytes):
    result = service.convert("dot.png", "image/png", png_bytes, "webp", "80", include_metadata=True)

    assert result.metadata["dimensions"]["width"] == 40
    assert result.metadata["file_name"] == "dot.png"


def test_data_to_jpg_rejected_before_any_codec(spy_service, store):
    with pytest.raises(ConversionRejectedError) as exc:
        spy_service.convert("data.json", "application/json", b'{"a": 1}', "jpg")

    assert "data files cannot be converted to jpg" in exc.value.message
    assert exc.value.context["suggestion"].startswith("Try converting to one of these formats: json")
    assert spy_service.dispatcher.calls == []
    assert len(store) == 0


def test_unsupported_target_leaves_store_untouched(service, store):
    with pytest.raises(UnsupportedFormatError):
        service.convert("report.txt", "text/plain", b"hello", "docx")
    assert len(store) == 0


def test_codec_failure_carries_remediation_hint(service, store):
    with pytest.raises(ConversionFailedError) as exc:
        service.convert("broken.png", "image/png", b"garbage", "webp")

    assert exc.value.message.startswith("Conversion failed: ")
    assert exc.value.context["suggestion"] == REMEDIATION_HINTS["image"]
    details = exc.value.context["details"]
    assert details["file_name"] == "broken.png"
    assert details["file_type"] == "image/png"
    assert details["target_format"] == "webp"
    assert len(store) == 0


def test_three_throttled_requests_report_decreasing_time(spy_service, store, gate, clock):
    gate.apply_status("critical")
    remaining = []
    for _ in range(3):
        with pytest.raises(ServiceThrottledError) as exc:
            spy_service.convert("a.txt", "text/plain", b"x", "json")
        remaining.append(exc.value.time_remaining)
        clock.advance(15 * 60)

    assert remaining == [60, 45, 30]
    assert spy_service.dispatcher.calls == []
    assert len(store) == 0


def test_throttle_is_checked_before_the_upload(service, gate):
    gate.apply_status("warning")
    with pytest.raises(ServiceThrottledError):
        service.convert(None, None, None)


def test_missing_file(service):
    with pytest.raises(FileMissingError):
        service.convert(None, None, None, "json")
    with pytest.raises(FileMissingError):
        service.convert("", "text/plain", b"x", "json")


def test_oversize_upload(service):
    with pytest.raises(FileTooLargeError) as exc:
        service.convert("big.txt", "text/plain", b"x" * (1024 * 1024 + 1), "json")
    assert exc.value.context["max_size"] == 1024 * 1024


def test_fetch(service):
    result = service.convert("a.txt", "text/plain", b"hello", "txt")

    assert service.fetch(result.download_id).file_name == "a.txt"
    with pytest.raises(ArtifactNotFoundError):
        service.fetch("missing")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(None, 90), ("", 90), ("abc", 90), ("0", 90), ("-5", 90), ("75", 75), (" 60 ", 60), ("150", 100), (85, 85)],
)
def test_normalize_quality(raw, expected):
    assert normalize_quality(raw) == expected


def test_normalize_target():
    assert normalize_target(None) == "png"
    assert normalize_target("  ") == "png"
    assert normalize_target("PDF") == "pdf"


def test_compression_ratio():
    assert compression_ratio(0, 10) == "0.00%"
    assert compression_ratio(200, 50) == "75.00%"
    assert compression_ratio(100, 150) == "-50.00%"
