"""Tests for best-effort metadata extraction."""

from __future__ import annotations

from file_converter.categories import Category
from file_converter.metadata import extract_metadata, utc_timestamp


def test_basic_fields_for_non_image():
    metadata = extract_metadata(b"hello", "notes.txt", "text/plain", Category.DOCUMENT)

    assert metadata["file_name"] == "notes.txt"
    assert metadata["original_mime_type"] == "text/plain"
    assert metadata["size"] == 5
    assert metadata["converted_at"].endswith("Z")
    assert "dimensions" not in metadata


def test_image_dimensions_are_probed(png_bytes):
    metadata = extract_metadata(png_bytes, "dot.png", "image/png", Category.IMAGE)

    dimensions = metadata["dimensions"]
    assert (dimensions["width"], dimensions["height"]) == (40, 30)
    assert dimensions["format"] == "png"
    assert dimensions["has_alpha"] is True


def test_unreadable_image_still_returns_basic_fields():
    metadata = extract_metadata(b"not an image", "broken.png", "image/png", Category.IMAGE)

    assert metadata["size"] == len(b"not an image")
    assert "dimensions" not in metadata


def test_utc_timestamp_has_millisecond_precision():
    stamp = utc_timestamp()
    assert stamp.endswith("Z")
    assert len(stamp.split(".")[-1]) == 4
