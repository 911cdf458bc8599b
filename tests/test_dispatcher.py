"""Tests for target-format dispatch."""

from __future__ import annotations

import pytest

from file_converter.codecs import WorkbookCodecError
from file_converter.dispatcher import ConversionDispatcher
from file_converter.errors import UnsupportedFormatError
from file_converter.models import ConversionRequest


def test_dispatch_routes_to_plugin(make_source):
    request = ConversionRequest(source=make_source("a.txt", b"hi", "text/plain"), target_format="TXT")
    output = ConversionDispatcher().dispatch(request)

    assert output.payload == b"hi"
    assert output.extension == "txt"


def test_dispatch_passes_metadata(make_source):
    request = ConversionRequest(source=make_source("a.txt", b"hi", "text/plain"), target_format="xml")
    output = ConversionDispatcher().dispatch(request, {"origin": "test"})

    assert b"origin" in output.payload


def test_unknown_target_lists_supported_formats(make_source):
    request = ConversionRequest(source=make_source("a.json", b"{}"), target_format="tsv")

    with pytest.raises(UnsupportedFormatError) as exc:
        ConversionDispatcher().dispatch(request)

    assert exc.value.code == "ERR_FORMAT_UNSUPPORTED"
    assert set(exc.value.context["supported_formats"]) == {"images", "documents", "spreadsheets", "data"}


def test_codec_errors_propagate(make_source):
    request = ConversionRequest(source=make_source("bad.xlsx", b"not a zip"), target_format="json")

    with pytest.raises(WorkbookCodecError):
        ConversionDispatcher().dispatch(request)
