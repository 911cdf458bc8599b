"""Shared pytest fixtures for the conversion engine tests."""

from __future__ import annotations

import io
import json

import pytest
from docx import Document
from openpyxl import Workbook
from PIL import Image

from file_converter.admission import AdmissionGate
from file_converter.categories import classify
from file_converter.config import (
    ArtifactSettings,
    FileLimitSettings,
    LoggingSettings,
    MonitoringSettings,
    Settings,
)
from file_converter.models import SourceFile
from file_converter.plugins import load_plugins
from file_converter.service import ConversionService
from file_converter.storage import ArtifactStore

START_TIME = 1_700_000_000.0


class FakeClock:
    def __init__(self, now: float = START_TIME) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(scope="session", autouse=True)
def builtin_plugins() -> None:
    load_plugins()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    return Settings(
        service_name="file-conversion-engine-test",
        environment="test",
        api_version="v1",
        base_url="/api/v1",
        file_limits=FileLimitSettings(max_upload_size_mb=1),
        logging=LoggingSettings(level="DEBUG", log_dir=str(tmp_path / "logs")),
        monitoring=MonitoringSettings(metrics_enabled=False),
        artifacts=ArtifactSettings(retention_sec=3600),
        plugin_modules_file=None,
    )


@pytest.fixture()
def store(clock) -> ArtifactStore:
    return ArtifactStore(3600, clock=clock)


@pytest.fixture()
def gate(clock) -> AdmissionGate:
    return AdmissionGate(clock=clock)


@pytest.fixture()
def service(test_settings, store, gate) -> ConversionService:
    return ConversionService(test_settings, store, gate)


@pytest.fixture()
def make_source():
    def _make(name: str, payload: bytes, media_type: str = "application/octet-stream") -> SourceFile:
        return SourceFile(name=name, media_type=media_type, payload=payload, category=classify(name, media_type))

    return _make


@pytest.fixture()
def png_bytes() -> bytes:
    image = Image.new("RGBA", (40, 30), (200, 30, 30, 128))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def jpeg_bytes() -> bytes:
    image = Image.new("RGB", (64, 48), (10, 120, 220))
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


@pytest.fixture()
def docx_bytes() -> bytes:
    document = Document()
    document.add_heading("Quarterly Report", level=1)
    paragraph = document.add_paragraph("Revenue ")
    paragraph.add_run("grew").bold = True
    paragraph.add_run(" by ")
    paragraph.add_run("12%").italic = True
    document.add_heading("Details", level=2)
    document.add_paragraph("Costs & margins stayed flat.")
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


@pytest.fixture()
def xlsx_bytes() -> bytes:
    workbook = Workbook()
    sales = workbook.active
    sales.title = "Sales"
    sales.append(["region", "amount", None])
    sales.append(["north", 10, "extra"])
    sales.append([None, None, None])
    sales.append(["south", 'say "hi"'])
    notes = workbook.create_sheet("Notes")
    notes.append(["note"])
    notes.append(["first"])
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture()
def records_json() -> bytes:
    rows = [{"name": "Ada", "age": 36}, {"name": "Linus", "age": 28}]
    return json.dumps(rows).encode("utf-8")
