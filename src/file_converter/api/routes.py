"""API route definitions for the conversion service."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import Response

from ..errors import ConversionError, raise_conversion_error
from ..categories import supported_formats
from ..models import ArtifactRecord
from ..service import ConversionService
from ..storage import sanitize_download_name
from .dependencies import get_service
from .schemas import AdmissionState, ConversionResponse, FormatsResponse, HealthResponse, RuleDescriptor

logger = logging.getLogger(__name__)
router = APIRouter()

TRUTHY = {"1", "true", "yes", "on"}


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUTHY


def _attachment(record: ArtifactRecord, max_name_length: int) -> Response:
    safe_name = sanitize_download_name(record.file_name, max_name_length)
    disposition = f"attachment; filename=\"{safe_name}\"; filename*=UTF-8''{quote(record.file_name, safe='')}"
    return Response(
        content=record.payload,
        media_type=record.media_type,
        headers={
            "Content-Disposition": disposition,
            "Content-Length": str(len(record.payload)),
            "Cache-Control": "no-cache",
        },
    )


def _download(service: ConversionService, handle: str) -> Response:
    try:
        record = service.fetch(handle)
    except ConversionError as exc:
        raise_conversion_error(exc)
    return _attachment(record, service.settings.artifacts.max_download_name_length)


@router.post("/convert", response_model=ConversionResponse)
async def convert_file(
    file: Optional[UploadFile] = File(None),
    output_format: Optional[str] = Form(None),
    output_format_alias: Optional[str] = Form(None, alias="outputFormat"),
    quality: Optional[str] = Form(None),
    include_metadata: Optional[str] = Form(None),
    include_metadata_alias: Optional[str] = Form(None, alias="includeMetadata"),
    service: ConversionService = Depends(get_service),
) -> ConversionResponse:
    payload = await file.read() if file is not None else None
    file_name = file.filename if file is not None else None
    media_type = file.content_type if file is not None else None

    try:
        result = await asyncio.to_thread(
            service.convert,
            file_name,
            media_type,
            payload,
            output_format or output_format_alias,
            quality,
            _flag(include_metadata) or _flag(include_metadata_alias),
        )
    except ConversionError as exc:
        logger.info("Conversion refused", extra={"error_code": exc.code, "file_name": file_name})
        raise_conversion_error(exc)

    return ConversionResponse.from_result(result)


@router.get("/convert")
async def download_by_query(
    download_id: str = Query(..., alias="id", description="download_id returned by POST /convert"),
    service: ConversionService = Depends(get_service),
) -> Response:
    return _download(service, download_id)


@router.get("/download/{handle}")
async def download(handle: str, service: ConversionService = Depends(get_service)) -> Response:
    return _download(service, handle)


@router.get("/formats", response_model=FormatsResponse)
async def list_formats(service: ConversionService = Depends(get_service)) -> FormatsResponse:
    rules = {
        category: RuleDescriptor(**rule)
        for category, rule in service.policy.describe().items()
    }
    return FormatsResponse(
        targets=service.dispatcher.formats(),
        categories=supported_formats(),
        rules=rules,
    )


@router.get("/monitor/health", response_model=HealthResponse)
async def health(service: ConversionService = Depends(get_service)) -> HealthResponse:
    admission = AdmissionState(**service.gate.state())
    return HealthResponse(
        status="ok" if admission.state == "open" else "degraded",
        timestamp=datetime.now(timezone.utc),
        admission=admission,
        artifacts=len(service.store),
    )
