"""FastAPI dependency providers for application state."""

from __future__ import annotations

from fastapi import HTTPException, Request

from ..service import ConversionService


def get_service(request: Request) -> ConversionService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="SERVICE_UNAVAILABLE")
    return service


__all__ = ["get_service"]
