"""Prometheus metrics and the upstream health probe used by the admission gate."""

from __future__ import annotations

import logging
from typing import Optional

import requests
from prometheus_client import Counter, Gauge, start_http_server

logger = logging.getLogger(__name__)

CONVERSIONS_TOTAL = Counter(
    "file_conversions_total",
    "Total number of conversion attempts",
    labelnames=("target", "status"),
)
REJECTIONS_TOTAL = Counter(
    "file_conversion_rejections_total",
    "Conversions refused before any codec ran",
    labelnames=("reason",),
)
ARTIFACTS_STORED = Gauge(
    "file_conversion_artifacts_stored",
    "Number of converted artifacts currently held for download",
)
ADMISSION_THROTTLED = Gauge(
    "file_conversion_admission_throttled",
    "1 while the admission gate rejects new conversions",
)

_metrics_started = False


def ensure_metrics_server(port: int) -> None:
    global _metrics_started
    if _metrics_started:
        return
    start_http_server(port)
    _metrics_started = True
    logger.info("Prometheus metrics server started", extra={"port": port})


def record_conversion(target: str, status: str) -> None:
    CONVERSIONS_TOTAL.labels(target=target, status=status).inc()


def record_rejection(reason: str) -> None:
    REJECTIONS_TOTAL.labels(reason=reason).inc()


def record_artifacts(count: int) -> None:
    ARTIFACTS_STORED.set(count)


def record_throttle_state(throttled: bool) -> None:
    ADMISSION_THROTTLED.set(1 if throttled else 0)


class HealthProbe:
    """``GET <url>`` and return its ``status`` field; ``None`` on any failure."""

    def __init__(self, url: str, timeout: float = 2.0, session: requests.Session | None = None) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def __call__(self) -> Optional[str]:
        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Health probe failed", extra={"url": self.url, "error": str(exc)})
            return None

        status = body.get("status") if isinstance(body, dict) else None
        return str(status).lower() if status is not None else None


__all__ = [
    "ADMISSION_THROTTLED",
    "ARTIFACTS_STORED",
    "CONVERSIONS_TOTAL",
    "REJECTIONS_TOTAL",
    "HealthProbe",
    "ensure_metrics_server",
    "record_artifacts",
    "record_conversion",
    "record_rejection",
    "record_throttle_state",
]
