"""Admission gate: refuses conversions while an upstream health signal says so.

The gate is OPEN or THROTTLED until a deadline. A probe is consulted only
while OPEN, at most once per ``probe_interval_sec``, so an active window is
never extended by later probes.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from .errors import ServiceThrottledError
from .monitoring import record_throttle_state

logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_MINUTES: Dict[str, int] = {"critical": 60, "warning": 30, "starting": 5}

REASONS: Dict[str, str] = {
    "critical": "System critical",
    "warning": "High system load",
    "starting": "System starting",
}


@dataclass(frozen=True)
class ThrottleWindow:
    until: float
    reason: str


class AdmissionGate:
    def __init__(
        self,
        probe: Optional[Callable[[], Optional[str]]] = None,
        *,
        probe_interval_sec: float = 30,
        cooldown_minutes: Mapping[str, int] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.probe = probe
        self.probe_interval_sec = probe_interval_sec
        self.cooldown_minutes = dict(DEFAULT_COOLDOWN_MINUTES if cooldown_minutes is None else cooldown_minutes)
        self._clock = clock
        self._window: Optional[ThrottleWindow] = None
        self._last_probe: Optional[float] = None
        self._lock = threading.Lock()

    def admit(self) -> None:
        """Return when a conversion may proceed, else raise ``ServiceThrottledError``."""

        with self._lock:
            now = self._clock()
            if self._window is not None and now >= self._window.until:
                self._clear_locked()
            probe_due = self._window is None and self._probe_due_locked(now)
            if probe_due:
                self._last_probe = now
            window = self._window

        if probe_due:
            # Probe outside the lock; concurrent requests skip it via _last_probe.
            status = self.probe()
            with self._lock:
                now = self._clock()
                if status is not None:
                    self._apply_locked(status, now)
                window = self._window

        if window is not None:
            remaining = math.ceil((window.until - now) / 60)
            raise ServiceThrottledError(
                f"System is under maintenance. Please try again in {remaining} minutes.",
                time_remaining=remaining,
                reason=window.reason,
            )

    def apply_status(self, status: str) -> Optional[ThrottleWindow]:
        with self._lock:
            return self._apply_locked(status, self._clock())

    def state(self) -> Dict[str, object]:
        with self._lock:
            now = self._clock()
            window = self._window
            if window is None or now >= window.until:
                return {"state": "open"}
            return {
                "state": "throttled",
                "reason": window.reason,
                "time_remaining": math.ceil((window.until - now) / 60),
            }

    def _probe_due_locked(self, now: float) -> bool:
        if self.probe is None:
            return False
        return self._last_probe is None or now - self._last_probe >= self.probe_interval_sec

    def _apply_locked(self, status: str, now: float) -> Optional[ThrottleWindow]:
        severity = (status or "").lower()
        minutes = self.cooldown_minutes.get(severity)
        if not minutes or minutes <= 0:
            self._clear_locked()
            return None
        self._window = ThrottleWindow(until=now + minutes * 60, reason=REASONS.get(severity, severity))
        record_throttle_state(True)
        logger.warning("Admission throttled", extra={"reason": self._window.reason, "minutes": minutes})
        return self._window

    def _clear_locked(self) -> None:
        if self._window is not None:
            logger.info("Admission reopened")
        self._window = None
        record_throttle_state(False)


__all__ = ["AdmissionGate", "ThrottleWindow", "DEFAULT_COOLDOWN_MINUTES"]
