"""Tests for the admission gate."""

from __future__ import annotations

import threading

import pytest

from file_converter.admission import AdmissionGate
from file_converter.errors import ServiceThrottledError


class _GaugeStub:
    def __init__(self) -> None:
        self.values: list[float] = []

    def set(self, value: float) -> None:
        self.values.append(value)


class _Probe:
    def __init__(self, *statuses) -> None:
        self.statuses = list(statuses)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.statuses.pop(0) if self.statuses else "healthy"


def test_open_gate_admits_without_probe(gate):
    gate.admit()
    assert gate.state() == {"state": "open"}


def test_throttled_requests_see_decreasing_time_remaining(gate, clock):
    gate.apply_status("critical")
    remaining = []
    for minutes in (0, 10, 20):
        clock.advance(minutes * 60)
        with pytest.raises(ServiceThrottledError) as exc:
            gate.admit()
        remaining.append(exc.value.time_remaining)
        assert exc.value.reason == "System critical"
        assert exc.value.context["rate_limited"] is True

    assert remaining == [60, 50, 30]
    assert str(exc.value) == "System is under maintenance. Please try again in 30 minutes."


def test_window_expires_and_gate_reopens(gate, clock):
    gate.apply_status("starting")
    clock.advance(5 * 60 - 1)
    with pytest.raises(ServiceThrottledError) as exc:
        gate.admit()
    assert exc.value.time_remaining == 1

    clock.advance(1)
    gate.admit()
    assert gate.state() == {"state": "open"}


@pytest.mark.parametrize(
    ("status", "minutes", "reason"),
    [("critical", 60, "System critical"), ("warning", 30, "High system load"), ("STARTING", 5, "System starting")],
)
def test_status_severity_mapping(gate, clock, status, minutes, reason):
    window = gate.apply_status(status)

    assert window.until == clock.now + minutes * 60
    assert gate.state() == {"state": "throttled", "reason": reason, "time_remaining": minutes}


def test_healthy_status_clears_window(gate):
    gate.apply_status("warning")
    assert gate.apply_status("healthy") is None
    gate.admit()


def test_probe_reporting_trouble_rejects_current_request(clock):
    probe = _Probe("warning")
    gate = AdmissionGate(probe, clock=clock)

    with pytest.raises(ServiceThrottledError) as exc:
        gate.admit()
    assert exc.value.time_remaining == 30

    clock.advance(60)
    with pytest.raises(ServiceThrottledError):
        gate.admit()
    assert probe.calls == 1


def test_probe_runs_at_most_once_per_interval(clock):
    probe = _Probe()
    gate = AdmissionGate(probe, probe_interval_sec=30, clock=clock)

    gate.admit()
    gate.admit()
    assert probe.calls == 1

    clock.advance(30)
    gate.admit()
    assert probe.calls == 2


def test_probe_failure_does_not_throttle(clock):
    gate = AdmissionGate(lambda: None, clock=clock)
    gate.admit()
    assert gate.state()["state"] == "open"


def test_custom_cooldowns(clock):
    gate = AdmissionGate(cooldown_minutes={"warning": 2}, clock=clock)

    assert gate.apply_status("critical") is None
    assert gate.apply_status("warning").until == clock.now + 120


def test_throttle_gauge_tracks_state(monkeypatch, gate, clock):
    gauge = _GaugeStub()
    monkeypatch.setattr("file_converter.monitoring.ADMISSION_THROTTLED", gauge)

    gate.apply_status("warning")
    clock.advance(30 * 60)
    gate.admit()

    assert gauge.values == [1, 0]


def test_slow_health_check_does_not_block_other_requests(clock):
    started = threading.Event()
    release = threading.Event()
    rejections = []

    def slow_health_check():
        started.set()
        release.wait(5)
        return "warning"

    def first_request():
        try:
            gate.admit()
        except ServiceThrottledError as exc:
            rejections.append(exc)

    gate = AdmissionGate(slow_health_check, clock=clock)
    worker = threading.Thread(target=first_request)
    worker.start()
    try:
        assert started.wait(5)
        observed = {}
        checker = threading.Thread(target=lambda: observed.update(state=gate.state()))
        checker.start()
        checker.join(2)
        assert observed.get("state") == {"state": "open"}
        gate.admit()
    finally:
        release.set()
        worker.join(5)

    assert [exc.time_remaining for exc in rejections] == [30]
    assert gate.state()["state"] == "throttled"
