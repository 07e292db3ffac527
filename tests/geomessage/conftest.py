# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Shared fixtures for geomessage tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from geomessage.models import Activity, Equipment, Size, SpotReport, Unit


class MockMapController:
    """Map controller returning a canned grid reference and logging calls."""

    def __init__(self, grid_reference: str = "11SMS1234567890"):
        self.grid_reference = grid_reference
        self.calls: list[tuple[float, float, int]] = []

    def point_to_grid_reference(self, x: float, y: float, wkid: int) -> str:
        self.calls.append((x, y, wkid))
        return self.grid_reference


class RecordingSink:
    """Message sink that keeps every payload in memory."""

    def __init__(self):
        self.sent: list[bytes] = []

    def send_bytes(self, data: bytes) -> None:
        self.sent.append(data)


class FailingSink:
    """Message sink whose every send raises the given error."""

    def __init__(self, error: Exception | None = None):
        self.error = error or ConnectionRefusedError("listener gone")
        self.attempts = 0

    def send_bytes(self, data: bytes) -> None:
        self.attempts += 1
        raise self.error


class CountingIds:
    """Deterministic message ID generator: id-1, id-2, ..."""

    def __init__(self, prefix: str = "id"):
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}-{self.count}"


FIXED_NOW = datetime(2026, 3, 14, 15, 9, 26, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def map_controller():
    return MockMapController()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def id_generator():
    return CountingIds()


@pytest.fixture
def platoon_report():
    """The reference SALUTE report: moving infantry platoon, no equipment."""
    return SpotReport(
        message_id="report-0",
        time=datetime(2026, 3, 14, 12, 0, 0, tzinfo=timezone.utc),
        location_x=34.5,
        location_y=-117.2,
        location_wkid=4326,
        size=Size.PLATOON,
        activity=Activity.MOVING,
        unit=Unit.INFANTRY,
        equipment=Equipment.NONE,
    )


@pytest.fixture
def sender(map_controller, sink, id_generator, fixed_clock):
    from geomessage.spot_report import SpotReportSender
    return SpotReportSender(
        map_controller, sink, id_generator=id_generator, clock=fixed_clock,
    )
