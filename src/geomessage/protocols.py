# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Collaborator interfaces consumed by the geomessage senders.

The sender does not convert coordinates or move bytes itself; any object
satisfying these protocols can be plugged in.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MapController(Protocol):
    """Converts raw map coordinates to a military grid reference."""

    def point_to_grid_reference(self, x: float, y: float, wkid: int) -> str:
        """Return the grid reference (e.g. MGRS) for x/y in spatial reference wkid."""
        ...


@runtime_checkable
class MessageSink(Protocol):
    """Delivers serialized messages to listening clients."""

    def send_bytes(self, data: bytes) -> None:
        """Send one message. Raises OSError on delivery failure."""
        ...
