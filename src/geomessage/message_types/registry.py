# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Geomessage type registry.

Listeners key their symbology on the wire-level ``geomessagetype`` value,
which differs from the tags used internally (``spot_report`` travels as
``spotrep``).  The mapping lives in message_types.json and is lazy-loaded
on first access.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

_DIR = Path(__file__).parent

_TYPES: dict[str, dict] = {}
_LOADED = False


def _load() -> None:
    """Load the JSON data file on first access."""
    global _TYPES, _LOADED
    if _LOADED:
        return
    with open(_DIR / "message_types.json") as f:
        _TYPES = json.load(f)
    _LOADED = True


def outbound_type_name(report_type: str) -> str:
    """Wire name for an internal report type.

    Unmapped types are transmitted under their own name.
    """
    _load()
    entry = _TYPES.get(report_type)
    if entry is None:
        return report_type
    return entry["outbound"]


def inbound_type_name(wire_name: str) -> Optional[str]:
    """Internal report type for a wire name, or None if unknown."""
    _load()
    for report_type, entry in _TYPES.items():
        if entry["outbound"] == wire_name:
            return report_type
    return None


def describe(report_type: str) -> str:
    """Human-readable description, or the type itself when unknown."""
    _load()
    entry = _TYPES.get(report_type)
    if entry is None:
        return report_type
    return entry.get("description", report_type)


def all_types() -> list[str]:
    """Return all known internal report types, sorted."""
    _load()
    return sorted(_TYPES)
