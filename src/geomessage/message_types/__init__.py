# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Geomessage type registry -- internal report tags to wire type names."""

from .registry import all_types, describe, inbound_type_name, outbound_type_name

__all__ = [
    "outbound_type_name",
    "inbound_type_name",
    "describe",
    "all_types",
]
