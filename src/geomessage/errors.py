# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Errors raised while building or transmitting Geomessages."""

from __future__ import annotations


class GeomessageError(Exception):
    """Base class for all geomessage errors."""


class MessageConstructionError(GeomessageError):
    """The Geomessage XML document could not be built."""

    def __init__(self, report_type: str, cause: Exception | None = None):
        self.report_type = report_type
        self.cause = cause
        super().__init__(
            f"Failed to build '{report_type}' geomessage"
            f"{f': {cause}' if cause else ''}"
        )


class TransmissionError(GeomessageError, OSError):
    """The message sink failed to deliver a payload."""
