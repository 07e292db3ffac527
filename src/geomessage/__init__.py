# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Geomessage — spot report serialization and transport.

Builds SALUTE spot reports as Geomessage XML and sends them to listening
clients over UDP broadcast or to a TAK server.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .cot import geomessage_to_cot
from .document import GeomessageBuilder, format_timestamp, parse_geomessage
from .errors import GeomessageError, MessageConstructionError, TransmissionError
from .models import Activity, Equipment, Size, SpotReport, Unit, new_message_id
from .protocols import MapController, MessageSink
from .spot_report import REPORT_TYPE, SendResult, SpotReportSender
from .tak_sink import TAKMessageSink
from .transport import UDPMessageSink

if TYPE_CHECKING:
    from .config import Settings

__all__ = [
    "Activity",
    "Equipment",
    "GeomessageBuilder",
    "GeomessageError",
    "MapController",
    "MessageConstructionError",
    "MessageSink",
    "REPORT_TYPE",
    "SendResult",
    "Size",
    "SpotReport",
    "SpotReportSender",
    "TAKMessageSink",
    "TransmissionError",
    "UDPMessageSink",
    "Unit",
    "create_sender",
    "format_timestamp",
    "geomessage_to_cot",
    "new_message_id",
    "parse_geomessage",
]


def create_sender(map_controller: MapController, settings: Settings | None = None) -> SpotReportSender:
    """Create a SpotReportSender wired to the configured transport.

    Args:
        map_controller: Converts report coordinates to grid references.
        settings: Settings object, or None to use geomessage.config.settings.

    Returns:
        A SpotReportSender. When the TAK transport is selected its sink has
        already been started.
    """
    if settings is None:
        from .config import settings

    sink: MessageSink
    if settings.transport == "tak":
        sink = TAKMessageSink(
            cot_url=settings.cot_url,
            callsign=settings.callsign,
            tls_client_cert=settings.tls_client_cert,
            tls_client_key=settings.tls_client_key,
            tls_ca_cert=settings.tls_ca_cert,
            tx_queue_max=settings.tx_queue_max,
        )
        sink.start()
    else:
        sink = UDPMessageSink(
            settings.udp_host,
            settings.udp_port,
            broadcast=settings.udp_broadcast,
        )

    return SpotReportSender(
        map_controller,
        sink,
        timestamp_format=settings.timestamp_format,
    )
