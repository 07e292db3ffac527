# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""SpotReportSender -- serializes spot reports as Geomessages and sends them.

Flow per send:  None check -> optional ID regeneration -> serialize -> sink.

The sender owns no state besides its collaborators.  Coordinates are turned
into a grid reference by the map controller and bytes are delivered by the
message sink; both are injected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from .document import (
    ACTION_FIELD_NAME,
    CONTROL_POINTS_FIELD_NAME,
    GEOMESSAGE_TIMESTAMP_FORMAT,
    ID_FIELD_NAME,
    TYPE_FIELD_NAME,
    WKID_FIELD_NAME,
    GeomessageBuilder,
    format_control_points,
    format_timestamp,
)
from .errors import MessageConstructionError, TransmissionError
from .message_types import outbound_type_name
from .models import IdGenerator, SpotReport, new_message_id
from .protocols import MapController, MessageSink

logger = logging.getLogger("geomessage.spotrep")

REPORT_TYPE = "spot_report"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SendResult:
    """Outcome of a successful send.

    ``report`` is the record that went out; when ``regenerated`` is True it
    is a new value and the caller's original record still has the old ID.
    """

    report: SpotReport
    regenerated: bool
    payload: bytes


class SpotReportSender:
    """Broadcasts spot reports through a message sink."""

    def __init__(
        self,
        map_controller: MapController,
        message_sink: MessageSink,
        *,
        id_generator: IdGenerator = new_message_id,
        clock: Callable[[], datetime] = utc_now,
        timestamp_format: str = GEOMESSAGE_TIMESTAMP_FORMAT,
    ) -> None:
        self._map_controller = map_controller
        self._sink = message_sink
        self._id_generator = id_generator
        self._clock = clock
        self._timestamp_format = timestamp_format

    @property
    def message_sink(self) -> MessageSink:
        return self._sink

    # -----------------------------------------------------------------------
    # Send
    # -----------------------------------------------------------------------

    def send(
        self,
        report: Optional[SpotReport],
        sender_designation: Optional[str] = None,
        is_update: bool = False,
    ) -> Optional[SendResult]:
        """Serialize a spot report and hand it to the message sink.

        Args:
            report: The report to send. None is ignored.
            sender_designation: Unique designation of the sending unit, or
                None to omit the uniquedesignation field.
            is_update: False to send as a new report under a freshly
                generated message ID; True to keep the report's ID so
                listeners treat it as an update of an earlier report.

        Returns:
            SendResult, or None when report was None.

        Raises:
            MessageConstructionError: the XML document could not be built.
            TransmissionError: the sink failed to deliver the bytes.
        """
        if report is None:
            logger.debug("send called without a spot report; nothing sent")
            return None

        regenerated = not is_update
        if regenerated:
            report = report.regenerate_message_id(self._id_generator)

        payload = self.to_message_string(report, sender_designation).encode("utf-8")

        try:
            self._sink.send_bytes(payload)
        except TransmissionError:
            raise
        except OSError as e:
            logger.warning(f"Spot report {report.message_id} not sent: {e}")
            raise TransmissionError(f"Failed to send spot report {report.message_id}: {e}") from e

        logger.debug(
            f"Sent spot report {report.message_id} ({len(payload)} bytes, "
            f"{'new' if regenerated else 'update'})"
        )
        return SendResult(report=report, regenerated=regenerated, payload=payload)

    # -----------------------------------------------------------------------
    # Serialization
    # -----------------------------------------------------------------------

    def to_message_string(
        self,
        report: SpotReport,
        sender_designation: Optional[str] = None,
    ) -> str:
        """Build the spot report Geomessage XML string.

        Field order is fixed; listeners rely on it.
        """
        observed = report.time if report.time is not None else self._clock()
        x, y, wkid = report.location_x, report.location_y, report.location_wkid

        builder = GeomessageBuilder()
        builder.add(TYPE_FIELD_NAME, outbound_type_name(REPORT_TYPE))
        builder.add(ID_FIELD_NAME, report.message_id)
        builder.add(WKID_FIELD_NAME, str(wkid))
        builder.add(CONTROL_POINTS_FIELD_NAME, format_control_points(x, y))
        builder.add(ACTION_FIELD_NAME, "update")
        builder.add_optional("uniquedesignation", sender_designation)

        # SALUTE display values
        builder.add("size", str(report.size))
        builder.add("activity", str(report.activity))
        builder.add("location", self._map_controller.point_to_grid_reference(x, y, wkid))
        builder.add("unit", str(report.unit))
        builder.add("equipment", str(report.equipment))

        # SALUTE codes
        builder.add("size_cat", str(report.size.code))
        builder.add("activity_cat", str(report.activity.code))
        builder.add("unit_cat", str(report.unit.code))
        builder.add("equip_cat", str(report.equipment.code))

        builder.add("timeobserved", format_timestamp(observed, self._timestamp_format))
        builder.add("datetimesubmitted", format_timestamp(self._clock(), self._timestamp_format))

        try:
            return builder.to_string()
        except (TypeError, ValueError) as e:
            logger.error(f"Could not serialize spot report {report.message_id}: {e}")
            raise MessageConstructionError(REPORT_TYPE, e) from e
