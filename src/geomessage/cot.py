# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Geomessage -> Cursor on Target conversion for TAK delivery.

TAK servers only route CoT <event> documents, so a spot report Geomessage
is rewritten as a CoT spot report (type b-m-p-s-m) before it is queued.
The SALUTE fields travel as attributes of <detail><spotrep>.
"""

from __future__ import annotations

import math
import xml.etree.ElementTree as ET
from datetime import datetime, timedelta, timezone

from .document import (
    CONTROL_POINTS_FIELD_NAME,
    ID_FIELD_NAME,
    TYPE_FIELD_NAME,
    WKID_FIELD_NAME,
)
from .message_types import inbound_type_name

SPOT_REPORT_COT_TYPE = "b-m-p-s-m"
COT_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

# Spatial references whose control points are already lon,lat
_GEOGRAPHIC_WKIDS = {4326}
# Web Mercator (current and legacy ids)
_WEB_MERCATOR_WKIDS = {3857, 102100, 102113}
_EARTH_RADIUS = 6378137.0

_SALUTE_ATTRIBUTES = (
    ("size", "size"),
    ("activity", "activity"),
    ("location", "location"),
    ("unit", "unit"),
    ("equipment", "equipment"),
    ("size_cat", "size_cat"),
    ("activity_cat", "activity_cat"),
    ("unit_cat", "unit_cat"),
    ("equip_cat", "equip_cat"),
    ("timeobserved", "time"),
)


def control_points_to_latlng(control_points: str, wkid: int) -> tuple[float, float]:
    """Convert a single "x,y" control point to (lat, lng) in degrees.

    Raises:
        ValueError: malformed control points or an unsupported wkid.
    """
    try:
        x_str, y_str = control_points.split(",")
        x, y = float(x_str), float(y_str)
    except ValueError:
        raise ValueError(f"Malformed control points: {control_points!r}") from None

    if wkid in _GEOGRAPHIC_WKIDS:
        return y, x
    if wkid in _WEB_MERCATOR_WKIDS:
        lng = math.degrees(x / _EARTH_RADIUS)
        lat = math.degrees(2.0 * math.atan(math.exp(y / _EARTH_RADIUS)) - math.pi / 2.0)
        return lat, lng
    raise ValueError(f"No lat/lng conversion for wkid {wkid}")


def geomessage_to_cot(
    fields: dict[str, str],
    callsign: str,
    stale_seconds: int = 300,
    now: datetime | None = None,
) -> str:
    """Build CoT event XML for a parsed spot report Geomessage.

    Args:
        fields: Field dict as returned by parse_geomessage().
        callsign: Fallback contact callsign when the message carries no
            uniquedesignation.
        stale_seconds: Seconds until the event goes stale.
        now: Event time; defaults to the current UTC time.

    Returns:
        CoT XML string. The event uid is derived from the Geomessage id, so
        an update replaces the earlier report on TAK clients.

    Raises:
        ValueError: the message is not a spot report or has no usable
            position.
    """
    if inbound_type_name(fields.get(TYPE_FIELD_NAME, "")) != "spot_report":
        raise ValueError(f"No CoT mapping for geomessage type {fields.get(TYPE_FIELD_NAME)!r}")

    try:
        wkid = int(fields.get(WKID_FIELD_NAME, ""))
    except ValueError:
        raise ValueError(f"Invalid wkid {fields.get(WKID_FIELD_NAME)!r}") from None
    lat, lng = control_points_to_latlng(fields.get(CONTROL_POINTS_FIELD_NAME, ""), wkid)

    now = now or datetime.now(timezone.utc)
    now_str = now.strftime(COT_TIME_FORMAT)
    stale_str = (now + timedelta(seconds=stale_seconds)).strftime(COT_TIME_FORMAT)
    reporter = fields.get("uniquedesignation") or callsign

    event = ET.Element("event")
    event.set("version", "2.0")
    event.set("uid", f"spotrep-{fields.get(ID_FIELD_NAME, '')}")
    event.set("type", SPOT_REPORT_COT_TYPE)
    event.set("how", "h-e")
    event.set("time", now_str)
    event.set("start", now_str)
    event.set("stale", stale_str)

    point = ET.SubElement(event, "point")
    point.set("lat", str(lat))
    point.set("lon", str(lng))
    point.set("hae", "9999999.0")
    point.set("ce", "9999999.0")
    point.set("le", "9999999.0")

    detail = ET.SubElement(event, "detail")
    contact = ET.SubElement(detail, "contact")
    contact.set("callsign", reporter)

    spotrep = ET.SubElement(detail, "spotrep")
    spotrep.set("category", "hostile")
    for field_name, attr in _SALUTE_ATTRIBUTES:
        if field_name in fields:
            spotrep.set(attr, fields[field_name])

    remarks = ET.SubElement(detail, "remarks")
    remarks.text = (
        f"SALUTE from {reporter}: {fields.get('size', '')} "
        f"{fields.get('activity', '').lower()} at {fields.get('location', '')}, "
        f"{fields.get('unit', '')}, equipment {fields.get('equipment', '')}"
    )

    return ET.tostring(event, encoding="unicode", xml_declaration=False)
