# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Geomessage XML generation and parsing.

A Geomessage is a flat XML record wrapped in a ``<geomessages>`` document:

    <geomessages>
      <geomessage v="1.0">
        <geomessagetype>spotrep</geomessagetype>
        <id>...</id>
        ...
      </geomessage>
    </geomessages>

Listeners read the children by name but some legacy ones also depend on
their order, so fields are rendered exactly in the order they were added.
Only xml.etree.ElementTree is used.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from datetime import datetime, timezone

# ---------------------------------------------------------------------------
# Wire constants
# ---------------------------------------------------------------------------

GEOMESSAGES_TAG = "geomessages"
GEOMESSAGE_TAG = "geomessage"
GEOMESSAGE_VERSION = "1.0"

TYPE_FIELD_NAME = "geomessagetype"
ID_FIELD_NAME = "id"
WKID_FIELD_NAME = "wkid"
CONTROL_POINTS_FIELD_NAME = "controlpoints"
ACTION_FIELD_NAME = "action"

# Shared by every Geomessage producer in the process; always rendered in UTC.
GEOMESSAGE_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Characters outside the XML 1.0 Char production. ElementTree writes them
# unescaped, which yields a document no parser accepts.
_ILLEGAL_XML_CHARS = re.compile(
    "[^\u0009\u000a\u000d\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]"
)


def format_timestamp(dt: datetime, fmt: str = GEOMESSAGE_TIMESTAMP_FORMAT) -> str:
    """Render a datetime in UTC. Naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime(fmt)


def format_control_points(x: float, y: float) -> str:
    """Single-point control points string, full precision."""
    return f"{x},{y}"


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class GeomessageBuilder:
    """Collects ordered (name, value) fields and renders them in one pass."""

    def __init__(self) -> None:
        self._fields: list[tuple[str, str]] = []

    def add(self, name: str, value: str) -> GeomessageBuilder:
        self._fields.append((name, value))
        return self

    def add_optional(self, name: str, value: str | None) -> GeomessageBuilder:
        """Add the field only when value is not None."""
        if value is not None:
            self._fields.append((name, value))
        return self

    @property
    def fields(self) -> list[tuple[str, str]]:
        return list(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def to_element(self) -> ET.Element:
        root = ET.Element(GEOMESSAGES_TAG)
        message = ET.SubElement(root, GEOMESSAGE_TAG)
        message.set("v", GEOMESSAGE_VERSION)
        for name, value in self._fields:
            if isinstance(value, str):
                bad = _ILLEGAL_XML_CHARS.search(value)
                if bad is not None:
                    raise ValueError(
                        f"Field {name!r} contains character {bad.group()!r} not allowed in XML"
                    )
            child = ET.SubElement(message, name)
            child.text = value
        return root

    def to_string(self) -> str:
        """Render the document as an XML string (no declaration).

        Raises ValueError when a value holds a character XML cannot carry,
        and TypeError from ElementTree for values that are not strings.
        """
        return ET.tostring(self.to_element(), encoding="unicode", xml_declaration=False)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_geomessage(xml_string: str | bytes) -> dict[str, str] | None:
    """Parse a flat Geomessage into an ordered field dict.

    Returns None if the XML is malformed or has no geomessage element.
    Empty elements map to "".
    """
    try:
        root = ET.fromstring(xml_string)
    except ET.ParseError:
        return None

    if root.tag == GEOMESSAGE_TAG:
        message = root
    elif root.tag == GEOMESSAGES_TAG:
        message = root.find(GEOMESSAGE_TAG)
        if message is None:
            return None
    else:
        return None

    return {child.tag: (child.text or "") for child in message}
