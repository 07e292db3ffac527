# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Spot report record and its SALUTE categories.

A spot report describes an observed entity using the SALUTE mnemonic
(Size, Activity, Location, Unit, Time, Equipment).  Location and time are
plain values on the record; the four categorical fields are fixed
enumerations, each member carrying a display label and a wire code.

Records are immutable.  Regenerating the message ID returns a new record so
that two senders sharing a record never race on the ID.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

IdGenerator = Callable[[], str]


def new_message_id() -> str:
    """Return a fresh, globally unique message ID."""
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# SALUTE categories
# ---------------------------------------------------------------------------

class SaluteCategory(Enum):
    """Enum whose members are (label, code) pairs."""

    def __init__(self, label: str, code: int | str) -> None:
        self.label = label
        self.code = code

    def __str__(self) -> str:
        return self.label

    @classmethod
    def from_code(cls, code: int | str) -> SaluteCategory:
        """Return the member with this code (compared as text)."""
        wanted = str(code)
        for member in cls:
            if str(member.code) == wanted:
                return member
        raise ValueError(f"{code!r} is not a valid {cls.__name__} code")

    @classmethod
    def coerce(cls, value: Any) -> SaluteCategory:
        """Accept a member, a member name, or a code."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.upper() in cls.__members__:
            return cls[value.upper()]
        return cls.from_code(value)


class Size(SaluteCategory):
    INDIVIDUAL = ("Individual", 0)
    TEAM = ("Team", 1)
    SQUAD = ("Squad", 2)
    PLATOON = ("Platoon", 3)
    COMPANY = ("Company", 4)
    BATTALION = ("Battalion", 5)
    REGIMENT = ("Regiment", 6)
    BRIGADE = ("Brigade", 7)
    DIVISION = ("Division", 8)


class Activity(SaluteCategory):
    ATTACKING = ("Attacking", "A")
    DEFENDING = ("Defending", "D")
    MOVING = ("Moving", "M")
    STATIONARY = ("Stationary", "S")
    CACHE = ("Cache", "C")
    EVADING = ("Evading", "E")
    UNKNOWN = ("Unknown", "U")


class Unit(SaluteCategory):
    UNKNOWN = ("Unknown", "0")
    INFANTRY = ("Infantry", "1")
    ARMOR = ("Armor", "2")
    ARTILLERY = ("Artillery", "3")
    AIR_DEFENSE = ("Air Defense", "4")
    ENGINEER = ("Engineer", "5")
    RECONNAISSANCE = ("Reconnaissance", "6")
    AVIATION = ("Aviation", "7")
    SUPPLY = ("Supply", "8")


class Equipment(SaluteCategory):
    NONE = ("None", "0")
    SMALL_ARMS = ("Small Arms", "1")
    MACHINE_GUN = ("Machine Gun", "2")
    MORTAR = ("Mortar", "3")
    ANTI_TANK = ("Anti-Tank", "4")
    TRUCK = ("Truck", "5")
    ARMORED_VEHICLE = ("Armored Vehicle", "6")
    AIRCRAFT = ("Aircraft", "7")


_CATEGORY_FIELDS: dict[str, type[SaluteCategory]] = {
    "size": Size,
    "activity": Activity,
    "unit": Unit,
    "equipment": Equipment,
}


# ---------------------------------------------------------------------------
# Spot report
# ---------------------------------------------------------------------------

class SpotReport(BaseModel):
    """One observation, ready to be serialized as a spot report Geomessage."""

    model_config = ConfigDict(frozen=True)

    message_id: str = Field(default_factory=new_message_id)
    time: Optional[datetime] = None  # None means "observed now"
    location_x: float
    location_y: float
    location_wkid: int = 4326
    size: Size
    activity: Activity
    unit: Unit
    equipment: Equipment

    @field_validator("size", "activity", "unit", "equipment", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any, info) -> SaluteCategory:
        return _CATEGORY_FIELDS[info.field_name].coerce(value)

    def with_message_id(self, message_id: str) -> SpotReport:
        return self.model_copy(update={"message_id": message_id})

    def regenerate_message_id(self, generator: IdGenerator | None = None) -> SpotReport:
        """Return a copy of this report carrying a newly generated message ID."""
        generator = generator or new_message_id
        return self.with_message_id(generator())
