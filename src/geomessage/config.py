# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Runtime settings for the geomessage senders.

Every field can be overridden from the environment with the GEOMESSAGE_
prefix (e.g. GEOMESSAGE_UDP_PORT=45679) or from a local .env file.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from geomessage.document import GEOMESSAGE_TIMESTAMP_FORMAT


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GEOMESSAGE_",
        env_file=".env",
        extra="ignore",
    )

    # Transport selection
    transport: Literal["udp", "tak"] = "udp"

    # UDP broadcast (listeners bind this port on every host)
    udp_host: str = "255.255.255.255"
    udp_port: int = Field(default=45678, ge=1, le=65535)
    udp_broadcast: bool = True

    # TAK server via pytak
    cot_url: str = "tcp://localhost:8088"
    callsign: str = "GEOMESSAGE"
    tls_client_cert: str = ""
    tls_client_key: str = ""
    tls_ca_cert: str = ""
    tx_queue_max: int = Field(default=500, ge=1)

    # Message content
    timestamp_format: str = GEOMESSAGE_TIMESTAMP_FORMAT


settings = Settings()
