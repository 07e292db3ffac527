# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""UDP message sink -- one datagram per Geomessage.

Listeners on the local network bind the Geomessage port and pick up
broadcast datagrams, so no connection or session state is needed.
"""

from __future__ import annotations

import logging
import socket
import threading

from .errors import TransmissionError

logger = logging.getLogger("geomessage.udp")

DEFAULT_UDP_HOST = "255.255.255.255"
DEFAULT_UDP_PORT = 45678


class UDPMessageSink:
    """Sends each message as a single UDP datagram to host:port."""

    def __init__(
        self,
        host: str = DEFAULT_UDP_HOST,
        port: int = DEFAULT_UDP_PORT,
        *,
        broadcast: bool = True,
    ) -> None:
        self._host = host
        self._port = port
        self._broadcast = broadcast
        self._sock: socket.socket | None = None
        self._lock = threading.Lock()

        # Stats
        self._messages_sent: int = 0
        self._bytes_sent: int = 0
        self._last_error: str = ""

    # -----------------------------------------------------------------------
    # Properties
    # -----------------------------------------------------------------------

    @property
    def address(self) -> tuple[str, int]:
        return (self._host, self._port)

    @property
    def messages_sent(self) -> int:
        return self._messages_sent

    @property
    def stats(self) -> dict:
        return {
            "host": self._host,
            "port": self._port,
            "broadcast": self._broadcast,
            "messages_sent": self._messages_sent,
            "bytes_sent": self._bytes_sent,
            "last_error": self._last_error,
        }

    # -----------------------------------------------------------------------
    # Socket lifecycle
    # -----------------------------------------------------------------------

    def _socket(self) -> socket.socket:
        if self._sock is None:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            if self._broadcast:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
            self._sock = sock
            logger.info(f"UDP sink ready ({self._host}:{self._port})")
        return self._sock

    def close(self) -> None:
        with self._lock:
            if self._sock is not None:
                self._sock.close()
                self._sock = None

    def __enter__(self) -> UDPMessageSink:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # -----------------------------------------------------------------------
    # Send
    # -----------------------------------------------------------------------

    def send_bytes(self, data: bytes) -> None:
        """Send one datagram. Raises TransmissionError on socket failure."""
        with self._lock:
            try:
                sent = self._socket().sendto(data, (self._host, self._port))
            except OSError as e:
                self._last_error = str(e)
                logger.warning(f"UDP send to {self._host}:{self._port} failed: {e}")
                raise TransmissionError(
                    f"UDP send to {self._host}:{self._port} failed: {e}"
                ) from e
            self._messages_sent += 1
            self._bytes_sent += sent
