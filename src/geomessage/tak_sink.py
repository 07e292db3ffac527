# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""TAKMessageSink — delivers Geomessages to a TAK server over pytak.

send_bytes() rewrites each Geomessage as a CoT event (see geomessage.cot)
and only touches a bounded thread-safe queue.  A daemon thread owns
the pytak session and a drain task moves queued payloads onto pytak's
tx_queue.  When the queue is full the oldest payload is discarded.  Without
pytak the sink logs a warning and never starts.
"""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
from dataclasses import asdict, dataclass

from .cot import geomessage_to_cot
from .document import parse_geomessage
from .errors import TransmissionError

logger = logging.getLogger("geomessage.tak")

DEFAULT_TX_QUEUE_MAX = 500

# Seconds the drain task blocks on the payload queue before rechecking state
_DRAIN_POLL = 0.2


def _pytak_available() -> bool:
    try:
        import pytak  # noqa: F401
    except ImportError:
        return False
    return True


@dataclass(frozen=True)
class TAKEndpoint:
    """Where and as whom the sink connects."""

    cot_url: str = "tcp://localhost:8088"
    callsign: str = "GEOMESSAGE"
    tls_client_cert: str = ""
    tls_client_key: str = ""
    tls_ca_cert: str = ""

    def pytak_config(self) -> dict[str, str]:
        """Config mapping for pytak.CLITool; TLS keys only when set."""
        config = {"COT_URL": self.cot_url, "CALLSIGN": self.callsign}
        tls = {
            "PYTAK_TLS_CLIENT_CERT": self.tls_client_cert,
            "PYTAK_TLS_CLIENT_KEY": self.tls_client_key,
            "PYTAK_TLS_CLIENT_CAFILE": self.tls_ca_cert,
        }
        config.update({key: path for key, path in tls.items() if path})
        return config


@dataclass
class _Counters:
    messages_queued: int = 0
    messages_sent: int = 0
    messages_dropped: int = 0
    last_error: str = ""


class TAKMessageSink:
    """Message sink that forwards payloads to a TAK server."""

    def __init__(
        self,
        cot_url: str = "tcp://localhost:8088",
        callsign: str = "GEOMESSAGE",
        tls_client_cert: str = "",
        tls_client_key: str = "",
        tls_ca_cert: str = "",
        tx_queue_max: int = DEFAULT_TX_QUEUE_MAX,
        stale_seconds: int = 300,
    ) -> None:
        self.endpoint = TAKEndpoint(
            cot_url=cot_url,
            callsign=callsign,
            tls_client_cert=tls_client_cert,
            tls_client_key=tls_client_key,
            tls_ca_cert=tls_ca_cert,
        )
        self._stale_seconds = stale_seconds
        self._payloads: queue.Queue[bytes] = queue.Queue(maxsize=tx_queue_max)
        self._counters = _Counters()
        self._lock = threading.Lock()
        self._running = False
        self._connected = False
        self._worker: threading.Thread | None = None

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def running(self) -> bool:
        return self._running

    @property
    def stats(self) -> dict:
        return {
            "running": self._running,
            "connected": self._connected,
            "cot_url": self.endpoint.cot_url,
            "callsign": self.endpoint.callsign,
            "tx_queue_size": self._payloads.qsize(),
            **asdict(self._counters),
        }

    # -----------------------------------------------------------------------
    # MessageSink
    # -----------------------------------------------------------------------

    def send_bytes(self, data: bytes) -> None:
        """Convert one Geomessage to CoT and queue it.

        Raises TransmissionError if the sink is stopped or the payload has
        no CoT form (not a spot report, or no usable position).
        """
        if not self._running:
            raise TransmissionError(f"TAK sink not running ({self.endpoint.cot_url})")
        data = self._to_cot(data)
        with self._lock:
            if self._payloads.full():
                try:
                    self._payloads.get_nowait()
                    self._counters.messages_dropped += 1
                except queue.Empty:
                    pass
            self._payloads.put_nowait(data)
            self._counters.messages_queued += 1

    def _to_cot(self, data: bytes) -> bytes:
        fields = parse_geomessage(data)
        if fields is None:
            raise TransmissionError("TAK sink payload is not a Geomessage")
        try:
            cot_xml = geomessage_to_cot(
                fields, self.endpoint.callsign, stale_seconds=self._stale_seconds,
            )
        except ValueError as e:
            self._counters.last_error = str(e)
            logger.warning(f"Geomessage {fields.get('id', '?')} not sent to TAK: {e}")
            raise TransmissionError(f"Cannot convert geomessage to CoT: {e}") from e
        return cot_xml.encode("utf-8")

    def _next_payload(self, timeout: float) -> bytes | None:
        try:
            return self._payloads.get(timeout=timeout)
        except queue.Empty:
            return None

    def _mark_sent(self) -> None:
        with self._lock:
            self._counters.messages_sent += 1

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    def start(self) -> None:
        """Connect in a background thread. No-op if already running."""
        if self._running:
            return
        if not _pytak_available():
            logger.warning("pytak not installed -- TAK sink disabled")
            self._counters.last_error = "pytak not installed"
            return

        self._running = True
        self._worker = threading.Thread(
            target=self._serve, name="geomessage-tak", daemon=True
        )
        self._worker.start()
        logger.info(f"TAK sink started ({self.endpoint.cot_url})")

    def stop(self) -> None:
        """Stop the sink. Payloads still queued are not sent."""
        self._running = False
        worker, self._worker = self._worker, None
        if worker is not None and worker.is_alive():
            worker.join(timeout=5.0)
        self._connected = False
        logger.info("TAK sink stopped")

    def _serve(self) -> None:
        import pytak

        try:
            asyncio.run(self._session(pytak))
        except Exception as e:
            logger.error(f"TAK session to {self.endpoint.cot_url} ended: {e}")
            self._counters.last_error = str(e)
        finally:
            self._connected = False

    async def _session(self, pytak_module) -> None:
        clitool = pytak_module.CLITool(self.endpoint.pytak_config())
        await clitool.setup()
        clitool.add_task(_QueueDrain(clitool.tx_queue, self))
        self._connected = True
        logger.info(f"TAK connected to {self.endpoint.cot_url}")
        await clitool.run()


class _QueueDrain:
    """pytak task feeding queued Geomessage payloads to pytak's tx_queue."""

    def __init__(self, pytak_tx_queue: asyncio.Queue, sink: TAKMessageSink):
        self._pytak_tx = pytak_tx_queue
        self._sink = sink

    async def run(self, number_of_iterations=-1):
        while self._sink.running:
            payload = await asyncio.to_thread(self._sink._next_payload, _DRAIN_POLL)
            if payload is None:
                continue
            await self._pytak_tx.put(payload)
            self._sink._mark_sent()
            logger.debug(f"TAK payload handed to pytak ({len(payload)} bytes)")
