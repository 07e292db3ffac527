# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Root conftest — skip socket tests when loopback UDP is unavailable."""

import socket

import pytest


def _loopback_udp_available() -> bool:
    """Check that a UDP socket can bind on 127.0.0.1."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.bind(("127.0.0.1", 0))
        return True
    except OSError:
        return False


_HAS_LOOPBACK = _loopback_udp_available()


def pytest_collection_modifyitems(config, items):
    for item in items:
        if "integration" in item.keywords and not _HAS_LOOPBACK:
            item.add_marker(pytest.mark.skip(reason="loopback UDP not available"))
