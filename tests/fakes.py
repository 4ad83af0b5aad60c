"""Fake interface address tables and sysfs counter files."""

from __future__ import annotations

import socket
from collections import namedtuple
from pathlib import Path

# Same shape as psutil's snicaddr
Addr = namedtuple("Addr", ["family", "address", "netmask", "broadcast", "ptp"])


def inet(address: str) -> Addr:
    return Addr(socket.AF_INET, address, "255.255.255.0", None, None)


def inet6(address: str) -> Addr:
    return Addr(socket.AF_INET6, address, "ffff:ffff:ffff:ffff::", None, None)


def write_counter(root: Path, iface: str, name: str, text: str | bytes) -> Path:
    """Write one counter file under a fake /sys/class/net tree."""
    if name == "speed":
        path = root / iface / "speed"
    else:
        path = root / iface / "statistics" / name
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(text, bytes):
        path.write_bytes(text)
    else:
        path.write_text(text)
    return path
