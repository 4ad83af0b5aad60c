"""Host identity collector."""

import platform
import socket
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

import distro


def collect_host(tags: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Collect the host fields attached to every snapshot.

    Returns hostname, OS name/version, kernel release and user tags.
    """
    # Get OS information
    os_name = distro.name() or platform.system()
    os_version = distro.version() or platform.release()

    return {
        "hostname": socket.getfqdn(),
        "os": {
            "name": os_name,
            "version": os_version,
        },
        "kernel": platform.release(),
        "tags": tags or {},
    }


def snapshot_timestamp() -> str:
    """Current UTC time in ISO 8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%S.%f')[:-3] + 'Z'


def build_payload(
    interfaces: Iterable[Dict[str, Any]],
    host: Dict[str, Any],
    ts: Optional[str] = None,
) -> Dict[str, Any]:
    """Wrap interface dicts in the snapshot envelope sent to sinks."""
    return {
        "host": host,
        "ts": ts or snapshot_timestamp(),
        "network_ifaces": list(interfaces),
    }
