"""Per-interface traffic and link counters.

On Linux the counters come from /sys/class/net/{iface}/statistics/ and
/sys/class/net/{iface}/speed. Other platforms read the same values through
psutil.
"""

import logging
import re
import sys
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import psutil

from ..errors import SourceUnavailable

logger = logging.getLogger("netinfo-agent.counters")

DEFAULT_SYSFS_ROOT = "/sys/class/net"

UINT64_MAX = 2 ** 64 - 1

# C isspace() set and ASCII digits only, as atoll() accepts
_LEADING_INT = re.compile(rb"[ \t\n\v\f\r]*([+-]?[0-9]+)")


class CounterKind(Enum):
    """Counters collected for every interface."""

    RX_BYTES = "rx_bytes"
    TX_BYTES = "tx_bytes"
    RX_PACKETS = "rx_packets"
    TX_PACKETS = "tx_packets"
    RX_ERRORS = "rx_errors"
    TX_ERRORS = "tx_errors"
    RX_DROPPED = "rx_dropped"
    TX_DROPPED = "tx_dropped"
    LINK_SPEED = "speed"

    @property
    def field_name(self) -> str:
        """Name of the InterfaceRecord attribute this counter fills."""
        if self is CounterKind.LINK_SPEED:
            return "speed_mbps"
        return self.value


# psutil snetio attribute for each traffic counter
_PSUTIL_IO_FIELDS = {
    CounterKind.RX_BYTES: "bytes_recv",
    CounterKind.TX_BYTES: "bytes_sent",
    CounterKind.RX_PACKETS: "packets_recv",
    CounterKind.TX_PACKETS: "packets_sent",
    CounterKind.RX_ERRORS: "errin",
    CounterKind.TX_ERRORS: "errout",
    CounterKind.RX_DROPPED: "dropin",
    CounterKind.TX_DROPPED: "dropout",
}


def parse_counter(text: Union[str, bytes]) -> int:
    """
    Parse the leading decimal integer of a counter line (bytes or text).

    Mirrors atoll(): leading whitespace and a sign are accepted, anything after
    the digits is ignored, and text without a numeric prefix parses as 0.
    The result is clamped into the unsigned 64-bit range.
    """
    if isinstance(text, str):
        text = text.encode("ascii", "replace")

    match = _LEADING_INT.match(text)
    if not match:
        return 0

    value = int(match.group(1))
    if value < 0:
        return 0
    return min(value, UINT64_MAX)


class SysfsCounterReader:
    """Read interface counters from the Linux sysfs net class."""

    def __init__(self, sysfs_root: str = DEFAULT_SYSFS_ROOT):
        self.sysfs_root = Path(sysfs_root)

    def counter_path(self, interface: str, kind: CounterKind) -> Path:
        """Return the sysfs file holding `kind` for `interface`."""
        if kind is CounterKind.LINK_SPEED:
            return self.sysfs_root / interface / "speed"
        return self.sysfs_root / interface / "statistics" / kind.value

    def _read_first_line(self, interface: str, kind: CounterKind) -> bytes:
        path = self.counter_path(interface, kind)
        try:
            with open(path, "rb") as f:
                return f.readline()
        except OSError as e:
            # speed raises EINVAL on read when the link is down
            raise SourceUnavailable(interface, kind.value, str(path), e.strerror or str(e))

    def read(self, interface: str, kind: CounterKind) -> Tuple[int, bool]:
        """
        Read one counter.

        Args:
            interface: Interface name as reported by enumeration
            kind: Counter to read

        Returns:
            Tuple of (value, ok). `ok` is False when the source could not be
            opened; the value is then 0.
        """
        try:
            line = self._read_first_line(interface, kind)
        except SourceUnavailable as e:
            logger.warning(str(e))
            return 0, False

        return parse_counter(line), True


class PsutilCounterReader:
    """
    Read interface counters through psutil.

    Used where sysfs is not available. The psutil tables are captured when the
    reader is created, so one reader serves exactly one snapshot.
    """

    def __init__(self):
        self._io_counters = psutil.net_io_counters(pernic=True)
        self._if_stats = psutil.net_if_stats()

    def _lookup(self, interface: str, kind: CounterKind) -> int:
        if kind is CounterKind.LINK_SPEED:
            stats = self._if_stats.get(interface)
            if stats is None:
                raise SourceUnavailable(interface, kind.value, "psutil.net_if_stats()")
            return stats.speed

        counters = self._io_counters.get(interface)
        if counters is None:
            raise SourceUnavailable(interface, kind.value, "psutil.net_io_counters(pernic=True)")
        return getattr(counters, _PSUTIL_IO_FIELDS[kind])

    def read(self, interface: str, kind: CounterKind) -> Tuple[int, bool]:
        """Read one counter; returns (value, ok) like SysfsCounterReader.read."""
        try:
            value = self._lookup(interface, kind)
        except SourceUnavailable as e:
            logger.warning(str(e))
            return 0, False

        return min(max(int(value), 0), UINT64_MAX), True


def default_counter_reader(sysfs_root: Optional[str] = None):
    """Return the counter reader for the current platform."""
    if sys.platform.startswith("linux"):
        return SysfsCounterReader(sysfs_root or DEFAULT_SYSFS_ROOT)
    return PsutilCounterReader()


def read_all_counters(reader, interface: str) -> Dict[str, int]:
    """
    Read every CounterKind for one interface.

    Each counter is read independently; an unavailable one is reported as 0
    without affecting the others.

    Returns:
        Dict mapping InterfaceRecord field names to counter values
    """
    values = {}
    for kind in CounterKind:
        value, _ok = reader.read(interface, kind)
        values[kind.field_name] = value
    return values
