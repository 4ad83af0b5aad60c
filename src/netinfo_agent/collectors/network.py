"""Network interface collector."""

import ipaddress
import logging
import socket
from dataclasses import dataclass, asdict, astuple, fields
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import psutil

from ..errors import AddressResolutionFailed, EnumerationFailed
from .counters import DEFAULT_SYSFS_ROOT, default_counter_reader, read_all_counters

logger = logging.getLogger("netinfo-agent.network")


@dataclass
class InterfaceRecord:
    """One snapshot row for an IPv4-bearing interface."""

    name: str
    ipv4_address: Optional[str] = None
    ipv6_address: Optional[str] = None
    speed_mbps: int = 0
    tx_bytes: int = 0
    tx_packets: int = 0
    tx_errors: int = 0
    tx_dropped: int = 0
    rx_bytes: int = 0
    rx_packets: int = 0
    rx_errors: int = 0
    rx_dropped: int = 0

    @classmethod
    def columns(cls) -> List[str]:
        """Attribute names in output order."""
        return [f.name for f in fields(cls)]

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def as_row(self) -> Tuple[Any, ...]:
        return astuple(self)


def numeric_host(interface: str, address: Any, family: int) -> str:
    """
    Convert a raw interface address to its numeric-host string.

    IPv6 scope suffixes ("%eth0") are dropped.

    Raises:
        AddressResolutionFailed: If the address is not a valid address of `family`
    """
    text = str(address).split("%", 1)[0]
    try:
        parsed = ipaddress.ip_address(text)
    except ValueError as e:
        raise AddressResolutionFailed(interface, str(address), str(e))

    expected = 4 if family == socket.AF_INET else 6
    if parsed.version != expected:
        raise AddressResolutionFailed(interface, str(address), f"not an IPv{expected} address")

    return str(parsed)


class NetworkScanner:
    """
    Build InterfaceRecords from the host's interface addresses and counters.

    Args:
        address_source: Callable returning {interface: [addresses]} like
            psutil.net_if_addrs(); each address has .family and .address
        counter_reader: Object with read(interface, kind) -> (value, ok). When
            omitted a fresh platform reader is created for every scan.
        include_ipv6: Fill ipv6_address from the interface's IPv6 addresses
        sysfs_root: Root of the sysfs net class for the default reader
    """

    def __init__(
        self,
        address_source: Optional[Callable[[], Dict[str, List[Any]]]] = None,
        counter_reader=None,
        include_ipv6: bool = True,
        sysfs_root: str = DEFAULT_SYSFS_ROOT,
    ):
        self.address_source = address_source or psutil.net_if_addrs
        self.counter_reader = counter_reader
        self.include_ipv6 = include_ipv6
        self.sysfs_root = sysfs_root

    def _enumerate(self) -> Dict[str, List[Any]]:
        try:
            return self.address_source()
        except (OSError, psutil.Error) as e:
            raise EnumerationFailed(f"Failed to get network interfaces: {e}") from e

    def _ipv6_address(self, interface: str, addresses: List[Any]) -> Optional[str]:
        """Pick the first global IPv6 address, falling back to a link-local one."""
        link_local = None
        for addr in addresses:
            if addr.family != socket.AF_INET6 or not addr.address:
                continue
            try:
                host = numeric_host(interface, addr.address, socket.AF_INET6)
            except AddressResolutionFailed as e:
                logger.error(str(e))
                continue
            if ipaddress.IPv6Address(host).is_link_local:
                link_local = link_local or host
                continue
            return host
        return link_local

    def scan(self) -> Iterator[InterfaceRecord]:
        """
        Take one snapshot.

        Enumeration happens before this method returns; the records themselves
        are produced lazily, in enumeration order.

        Raises:
            EnumerationFailed: If the interface list could not be obtained
        """
        interfaces = self._enumerate()
        reader = self.counter_reader or default_counter_reader(self.sysfs_root)
        return self._records(interfaces, reader)

    def _records(self, interfaces: Dict[str, List[Any]], reader) -> Iterator[InterfaceRecord]:
        """
        Yield one record per interface that has an IPv4 address.

        Secondary IPv4 addresses on the same interface (aliases) do not get
        their own record: only the first AF_INET entry in enumeration order is
        used, whereas getifaddrs() consumers that emit a row per address entry
        would report the interface once per address.
        """
        for name, addresses in interfaces.items():
            for addr in addresses:
                # Skip entries without a bound address
                if not addr.address:
                    continue
                if addr.family != socket.AF_INET:
                    continue

                yield self._build_record(name, addr, addresses, reader)
                # First IPv4 address per interface only
                break

    def _build_record(self, name: str, addr: Any, addresses: List[Any], reader) -> InterfaceRecord:
        try:
            ipv4_address = numeric_host(name, addr.address, socket.AF_INET)
        except AddressResolutionFailed as e:
            logger.error(str(e))
            ipv4_address = None

        ipv6_address = self._ipv6_address(name, addresses) if self.include_ipv6 else None

        return InterfaceRecord(
            name=name,
            ipv4_address=ipv4_address,
            ipv6_address=ipv6_address,
            **read_all_counters(reader, name),
        )


def collect_network_interfaces(
    sysfs_root: str = DEFAULT_SYSFS_ROOT,
    include_ipv6: bool = True,
) -> List[Dict[str, Any]]:
    """
    Collect network interface information.

    Returns list of IPv4-bearing interfaces with addresses, link speed and
    traffic counters.
    """
    scanner = NetworkScanner(include_ipv6=include_ipv6, sysfs_root=sysfs_root)
    return [record.as_dict() for record in scanner.scan()]
