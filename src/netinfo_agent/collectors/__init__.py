"""Collectors for network interface snapshots."""

from .counters import (
    CounterKind,
    SysfsCounterReader,
    PsutilCounterReader,
    default_counter_reader,
    parse_counter,
)
from .identity import build_payload, collect_host
from .network import InterfaceRecord, NetworkScanner, collect_network_interfaces

__all__ = [
    "CounterKind",
    "SysfsCounterReader",
    "PsutilCounterReader",
    "default_counter_reader",
    "parse_counter",
    "build_payload",
    "collect_host",
    "InterfaceRecord",
    "NetworkScanner",
    "collect_network_interfaces",
]
