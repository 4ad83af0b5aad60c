"""Error taxonomy for the network snapshot collectors.

Per-counter and per-interface problems are raised and absorbed inside the
collectors; only EnumerationFailed reaches the caller.
"""


class NetInfoError(Exception):
    """Base exception for collector errors."""
    pass


class SourceUnavailable(NetInfoError):
    """A counter source could not be opened or read."""

    def __init__(self, interface: str, kind: str, source: str, reason: str = ""):
        self.interface = interface
        self.kind = kind
        self.source = source
        self.reason = reason
        message = f"can not open {source} for reading {kind} of {interface}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class AddressResolutionFailed(NetInfoError):
    """An interface address could not be converted to numeric-host form."""

    def __init__(self, interface: str, address: str, reason: str = ""):
        self.interface = interface
        self.address = address
        self.reason = reason
        super().__init__(f"address resolution failed for {interface} ({address!r}): {reason}")


class EnumerationFailed(NetInfoError):
    """The OS could not produce the interface list."""
    pass
