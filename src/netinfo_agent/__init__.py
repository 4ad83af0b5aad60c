"""netinfo-agent: point-in-time network interface snapshots."""

__version__ = "0.1.0"
