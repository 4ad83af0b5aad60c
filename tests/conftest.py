"""Shared fixtures for the collector tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


@pytest.fixture()
def sysfs_root(tmp_path: Path) -> Path:
    """Empty fake /sys/class/net directory."""
    root = tmp_path / "net"
    root.mkdir()
    return root


@pytest.fixture()
def linux(monkeypatch: pytest.MonkeyPatch) -> None:
    """Force the sysfs counter reader regardless of the test host."""
    monkeypatch.setattr(sys, "platform", "linux")
