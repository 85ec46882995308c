"""Shared pytest fixtures for pacstdlib tests."""

import ipaddress
import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from pacstdlib.addresses import is_ip_literal, parse_address
from pacstdlib.config import PacSettings
from pacstdlib.exceptions import ResolutionError
from pacstdlib.provider import HostProvider
from pacstdlib.stdlib import PacStandardLibrary


class FakeHostProvider(HostProvider):
    """In-memory provider: a host table instead of DNS."""

    def __init__(self, hosts=None, local=None, settings=None):
        super().__init__(settings or PacSettings(timezone="UTC"))
        self.hosts = {
            name: [ipaddress.ip_address(a) for a in found] for name, found in (hosts or {}).items()
        }
        self.local = [ipaddress.ip_address(a) for a in (local or [])]
        self.lookups = []
        self.alerts = []

    def resolve(self, host, family=None):
        self.lookups.append(host)
        if is_ip_literal(host):
            found = [parse_address(host)]
        elif host.strip().lower() in self.hosts:
            found = self.hosts[host.strip().lower()]
        else:
            raise ResolutionError(f"Unknown host {host}")
        return [a for a in found if family is None or a.version == family]

    def local_addresses(self):
        if not self.local:
            raise ResolutionError("No local address found")
        return list(self.local)

    def primary_ipv4_address(self):
        for address in self.local:
            if address.version == 4:
                return address
        raise ResolutionError("No IPv4 address found")

    def alert(self, message):
        self.alerts.append(message)


class BrokenHostProvider(FakeHostProvider):
    """Provider whose network primitives fail with unexpected errors."""

    def resolve(self, host, family=None):
        raise RuntimeError("resolver crashed")

    def local_addresses(self):
        raise RuntimeError("interfaces unavailable")

    def primary_ipv4_address(self):
        raise RuntimeError("interfaces unavailable")

    def alert(self, message):
        raise RuntimeError("sink closed")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def provider():
    """Provider knowing a few hosts, dual-stack."""
    return FakeHostProvider(
        hosts={
            "www.example.com": ["93.184.216.34", "2606:2800:220:1:248:1893:25c8:1946"],
            "intranet": ["192.168.1.10"],
            "v6only.example.com": ["2001:db8::10"],
            "multi.example.com": ["10.0.0.5", "2001:db8::5", "10.0.0.1"],
        },
        local=["192.168.1.20", "fe80::1"],
    )


@pytest.fixture
def library(provider):
    """Bridge over the fake provider with a clock fixed on Wednesday noon UTC."""
    return PacStandardLibrary(provider, clock=lambda: WEDNESDAY_NOON)


WEDNESDAY_NOON = datetime(2026, 10, 21, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def broken_library():
    """Bridge over a provider that raises on every network call."""
    return PacStandardLibrary(BrokenHostProvider(), clock=lambda: WEDNESDAY_NOON)


@pytest.fixture
def make_provider():
    """Factory for fake providers with custom hosts and settings."""
    return FakeHostProvider
