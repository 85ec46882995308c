"""
config
======

Settings of the PAC standard library, persisted as YAML.  Values live
under a top-level ``pac`` key::

    pac:
      prefer_ipv6_addresses: false
      resolve_timeout: 5.0
      dns_cache_ttl: 0
      glob_cache_capacity: 256
      client_version: "1.0"
      timezone: Europe/Bucharest
      provider: mypackage.providers:CorporateProvider

A missing file yields the defaults.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from datetime import timezone, tzinfo
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_RESOLVE_TIMEOUT = 5.0
DEFAULT_GLOB_CACHE_CAPACITY = 256
DEFAULT_CLIENT_VERSION = "1.0"


@dataclass
class PacSettings:
    """Tunables shared by the bridge and the default host provider."""

    #: Order IPv6 addresses before IPv4 ones in ``dnsResolveEx`` and
    #: ``myIpAddressEx``.
    prefer_ipv6_addresses: bool = False
    #: Upper bound, in seconds, for a single DNS lookup.
    resolve_timeout: float = DEFAULT_RESOLVE_TIMEOUT
    #: Lifetime, in seconds, of cached DNS answers; 0 disables caching.
    dns_cache_ttl: float = 0
    glob_cache_capacity: int = DEFAULT_GLOB_CACHE_CAPACITY
    client_version: str = DEFAULT_CLIENT_VERSION
    #: IANA zone for local time; ``None`` uses the system zone.
    timezone: Optional[str] = None
    #: ``package.module:ClassName`` of a custom host provider.
    provider: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.prefer_ipv6_addresses, bool):
            raise ConfigError(f"prefer_ipv6_addresses must be a boolean, got {self.prefer_ipv6_addresses!r}")
        try:
            self.resolve_timeout = float(self.resolve_timeout)
            self.dns_cache_ttl = float(self.dns_cache_ttl)
            self.glob_cache_capacity = int(self.glob_cache_capacity)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid numeric setting: {exc}") from exc
        if self.resolve_timeout <= 0:
            raise ConfigError("resolve_timeout must be positive")
        if self.dns_cache_ttl < 0:
            raise ConfigError("dns_cache_ttl cannot be negative")
        if self.glob_cache_capacity < 1:
            raise ConfigError("glob_cache_capacity must be at least 1")
        self.client_version = str(self.client_version)
        if self.timezone is not None:
            self.local_zone()

    def local_zone(self) -> Optional[tzinfo]:
        """Zone used by the non-GMT temporal predicates."""
        if self.timezone is None:
            return None
        if self.timezone.upper() in ("UTC", "GMT"):
            return timezone.utc
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigError(f"Unknown timezone: {self.timezone!r}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PacSettings":
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key in known:
                values[key] = value
            else:
                logger.warning("Ignore unknown PAC setting %r", key)
        return cls(**values)


def load_settings(filename: Optional[str] = None) -> PacSettings:
    """Read settings from a YAML file; defaults when there is none."""
    if filename is None:
        return PacSettings()
    try:
        with open(filename, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.debug("No settings file at %s, using defaults", filename)
        return PacSettings()
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse {filename}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{filename} must contain a mapping")
    section = data.get("pac") or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'pac' section of {filename} must be a mapping")
    return PacSettings.from_dict(section)


def save_settings(settings: PacSettings, filename: str) -> None:
    with open(filename, "w", encoding="utf-8") as f:
        yaml.safe_dump({"pac": settings.to_dict()}, f, sort_keys=False)
