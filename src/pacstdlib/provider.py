"""
provider
========

Defines the abstract host provider consumed by the PAC standard library.

A provider answers the questions a PAC script cannot answer by itself:
which addresses a host name resolves to and which addresses the local
machine has.  Subclasses implement the three network-facing primitives
(:meth:`HostProvider.resolve`, :meth:`HostProvider.local_addresses` and
:meth:`HostProvider.primary_ipv4_address`); every PAC helper is a
concrete hook built on top of them and may be overridden as well.

Providers are shared by concurrent evaluations, so implementations must
be safe to call from several threads.  The hooks below keep no state of
their own apart from the compiled-pattern cache, which is locked.

A provider class can also be named in the settings file
(``provider: package.module:ClassName``) and loaded with
:func:`load_provider`.
"""
from __future__ import annotations

import abc
import importlib
import logging
from datetime import datetime
from typing import List, Optional

from . import addresses, hostnames
from .addresses import IPAddress
from .config import PacSettings
from .datetime_ranges import DateRange, TimeRange, WeekdayRange
from .exceptions import AddressError, ConfigError, ResolutionError
from .glob import GlobPatternMatcher

logger = logging.getLogger(__name__)
alert_logger = logging.getLogger("pacstdlib.alert")


class HostProvider(abc.ABC):
    """Abstract base class for host providers.

    To plug a different resolver in, subclass ``HostProvider`` and
    implement the abstract primitives.  All hooks return plain Python
    values; type coercion for the script happens in the bridge.
    """

    def __init__(self, settings: Optional[PacSettings] = None) -> None:
        self.settings = settings or PacSettings()
        self.glob_matcher = GlobPatternMatcher(self.settings.glob_cache_capacity)

    # Network primitives

    @abc.abstractmethod
    def resolve(self, host: str, family: Optional[int] = None) -> List[IPAddress]:
        """Resolve ``host`` to its addresses.

        Parameters
        ----------
        host: str
            Host name or IP literal.  Literals are returned as they are,
            without a lookup.
        family: int, optional
            ``4`` or ``6`` to keep a single address family.

        Returns
        -------
        list
            The (possibly empty) list of addresses, in resolver order.

        Raises
        ------
        ResolutionError
            If the lookup failed or timed out.
        """

    @abc.abstractmethod
    def local_addresses(self) -> List[IPAddress]:
        """Return every address of the local machine, IPv4 and IPv6."""

    @abc.abstractmethod
    def primary_ipv4_address(self) -> IPAddress:
        """Return the outbound-facing IPv4 address.

        Raises
        ------
        ResolutionError
            If the machine has no usable IPv4 address.
        """

    # Name and domain predicates

    def is_plain_host_name(self, host: str) -> bool:
        return hostnames.is_plain_host_name(host)

    def dns_domain_is(self, host: str, domain: str) -> bool:
        return hostnames.dns_domain_is(host, domain)

    def local_host_or_domain_is(self, host: str, hostdom: str) -> bool:
        return hostnames.local_host_or_domain_is(host, hostdom)

    def dns_domain_levels(self, host: str) -> int:
        return hostnames.dns_domain_levels(host)

    def sh_exp_match(self, text: str, shexp: str) -> bool:
        return self.glob_matcher.matches(text, shexp)

    # Resolution-dependent helpers

    def _resolve_quietly(self, host: str, family: Optional[int] = None) -> List[IPAddress]:
        try:
            return self.resolve(host, family)
        except ResolutionError as exc:
            logger.debug("Error on resolving host [%s]: %s", host, exc)
            return []

    def is_resolvable(self, host: str) -> bool:
        return bool(self._resolve_quietly(host, 4))

    def is_resolvable_ex(self, host: str) -> bool:
        return bool(self._resolve_quietly(host))

    def dns_resolve(self, host: str) -> str:
        found = self._resolve_quietly(host, 4)
        return str(found[0]) if found else ""

    def dns_resolve_ex(self, host: str) -> str:
        found = self._resolve_quietly(host)
        ordered = addresses.order_by_family(found, self.settings.prefer_ipv6_addresses)
        return addresses.join_addresses(ordered)

    def is_in_net(self, host: str, pattern: str, mask: str) -> bool:
        found = self._resolve_quietly(host, 4)
        if not found:
            return False
        try:
            return addresses.in_net(found[0], pattern, mask)
        except AddressError as exc:
            logger.debug("isInNet: %s", exc)
            return False

    def is_in_net_ex(self, host: str, ip_prefix: str) -> bool:
        try:
            prefixes = addresses.parse_prefixes(ip_prefix)
        except AddressError as exc:
            logger.debug("isInNetEx: %s", exc)
            return False
        return addresses.in_any_prefix(self._resolve_quietly(host), prefixes)

    def my_ip_address(self) -> str:
        try:
            return str(self.primary_ipv4_address())
        except ResolutionError as exc:
            logger.warning("Cannot get localhost ip address: %s", exc)
            return addresses.LOCALHOST

    def my_ip_address_ex(self) -> str:
        try:
            found = self.local_addresses()
        except ResolutionError as exc:
            logger.warning("Cannot get localhost ip addresses: %s", exc)
            found = []
        if not found:
            return addresses.LOCALHOST
        ordered = addresses.order_by_family(found, self.settings.prefer_ipv6_addresses)
        return addresses.join_addresses(ordered)

    def sort_ip_address_list(self, ip_address_list: str) -> str:
        return addresses.sort_ip_address_list(ip_address_list)

    # Temporal predicates, evaluated against the caller's instant

    def weekday_range(self, period: WeekdayRange, now: datetime) -> bool:
        return period.matches(now, self.settings.local_zone())

    def date_range(self, period: DateRange, now: datetime) -> bool:
        return period.matches(now, self.settings.local_zone())

    def time_range(self, period: TimeRange, now: datetime) -> bool:
        return period.matches(now, self.settings.local_zone())

    # Miscellaneous

    def get_client_version(self) -> str:
        return self.settings.client_version

    def alert(self, message: str) -> None:
        alert_logger.info("PAC script says: %s", message)


def load_provider(reference: str, settings: Optional[PacSettings] = None) -> HostProvider:
    """Instantiate the provider class named by ``package.module:ClassName``."""
    module_name, sep, class_name = reference.partition(":")
    if not sep or not module_name or not class_name:
        raise ConfigError(f"Provider reference must look like 'package.module:ClassName', got {reference!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import provider module {module_name!r}: {exc}") from exc
    cls = getattr(module, class_name, None)
    if not isinstance(cls, type) or not issubclass(cls, HostProvider):
        raise ConfigError(f"{reference} is not a HostProvider subclass")
    return cls(settings)


def default_provider(settings: Optional[PacSettings] = None) -> HostProvider:
    """Provider named in ``settings``, or the socket-based one."""
    settings = settings or PacSettings()
    if settings.provider:
        return load_provider(settings.provider, settings)
    from .system import SystemHostProvider

    return SystemHostProvider(settings)
