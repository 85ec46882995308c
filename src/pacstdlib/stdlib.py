"""
stdlib
======

The script-visible surface of the PAC API.

:class:`PacStandardLibrary` exposes the standard PAC helper functions
under their exact script names (``isInNet``, ``dnsResolve``,
``shExpMatch``, ...).  Each one passes its arguments to the injected
:class:`~pacstdlib.provider.HostProvider` and coerces the answer to the
type the script expects: ``str`` for addresses and versions, ``int`` for
``dnsDomainLevels`` and ``bool`` for predicates.

PAC scripts have no convention for handling exceptions, so nothing is
allowed to escape: a missing or non-string argument, a malformed
date/time range or a fault inside the provider all produce the
function's sentinel (``False``, ``""`` or ``0``).

Usage::

    library = PacStandardLibrary(SystemHostProvider(settings))
    evaluation = library.snapshot()          # one per FindProxyForURL call
    engine.install_globals(evaluation.functions())

A snapshot freezes the clock, so every temporal predicate called during
one evaluation sees the same instant.
"""
from __future__ import annotations

import functools
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .datetime_ranges import parse_date_range, parse_time_range, parse_weekday_range
from .exceptions import PacDateTimeInputError
from .provider import HostProvider, default_provider

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

#: Names installed as globals in the script engine.
FUNCTION_NAMES = (
    "isPlainHostName",
    "dnsDomainIs",
    "localHostOrDomainIs",
    "isResolvable",
    "isInNet",
    "dnsResolve",
    "myIpAddress",
    "dnsDomainLevels",
    "shExpMatch",
    "weekdayRange",
    "dateRange",
    "timeRange",
    "isResolvableEx",
    "isInNetEx",
    "dnsResolveEx",
    "myIpAddressEx",
    "sortIpAddressList",
    "getClientVersion",
    "alert",
)


class _BadArgument(Exception):
    pass


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise _BadArgument(f"expected a string, got {value!r}")
    return value


def _pac_function(result_type: type, sentinel: Any) -> Callable:
    """Wrap a bridge method with output coercion and the sentinel policy."""

    def decorate(method: Callable) -> Callable:
        name = method.__name__

        @functools.wraps(method)
        def wrapper(self: "PacStandardLibrary", *args: Any, **kwargs: Any) -> Any:
            try:
                value = method(self, *args, **kwargs)
            except (_BadArgument, TypeError) as exc:
                logger.debug("PAC script error: bad arguments to %s() %r: %s", name, args, exc)
                return sentinel
            except PacDateTimeInputError as exc:
                logger.warning("PAC script error: arguments passed to %s() %r are faulty: %s", name, args, exc)
                return sentinel
            except Exception:
                logger.warning("Host provider failed in %s() %r", name, args, exc_info=True)
                return sentinel
            if value is None:
                return sentinel
            return result_type(value)

        return wrapper

    return decorate


class PacStandardLibrary:
    """PAC helper functions bound to a host provider.

    Parameters
    ----------
    provider: HostProvider, optional
        Source of DNS and local-address answers.  Defaults to the one
        named by the default settings (the socket-based provider).
    clock: callable, optional
        Returns the current instant as an aware ``datetime``.
    """

    def __init__(self, provider: Optional[HostProvider] = None, clock: Optional[Clock] = None) -> None:
        self.provider = provider if provider is not None else default_provider()
        self._clock = clock or _utc_now

    def snapshot(self, now: Optional[datetime] = None) -> "PacStandardLibrary":
        """Return a library sharing the provider, with the clock frozen."""
        instant = now if now is not None else self._clock()
        return PacStandardLibrary(self.provider, clock=lambda: instant)

    def functions(self) -> Dict[str, Callable[..., Any]]:
        """Mapping of script names to callables, ready to install as globals."""
        return {name: getattr(self, name) for name in FUNCTION_NAMES}

    # Name and domain predicates

    @_pac_function(bool, False)
    def isPlainHostName(self, host):
        return self.provider.is_plain_host_name(_text(host))

    @_pac_function(bool, False)
    def dnsDomainIs(self, host, domain):
        return self.provider.dns_domain_is(_text(host), _text(domain))

    @_pac_function(bool, False)
    def localHostOrDomainIs(self, host, hostdom):
        return self.provider.local_host_or_domain_is(_text(host), _text(hostdom))

    @_pac_function(int, 0)
    def dnsDomainLevels(self, host):
        return self.provider.dns_domain_levels(_text(host))

    @_pac_function(bool, False)
    def shExpMatch(self, text, shexp):
        return self.provider.sh_exp_match(_text(text), _text(shexp))

    # Resolution-dependent functions

    @_pac_function(bool, False)
    def isResolvable(self, host):
        return self.provider.is_resolvable(_text(host))

    @_pac_function(bool, False)
    def isResolvableEx(self, host):
        return self.provider.is_resolvable_ex(_text(host))

    @_pac_function(str, "")
    def dnsResolve(self, host):
        return self.provider.dns_resolve(_text(host))

    @_pac_function(str, "")
    def dnsResolveEx(self, host):
        return self.provider.dns_resolve_ex(_text(host))

    @_pac_function(bool, False)
    def isInNet(self, host, pattern, mask):
        return self.provider.is_in_net(_text(host), _text(pattern), _text(mask))

    @_pac_function(bool, False)
    def isInNetEx(self, host, ipPrefix):
        return self.provider.is_in_net_ex(_text(host), _text(ipPrefix))

    @_pac_function(str, "")
    def myIpAddress(self):
        return self.provider.my_ip_address()

    @_pac_function(str, "")
    def myIpAddressEx(self):
        return self.provider.my_ip_address_ex()

    @_pac_function(str, "")
    def sortIpAddressList(self, ipAddressList):
        return self.provider.sort_ip_address_list(_text(ipAddressList))

    @_pac_function(str, "")
    def getClientVersion(self):
        return self.provider.get_client_version()

    # Temporal predicates

    @_pac_function(bool, False)
    def weekdayRange(self, wd1=None, wd2=None, gmt=None):
        period = parse_weekday_range(wd1, wd2, gmt)
        return self.provider.weekday_range(period, self._clock())

    @_pac_function(bool, False)
    def dateRange(self, day1=None, month1=None, year1=None, day2=None, month2=None, year2=None, gmt=None):
        period = parse_date_range(day1, month1, year1, day2, month2, year2, gmt)
        return self.provider.date_range(period, self._clock())

    @_pac_function(bool, False)
    def timeRange(self, hour1=None, min1=None, sec1=None, hour2=None, min2=None, sec2=None, gmt=None):
        period = parse_time_range(hour1, min1, sec1, hour2, min2, sec2, gmt)
        return self.provider.time_range(period, self._clock())

    # Side channel

    def alert(self, txt=None) -> None:
        try:
            self.provider.alert("" if txt is None else str(txt))
        except Exception:
            logger.debug("Host provider failed in alert()", exc_info=True)
