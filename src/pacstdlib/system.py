"""
system
======

Default host provider backed by the operating system resolver.

Each lookup runs :func:`socket.getaddrinfo` on its own daemon thread and
the caller waits at most ``resolve_timeout`` for it; a lookup that takes
longer is reported as a :class:`ResolutionError`, exactly like a failed
one.  A hung lookup therefore never delays other names, and concurrent
lookups of the same name share one thread.  Answers may be cached for
``dns_cache_ttl`` seconds, in a cache bounded to ``cache_capacity`` names.
"""
from __future__ import annotations

import concurrent.futures
import logging
import socket
import threading
import time
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from .addresses import IPAddress, is_ip_literal, parse_address
from .config import PacSettings
from .exceptions import AddressError, ResolutionError
from .provider import HostProvider

logger = logging.getLogger(__name__)

DEFAULT_CACHE_CAPACITY = 1024

# Any routable address works: connecting a UDP socket sends nothing.
_ROUTE_TARGETS = {
    socket.AF_INET: ("192.0.2.1", 9),
    socket.AF_INET6: ("2001:db8::1", 9),
}


def _filter_family(found: List[IPAddress], family: Optional[int]) -> List[IPAddress]:
    if family is None:
        return list(found)
    return [a for a in found if a.version == family]


class SystemHostProvider(HostProvider):
    """Host provider using the standard :mod:`socket` resolver.

    Parameters
    ----------
    settings: PacSettings, optional
        ``resolve_timeout`` and ``dns_cache_ttl`` are read from here.
    cache_capacity: int
        Maximum number of names kept in the answer cache.
    """

    def __init__(self, settings: Optional[PacSettings] = None, cache_capacity: int = DEFAULT_CACHE_CAPACITY) -> None:
        super().__init__(settings)
        if cache_capacity < 1:
            raise ValueError("cache_capacity must be at least 1")
        self.cache_capacity = cache_capacity
        self._cache: "OrderedDict[str, Tuple[float, List[IPAddress]]]" = OrderedDict()
        self._cache_lock = threading.Lock()
        self._pending: Dict[str, concurrent.futures.Future] = {}
        self._pending_lock = threading.Lock()

    def __enter__(self) -> "SystemHostProvider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        """Drop cached answers.  Lookups still running finish on their own."""
        with self._cache_lock:
            self._cache.clear()

    # Resolution

    @staticmethod
    def _lookup(host: str) -> List[IPAddress]:
        infos = socket.getaddrinfo(host, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
        found: List[IPAddress] = []
        for family, _, _, _, sockaddr in infos:
            if family not in (socket.AF_INET, socket.AF_INET6):
                continue
            address = parse_address(sockaddr[0])
            if address not in found:
                found.append(address)
        return found

    def _cached(self, key: str) -> Optional[List[IPAddress]]:
        if self.settings.dns_cache_ttl <= 0:
            return None
        with self._cache_lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            expires, found = entry
            if expires < time.monotonic():
                del self._cache[key]
                return None
            return found

    def _store(self, key: str, found: List[IPAddress]) -> None:
        if self.settings.dns_cache_ttl <= 0:
            return
        now = time.monotonic()
        with self._cache_lock:
            for name in [n for n, (expires, _) in self._cache.items() if expires < now]:
                del self._cache[name]
            self._cache[key] = (now + self.settings.dns_cache_ttl, found)
            self._cache.move_to_end(key)
            while len(self._cache) > self.cache_capacity:
                self._cache.popitem(last=False)

    def _run_lookup(self, key: str, name: str, future: concurrent.futures.Future) -> None:
        try:
            found = self._lookup(name)
        except Exception as exc:
            with self._pending_lock:
                self._pending.pop(key, None)
            future.set_exception(exc)
            return
        self._store(key, found)
        with self._pending_lock:
            self._pending.pop(key, None)
        future.set_result(found)

    def _submit(self, key: str, name: str) -> concurrent.futures.Future:
        with self._pending_lock:
            future = self._pending.get(key)
            if future is None:
                future = concurrent.futures.Future()
                self._pending[key] = future
                threading.Thread(
                    target=self._run_lookup, args=(key, name, future), name=f"pac-resolver-{key}", daemon=True
                ).start()
            return future

    def resolve(self, host: str, family: Optional[int] = None) -> List[IPAddress]:
        name = host.strip()
        if not name:
            raise ResolutionError("Empty host name")
        if is_ip_literal(name):
            return _filter_family([parse_address(name)], family)

        key = name.lower()
        found = self._cached(key)
        if found is None:
            future = self._submit(key, name)
            try:
                found = future.result(timeout=self.settings.resolve_timeout)
            except concurrent.futures.TimeoutError as exc:
                raise ResolutionError(
                    f"Timed out resolving {name} after {self.settings.resolve_timeout}s"
                ) from exc
            except (OSError, UnicodeError, AddressError) as exc:
                raise ResolutionError(f"Cannot resolve {name}: {exc}") from exc
            logger.debug("Resolved %s to %s", name, found)
        return _filter_family(found, family)

    # Local addresses

    def _outbound_address(self, family: int) -> Optional[IPAddress]:
        try:
            with socket.socket(family, socket.SOCK_DGRAM) as udp:
                udp.connect(_ROUTE_TARGETS[family])
                return parse_address(udp.getsockname()[0])
        except (OSError, AddressError) as exc:
            logger.debug("No outbound address for family %s: %s", family, exc)
            return None

    def local_addresses(self) -> List[IPAddress]:
        found: List[IPAddress] = []
        try:
            found.extend(self.resolve(socket.gethostname()))
        except ResolutionError as exc:
            logger.debug("Cannot resolve local host name: %s", exc)
        for family in (socket.AF_INET, socket.AF_INET6):
            address = self._outbound_address(family)
            if address is not None and address not in found:
                found.append(address)
        if not found:
            raise ResolutionError("No local address found")
        return found

    def primary_ipv4_address(self) -> IPAddress:
        address = self._outbound_address(socket.AF_INET)
        if address is not None and not address.is_unspecified:
            return address
        for candidate in self.local_addresses():
            if candidate.version == 4:
                return candidate
        raise ResolutionError("No IPv4 address found")
