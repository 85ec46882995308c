"""
addresses
=========

IP address helpers behind ``isInNet``, ``isInNetEx``,
``sortIpAddressList`` and the ``Ex`` resolution functions.  IPv4 and IPv6
literals are handled with the standard :mod:`ipaddress` module.
"""

from __future__ import annotations

import ipaddress
import logging
from typing import Iterable, List, Sequence, Tuple, Union

from .exceptions import AddressError

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

LOCALHOST = "127.0.0.1"


def parse_address(text: str) -> IPAddress:
    """Parse an IPv4 or IPv6 literal.

    Surrounding whitespace and the brackets of an IPv6 literal
    (``[::1]``) are tolerated.

    Raises
    ------
    AddressError
        If ``text`` is not an IP literal.
    """
    cleaned = text.strip()
    if cleaned.startswith("[") and cleaned.endswith("]"):
        cleaned = cleaned[1:-1]
    try:
        return ipaddress.ip_address(cleaned)
    except ValueError as exc:
        raise AddressError(f"Invalid IP address: {text!r}") from exc


def is_ip_literal(text: str) -> bool:
    try:
        parse_address(text)
        return True
    except AddressError:
        return False


def in_net(address: IPAddress, pattern: str, mask: str) -> bool:
    """Test ``(address & mask) == (pattern & mask)`` on IPv4 addresses.

    ``mask`` is a dotted quad.  It does not need to be contiguous: the
    test is plain 32-bit arithmetic.
    """
    net = parse_address(pattern)
    netmask = parse_address(mask)
    if net.version != 4 or netmask.version != 4:
        raise AddressError(f"isInNet needs IPv4 pattern and mask, got {pattern!r}/{mask!r}")
    if address.version != 4:
        return False
    m = int(netmask)
    return (int(address) & m) == (int(net) & m)


def parse_prefixes(text: str) -> List[IPNetwork]:
    """Parse one or more prefixes separated by ``,`` or ``;``.

    An entry without ``/`` denotes a single address.  Malformed entries
    are skipped.

    Raises
    ------
    AddressError
        If no entry could be parsed.
    """
    networks: List[IPNetwork] = []
    for entry in text.replace(",", ";").split(";"):
        entry = entry.strip()
        if not entry:
            continue
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError:
            logger.debug("Ignore malformed IP prefix %r", entry)
    if not networks:
        raise AddressError(f"No valid IP prefix in {text!r}")
    return networks


def in_any_prefix(addresses: Iterable[IPAddress], prefixes: Sequence[IPNetwork]) -> bool:
    """Return ``True`` if any address lies in any prefix of its own family."""
    for address in addresses:
        for network in prefixes:
            if network.version == address.version and address in network:
                return True
    return False


def family_rank(address: IPAddress, prefer_ipv6: bool) -> int:
    if prefer_ipv6:
        return 0 if address.version == 6 else 1
    return 0 if address.version == 4 else 1


def order_by_family(addresses: Iterable[IPAddress], prefer_ipv6: bool) -> List[IPAddress]:
    """Put the preferred family first, keeping the order inside a family."""
    return sorted(addresses, key=lambda a: family_rank(a, prefer_ipv6))


def address_sort_key(address: IPAddress) -> Tuple[int, str]:
    """Total ordering used by ``sortIpAddressList``: IPv6 first.

    IPv6 addresses compare on their exploded (fully normalised) text,
    IPv4 addresses on their numeric value rendered at fixed width, so both
    orders are numeric.
    """
    if address.version == 6:
        return 0, address.exploded
    return 1, f"{int(address):010d}"


def sort_ip_address_list(text: str) -> str:
    """Sort a ``;`` separated address list.

    Malformed entries and repeated addresses are dropped.  The surviving
    entries keep their original spelling (trimmed).
    """
    if not text or not text.strip():
        return ""
    entries = {}
    for raw in text.split(";"):
        spelling = raw.strip()
        if not spelling:
            continue
        try:
            address = parse_address(spelling)
        except AddressError:
            logger.debug("Drop malformed address %r from list", spelling)
            continue
        entries.setdefault(address, spelling)
    ordered = sorted(entries, key=address_sort_key)
    return ";".join(entries[a] for a in ordered)


def join_addresses(addresses: Iterable[IPAddress]) -> str:
    return ";".join(str(a) for a in addresses)
