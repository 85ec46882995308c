"""
hostnames
=========

Host name and domain predicates of the PAC standard library.  These are
pure string tests: no function here touches the network.  Callers do not
normalise their input, so surrounding whitespace is ignored and
comparisons are case-insensitive.
"""

from __future__ import annotations


def _clean(value: str) -> str:
    return value.strip().lower()


def is_plain_host_name(host: str) -> bool:
    """Return ``True`` if ``host`` has no domain part (no dot)."""
    return "." not in host.strip()


def dns_domain_is(host: str, domain: str) -> bool:
    """Return ``True`` if ``host`` belongs to ``domain``.

    ``domain`` is either the host itself or a suffix starting with a dot,
    e.g. ``dns_domain_is("www.example.com", ".example.com")``.
    """
    h = _clean(host)
    d = _clean(domain)
    if not d or d == ".":
        return False
    if h == d:
        return True
    return d.startswith(".") and h.endswith(d)


def local_host_or_domain_is(host: str, hostdom: str) -> bool:
    """Return ``True`` if ``host`` is ``hostdom`` or its unqualified form.

    ``local_host_or_domain_is("www", "www.example.com")`` is true while
    ``local_host_or_domain_is("www.other.com", "www.example.com")`` is not.
    """
    h = _clean(host)
    hd = _clean(hostdom)
    if not h:
        return False
    if h == hd:
        return True
    if "." in h:
        return False
    first_label = next((label for label in hd.split(".") if label), None)
    return first_label == h


def dns_domain_levels(host: str) -> int:
    """Return the number of dots in ``host``."""
    return host.strip().count(".")
