"""
proxy_line
==========

Parsing of the value returned by ``FindProxyForURL``: a ``;`` separated
list such as ``"PROXY proxy.example.com:8080; SOCKS5 10.0.0.1:1080;
DIRECT"``.  Each entry becomes a :class:`ProxyInfo`, in order of
preference.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
from urllib.parse import urlsplit

from .exceptions import ProxyLineError

logger = logging.getLogger(__name__)


class PacType(enum.Enum):
    """Proxy types as they appear in a PAC result."""

    PROXY = "PROXY"
    HTTP = "HTTP"
    HTTPS = "HTTPS"
    SOCKS = "SOCKS"
    SOCKS4 = "SOCKS4"
    SOCKS5 = "SOCKS5"
    DIRECT = "DIRECT"

    @property
    def is_http(self) -> bool:
        return self in (PacType.PROXY, PacType.HTTP, PacType.HTTPS)

    @property
    def is_socks4(self) -> bool:
        return self is PacType.SOCKS4

    @property
    def is_socks5(self) -> bool:
        return self in (PacType.SOCKS, PacType.SOCKS5)

    @property
    def is_socks(self) -> bool:
        return self.is_socks4 or self.is_socks5

    @property
    def is_direct(self) -> bool:
        return self is PacType.DIRECT


@dataclass(frozen=True)
class ProxyInfo:
    type: PacType
    host: Optional[str] = None
    port: Optional[int] = None

    def __str__(self) -> str:
        if self.type.is_direct:
            return "DIRECT"
        host = f"[{self.host}]" if self.host and ":" in self.host else self.host
        if self.port is None:
            return f"{self.type.value} {host}"
        return f"{self.type.value} {host}:{self.port}"


DIRECT = ProxyInfo(PacType.DIRECT)


def _parse_endpoint(text: str, line: str) -> Tuple[str, Optional[int]]:
    try:
        parts = urlsplit(f"//{text}")
        host, port = parts.hostname, parts.port
    except ValueError as exc:
        raise ProxyLineError(f"Invalid proxy line [{line}]: bad address {text!r}") from exc
    if not host:
        raise ProxyLineError(f"Invalid proxy line [{line}]: proxy host required")
    return host, port


def parse_proxy_line(line: Optional[str], accept: Optional[Callable[[ProxyInfo], bool]] = None) -> List[ProxyInfo]:
    """Turn a PAC result into a list of :class:`ProxyInfo`.

    Parameters
    ----------
    line: str
        The string returned by the script.  A blank result means
        ``DIRECT``.
    accept: callable, optional
        Predicate deciding whether a proxy is usable (e.g. not
        blacklisted).  Rejected proxies are left out.  ``DIRECT`` is
        always kept.

    Raises
    ------
    ProxyLineError
        On an unknown proxy type, a missing host or an invalid port.
        A host without a port is accepted, with ``port`` left ``None``.
    """
    if line is None or not line.strip():
        return [DIRECT]
    result: List[ProxyInfo] = []
    for entry in line.split(";"):
        tokens = entry.split()
        if not tokens:
            continue
        try:
            pac_type = PacType(tokens[0].upper())
        except ValueError as exc:
            raise ProxyLineError(f"Invalid proxy line [{line}]: unknown type {tokens[0]!r}") from exc
        if pac_type.is_direct:
            result.append(DIRECT)
            continue
        if len(tokens) < 2:
            raise ProxyLineError(f"Invalid proxy line [{line}]: proxy host required")
        host, port = _parse_endpoint(tokens[1], line)
        info = ProxyInfo(pac_type, host, port)
        if accept is not None and not accept(info):
            logger.debug("Ignore blacklisted proxy %s", info)
            continue
        result.append(info)
    return result
