"""Top‑level package for the PAC standard library.

Exposes common classes so that they can be imported directly from
`pacstdlib`, e.g. `from pacstdlib import PacStandardLibrary`.
"""

from .config import PacSettings, load_settings, save_settings
from .provider import HostProvider, default_provider, load_provider
from .proxy_line import PacType, ProxyInfo, parse_proxy_line
from .stdlib import FUNCTION_NAMES, PacStandardLibrary
from .system import SystemHostProvider

__all__ = [
    "FUNCTION_NAMES",
    "HostProvider",
    "PacSettings",
    "PacStandardLibrary",
    "PacType",
    "ProxyInfo",
    "SystemHostProvider",
    "default_provider",
    "load_provider",
    "load_settings",
    "parse_proxy_line",
    "save_settings",
]
