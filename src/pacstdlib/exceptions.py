"""Exception hierarchy for pacstdlib.

These errors are raised inside the library.  None of them is allowed to
reach a PAC script: the bridge in :mod:`pacstdlib.stdlib` turns them into
the sentinel value of the function being called.
"""


class PacError(Exception):
    """Base exception for all pacstdlib errors."""

    pass


class ConfigError(PacError):
    """Invalid or unreadable settings."""

    pass


class ResolutionError(PacError):
    """A host name could not be resolved (failure or timeout)."""

    pass


class AddressError(PacError):
    """Malformed IP address, netmask or prefix."""

    pass


class PacDateTimeInputError(PacError):
    """Faulty arguments passed to weekdayRange, dateRange or timeRange."""

    pass


class ProxyLineError(PacError):
    """Malformed value returned by FindProxyForURL."""

    pass
