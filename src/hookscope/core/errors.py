"""Exceptions raised by hookscope.

Only InstallationError is meant to reach callers. ConfigurationError is
raised by path helpers and recovered by their display counterparts; missing
methods and malformed guard specifications are not exceptions at all, they
degrade to None fields in collected data.
"""


class HookscopeError(Exception):
    """Base class for hookscope errors."""

    pass


class InstallationError(HookscopeError):
    """The collector cannot attach to a type.

    Raised when the type does not expose a callback registry with the
    expected registration entry points, or when collected data is requested
    for a type the collector was never installed on.
    """

    pass


class ConfigurationError(HookscopeError):
    """A path setting required for relative path computation is missing."""

    pass
