"""Exception hierarchy shared across the server front-end."""

from __future__ import annotations


class TinyXvcError(RuntimeError):
    """Base error for tinyxvc failures."""


class OptionParseError(TinyXvcError):
    """Raised when the command line cannot be parsed."""


class BadOptionError(OptionParseError):
    """Raised for an unknown flag or a flag missing its value."""


class ExtraOperandsError(OptionParseError):
    """Raised when positional arguments remain after option scanning."""


class ServerAddressError(TinyXvcError):
    """Raised when a listen address is not in `<ipv4>:<port>` form."""


class DriverError(TinyXvcError):
    """Base error for driver discovery failures."""


class DriverCompatibilityError(DriverError):
    """Raised when a driver does not satisfy the minimum core version."""


__all__ = [
    "BadOptionError",
    "DriverCompatibilityError",
    "DriverError",
    "ExtraOperandsError",
    "OptionParseError",
    "ServerAddressError",
    "TinyXvcError",
]
