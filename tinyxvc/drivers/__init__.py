"""Driver contract and registry exports."""

from .registry import DiscoveredDriver, DriverRegistry
from .types import Driver, DriverParameters, DriverPredicate, named

__all__ = [
    "DiscoveredDriver",
    "Driver",
    "DriverParameters",
    "DriverPredicate",
    "DriverRegistry",
    "named",
]
