"""Driver discovery via entry points."""

from __future__ import annotations

import importlib.metadata as metadata
import inspect
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from tinyxvc import __version__ as CORE_VERSION
from tinyxvc.errors import DriverCompatibilityError, DriverError

from .types import Driver, DriverPredicate, named

LOG = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "tinyxvc.drivers"


def _parse_version(value: str) -> tuple[int, int, int]:
    """Parse a dotted string into a comparable tuple."""

    parts = value.split(".")
    ints: list[int] = []
    for chunk in parts[:3]:
        try:
            ints.append(int(chunk))
        except ValueError:
            ints.append(0)
    while len(ints) < 3:
        ints.append(0)
    return ints[0], ints[1], ints[2]


@dataclass(slots=True, frozen=True)
class DiscoveredDriver:
    """Metadata captured while discovering a driver."""

    name: str
    min_core: str
    entry_point: metadata.EntryPoint
    driver: Driver


class DriverRegistry:
    """Holds the drivers available to this process, ordered by name."""

    def __init__(
        self,
        *,
        core_version: str = CORE_VERSION,
        entry_point_group: str = ENTRY_POINT_GROUP,
        enabled_drivers: Iterable[str] | None = None,
        disabled_drivers: Iterable[str] | None = None,
        builtin_drivers: Iterable[Driver | type[Driver]] | None = None,
    ) -> None:
        self._core_version = core_version
        self._entry_point_group = entry_point_group
        self._enabled: set[str] | None = set(enabled_drivers) if enabled_drivers is not None else None
        self._disabled: set[str] = set(disabled_drivers or ())
        self._builtin_drivers = list(builtin_drivers or [])
        self._discovered: list[DiscoveredDriver] | None = None

    def discover(self) -> list[DiscoveredDriver]:
        """Load drivers from entry points and builtins, applying filters.

        Entry points that fail to import are logged and skipped.
        """

        eps = metadata.entry_points()
        group = eps.select(group=self._entry_point_group)
        candidates: dict[str, DiscoveredDriver] = {}
        for entry_point in sorted(group, key=lambda ep: ep.name):
            try:
                driver = self._load_driver(entry_point)
            except DriverError:
                continue
            candidates[driver.name] = self._describe(driver, entry_point)
        for builtin in self._iter_builtin_drivers():
            candidates.setdefault(builtin.name, builtin)

        discovered: list[DiscoveredDriver] = []
        for name in sorted(candidates):
            entry = candidates[name]
            if not self._is_enabled(name):
                LOG.debug("Skipping disabled driver", extra={"driver": name})
                continue
            try:
                self._ensure_compatible(entry)
            except DriverCompatibilityError as exc:
                LOG.warning(
                    "Skipping driver due to min_core mismatch",
                    extra={"driver": name, "min_core": entry.min_core},
                )
                LOG.debug(str(exc))
                continue
            discovered.append(entry)
        self._discovered = discovered
        return discovered

    @property
    def discovered(self) -> tuple[DiscoveredDriver, ...]:
        """Return discovered drivers, discovering on first use."""

        if self._discovered is None:
            self.discover()
        assert self._discovered is not None
        return tuple(self._discovered)

    def __iter__(self) -> Iterator[Driver]:
        return iter([entry.driver for entry in self.discovered])

    def enumerate(self, predicate: DriverPredicate) -> Driver | None:
        """Return the first driver, in name order, accepted by `predicate`."""

        for entry in self.discovered:
            if predicate(entry.driver):
                return entry.driver
        return None

    def find(self, name: str) -> Driver | None:
        return self.enumerate(named(name))

    def _is_enabled(self, name: str) -> bool:
        if self._enabled is not None:
            return name in self._enabled
        return name not in self._disabled

    def _ensure_compatible(self, entry: DiscoveredDriver) -> None:
        core = _parse_version(self._core_version)
        minimum = _parse_version(entry.min_core)
        if core < minimum:
            raise DriverCompatibilityError(
                f"Driver '{entry.name}' requires core>={entry.min_core}, found {self._core_version}"
            )

    def _describe(self, driver: Driver, entry_point: metadata.EntryPoint) -> DiscoveredDriver:
        return DiscoveredDriver(
            name=driver.name,
            min_core=getattr(driver, "min_core", "0.0.0"),
            entry_point=entry_point,
            driver=driver,
        )

    def _load_driver(self, entry_point: metadata.EntryPoint) -> Driver:
        try:
            obj = entry_point.load()
            if inspect.isclass(obj):
                return obj()  # type: ignore[call-arg]
        except Exception as exc:
            LOG.exception("Driver import failed", extra={"entry_point": entry_point.name})
            raise DriverError(f"Failed to load driver '{entry_point.name}'") from exc
        return obj  # type: ignore[return-value]

    def _iter_builtin_drivers(self) -> list[DiscoveredDriver]:
        builtins: list[DiscoveredDriver] = []
        for item in self._builtin_drivers:
            driver = item() if inspect.isclass(item) else item
            entry_point = metadata.EntryPoint(
                name=driver.name,
                value=f"{driver.__class__.__module__}:{driver.__class__.__qualname__}",
                group=self._entry_point_group,
            )
            builtins.append(self._describe(driver, entry_point))
        return builtins


__all__ = ["DiscoveredDriver", "DriverRegistry", "ENTRY_POINT_GROUP"]
