"""Driver contract shared between the registry, the activator and drivers."""

from __future__ import annotations

from typing import Callable, Protocol, Sequence, runtime_checkable

DriverParameters = Sequence[tuple[str, str]]


@runtime_checkable
class Driver(Protocol):
    """Contract implemented by hardware drivers.

    `activate` receives the profile parameters in the order they were written
    (duplicate keys included) and reports failure by returning False. It is
    called at most once per run and always before `deactivate`.
    """

    name: str
    help: str

    def activate(self, parameters: DriverParameters) -> bool: ...

    def deactivate(self) -> bool: ...


DriverPredicate = Callable[[Driver], bool]


def named(name: str) -> DriverPredicate:
    """Predicate matching a driver by exact, case-sensitive name."""

    def _match(driver: Driver) -> bool:
        return driver.name == name

    return _match


__all__ = ["Driver", "DriverParameters", "DriverPredicate", "named"]
