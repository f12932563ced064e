"""Driver activation and deactivation."""

from __future__ import annotations

import logging
from typing import Sequence

from .drivers import Driver, DriverRegistry, named
from .profiles import PROFILE_ALIASES, ProfileAlias, parse_profile

LOG = logging.getLogger(__name__)


def activate_driver(
    profile: str,
    registry: DriverRegistry,
    *,
    aliases: Sequence[ProfileAlias] = PROFILE_ALIASES,
) -> Driver | None:
    """Resolve `profile`, find its driver and activate it.

    Returns None both when no driver has the requested name and when the driver
    refuses its parameters; either way there is nothing to deactivate.
    """

    parsed = parse_profile(profile, aliases)
    driver = registry.enumerate(named(parsed.driver))
    if driver is None:
        LOG.error('Can not find driver "%s"', parsed.driver, extra={"driver": parsed.driver})
        return None

    LOG.debug(
        "Activating driver",
        extra={"driver": driver.name, "parameters": parsed.keys()},
    )
    try:
        activated = driver.activate(parsed.parameters)
    except Exception:
        LOG.exception("Driver activation raised", extra={"driver": driver.name})
        activated = False
    if not activated:
        LOG.error('Failed to activate driver "%s"', parsed.driver, extra={"driver": parsed.driver})
        return None
    return driver


def deactivate_driver(driver: Driver) -> bool:
    """Deactivate `driver`; failures are reported as warnings only."""

    try:
        deactivated = driver.deactivate()
    except Exception:
        LOG.exception("Driver deactivation raised", extra={"driver": driver.name})
        deactivated = False
    if not deactivated:
        LOG.warning('Failed to deactivate driver "%s"', driver.name, extra={"driver": driver.name})
    return bool(deactivated)


__all__ = ["activate_driver", "deactivate_driver"]
