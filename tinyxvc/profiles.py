"""Profile aliases and the `driver:key=value,...` profile mini-language.

A profile selects a driver and hands it an ordered list of parameters::

    <driver_name>:<key0>=<value0>,<key1>=<value1>,...

The colon and everything after it are optional. Parsing works on a bounded
copy of the input: text beyond ``PROFILE_BUFFER_SIZE - 1`` bytes is dropped
and segments beyond ``MAX_PROFILE_PARAMETERS`` are ignored. Neither case is
reported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

LOG = logging.getLogger(__name__)

PROFILE_BUFFER_SIZE = 1024
MAX_PROFILE_PARAMETERS = 32

ProfileParameter = tuple[str, str]


@dataclass(frozen=True, slots=True)
class ProfileAlias:
    """Short name expanding to a fully specified profile."""

    alias: str
    description: str
    profile: str


@dataclass(frozen=True, slots=True)
class ParsedProfile:
    """Driver name plus the ordered parameters handed to its activation."""

    driver: str
    parameters: tuple[ProfileParameter, ...] = ()

    def keys(self) -> tuple[str, ...]:
        return tuple(key for key, _ in self.parameters)


PROFILE_ALIASES: tuple[ProfileAlias, ...] = (
    ProfileAlias(
        alias="ft2232h",
        description="FT2232H based JTAG adapter, channel A",
        profile="ftdi-generic:vid=0403,pid=6010,channel=0,frequency=15000000",
    ),
    ProfileAlias(
        alias="ft232h",
        description="FT232H based JTAG adapter",
        profile="ftdi-generic:vid=0403,pid=6014,channel=0,frequency=15000000",
    ),
    ProfileAlias(
        alias="loopback",
        description="Dummy driver without hardware, TDO mirrors TDI",
        profile="dummy:mode=loopback",
    ),
)


def resolve_alias(profile: str, aliases: Iterable[ProfileAlias] = PROFILE_ALIASES) -> str:
    """Expand `profile` through the alias table in a single front-to-back pass.

    Each entry is compared against the current value, so an expansion can only be
    expanded again by an entry further down the table.
    """

    for entry in aliases:
        if profile == entry.alias:
            LOG.info("Found alias %s (%s)", entry.alias, entry.description)
            LOG.info("Using profile %s", entry.profile)
            profile = entry.profile
    return profile


def truncate_profile(profile: str, limit: int = PROFILE_BUFFER_SIZE) -> str:
    """Clip `profile` to `limit - 1` UTF-8 bytes, dropping any split character."""

    raw = profile.encode("utf-8")
    if len(raw) < limit:
        return profile
    return raw[: limit - 1].decode("utf-8", errors="ignore")


def tokenize_profile(profile: str) -> ParsedProfile:
    """Split a profile string into a driver name and its parameters."""

    text = truncate_profile(profile)
    name, colon, rest = text.partition(":")
    if not colon:
        return ParsedProfile(driver=name)

    parameters: list[ProfileParameter] = []
    while rest and len(parameters) < MAX_PROFILE_PARAMETERS:
        segment, _, rest = rest.partition(",")
        key, _, value = segment.partition("=")
        parameters.append((key, value))
    return ParsedProfile(driver=name, parameters=tuple(parameters))


def parse_profile(profile: str, aliases: Sequence[ProfileAlias] = PROFILE_ALIASES) -> ParsedProfile:
    """Resolve aliases, then tokenize."""

    return tokenize_profile(resolve_alias(profile, aliases))


__all__ = [
    "MAX_PROFILE_PARAMETERS",
    "PROFILE_ALIASES",
    "PROFILE_BUFFER_SIZE",
    "ParsedProfile",
    "ProfileAlias",
    "ProfileParameter",
    "parse_profile",
    "resolve_alias",
    "tokenize_profile",
    "truncate_profile",
]
