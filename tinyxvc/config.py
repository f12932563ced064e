"""Server configuration loading helpers."""

from __future__ import annotations

import os
from pathlib import Path

import tomllib

from pydantic import BaseModel, Field

from .profiles import PROFILE_ALIASES, ProfileAlias

CONFIG_ENV_VAR = "TINYXVC_CONFIG"
CONFIG_FILE = Path.home() / ".config" / "tinyxvc" / "config.toml"


class AliasConfig(BaseModel):
    """User-defined profile alias stored in config.toml."""

    alias: str
    description: str = ""
    profile: str

    def to_alias(self) -> ProfileAlias:
        return ProfileAlias(alias=self.alias, description=self.description, profile=self.profile)


class ServerConfig(BaseModel):
    """Shape of the configuration file."""

    server_address: str | None = None
    profile: str | None = None
    verbose: bool = False
    drivers: dict[str, bool] = Field(default_factory=dict)
    aliases: list[AliasConfig] = Field(default_factory=list)

    def driver_filters(self) -> tuple[set[str] | None, set[str]]:
        """Return allow/block lists for driver enablement."""

        allowed = {name for name, flag in self.drivers.items() if flag}
        disabled = {name for name, flag in self.drivers.items() if not flag}
        allowlist: set[str] | None = allowed or None
        return allowlist, disabled

    def profile_aliases(self) -> tuple[ProfileAlias, ...]:
        """Built-in aliases followed by the user's, in file order."""

        return PROFILE_ALIASES + tuple(entry.to_alias() for entry in self.aliases)


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return CONFIG_FILE


def load_config(path: Path | None = None) -> ServerConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file(path or config_path())
    except FileNotFoundError:
        return ServerConfig()
    except (tomllib.TOMLDecodeError, OSError):
        return ServerConfig()
    return ServerConfig(**data)


def _read_config_file(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    for key in ("server_address", "profile"):
        value = raw.get(key)
        if isinstance(value, str):
            data[key] = value
    verbose = raw.get("verbose")
    if isinstance(verbose, bool):
        data["verbose"] = verbose
    drivers = raw.get("drivers")
    if isinstance(drivers, dict):
        data["drivers"] = {str(name): bool(enabled) for name, enabled in drivers.items()}
    aliases = raw.get("aliases")
    if isinstance(aliases, list):
        parsed_aliases: list[AliasConfig] = []
        for entry in aliases:
            if not isinstance(entry, dict):
                continue
            alias = entry.get("alias")
            profile = entry.get("profile")
            if not isinstance(alias, str) or not isinstance(profile, str):
                continue
            description = entry.get("description")
            parsed_aliases.append(
                AliasConfig(
                    alias=alias,
                    description=description if isinstance(description, str) else "",
                    profile=profile,
                )
            )
        data["aliases"] = parsed_aliases
    return data


__all__ = ["AliasConfig", "CONFIG_FILE", "ServerConfig", "config_path", "load_config"]
