"""Server runner contract and listen address handling."""

from __future__ import annotations

import importlib.metadata as metadata
import inspect
import ipaddress
import logging
import selectors
from dataclasses import dataclass
from typing import Protocol

from .drivers import Driver
from .errors import ServerAddressError
from .termination import TerminationFlag

LOG = logging.getLogger(__name__)

DEFAULT_SERVER_ADDRESS = "127.0.0.1:2542"
ENTRY_POINT_GROUP = "tinyxvc.server"


@dataclass(frozen=True, slots=True)
class ServerAddress:
    """IPv4 host and TCP port to listen at."""

    host: str
    port: int

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


def parse_server_address(text: str) -> ServerAddress:
    """Parse `<ipv4_address>:<port>`."""

    host, colon, port_text = text.rpartition(":")
    if not colon or not host:
        raise ServerAddressError(f"Expected <ipv4_address:port>, got {text!r}")
    try:
        ipaddress.IPv4Address(host)
    except ValueError as exc:
        raise ServerAddressError(f"Invalid IPv4 address {host!r}") from exc
    if not port_text.isdigit() or not 0 < int(port_text) < 65536:
        raise ServerAddressError(f"Invalid port {port_text!r}")
    return ServerAddress(host=host, port=int(port_text))


class ServerRunner(Protocol):
    """Protocol implemented by XVC protocol servers.

    `run` owns the accept loop. It must return once `flag` is set and should
    check the flag after every blocking call that returns early.
    """

    def run(self, address: ServerAddress, driver: Driver, flag: TerminationFlag) -> None: ...


class IdleServerRunner:
    """Fallback runner used when no protocol server is installed.

    Holds the activated driver until the process is interrupted.
    """

    def __init__(self, *, poll_interval: float = 1.0) -> None:
        self._poll_interval = poll_interval

    def run(self, address: ServerAddress, driver: Driver, flag: TerminationFlag) -> None:
        LOG.warning(
            "No XVC protocol server installed; holding driver until interrupted",
            extra={"driver": driver.name, "address": str(address)},
        )
        with selectors.DefaultSelector() as selector:
            selector.register(flag, selectors.EVENT_READ)
            while not flag.is_set():
                selector.select(timeout=self._poll_interval)
                flag.drain()
        LOG.debug("Idle server stopped", extra={"driver": driver.name})


def load_server_runner(entry_point_group: str = ENTRY_POINT_GROUP) -> ServerRunner:
    """Return the first installed server runner, else `IdleServerRunner`."""

    group = metadata.entry_points().select(group=entry_point_group)
    for entry_point in sorted(group, key=lambda ep: ep.name):
        obj = entry_point.load()
        LOG.debug("Using server runner", extra={"entry_point": entry_point.name})
        if inspect.isclass(obj):
            return obj()  # type: ignore[no-any-return]
        return obj  # type: ignore[no-any-return]
    return IdleServerRunner()


__all__ = [
    "DEFAULT_SERVER_ADDRESS",
    "IdleServerRunner",
    "ServerAddress",
    "ServerRunner",
    "load_server_runner",
    "parse_server_address",
]
