"""Hardware-free driver used for smoke testing clients and the server wiring."""

from __future__ import annotations

import logging

from .types import DriverParameters

LOG = logging.getLogger(__name__)

MODES = ("loopback", "zeros", "ones")


class DummyDriver:
    """Accepts a session without touching any hardware."""

    name = "dummy"
    help = (
        "Driver without hardware behind it, useful to check XVC clients and server setup.\n"
        "  mode=<loopback|zeros|ones> - what TDO would carry back (default: loopback)\n"
    )
    min_core = "0.1.0"

    def __init__(self) -> None:
        self.mode: str | None = None

    @property
    def active(self) -> bool:
        return self.mode is not None

    def activate(self, parameters: DriverParameters) -> bool:
        mode = "loopback"
        for key, value in parameters:
            if key != "mode":
                LOG.error("Unknown parameter %r", key, extra={"driver": self.name})
                return False
            if value not in MODES:
                LOG.error("Unsupported mode %r", value, extra={"driver": self.name})
                return False
            mode = value
        self.mode = mode
        LOG.info("Dummy driver active in %s mode", mode)
        return True

    def deactivate(self) -> bool:
        if self.mode is None:
            return False
        self.mode = None
        return True


__all__ = ["DummyDriver", "MODES"]
