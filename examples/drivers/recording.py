"""Sample driver implementing the contract for manual and automated tests."""

from __future__ import annotations

from tinyxvc.drivers import Driver, DriverParameters


class RecordingDriver(Driver):
    """Driver that remembers every lifecycle call it receives."""

    name = "recording"
    help = "  any key=value pairs are accepted and recorded\n  fail=activate|deactivate - simulate a failure\n"
    min_core = "0.1.0"

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.parameters: tuple[tuple[str, str], ...] | None = None
        self.fail_deactivate = False

    def activate(self, parameters: DriverParameters) -> bool:
        self.calls.append("activate")
        self.parameters = tuple(parameters)
        failures = {value for key, value in self.parameters if key == "fail"}
        self.fail_deactivate = "deactivate" in failures
        return "activate" not in failures

    def deactivate(self) -> bool:
        self.calls.append("deactivate")
        return not self.fail_deactivate
