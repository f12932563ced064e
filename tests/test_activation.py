"""Tests for driver activation and deactivation."""

from __future__ import annotations

import importlib.metadata as metadata
import logging

import pytest

from examples.drivers.recording import RecordingDriver
from tinyxvc.activation import activate_driver, deactivate_driver
from tinyxvc.drivers import DriverRegistry
from tinyxvc.drivers.dummy import DummyDriver
from tinyxvc.profiles import ProfileAlias


@pytest.fixture(autouse=True)
def no_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(metadata, "entry_points", lambda: metadata.EntryPoints(()))


@pytest.fixture
def recording() -> RecordingDriver:
    return RecordingDriver()


@pytest.fixture
def registry(recording: RecordingDriver) -> DriverRegistry:
    return DriverRegistry(builtin_drivers=[recording, DummyDriver])


def _errors(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [record for record in caplog.records if record.levelno >= logging.ERROR]


def test_activation_passes_parameters_in_order(registry: DriverRegistry, recording: RecordingDriver) -> None:
    driver = activate_driver("recording:b=2,a=1,b=3,flag", registry)

    assert driver is recording
    assert recording.calls == ["activate"]
    assert recording.parameters == (("b", "2"), ("a", "1"), ("b", "3"), ("flag", ""))


def test_unknown_driver_reports_one_error(registry: DriverRegistry, caplog: pytest.LogCaptureFixture) -> None:
    driver = activate_driver("missing:a=1", registry)

    assert driver is None
    errors = _errors(caplog)
    assert len(errors) == 1
    assert '"missing"' in errors[0].getMessage()


def test_driver_lookup_is_case_sensitive(registry: DriverRegistry) -> None:
    assert activate_driver("Dummy", registry) is None


def test_failed_activation_looks_like_missing_driver(
    registry: DriverRegistry,
    recording: RecordingDriver,
    caplog: pytest.LogCaptureFixture,
) -> None:
    driver = activate_driver("recording:fail=activate", registry)

    assert driver is None
    assert recording.calls == ["activate"]
    errors = _errors(caplog)
    assert len(errors) == 1
    assert errors[0].getMessage() == 'Failed to activate driver "recording"'


def test_activation_exception_is_treated_as_failure(
    registry: DriverRegistry,
    recording: RecordingDriver,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def _boom(parameters):  # type: ignore[no-untyped-def]
        raise RuntimeError("device unplugged")

    monkeypatch.setattr(recording, "activate", _boom)

    assert activate_driver("recording", registry) is None


def test_aliases_are_resolved_before_lookup(registry: DriverRegistry) -> None:
    driver = activate_driver("loopback", registry)

    assert isinstance(driver, DummyDriver)
    assert driver.mode == "loopback"


def test_custom_alias_table(registry: DriverRegistry, recording: RecordingDriver) -> None:
    aliases = (ProfileAlias(alias="bench", description="Bench", profile="recording:x=1"),)

    assert activate_driver("bench", registry, aliases=aliases) is recording
    assert recording.parameters == (("x", "1"),)


def test_deactivate_driver_reports_success(recording: RecordingDriver, caplog: pytest.LogCaptureFixture) -> None:
    recording.activate(())

    assert deactivate_driver(recording) is True
    assert recording.calls == ["activate", "deactivate"]
    assert not caplog.records


def test_deactivate_failure_is_only_a_warning(recording: RecordingDriver, caplog: pytest.LogCaptureFixture) -> None:
    recording.activate([("fail", "deactivate")])

    assert deactivate_driver(recording) is False
    assert [record.levelno for record in caplog.records] == [logging.WARNING]
    assert caplog.records[0].getMessage() == 'Failed to deactivate driver "recording"'


def test_deactivate_exception_is_contained(recording: RecordingDriver, monkeypatch: pytest.MonkeyPatch) -> None:
    def _boom():  # type: ignore[no-untyped-def]
        raise OSError("usb gone")

    monkeypatch.setattr(recording, "deactivate", _boom)

    assert deactivate_driver(recording) is False
