"""Tests for driver discovery."""

from __future__ import annotations

import importlib.metadata as metadata

import pytest

from examples.drivers.recording import RecordingDriver
from tinyxvc.drivers import DriverRegistry, named
from tinyxvc.drivers.dummy import DummyDriver

ENTRY_POINT = metadata.EntryPoint(
    name="recording",
    value="examples.drivers.recording:RecordingDriver",
    group="tinyxvc.drivers",
)


@pytest.fixture(autouse=True)
def fake_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    """Force discovery to use the sample driver."""

    def _entry_points() -> metadata.EntryPoints:
        return metadata.EntryPoints((ENTRY_POINT,))

    monkeypatch.setattr(metadata, "entry_points", _entry_points)


def test_discover_returns_driver_metadata() -> None:
    registry = DriverRegistry()

    discovered = registry.discover()

    assert [entry.name for entry in discovered] == ["recording"]
    assert discovered[0].min_core == RecordingDriver.min_core
    assert isinstance(discovered[0].driver, RecordingDriver)


def test_enumerate_returns_first_match_or_none() -> None:
    registry = DriverRegistry(builtin_drivers=[DummyDriver])

    assert isinstance(registry.enumerate(named("dummy")), DummyDriver)
    assert isinstance(registry.enumerate(lambda driver: True), DummyDriver)
    assert registry.enumerate(lambda driver: False) is None


def test_find_is_case_sensitive() -> None:
    registry = DriverRegistry()

    assert registry.find("recording") is not None
    assert registry.find("Recording") is None
    assert registry.find("record") is None


def test_iteration_is_ordered_by_name() -> None:
    registry = DriverRegistry(builtin_drivers=[DummyDriver])

    assert [driver.name for driver in registry] == ["dummy", "recording"]


def test_allowlist_limits_drivers() -> None:
    registry = DriverRegistry(enabled_drivers={"dummy"}, builtin_drivers=[DummyDriver])

    assert [driver.name for driver in registry] == ["dummy"]


def test_disabled_driver_is_skipped() -> None:
    registry = DriverRegistry(disabled_drivers={"recording"})

    assert registry.discover() == []
    assert registry.find("recording") is None


def test_incompatible_driver_is_skipped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(RecordingDriver, "min_core", "9.9.9")
    registry = DriverRegistry(core_version="0.1.0")

    assert registry.discover() == []


def test_builtin_driver_is_discovered(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(metadata, "entry_points", lambda: metadata.EntryPoints(()))
    driver = DummyDriver()
    registry = DriverRegistry(builtin_drivers=[driver])

    discovered = registry.discover()

    assert discovered[0].driver is driver
    assert discovered[0].entry_point.value == "tinyxvc.drivers.dummy:DummyDriver"


def test_entry_point_wins_over_builtin_with_same_name() -> None:
    builtin = RecordingDriver()
    registry = DriverRegistry(builtin_drivers=[builtin])

    found = registry.find("recording")

    assert found is not None
    assert found is not builtin


def test_broken_entry_point_is_skipped(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    broken = metadata.EntryPoint(name="broken", value="examples.drivers.missing:Nope", group="tinyxvc.drivers")
    monkeypatch.setattr(metadata, "entry_points", lambda: metadata.EntryPoints((broken, ENTRY_POINT)))

    discovered = DriverRegistry().discover()

    assert [entry.name for entry in discovered] == ["recording"]
    assert "Driver import failed" in caplog.text
