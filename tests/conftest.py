"""Pytest fixtures for tooldialect tests."""

import pytest

from tooldialect.capabilities import CapabilityDescriptor, CapabilityRegistry, capability
from tooldialect.foundation.config import reset_config
from tooldialect.foundation.errors import CapabilityError

WEATHER_SCHEMA = {
    "type": "object",
    "properties": {
        "city": {"type": "string", "description": "City name"},
        "unit": {"type": "string", "enum": ["C", "F"]},
    },
    "required": ["city"],
}


@pytest.fixture
def get_weather() -> CapabilityDescriptor:
    """Capability that always reports 22C."""

    @capability(
        name="get_weather",
        description="Current weather for a city",
        parameters=WEATHER_SCHEMA,
    )
    async def _get_weather(arguments: dict) -> str:
        return "22C"

    return _get_weather


@pytest.fixture
def failing_tool() -> CapabilityDescriptor:
    """Capability that reports a failure."""

    @capability(name="flaky", description="Always fails")
    async def _flaky(arguments: dict) -> str:
        raise CapabilityError("upstream service unavailable")

    return _flaky


@pytest.fixture
def recorder() -> tuple[CapabilityDescriptor, list]:
    """Capability that records the arguments it was called with."""
    calls: list = []

    @capability(name="record", description="Record arguments")
    async def _record(arguments: dict) -> str:
        calls.append(arguments)
        return "recorded"

    return _record, calls


@pytest.fixture
def registry(get_weather, failing_tool) -> CapabilityRegistry:
    """Registry with a working and a failing capability."""
    return CapabilityRegistry([get_weather, failing_tool])


@pytest.fixture
def empty_registry() -> CapabilityRegistry:
    return CapabilityRegistry()


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Keep tests independent of real config files and TOOLDIALECT_* env vars."""
    import os

    for key in list(os.environ):
        if key.startswith("TOOLDIALECT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def restore_logging():
    """Undo root logger changes made by configure_logging."""
    import logging

    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(level)
