"""Pytest configuration and fixtures for SmartAC tests."""

import copy
import json
from typing import Any

import pytest

LEGACY_STATUS_HTML = """
<div class="appliance">
  <div id="appName"><h3>Bedroom</h3><span class="drSetTemp" id="A1"></span></div>
  <select class="tempSelect">
    <option value="70">70</option>
    <option value="72" selected="selected">72</option>
  </select>
  <div id="currentTemperature">70&deg;</div>
  <div id="deviceAction"><a class="Off" href="#">Turn Off</a></div>
</div>
<div class="appliance">
  <div id="appName"><h3>Office</h3><span class="drSetTemp" id="B2"></span></div>
  <select class="tempSelect">
    <option value="70" selected="selected">70</option>
    <option value="72">72</option>
  </select>
  <div id="currentTemperature">75&deg;</div>
  <div id="deviceAction"><a class="On" href="#">Turn On</a></div>
</div>
<div class="summary"><div id="appName">Account</div></div>
"""

MODERN_STATUS_DOCUMENT: dict[str, Any] = {
    "modlets": [
        {"modletId": "M1", "isConnected": True},
        {"modletId": "M2", "isConnected": False},
    ],
    "devices": [
        {
            "applianceId": "A",
            "modletId": "M1",
            "name": "Bedroom",
            "currentTemperature": 70,
            "targetTemperature": 72,
            "isOn": True,
            "isThermostatConnected": True,
            "isReadWriteAvailable": True,
        },
        {
            "applianceId": "B",
            "modletId": "M2",
            "name": "Office",
            "currentTemperature": 75,
            "targetTemperature": 70,
            "isOn": False,
        },
    ],
}


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Fixture providing a controllable monotonic clock."""
    return FakeClock()


@pytest.fixture
def legacy_status_html() -> str:
    """Fixture providing the legacy status HTML fragment."""
    return LEGACY_STATUS_HTML


@pytest.fixture
def legacy_status_body() -> str:
    """Fixture providing a legacy status response body (quoted HTML)."""
    return json.dumps(LEGACY_STATUS_HTML)


@pytest.fixture
def modern_status_document() -> dict[str, Any]:
    """Fixture providing the decoded modern status document."""
    return copy.deepcopy(MODERN_STATUS_DOCUMENT)


@pytest.fixture
def modern_status_body(modern_status_document: dict[str, Any]) -> str:
    """Fixture providing a modern status response body (double-encoded JSON)."""
    return json.dumps(json.dumps(modern_status_document))


@pytest.fixture
def legacy_ack_body() -> str:
    """Fixture providing a successful legacy settings acknowledgment."""
    return json.dumps({"Success": True})


@pytest.fixture
def modern_ack_body() -> str:
    """Fixture providing a successful modern settings acknowledgment."""
    return json.dumps(json.dumps({"status": {"code": 0, "error": None}}))
