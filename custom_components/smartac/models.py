"""Data models for SmartAC integration."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


@dataclass(frozen=True)
class Credentials:
    """mymodlet.com account credentials."""

    username: str
    password: str

    def __post_init__(self) -> None:
        if not self.username or not self.password:
            error_msg = "Username and password must not be empty"
            raise ValueError(error_msg)


@dataclass(frozen=True, slots=True)
class ThermostatState:
    """Represents one SmartAC thermostat as last reported by mymodlet.com.

    Temperatures are in the upstream unit (Fahrenheit).
    """

    id: str
    name: str
    current_temperature: int
    target_temperature: int
    power_on: bool
    device_offline: bool = False
    sensor_offline: bool = False
    rw_unavailable: bool = False

    @property
    def available(self) -> bool:
        """Return True if both the modlet and its sensor are reachable."""
        return not (self.device_offline or self.sensor_offline)


class PayloadShape(StrEnum):
    """Known shapes of the mymodlet.com status response."""

    LEGACY_HTML = "legacy_html"
    MODERN_JSON = "modern_json"


@dataclass(frozen=True, slots=True)
class LegacyHtmlPayload:
    """Status response carrying a quoted blob of HTML."""

    html: str
    shape = PayloadShape.LEGACY_HTML


@dataclass(frozen=True, slots=True)
class ModernJsonPayload:
    """Status response carrying modlet and device lists as JSON."""

    data: dict[str, Any]
    shape = PayloadShape.MODERN_JSON
