"""Parsers for mymodlet.com status and settings responses.

mymodlet.com has answered the status call in two shapes over time:

* Legacy: a JSON string literal holding an HTML fragment. Each thermostat
  is an ``#appName`` block (ids repeat per device) whose parent also holds
  the set-point ``<select>``, ``#currentTemperature`` and ``#deviceAction``.
* Modern: a JSON string literal holding a JSON document with a ``modlets``
  list (network bridges) and a ``devices`` list cross-referenced by
  ``modletId``.

Both shapes are decoded into the same ThermostatState records. A single
malformed device is skipped; only an undecodable document fails the batch.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

from bs4 import BeautifulSoup

from .api import SmartAcPayloadError
from .models import LegacyHtmlPayload, ModernJsonPayload, ThermostatState

if TYPE_CHECKING:
    from bs4 import Tag

_LOGGER = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*(-?\d+)")


def _loads(text: str | bytes) -> Any:  # noqa: ANN401
    try:
        return json.loads(text)
    except (TypeError, ValueError) as err:
        error_msg = f"Response is not valid JSON: {err}"
        raise SmartAcPayloadError(error_msg) from err


def decode_json_document(text: str | bytes) -> Any:  # noqa: ANN401
    """Decode a JSON body that may be double-encoded.

    A body that decodes to a string starting with ``{`` or ``[`` is decoded
    once more; any other string is returned as is.

    Raises:
        SmartAcPayloadError: If the body is not valid JSON.

    """
    data = _loads(text)
    if isinstance(data, str) and data.lstrip().startswith(("{", "[")):
        return _loads(data)
    return data


def decode_payload(text: str | bytes) -> LegacyHtmlPayload | ModernJsonPayload:
    """Detect the shape of a status response and decode it.

    Args:
        text: Raw status response body.

    Returns:
        The decoded payload variant.

    Raises:
        SmartAcPayloadError: If the body matches neither known shape.

    """
    data = decode_json_document(text)

    if isinstance(data, dict):
        return ModernJsonPayload(data=data)

    if isinstance(data, str):
        return LegacyHtmlPayload(html=data)

    error_msg = f"Unexpected status document of type {type(data).__name__}"
    raise SmartAcPayloadError(error_msg)


def parse_payload(
    payload: LegacyHtmlPayload | ModernJsonPayload,
) -> list[ThermostatState]:
    """Extract thermostat records from a decoded payload."""
    if isinstance(payload, LegacyHtmlPayload):
        return parse_legacy_html(payload.html)
    return parse_modern_json(payload.data)


def parse_status(text: str | bytes) -> list[ThermostatState]:
    """Decode a raw status response into thermostat records."""
    return parse_payload(decode_payload(text))


def _parse_int(value: Any) -> int:  # noqa: ANN401
    """Parse an integer the way the web app's parseInt would.

    Raises:
        ValueError: If no leading integer can be found.

    """
    if isinstance(value, bool):
        error_msg = f"Expected a number, got {value!r}"
        raise ValueError(error_msg)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    error_msg = f"Expected a number, got {value!r}"
    raise ValueError(error_msg)


def parse_legacy_html(html: str) -> list[ThermostatState]:
    """Scrape thermostat records out of the legacy HTML fragment."""
    soup = BeautifulSoup(html, "html.parser")
    states = []

    for block in soup.select("#appName"):
        set_temp = block.select_one(".drSetTemp")
        if set_temp is None:
            continue

        device_id = set_temp.get("id")
        if not device_id:
            _LOGGER.warning("Skipping thermostat without an id: %s", block)
            continue

        try:
            states.append(_parse_legacy_block(str(device_id), block))
        except ValueError as err:
            _LOGGER.warning("Skipping thermostat %s: %s", device_id, err)

    return states


def _parse_legacy_block(device_id: str, block: Tag) -> ThermostatState:
    container = block.parent if block.parent is not None else block

    first_child = next(iter(block.find_all(recursive=False)), None)
    name = first_child.get_text(strip=True) if first_child is not None else ""

    selected = container.select_one("option[selected]")
    if selected is None:
        error_msg = "no selected target temperature"
        raise ValueError(error_msg)

    current = container.select_one("#currentTemperature")
    if current is None:
        error_msg = "no current temperature"
        raise ValueError(error_msg)

    # The action link offers the opposite of the current state
    power_on = False
    action = container.select_one("#deviceAction")
    if action is not None:
        power_on = any(
            "Off" in (link.get("class") or [])
            for link in action.find_all("a", recursive=False)
        )

    return ThermostatState(
        id=device_id,
        name=name,
        current_temperature=_parse_int(current.get_text()),
        target_temperature=_parse_int(selected.get("value", selected.get_text())),
        power_on=power_on,
    )


def parse_modern_json(data: dict[str, Any]) -> list[ThermostatState]:
    """Build thermostat records from the modern modlet/device lists.

    Raises:
        SmartAcPayloadError: If the document has no device list.

    """
    devices = data.get("devices")
    if not isinstance(devices, list):
        error_msg = f"Status document has no device list: {sorted(data)}"
        raise SmartAcPayloadError(error_msg)

    raw_modlets = data.get("modlets")
    modlets = {}
    for modlet in raw_modlets if isinstance(raw_modlets, list) else []:
        if isinstance(modlet, dict) and modlet.get("modletId") is not None:
            modlets[str(modlet["modletId"])] = modlet

    states = []
    for device in devices:
        if not isinstance(device, dict):
            _LOGGER.warning("Skipping malformed device entry: %r", device)
            continue

        device_id = device.get("applianceId")
        if device_id is None or device_id == "":
            _LOGGER.warning("Skipping device without applianceId: %s", device)
            continue

        try:
            states.append(_parse_modern_device(str(device_id), device, modlets))
        except (KeyError, ValueError) as err:
            _LOGGER.warning("Skipping thermostat %s: %s", device_id, err)

    return states


def _parse_modern_device(
    device_id: str, device: dict[str, Any], modlets: dict[str, dict[str, Any]]
) -> ThermostatState:
    modlet = modlets.get(str(device.get("modletId")), {})

    return ThermostatState(
        id=device_id,
        name=str(device.get("name") or ""),
        current_temperature=_parse_int(device["currentTemperature"]),
        target_temperature=_parse_int(device["targetTemperature"]),
        power_on=bool(device.get("isOn", False)),
        device_offline=modlet.get("isConnected", True) is False,
        sensor_offline=device.get("isThermostatConnected", True) is False,
        rw_unavailable=device.get("isReadWriteAvailable", True) is False,
    )


def parse_ack(text: str | bytes) -> bool:
    """Interpret a settings acknowledgment.

    Legacy responses carry ``{"Success": bool}``. Modern responses are
    double-encoded and carry ``{"status": {"code": int, "error": str}}``,
    where success means code 0 and no error.

    Raises:
        SmartAcPayloadError: If the body is not valid JSON.

    """
    data = decode_json_document(text)
    if not isinstance(data, dict):
        return False

    if "Success" in data:
        return data["Success"] is True

    status = data.get("status")
    if isinstance(status, dict):
        return status.get("code", 0) == 0 and not status.get("error")
    if isinstance(status, int) and not isinstance(status, bool):
        return status == 0

    return False
