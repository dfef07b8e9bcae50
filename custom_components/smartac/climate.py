"""Climate entities for SmartAC thermostats.

Each thermostat known to the SmartAC client is exposed as a cooling-only
climate entity. State is read from the coordinator; changes are pushed to
mymodlet.com and then confirmed by a coordinator refresh rather than applied
optimistically.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx
from homeassistant.components.climate import (
    ClimateEntity,
    ClimateEntityFeature,
    HVACAction,
    HVACMode,
)
from homeassistant.const import ATTR_TEMPERATURE, UnitOfTemperature
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.device_registry import DeviceInfo

from .api import SmartAcApiAuthError, SmartAcApiClientError
from .const import DOMAIN, MANUFACTURER, MAX_TARGET_TEMP, MIN_TARGET_TEMP, MODEL

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry
    from homeassistant.core import HomeAssistant
    from homeassistant.helpers.entity_platform import AddEntitiesCallback

    from .coordinator import SmartAcCoordinator
    from .models import ThermostatState

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up climate entities for SmartAC thermostats."""
    coordinator = hass.data[DOMAIN][entry.entry_id]["coordinator"]

    entities = [
        SmartAcClimateEntity(coordinator, state)
        for state in coordinator.data.values()
    ]
    async_add_entities(entities)


class SmartAcClimateEntity(ClimateEntity):
    """Climate entity for a SmartAC thermostat.

    Temperatures stay in Fahrenheit, the unit mymodlet.com works in; Home
    Assistant converts them for display.
    """

    _attr_temperature_unit = UnitOfTemperature.FAHRENHEIT
    _attr_target_temperature_step = 1
    _attr_has_entity_name = True
    _attr_name = None
    _attr_should_poll = False
    _attr_hvac_modes = [HVACMode.OFF, HVACMode.COOL]
    _attr_min_temp = MIN_TARGET_TEMP
    _attr_max_temp = MAX_TARGET_TEMP
    _attr_supported_features = (
        ClimateEntityFeature.TARGET_TEMPERATURE
        | ClimateEntityFeature.TURN_OFF
        | ClimateEntityFeature.TURN_ON
    )

    def __init__(
        self,
        coordinator: SmartAcCoordinator,
        state: ThermostatState,
    ) -> None:
        """Initialize the SmartAC climate entity.

        Args:
            coordinator: Coordinator polling the SmartAC client.
            state: Thermostat record the entity was discovered from.

        """
        self._coordinator = coordinator
        self._device_id = state.id
        self._attr_unique_id = state.id
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, state.id)},
            name=state.name,
            manufacturer=MANUFACTURER,
            model=MODEL,
        )
        self._coordinator_listener_unsub = None

    @property
    def _state(self) -> ThermostatState | None:
        if not self._coordinator.data:
            return None
        return self._coordinator.data.get(self._device_id)

    @property
    def available(self) -> bool:
        """Return True if the thermostat and its modlet are reachable."""
        state = self._state
        return (
            self._coordinator.last_update_success
            and state is not None
            and state.available
        )

    @property
    def hvac_mode(self) -> HVACMode:
        """Return COOL while the unit is thermostated, otherwise OFF."""
        state = self._state
        if state is not None and state.power_on:
            return HVACMode.COOL
        return HVACMode.OFF

    @property
    def hvac_action(self) -> HVACAction:
        """Return the current running action."""
        if self.hvac_mode == HVACMode.COOL:
            return HVACAction.COOLING
        return HVACAction.OFF

    @property
    def current_temperature(self) -> float | None:
        """Return the measured temperature."""
        state = self._state
        return state.current_temperature if state is not None else None

    @property
    def target_temperature(self) -> float | None:
        """Return the set point."""
        state = self._state
        return state.target_temperature if state is not None else None

    async def async_added_to_hass(self) -> None:
        """Subscribe to coordinator updates."""
        await super().async_added_to_hass()
        self._coordinator_listener_unsub = self._coordinator.async_add_listener(
            self._handle_coordinator_update
        )

    async def async_will_remove_from_hass(self) -> None:
        """Handle entity being removed from Home Assistant."""
        await super().async_will_remove_from_hass()

        if self._coordinator_listener_unsub is not None:
            self._coordinator_listener_unsub()
            self._coordinator_listener_unsub = None

    def _handle_coordinator_update(self) -> None:
        """Handle updated data from the coordinator."""
        self.async_write_ha_state()

    async def _async_push(self, **changes: Any) -> None:  # noqa: ANN401
        """Push a change to mymodlet.com and refresh on success."""
        state = self._state
        if state is not None and state.rw_unavailable:
            error_msg = f"Thermostat {state.name} is not accepting changes right now"
            raise HomeAssistantError(error_msg)

        try:
            result = await self._coordinator.client.async_push(
                self._device_id, **changes
            )
        except SmartAcApiAuthError:
            _LOGGER.exception(
                "Authentication error for %s. Please check your credentials.",
                self._device_id,
            )
            return
        except SmartAcApiClientError:
            _LOGGER.exception("API error while updating %s", self._device_id)
            return
        except httpx.RequestError:
            _LOGGER.exception("Connection error while updating %s", self._device_id)
            return

        if not result:
            _LOGGER.warning(
                "mymodlet.com did not accept %s for %s", changes, self._device_id
            )
            return

        await self._coordinator.async_request_refresh()

    async def async_set_temperature(self, **kwargs: Any) -> None:  # noqa: ANN401
        """Set the target temperature.

        Args:
            **kwargs: Keyword arguments containing temperature data.

        """
        temperature = kwargs.get(ATTR_TEMPERATURE)
        if temperature is None:
            return
        await self._async_push(target_temperature=round(temperature))

    async def async_set_hvac_mode(self, hvac_mode: HVACMode) -> None:
        """Set the HVAC mode.

        Args:
            hvac_mode: COOL to start thermostating, OFF to stop.

        """
        await self._async_push(power_on=hvac_mode == HVACMode.COOL)

    async def async_turn_on(self) -> None:
        """Turn the unit on."""
        await self.async_set_hvac_mode(HVACMode.COOL)

    async def async_turn_off(self) -> None:
        """Turn the unit off."""
        await self.async_set_hvac_mode(HVACMode.OFF)
