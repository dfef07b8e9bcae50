"""Coordinator for SmartAC integration."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

import httpx
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from . import api
from .const import DEFAULT_POLL_INTERVAL, DOMAIN
from .models import ThermostatState

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .client import SmartAcClient

_LOGGER = logging.getLogger(__name__)


class SmartAcCoordinator(DataUpdateCoordinator[dict[str, ThermostatState]]):
    """Coordinator that polls SmartAC thermostat states."""

    def __init__(
        self,
        hass: HomeAssistant,
        client: SmartAcClient,
    ) -> None:
        """Initialize the coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            name=DOMAIN,
            update_interval=timedelta(seconds=DEFAULT_POLL_INTERVAL),
        )
        self.client = client
        self.data = {state.id: state for state in client.thermostats}

    async def _async_update_data(self) -> dict[str, ThermostatState]:
        try:
            states = await self.client.async_refresh()
        except api.SmartAcApiAuthError as err:
            error_msg = f"Authentication error while polling thermostats: {err}"
            raise UpdateFailed(error_msg) from err
        except api.SmartAcApiClientError as err:
            error_msg = f"API error while polling thermostats: {err}"
            raise UpdateFailed(error_msg) from err
        except httpx.RequestError as err:
            error_msg = f"Connection error while polling thermostats: {err}"
            raise UpdateFailed(error_msg) from err

        _LOGGER.debug("Polled status for %d thermostats", len(states))
        return {state.id: state for state in states}
