from __future__ import annotations

import logging

import httpx
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_PASSWORD, CONF_USERNAME, Platform
from homeassistant.core import HomeAssistant

from . import api
from .api import create_session_client
from .client import SmartAcClient
from .const import DOMAIN
from .coordinator import SmartAcCoordinator

_LOGGER = logging.getLogger(__name__)

PLATFORMS = [Platform.CLIMATE]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Setting up SmartAC integration for entry %s", entry.entry_id)

    if not entry.data.get(CONF_USERNAME) or not entry.data.get(CONF_PASSWORD):
        _LOGGER.error(
            "Missing credentials in configuration for entry %s", entry.entry_id
        )
        return False

    session = create_session_client(hass)
    client = SmartAcClient(session, entry.data[CONF_USERNAME], entry.data[CONF_PASSWORD])

    try:
        _LOGGER.debug("Fetching thermostats from mymodlet.com")
        thermostats = await client.async_refresh()
        _LOGGER.info(
            "Successfully retrieved %d thermostats from mymodlet.com",
            len(thermostats),
        )
    except api.SmartAcApiAuthError as err:
        _LOGGER.warning(
            "Authentication failed for entry %s: %s", entry.entry_id, str(err)
        )
        return False
    except api.SmartAcApiClientError as err:
        _LOGGER.error("API client error for entry %s: %s", entry.entry_id, str(err))
        return False
    except httpx.ConnectError as err:
        _LOGGER.error("Connection error for entry %s: %s", entry.entry_id, str(err))
        return False
    except httpx.TimeoutException as err:
        _LOGGER.error("Timeout error for entry %s: %s", entry.entry_id, str(err))
        return False
    except httpx.RequestError as err:
        _LOGGER.error("Request error for entry %s: %s", entry.entry_id, str(err))
        return False

    coordinator = SmartAcCoordinator(hass, client)

    hass.data.setdefault(DOMAIN, {})[entry.entry_id] = {
        "client": client,
        "coordinator": coordinator,
    }
    _LOGGER.debug(
        "Stored data for entry %s: %d thermostats", entry.entry_id, len(thermostats)
    )

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    _LOGGER.info("Successfully setup SmartAC integration for entry %s", entry.entry_id)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    _LOGGER.info("Unloading SmartAC integration for entry %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    if unload_ok:
        if DOMAIN in hass.data and entry.entry_id in hass.data[DOMAIN]:
            hass.data[DOMAIN].pop(entry.entry_id)
            _LOGGER.debug("Cleaned up data for entry %s", entry.entry_id)
        _LOGGER.info(
            "Successfully unloaded SmartAC integration for entry %s", entry.entry_id
        )
    else:
        _LOGGER.warning("Failed to unload some platforms for entry %s", entry.entry_id)

    return unload_ok
