"""Tests for the SmartAC Coordinator."""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import httpx
import pytest
from homeassistant.helpers.update_coordinator import UpdateFailed

from custom_components.smartac import api
from custom_components.smartac.const import DEFAULT_POLL_INTERVAL
from custom_components.smartac.coordinator import SmartAcCoordinator
from custom_components.smartac.models import ThermostatState


@pytest.fixture
def mock_hass() -> Mock:
    """Create a mock Home Assistant instance."""
    return Mock()


@pytest.fixture
def bedroom() -> ThermostatState:
    """Create a sample thermostat record."""
    return ThermostatState(
        id="A",
        name="Bedroom",
        current_temperature=70,
        target_temperature=72,
        power_on=True,
    )


@pytest.fixture
def mock_client(bedroom: ThermostatState) -> Mock:
    """Create a mock SmartAC client."""
    client = Mock()
    client.thermostats = [bedroom]
    client.async_refresh = AsyncMock(return_value=[bedroom])
    return client


class TestSmartAcCoordinatorInit:
    """Tests for SmartAcCoordinator initialization."""

    def test_init_sets_client_and_interval(
        self, mock_hass: Mock, mock_client: Mock
    ) -> None:
        """Test that the coordinator polls on the default interval."""
        coordinator = SmartAcCoordinator(mock_hass, mock_client)
        assert coordinator.client is mock_client
        assert coordinator.update_interval == timedelta(seconds=DEFAULT_POLL_INTERVAL)

    def test_init_seeds_data_from_client_cache(
        self,
        mock_hass: Mock,
        mock_client: Mock,
        bedroom: ThermostatState,
    ) -> None:
        """Test that data starts out as the client's cached thermostats."""
        coordinator = SmartAcCoordinator(mock_hass, mock_client)
        assert coordinator.data == {"A": bedroom}


class TestSmartAcCoordinatorAsyncUpdateData:
    """Tests for _async_update_data method."""

    @pytest.mark.asyncio
    async def test_async_update_data_returns_states_by_id(
        self,
        mock_hass: Mock,
        mock_client: Mock,
        bedroom: ThermostatState,
    ) -> None:
        """Test that polled thermostats are keyed by appliance id."""
        coordinator = SmartAcCoordinator(mock_hass, mock_client)
        result = await coordinator._async_update_data()
        mock_client.async_refresh.assert_called_once()
        assert result == {"A": bedroom}

    @pytest.mark.asyncio
    async def test_async_update_data_raises_update_failed_on_auth_error(
        self, mock_hass: Mock, mock_client: Mock
    ) -> None:
        """Test that an authentication error becomes UpdateFailed."""
        mock_client.async_refresh.side_effect = api.SmartAcApiAuthError("Denied")
        coordinator = SmartAcCoordinator(mock_hass, mock_client)
        with pytest.raises(UpdateFailed, match="Authentication error"):
            await coordinator._async_update_data()

    @pytest.mark.asyncio
    async def test_async_update_data_raises_update_failed_on_client_error(
        self, mock_hass: Mock, mock_client: Mock
    ) -> None:
        """Test that an API error becomes UpdateFailed."""
        mock_client.async_refresh.side_effect = api.SmartAcPayloadError("Bad body")
        coordinator = SmartAcCoordinator(mock_hass, mock_client)
        with pytest.raises(UpdateFailed, match="API error"):
            await coordinator._async_update_data()

    @pytest.mark.asyncio
    async def test_async_update_data_raises_update_failed_on_request_error(
        self, mock_hass: Mock, mock_client: Mock
    ) -> None:
        """Test that a network error becomes UpdateFailed."""
        mock_client.async_refresh.side_effect = httpx.ConnectError("Unreachable")
        coordinator = SmartAcCoordinator(mock_hass, mock_client)
        with pytest.raises(UpdateFailed, match="Connection error"):
            await coordinator._async_update_data()
