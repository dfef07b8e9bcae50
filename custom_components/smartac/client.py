"""Thermostat cache and request orchestration for SmartAC.

SmartAcClient is the only entry point the rest of the integration uses. It
owns the mymodlet.com session, the thermostat cache, and the lock that keeps
concurrent refreshes from hammering the service.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from . import parser
from .api import (
    SmartAcApiClientError,
    SmartAcSession,
    build_settings_payload,
)
from .const import AUTH_TTL, UPDATE_TTL
from .lock import OwnershipLock
from .models import Credentials, PayloadShape, ThermostatState

if TYPE_CHECKING:
    from collections.abc import Callable, ValuesView

    import httpx

_LOGGER = logging.getLogger(__name__)


def _default_log_sink(subject: str, message: str) -> None:
    _LOGGER.debug("%s: %s", subject, message)


class ThermostatCache:
    """Known thermostats keyed by appliance id.

    Records are replaced whole and never removed: mymodlet.com sometimes
    leaves devices out of a response, and a stale record beats a vanished
    entity. Writes only happen while the client's lock is held.
    """

    def __init__(self) -> None:
        self._records: dict[str, ThermostatState] = {}

    def upsert(self, state: ThermostatState) -> None:
        """Create or replace the record for state.id."""
        self._records[state.id] = state

    def get(self, device_id: str) -> ThermostatState | None:
        """Return the record for device_id, if known."""
        return self._records.get(device_id)

    def values(self) -> ValuesView[ThermostatState]:
        """Return a live view of all records."""
        return self._records.values()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, device_id: object) -> bool:
        return device_id in self._records


class SmartAcClient:
    """Read-through cache over the mymodlet.com thermostat status.

    async_refresh() serializes callers through an OwnershipLock and skips
    the network entirely while the last refresh is younger than update_ttl.
    async_push() is independent of the lock and never touches the cache;
    call async_refresh() afterwards to observe the new state.
    """

    def __init__(
        self,
        session: httpx.AsyncClient,
        username: str,
        password: str,
        *,
        auth_ttl: float = AUTH_TTL,
        update_ttl: float = UPDATE_TTL,
        clock: Callable[[], float] = time.monotonic,
        log_sink: Callable[[str, str], None] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            session: HTTP client dedicated to this account.
            username: mymodlet.com account e-mail.
            password: mymodlet.com account password.
            auth_ttl: Seconds between logins.
            update_ttl: Seconds a refresh stays fresh.
            clock: Monotonic time source.
            log_sink: Callable receiving (subject, message) pairs.

        Raises:
            ValueError: If username or password is empty.

        """
        self._session = SmartAcSession(
            session,
            Credentials(username=username, password=password),
            auth_ttl=auth_ttl,
            clock=clock,
        )
        self._cache = ThermostatCache()
        self._lock = OwnershipLock()
        self._update_ttl = update_ttl
        self._clock = clock
        self._log = log_sink or _default_log_sink
        self._last_updated_at: float | None = None
        self._shape = PayloadShape.LEGACY_HTML

    @property
    def thermostats(self) -> list[ThermostatState]:
        """Return a snapshot of every known thermostat."""
        return list(self._cache.values())

    @property
    def payload_shape(self) -> PayloadShape:
        """Return the response shape mymodlet.com used most recently."""
        return self._shape

    def get_thermostat(self, device_id: str) -> ThermostatState | None:
        """Return the cached record for device_id, if known."""
        return self._cache.get(device_id)

    def _is_fresh(self) -> bool:
        if self._last_updated_at is None:
            return False
        return self._clock() - self._last_updated_at <= self._update_ttl

    async def async_refresh(self) -> list[ThermostatState]:
        """Return all thermostats, refreshing from mymodlet.com if stale.

        Concurrent callers queue behind one refresh and all receive the
        snapshot it produced.

        Raises:
            SmartAcApiAuthError: If mymodlet.com rejected the session.
            SmartAcApiClientError: If the request or the whole payload failed.
            httpx.RequestError: If mymodlet.com could not be reached.

        """
        async with self._lock:
            if self._is_fresh():
                self._log("api", "status is fresh, skipping update")
            else:
                await self._async_update()
            return list(self._cache.values())

    async def _async_update(self) -> None:
        self._log("api", "updating thermostat status...")
        if await self._session.async_ensure_authenticated():
            self._log("api", "logged in")
        text = await self._session.async_fetch_status()

        payload = parser.decode_payload(text)
        states = parser.parse_payload(payload)

        for state in states:
            self._cache.upsert(state)
        self._shape = payload.shape
        self._last_updated_at = self._clock()
        self._log(
            "api",
            f"updated {len(states)} thermostats ({len(self._cache)} known)",
        )

    async def async_push(
        self,
        device_id: str,
        target_temperature: int | None = None,
        power_on: bool | None = None,
    ) -> bool:
        """Send a desired state for one thermostat.

        Fields left as None are taken from the cached record.

        Returns:
            True if mymodlet.com acknowledged the change, False otherwise.

        Raises:
            SmartAcApiAuthError: If mymodlet.com rejected the session.
            SmartAcApiClientError: If the device is unknown and a field is
                missing, or the request failed.
            httpx.RequestError: If mymodlet.com could not be reached.

        """
        if target_temperature is None or power_on is None:
            current = self._cache.get(device_id)
            if current is None:
                error_msg = f"Unknown thermostat {device_id}; full state required"
                raise SmartAcApiClientError(error_msg)
            if target_temperature is None:
                target_temperature = current.target_temperature
            if power_on is None:
                power_on = current.power_on

        payload = build_settings_payload(device_id, target_temperature, power_on)

        if await self._session.async_ensure_authenticated():
            self._log("api", "logged in")
        text = await self._session.async_post_settings(payload, self._shape)

        result = parser.parse_ack(text)
        self._log(device_id, f"update {payload} acknowledged: {result}")
        return result
