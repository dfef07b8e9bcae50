"""API client for the ThinkEco SmartAC cloud (mymodlet.com).

This module provides the authenticated cookie session used to talk to
mymodlet.com, including login, status retrieval, and settings updates.
mymodlet.com has no documented API: requests mimic the web app's own
AJAX calls.
"""

import json
import logging
import time
from collections.abc import Callable
from typing import Any

import httpx
from homeassistant.core import HomeAssistant
from homeassistant.helpers.httpx_client import create_async_httpx_client

from .const import (
    AUTH_TTL,
    BASE_URL,
    LOGIN_PATH,
    LOGIN_RETURN_URL,
    REQUEST_TIMEOUT,
    SETTINGS_PATH,
    STATUS_PATH,
    USER_AGENT,
)
from .models import Credentials, PayloadShape

_LOGGER = logging.getLogger(__name__)

# HTTP status codes
HTTP_MULTIPLE_CHOICES = 300
HTTP_BAD_REQUEST = 400
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403


class SmartAcApiClientError(Exception):
    """Base exception for SmartAC API client errors."""


class SmartAcApiAuthError(SmartAcApiClientError):
    """Exception raised when mymodlet.com rejects the session."""


class SmartAcPayloadError(SmartAcApiClientError):
    """Exception raised when a response body cannot be decoded at all."""


def create_headers(*, ajax: bool = False) -> dict[str, str]:
    """Create HTTP headers for mymodlet.com requests.

    Args:
        ajax: Mark the request as an XMLHttpRequest, as the web app does
            for its status and settings calls.

    Returns:
        Dictionary containing HTTP headers.

    """
    headers = {
        "accept": "application/json, text/plain, */*",
        "accept-language": "en-US,en;q=0.9",
        "origin": BASE_URL,
        "referer": f"{BASE_URL}{LOGIN_RETURN_URL}",
        "user-agent": USER_AGENT,
    }
    if ajax:
        headers["x-requested-with"] = "XMLHttpRequest"
    return headers


def is_http_error(status: int) -> bool:
    """Check if HTTP status code indicates an error."""
    return status >= HTTP_BAD_REQUEST


def is_auth_error(status: int) -> bool:
    """Check if HTTP status code indicates an authentication error."""
    return status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN)


def is_login_redirect(response: httpx.Response) -> bool:
    """Check if mymodlet.com bounced the request to its login page."""
    if not HTTP_MULTIPLE_CHOICES <= response.status_code < HTTP_BAD_REQUEST:
        return False
    return LOGIN_PATH.lower() in response.headers.get("location", "").lower()


def validate_response(response: httpx.Response) -> str:
    """Validate HTTP response and return its body text.

    Args:
        response: HTTP response object to validate.

    Returns:
        The undecoded response body.

    Raises:
        SmartAcApiAuthError: If the session was rejected.
        SmartAcApiClientError: If the request failed.

    """
    if is_login_redirect(response) or is_auth_error(response.status_code):
        auth_error = "Authentication error"
        raise SmartAcApiAuthError(auth_error)

    if is_http_error(response.status_code):
        client_error = f"Request failed: {response.status_code}"
        raise SmartAcApiClientError(client_error)

    if response.status_code >= HTTP_MULTIPLE_CHOICES:
        client_error = f"Unexpected redirect: {response.status_code}"
        raise SmartAcApiClientError(client_error)

    return response.text


def build_settings_payload(
    device_id: str, target_temperature: int, power_on: bool
) -> dict[str, Any]:
    """Build the settings command the web app sends for one thermostat."""
    return {
        "applianceId": device_id,
        "targetTemperature": str(target_temperature),
        "thermostated": power_on,
    }


def create_session_client(hass: HomeAssistant) -> httpx.AsyncClient:
    """Create a dedicated HTTP client for mymodlet.com.

    The client keeps its own cookie jar, so it must not be shared with
    other integrations.

    Args:
        hass: Home Assistant instance.

    Returns:
        Configured httpx AsyncClient.

    """
    return create_async_httpx_client(hass, timeout=REQUEST_TIMEOUT)


class SmartAcSession:
    """Cookie session against mymodlet.com with lazy re-login.

    mymodlet.com does not report whether a login worked, so the login time
    is stamped after every completed login request. A bad password surfaces
    later as a rejected status or settings request and is not retried until
    the login window elapses.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        credentials: Credentials,
        *,
        auth_ttl: float = AUTH_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the session.

        Args:
            client: HTTP client whose cookie jar holds the session.
            credentials: Account credentials.
            auth_ttl: Seconds after which the login is renewed.
            clock: Monotonic time source.

        """
        self._client = client
        self._credentials = credentials
        self._auth_ttl = auth_ttl
        self._clock = clock
        self._last_authenticated_at: float | None = None

    @property
    def last_authenticated_at(self) -> float | None:
        """Return when the last login request completed."""
        return self._last_authenticated_at

    def needs_login(self) -> bool:
        """Return True if the login window has elapsed."""
        if self._last_authenticated_at is None:
            return True
        return self._clock() - self._last_authenticated_at > self._auth_ttl

    async def async_ensure_authenticated(self) -> bool:
        """Log in if the login window has elapsed.

        Returns:
            True if a login request was sent, False if still within the window.

        Raises:
            httpx.RequestError: If the login request could not be completed.

        """
        if not self.needs_login():
            return False

        url = f"{BASE_URL}{LOGIN_PATH}"
        form = {
            "loginForm.Email": self._credentials.username,
            "loginForm.Password": self._credentials.password,
            "loginForm.RememberMe": "True",
            "ReturnUrl": LOGIN_RETURN_URL,
        }

        _LOGGER.debug("Logging in to mymodlet.com")
        response = await self._client.post(
            url,
            headers=create_headers(),
            data=form,
            follow_redirects=False,
        )
        self._last_authenticated_at = self._clock()
        _LOGGER.debug("Login request completed with status %s", response.status_code)
        return True

    async def async_fetch_status(self) -> str:
        """Fetch the raw thermostat status document.

        Raises:
            SmartAcApiAuthError: If the session was rejected.
            SmartAcApiClientError: If the request failed.

        """
        url = f"{BASE_URL}{STATUS_PATH}"

        _LOGGER.debug("Fetching thermostat status from mymodlet.com")
        response = await self._client.post(
            url, headers=create_headers(ajax=True), follow_redirects=False
        )
        return validate_response(response)

    async def async_post_settings(
        self, payload: dict[str, Any], shape: PayloadShape
    ) -> str:
        """Send a settings command and return the raw acknowledgment.

        The modern web app double-encodes the body as a JSON string holding
        the JSON object; the legacy one posts the object directly.

        Raises:
            SmartAcApiAuthError: If the session was rejected.
            SmartAcApiClientError: If the request failed.

        """
        url = f"{BASE_URL}{SETTINGS_PATH}"
        headers = create_headers(ajax=True)
        headers["content-type"] = "application/json"

        body = json.dumps(payload)
        if shape is PayloadShape.MODERN_JSON:
            body = json.dumps(body)

        _LOGGER.debug("Posting settings to mymodlet.com: %s", payload)
        response = await self._client.post(
            url, headers=headers, content=body, follow_redirects=False
        )
        return validate_response(response)
