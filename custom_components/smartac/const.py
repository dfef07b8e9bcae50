"""Constants for the SmartAC integration.

This module contains all the constants used throughout the integration,
including upstream endpoints, timing windows, and configuration keys.
"""

DOMAIN = "smartac"

BASE_URL = "https://mymodlet.com"
LOGIN_PATH = "/Account/Login"
STATUS_PATH = "/SmartAC/UserSettingsTable"
SETTINGS_PATH = "/SmartAC/UserSettings"
LOGIN_RETURN_URL = "/smartac"
USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 11; IN2013) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/93.0.4577.82 Mobile Safari/537.36"
)

AUTH_TTL = 2 * 60 * 60  # Seconds between logins
UPDATE_TTL = 2  # Seconds a refresh stays fresh
REQUEST_TIMEOUT = 10.0
DEFAULT_POLL_INTERVAL = 60

ERROR_INVALID_AUTH = "invalid_auth"
ERROR_CANNOT_CONNECT = "cannot_connect"
ERROR_TIMEOUT = "timeout_error"
ERROR_API_ERROR = "api_error"
ERROR_UNKNOWN = "unknown_error"

# Target range of the SmartAC thermostat, in its native Fahrenheit
MIN_TARGET_TEMP = 59
MAX_TARGET_TEMP = 91

MANUFACTURER = "ThinkEco"
MODEL = "SmartAC"
