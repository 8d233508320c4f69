"""
Network Library Constants

This module contains constants and enums shared by the network clients.
"""

from enum import StrEnum
from typing import Dict, Final

VERSION: Final[str] = "0.1.0"

# Request configuration
DEFAULT_TIMEOUT: Final[float] = 30.0
DEFAULT_FIXTURE_ROOT: Final[str] = "."
FIXTURE_EXTENSION: Final[str] = ".json"

# Process channels used to inject mocks in debug runs
MOCK_ARGUMENT: Final[str] = "mock"
MAPPER_ENV_KEY: Final[str] = "mapper"

# Headers
CACHE_CONTROL_HEADER: Final[str] = "Cache-Control"
NO_CACHE: Final[str] = "no-cache"

# Success range for HTTP status codes (inclusive)
SUCCESS_STATUS_MIN: Final[int] = 200
SUCCESS_STATUS_MAX: Final[int] = 299


class HttpMethod(StrEnum):
    """HTTP methods used by the network layer"""

    GET = "GET"
    POST = "POST"
    HEAD = "HEAD"


class NetworkErrorKind(StrEnum):
    """Closed set of request outcomes reported to callers, dood!"""

    NO_NETWORK = "noNetwork"
    TRANSPORT = "network"
    DECODING = "decoding"
    SERVER = "error"
    MOCK_UNRESOLVED = "couldNotBeMock"


# Human readable descriptions, one per error kind.
# ERROR_FETCHING_WITH is the only one with interpolation (server payload).
ERROR_NO_NETWORK: Final[str] = "No network connection. Check your connection and try again."
ERROR_FETCHING: Final[str] = "There was an error fetching the data."
ERROR_DECODING: Final[str] = "There was an error decoding the data."
ERROR_FETCHING_WITH: Final[str] = "There was an error fetching the data: {reason}"
ERROR_MOCK_UNRESOLVED: Final[str] = "No mock data configured for the requested path."

ERROR_MESSAGES: Final[Dict[NetworkErrorKind, str]] = {
    NetworkErrorKind.NO_NETWORK: ERROR_NO_NETWORK,
    NetworkErrorKind.TRANSPORT: ERROR_FETCHING,
    NetworkErrorKind.DECODING: ERROR_DECODING,
    NetworkErrorKind.SERVER: ERROR_FETCHING,
    NetworkErrorKind.MOCK_UNRESOLVED: ERROR_MOCK_UNRESOLVED,
}
