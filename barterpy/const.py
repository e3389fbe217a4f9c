"""Constants used by barterpy."""

from __future__ import annotations

from enum import Enum

# secure store keys
ACCESS_TOKEN_KEY = "barter_access_token"
REFRESH_TOKEN_KEY = "barter_refresh_token"

CONTENT_TYPE_JSON = "application/json"
DEFAULT_ERROR_MESSAGE = "Request failed"
UNEXPECTED_SHAPE_MESSAGE = "Unexpected response shape"

# auth endpoints
AUTH_REGISTER = "/auth/register"
AUTH_LOGIN = "/auth/login"
AUTH_REFRESH = "/auth/refresh"
AUTH_LOGOUT = "/auth/logout"
AUTH_ME = "/auth/me"


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


API_URLS = {
    Environment.DEVELOPMENT: "http://localhost:3001/api/v1",
    Environment.STAGING: "https://staging-api.barter.app/api/v1",
    Environment.PRODUCTION: "https://api.barter.app/api/v1",
}


class TokenAttribute:
    """Token payload attributes."""

    ACCESS_TOKEN = "accessToken"
    REFRESH_TOKEN = "refreshToken"
    USER = "user"


class SwipeDirection(str, Enum):
    """Swipe direction on a discovery card."""

    LEFT = "LEFT"
    RIGHT = "RIGHT"


class TradeStatus(str, Enum):
    """Trade status."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
