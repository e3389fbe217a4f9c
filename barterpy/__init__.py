"""Provide a package for barterpy."""

__version__ = "0.1.0"

from .account import Account
from .api import BarterApi
from .exceptions import (
    BarterApiError,
    InvalidInputError,
    RequestError,
    SessionExpiredError,
)
from .store import KeyringTokenStore, MemoryTokenStore, TokenStore
