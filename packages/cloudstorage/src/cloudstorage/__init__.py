"""
Client for the Selectel Cloud Storage API.

Handles token authentication, caches the storage URL between runs and
forwards authenticated requests to the storage endpoint.
"""

from .api import ApiClient, RequestResult
from .auth import TOKEN_TTL, Credentials, SessionManager
from .cache import EncryptedFileCache, MemoryCache, TokenCache
from .exceptions import (
    AuthenticationFailedError,
    CacheError,
    CloudStorageError,
    StorageUrlMissingError,
)

__version__ = "0.1.0"
__all__ = [
    "ApiClient",
    "AuthenticationFailedError",
    "CacheError",
    "CloudStorageError",
    "Credentials",
    "EncryptedFileCache",
    "MemoryCache",
    "RequestResult",
    "SessionManager",
    "StorageUrlMissingError",
    "TOKEN_TTL",
    "TokenCache",
]
