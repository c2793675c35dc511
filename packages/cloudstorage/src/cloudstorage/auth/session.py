"""
# Session Manager for the Cloud Storage API

Tracks the authentication token, the moment it was issued and the storage
URL returned by the auth endpoint, and performs the username/password
handshake whenever the session is missing or older than `TOKEN_TTL`.

## Session lifecycle:
1. **Unauthenticated**: created with credentials only. The storage URL may
   still be known from the token cache.
2. **Authenticated**: after a successful handshake, for `TOKEN_TTL` seconds.
3. **Expired**: detected lazily by `is_authenticated()`. The token is kept
   but no longer trusted; the next `authenticate()` replaces it.

## Thread safety:
State changes and the handshake itself run under an `RLock`, so concurrent
callers perform at most one handshake per expiry.
"""

import logging
import threading
import time
from typing import Callable

from shared_lib.baseclient import Client
from shared_lib.baseclient.exceptions import ClientError

from cloudstorage.cache import TokenCache
from cloudstorage.exceptions import AuthenticationFailedError, StorageUrlMissingError
from cloudstorage.urls import STORAGE_URL_CACHE_KEY, AuthHeaders, AuthUrls

from .credentials import Credentials

# Fixed client-side token lifetime (24 hours)
TOKEN_TTL = 86400

logger = logging.getLogger(__name__)


class SessionManager:
    """
    # Authentication state machine

    ## Attributes:
    - `credentials` (Credentials): Immutable username/password
    - `cache` (TokenCache | None): Optional storage URL cache
    - `token` (str | None): Last issued auth token
    - `authenticated_at` (float | None): Unix time of the last successful handshake
    - `storage_url` (str | None): Base URL for storage requests, if resolved
    - `version` (int): Bumped on every successful handshake; lets dependants
      notice that the token changed

    ## Example:
    ```python
    session = SessionManager(Credentials("user", "key"), cache=MemoryCache())
    session.authenticate()
    session.token, session.storage_url
    ```
    """

    AUTH_URL = AuthUrls.AUTH_URL

    def __init__(
        self,
        credentials: Credentials,
        cache: TokenCache | None = None,
        transport_factory: Callable[..., Client] = Client,
        timeout: float = 30.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        ## Args:
        - `credentials` (Credentials): Username and password for the handshake
        - `cache` (TokenCache, optional): Where the storage URL is remembered
        - `transport_factory` (callable): Builds the transport used for the
          handshake. Called with keyword arguments only.
        - `timeout` (float): Handshake timeout in seconds
        - `clock` (callable): Returns the current unix time
        """
        self.credentials = credentials
        self.cache = cache
        self.timeout = timeout

        self._transport_factory = transport_factory
        self._clock = clock
        self._lock = threading.RLock()

        self._token: str | None = None
        self._authenticated_at: float | None = None
        self._storage_url: str | None = None
        self._version = 0

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def authenticated_at(self) -> float | None:
        return self._authenticated_at

    @property
    def storage_url(self) -> str | None:
        return self._storage_url

    @property
    def version(self) -> int:
        return self._version

    def is_authenticated(self) -> bool:
        """True if a token is held and was issued less than `TOKEN_TTL` seconds ago."""
        if self._token is None or self._authenticated_at is None:
            return False
        return self._clock() - self._authenticated_at < TOKEN_TTL

    def resolve_storage_url(self) -> str:
        """
        Return the storage URL, looking in memory, then the cache, and
        finally authenticating.

        ## Raises:
        - `AuthenticationFailedError`: If the handshake was needed and failed
        - `StorageUrlMissingError`: If the auth response had no storage URL
        """
        with self._lock:
            if self._storage_url is not None:
                return self._storage_url

            cached = self._read_cached_storage_url()
            if cached:
                logger.debug("Storage URL resolved from cache")
                self._storage_url = cached
                return cached

            self.authenticate()
            if self._storage_url is None:
                raise StorageUrlMissingError("Storage URL is missing.", 500)
            return self._storage_url

    def authenticate(self) -> None:
        """
        Perform the auth handshake unless the current session is still valid.

        On success the token, issue time, storage URL and version are updated
        together and the storage URL is written to the cache. On failure the
        previous state is left untouched.

        ## Raises:
        - `AuthenticationFailedError` (403): Credentials rejected, auth
          endpoint unreachable, or no token in the response
        - `StorageUrlMissingError` (500): No storage URL in the response
        """
        with self._lock:
            if self.is_authenticated():
                return

            logger.info(f"Authenticating storage user {self.credentials.username}")
            response = self._authentication_response()

            # Empty header values count as missing
            token = response.headers.get(AuthHeaders.TOKEN)
            if not token:
                logger.error("Auth response has no token header")
                raise AuthenticationFailedError("Given credentials are wrong.", 403)

            storage_url = response.headers.get(AuthHeaders.STORAGE_URL)
            if not storage_url:
                logger.error("Auth response has no storage URL header")
                raise StorageUrlMissingError("Storage URL is missing.", 500)

            self._token = token
            self._authenticated_at = self._clock()
            self._storage_url = storage_url
            self._version += 1

            logger.info(f"Authenticated, storage URL: {storage_url}")
            self._write_cached_storage_url(storage_url)

    def _authentication_response(self):
        headers = {
            AuthHeaders.USER: self.credentials.username.encode("utf-8"),
            AuthHeaders.KEY: self.credentials.password.encode("utf-8"),
        }

        try:
            with self._transport_factory(timeout=self.timeout) as client:
                return client.request("GET", self.AUTH_URL, headers=headers)
        except ClientError as e:
            logger.error(f"Authentication request failed: {e.message}")
            raise AuthenticationFailedError("Given credentials are wrong.", 403) from e

    def _read_cached_storage_url(self) -> str | None:
        if self.cache is None:
            return None

        try:
            return self.cache.get(STORAGE_URL_CACHE_KEY)
        except Exception as e:
            logger.warning(f"Failed to read storage URL from cache: {e}", exc_info=True)
            return None

    def _write_cached_storage_url(self, storage_url: str) -> None:
        if self.cache is None:
            return

        try:
            self.cache.set(STORAGE_URL_CACHE_KEY, storage_url)
        except Exception as e:
            logger.warning(f"Failed to write storage URL to cache: {e}", exc_info=True)
