"""
Cloud storage API client.

`ApiClient` is the entry point used by the higher-level storage operations.
It owns a `SessionManager` and forwards arbitrary requests to the storage
URL with the auth token and `format=json` attached.
"""

import logging
import threading
import time
from typing import Any, Callable

import httpx

from shared_lib.baseclient import Client
from shared_lib.baseclient.exceptions import ClientError, ConfigurationError, HTTPError

from cloudstorage.auth import Credentials, SessionManager
from cloudstorage.cache import EncryptedFileCache, TokenCache
from cloudstorage.urls import AuthHeaders

from .result import RequestResult


logger = logging.getLogger(__name__)


class ApiClient:
    """
    Authenticated client for the storage API.

    The client authenticates lazily: the first `request()` (or an expired
    session) triggers the handshake, and later calls reuse the token until
    it is `TOKEN_TTL` seconds old.

    Attributes:
        session (SessionManager): Authentication state.

    Example:
        >>> with ApiClient("user", "key", cache=EncryptedFileCache()) as api:
        ...     response = api.request("GET", "/container", {"query": {"limit": "10"}})
        ...     response.json()
    """

    def __init__(
        self,
        username: str,
        password: str,
        cache: TokenCache | None = None,
        transport_factory: Callable[..., Client] = Client,
        timeout: float = 30.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the API client.

        Args:
            username: Storage API user.
            password: Storage API key.
            cache: Optional cache remembering the storage URL between runs.
            transport_factory: Builds transports, both for the auth handshake
                and for storage requests. Called with keyword arguments
                (`base_url`, `timeout`, `headers`).
            timeout: Request timeout in seconds.
            clock: Returns the current unix time.
        """
        self._transport_factory = transport_factory
        self.timeout = timeout
        self.session = SessionManager(
            Credentials(username, password),
            cache=cache,
            transport_factory=transport_factory,
            timeout=timeout,
            clock=clock,
        )

        self._lock = threading.Lock()
        self._http_client: Client | None = None
        self._http_client_version: int | None = None
        self._pinned_client: Client | None = None

    @classmethod
    def from_env(cls, **kwargs: Any) -> "ApiClient":
        """
        Create a client from `SELECTEL_STORAGE_USERNAME` and
        `SELECTEL_STORAGE_PASSWORD`.

        Unless `cache` is given, the storage URL is cached in an
        `EncryptedFileCache` under `SELECTEL_STORAGE_CACHE_DIR` (or
        `~/.cloudstorage`).

        Raises:
            ConfigurationError: If either variable is missing.
        """
        credentials = Credentials.from_env()
        if credentials is None:
            raise ConfigurationError("Storage credentials are not configured in environment")

        if "cache" not in kwargs:
            kwargs["cache"] = EncryptedFileCache.from_env()

        return cls(credentials.username, credentials.password, **kwargs)

    def set_cache(self, cache: TokenCache | None) -> "ApiClient":
        """Replace the storage URL cache."""
        self.session.cache = cache
        return self

    def set_http_client(self, client: Client) -> "ApiClient":
        """
        Use `client` for all storage requests instead of building one.

        The injected client is never rebuilt; the auth token is still sent
        with every request.
        """
        self._pinned_client = client
        return self

    def http_client(self) -> Client:
        """
        Return the transport bound to the storage URL.

        The transport is built on first use and rebuilt whenever the session
        re-authenticates, so it never carries a stale token.
        """
        if self._pinned_client is not None:
            return self._pinned_client

        with self._lock:
            storage_url = self.session.resolve_storage_url()
            version = self.session.version

            if self._http_client is None or self._http_client_version != version:
                if self._http_client is not None:
                    logger.debug("Session changed, rebuilding storage client")
                    self._http_client.close()

                token = self.session.token
                self._http_client = self._transport_factory(
                    base_url=storage_url,
                    timeout=self.timeout,
                    headers={AuthHeaders.TOKEN: token} if token else None,
                )
                self._http_client_version = version

            return self._http_client

    def token(self) -> str | None:
        return self.session.token

    def storage_url(self) -> str:
        return self.session.resolve_storage_url()

    def authenticated(self) -> bool:
        return self.session.is_authenticated()

    def authenticate(self) -> None:
        self.session.authenticate()

    def request(
        self,
        method: str,
        path: str = "",
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Perform a storage request.

        Args:
            method: HTTP method.
            path: Path relative to the storage URL.
            params: Request options. `query` holds query parameters; `headers`,
                `content`, `json`, `data` and `files` are passed to httpx as is.
                `format=json` is always added to the query.

        Returns:
            The httpx response. Error status codes are returned, not raised.

        Raises:
            AuthenticationFailedError: If authentication was needed and failed.
            StorageUrlMissingError: If the auth response had no storage URL.
            ConnectionError, TimeoutError, ProxyError: If no response was
                received.
        """
        return self.send(method, path, params).unwrap()

    def send(
        self,
        method: str,
        path: str = "",
        params: dict[str, Any] | None = None,
    ) -> RequestResult:
        """
        Like `request()`, but transport failures are returned in the result
        instead of raised. Authentication errors still raise.
        """
        if not self.session.is_authenticated():
            self.session.authenticate()

        options = dict(params or {})
        query = dict(options.pop("query", None) or {})
        query["format"] = "json"

        headers = dict(options.pop("headers", None) or {})
        headers[AuthHeaders.TOKEN] = self.session.token

        client = self.http_client()

        try:
            response = client.request(
                method, path, params=query, headers=headers, **options
            )
        except HTTPError as e:
            if e.response is None:
                return RequestResult(error=e)
            return RequestResult(response=e.response)
        except ClientError as e:
            logger.error(f"{method} {path} failed without response: {e.message}")
            return RequestResult(error=e)

        return RequestResult(response=response)

    def close(self) -> None:
        """Close the storage transport built by this client."""
        with self._lock:
            if self._http_client is not None:
                self._http_client.close()
                self._http_client = None
                self._http_client_version = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
