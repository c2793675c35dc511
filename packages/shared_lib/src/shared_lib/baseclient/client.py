"""
Base HTTP client used as the transport for API clients.

This module provides a thin synchronous wrapper over httpx. It includes
support for proxies, default headers and timeouts, and maps httpx failures
onto the exceptions in `shared_lib.baseclient.exceptions`.
"""

from typing import Any
import logging

import httpx

from .exceptions import (
    ConfigurationError,
    ConnectionError,
    HTTPError,
    ProxyError,
    TimeoutError,
)


logger = logging.getLogger(__name__)


class BaseClient:
    """
    Synchronous HTTP transport for building API clients.

    This class provides a foundation for API clients with built-in support for:
    - Proxy configuration
    - Default and per-request headers
    - Error mapping (status errors keep their response)
    - Proper resource cleanup

    Attributes:
        BASE_URL (str): Default base URL for requests. Empty means endpoints
                       are absolute URLs.
        client (httpx.Client): The underlying httpx client.

    Example:
        >>> with BaseClient(base_url="https://api.example.com") as client:
        ...     response = client.request("GET", "/users/123")
    """

    BASE_URL: str = ""

    def __init__(
        self,
        base_url: str | None = None,
        proxy: str | None = None,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ):
        """
        Initialize the base client.

        Args:
            base_url: Custom base URL to override the class BASE_URL attribute.
            proxy: Proxy URL in format "host:port" or "http://host:port".
            timeout: Request timeout in seconds. Defaults to 30.0.
            headers: Headers sent with every request.
            **kwargs: Additional arguments passed to httpx.Client.
                     Common options include:
                     - verify: SSL verification (bool or path to cert)
                     - follow_redirects: Whether to follow redirects (bool,
                       defaults to True)
                     - transport: Custom httpx transport (e.g. MockTransport)

        Raises:
            ConfigurationError: If proxy format is invalid.
        """
        self.proxy = proxy
        self.base_url = base_url if base_url is not None else self.BASE_URL

        if self.proxy is not None:
            try:
                proxy_url = (
                    self.proxy
                    if self.proxy.startswith("http")
                    else f"http://{self.proxy}"
                )
                kwargs["proxy"] = proxy_url
                logger.debug(f"Proxy configured: {proxy_url}")
            except Exception as e:
                raise ConfigurationError(f"Invalid proxy configuration: {e}") from e

        if "timeout" not in kwargs:
            kwargs["timeout"] = timeout

        kwargs.setdefault("follow_redirects", True)

        self.client = httpx.Client(**kwargs)

        default_headers = {
            "Accept": "application/json",
            "User-Agent": "CloudStorageClient/0.1.0",
        }
        self.client.headers.update(default_headers)
        if headers:
            self.client.headers.update(headers)

        logger.debug(f"Client initialized with base URL: {self.base_url or '<none>'}")

    def _build_url(self, endpoint: str) -> str:
        if not self.base_url or endpoint.startswith(("http://", "https://")):
            return endpoint
        if not endpoint:
            return self.base_url
        return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def request(
        self,
        method: str,
        endpoint: str = "",
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Perform an HTTP request and return the raw response.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, HEAD, etc.).
            endpoint: Path appended to the base URL, or an absolute URL.
            params: Query parameters for the request.
            headers: Additional headers for this specific request.
            **kwargs: Additional arguments passed to httpx (content, json, ...).

        Returns:
            The httpx response, guaranteed to have a 2xx status.

        Raises:
            HTTPError: If the server returned an error status code. The
                response is attached as `HTTPError.response`.
            ProxyError: If the proxy connection failed.
            TimeoutError: If the request timed out.
            ConnectionError: If no response was received at all.
        """
        url = self._build_url(endpoint)

        try:
            logger.debug(f"{method} {url}")
            response = self.client.request(
                method,
                url,
                params=params,
                headers=headers,
                **kwargs,
            )
            response.raise_for_status()

            logger.debug(f"Response status: {response.status_code}")
            return response

        except httpx.ProxyError as e:
            logger.error(f"Proxy error: {e}")
            raise ProxyError(f"Proxy connection failed: {e}") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"HTTP error {e.response.status_code}: {method} {url}")
            raise HTTPError(
                f"Request failed with status {e.response.status_code}",
                status_code=e.response.status_code,
                response_body=e.response.text,
                response=e.response,
            ) from e
        except httpx.TimeoutException as e:
            logger.error(f"Request timeout: {e}")
            raise TimeoutError(f"Request timed out: {e}") from e
        except httpx.TransportError as e:
            logger.error(f"Transport error: {e}")
            raise ConnectionError(f"Request failed: {e}") from e

    def close(self) -> None:
        """
        Close the HTTP client and release resources.

        This should be called when the client is no longer needed to
        properly clean up connections and resources.
        """
        self.client.close()
        logger.debug("Client closed")

    def __enter__(self):
        """Enable use as context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Ensure client is closed when exiting context."""
        self.close()
