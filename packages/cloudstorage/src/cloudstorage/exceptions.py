"""
Exceptions raised by the cloud storage client.

Each error carries an HTTP-like `status_code` so callers can tell bad
credentials (403) apart from a malformed authentication response (500).
Network failures surface as `shared_lib.baseclient.exceptions` errors.
"""


class CloudStorageError(Exception):
    """Base exception for all cloud storage client errors."""

    status_code: int | None = None

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class AuthenticationFailedError(CloudStorageError):
    """Raised when the credentials are rejected or the handshake fails."""

    status_code = 403


class StorageUrlMissingError(CloudStorageError, RuntimeError):
    """Raised when the auth response accepted the credentials but has no storage URL."""

    status_code = 500


class CacheError(CloudStorageError):
    """Raised by token cache implementations on malformed keys or failed writes."""

    pass
