from typing import Protocol, runtime_checkable

from cloudstorage.exceptions import CacheError


@runtime_checkable
class TokenCache(Protocol):
    """
    Key/value store the session manager uses to remember the storage URL
    between process runs.

    `get` returns `None` on a miss. Implementations raise `CacheError` for
    malformed keys.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


def validate_key(key: object) -> str:
    if not isinstance(key, str) or not key:
        raise CacheError(f"Invalid cache key: {key!r}")
    return key
