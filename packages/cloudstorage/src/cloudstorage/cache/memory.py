from .base import validate_key


class MemoryCache:
    """Dict-backed cache, useful for tests and single-process scripts."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(validate_key(key))

    def set(self, key: str, value: str) -> None:
        self._data[validate_key(key)] = value

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
