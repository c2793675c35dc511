from .base import TokenCache
from .file_cache import EncryptedFileCache
from .memory import MemoryCache

__all__ = [
    "EncryptedFileCache",
    "MemoryCache",
    "TokenCache",
]
