import json
import logging
import os
import tempfile
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken

from cloudstorage.exceptions import CacheError

from .base import validate_key


# 0o700 = Owner has read/write/execute, others have no access
DIR_PERMISSIONS = 0o700
# 0o600 = Owner has read/write, others have no access
FILE_PERMISSIONS = 0o600

CACHE_DIR_ENV = "SELECTEL_STORAGE_CACHE_DIR"


class EncryptedFileCache:
    """
    # Encrypted File Cache

    Persistent key/value cache that survives process restarts. Values are
    kept in a single JSON document encrypted with Fernet (AES-128 in CBC
    mode with HMAC authentication).

    ## Storage Structure:
    ```
    ~/.cloudstorage/           # Storage directory (mode 0o700)
    ├── key.enc                # Encryption key (mode 0o600)
    └── cache.enc              # Encrypted key/value map (mode 0o600)
    ```

    ## Error Handling:
    - Missing, corrupted or undecryptable cache file reads as empty
    - Failed writes raise `CacheError`
    - Malformed keys raise `CacheError`

    ## Example:
    ```python
    cache = EncryptedFileCache()
    cache.set("selectelCloudStorage.apiClient.storageUrl", "https://...")

    # In a later process
    EncryptedFileCache().get("selectelCloudStorage.apiClient.storageUrl")
    ```
    """

    def __init__(self, storage_dir: str | Path | None = None) -> None:
        """
        Initialize the cache, creating the storage directory and encryption
        key on first use.

        ## Args:
        - `storage_dir` (str, optional): Directory for the cache files.
          Defaults to `~/.cloudstorage` if not specified.
        """
        self.storage_dir = Path(storage_dir or Path.home() / ".cloudstorage")
        self.storage_dir.mkdir(parents=True, exist_ok=True, mode=DIR_PERMISSIONS)

        self.cache_file = self.storage_dir / "cache.enc"
        self.key_file = self.storage_dir / "key.enc"

        self.logger = logging.getLogger(__name__)

        self._initialize_encryption_key()

    @classmethod
    def from_env(cls) -> "EncryptedFileCache":
        """Create a cache in `SELECTEL_STORAGE_CACHE_DIR`, or the default directory."""
        return cls(os.environ.get(CACHE_DIR_ENV) or None)

    def _initialize_encryption_key(self) -> None:
        """
        Load the Fernet key, generating and saving a new one if absent.

        Losing the key file means the cached values can no longer be read;
        the cache then behaves as empty and is rewritten on the next `set`.
        """
        if self.key_file.exists():
            with open(self.key_file, "rb") as f:
                self.key = f.read()
        else:
            self.key = Fernet.generate_key()

            with open(self.key_file, "wb") as f:
                f.write(self.key)

            # Unix only - no effect on Windows
            os.chmod(self.key_file, FILE_PERMISSIONS)

        self.cipher_suite = Fernet(self.key)

    def _load(self) -> dict[str, str]:
        if not self.cache_file.exists():
            return {}

        try:
            with open(self.cache_file, "rb") as f:
                encrypted_data = f.read()

            data = json.loads(self.cipher_suite.decrypt(encrypted_data).decode("utf-8"))
        except (OSError, InvalidToken, ValueError) as e:
            self.logger.warning(f"Ignoring unreadable cache file {self.cache_file}: {e}")
            return {}

        if not isinstance(data, dict):
            self.logger.warning(f"Ignoring malformed cache file {self.cache_file}")
            return {}

        return data

    def get(self, key: str) -> str | None:
        """
        Return the cached value for `key`, or `None` on a miss.

        ## Raises:
        - `CacheError`: If `key` is not a non-empty string
        """
        key = validate_key(key)
        value = self._load().get(key)
        if value is None:
            self.logger.debug(f"Cache miss: {key}")
        return value

    def set(self, key: str, value: str) -> None:
        """
        Store `value` under `key`, rewriting the encrypted cache file.

        ## Raises:
        - `CacheError`: If `key` is malformed or the file can't be written
        """
        key = validate_key(key)
        data = self._load()
        data[key] = value

        encrypted_data = self.cipher_suite.encrypt(json.dumps(data).encode("utf-8"))

        # Readers in other processes only ever see a complete file
        tmp_path: str | None = None
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.storage_dir, prefix=".cache-", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as f:
                f.write(encrypted_data)

            os.chmod(tmp_path, FILE_PERMISSIONS)
            os.replace(tmp_path, self.cache_file)
        except OSError as e:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)
            raise CacheError(f"Failed to write cache file {self.cache_file}: {e}") from e

        self.logger.debug(f"Cached value for {key}")

    def clear(self) -> None:
        """Delete the cache file. The encryption key is kept."""
        try:
            self.cache_file.unlink(missing_ok=True)
        except OSError as e:
            raise CacheError(f"Failed to delete cache file {self.cache_file}: {e}") from e
