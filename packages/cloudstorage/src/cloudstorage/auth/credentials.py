import os
from dataclasses import dataclass, field

USERNAME_ENV = "SELECTEL_STORAGE_USERNAME"
PASSWORD_ENV = "SELECTEL_STORAGE_PASSWORD"


@dataclass(frozen=True)
class Credentials:
    """
    # Storage API Credentials

    Immutable username/password pair sent in the authentication handshake.

    ## Attributes:
    - `username` (str): API user, sent as `X-Auth-User`
    - `password` (str): API key, sent as `X-Auth-Key`. Masked in `repr()`.
    """

    username: str
    password: str = field(repr=False)

    @classmethod
    def from_env(cls) -> "Credentials | None":
        """
        Read credentials from `SELECTEL_STORAGE_USERNAME` and
        `SELECTEL_STORAGE_PASSWORD`.

        ## Returns:
        - `Credentials`: If both variables are set
        - `None`: If either one is missing or empty
        """
        username = os.environ.get(USERNAME_ENV)
        password = os.environ.get(PASSWORD_ENV)

        if username and password:
            return cls(username, password)

        return None
