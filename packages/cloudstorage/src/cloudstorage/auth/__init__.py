from .credentials import Credentials
from .session import TOKEN_TTL, SessionManager

__all__ = [
    "Credentials",
    "SessionManager",
    "TOKEN_TTL",
]
