from .client import ApiClient
from .result import RequestResult

__all__ = [
    "ApiClient",
    "RequestResult",
]
