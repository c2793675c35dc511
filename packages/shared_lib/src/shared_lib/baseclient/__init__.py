"""
Base HTTP client shared by the API clients in this repository.

This package provides a small synchronous transport over httpx with
built-in support for proxies, default headers and error mapping.
"""

from .client import BaseClient as Client

__version__ = "0.1.0"
__all__ = [
    "Client",
]
