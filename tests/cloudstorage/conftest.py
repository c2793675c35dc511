"""Shared fixtures: an in-process fake of the auth and storage endpoints."""

import itertools
import threading

import httpx
import pytest

from shared_lib.baseclient import Client

AUTH_HOST = "auth.selcdn.ru"
STORAGE_URL = "https://store.example/v1/acct"


class FakeStorageService:
    """
    Answers the auth handshake and storage requests through httpx.MockTransport.

    Tokens are issued as tok123, tok124, ... so re-authentication is visible.
    """

    def __init__(self) -> None:
        self.auth_status = 204
        self.storage_url: str | None = STORAGE_URL
        self.issue_token = True
        self.auth_error: Exception | None = None
        self.storage_error: Exception | None = None
        self.storage_status = 200
        self.storage_json: object = []
        self.auth_redirect = False
        self.auth_gate: threading.Event | None = None

        self.auth_requests: list[httpx.Request] = []
        self.storage_requests: list[httpx.Request] = []
        self.factory_calls: list[dict] = []
        self._tokens = (f"tok{n}" for n in itertools.count(123))

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == AUTH_HOST:
            self.auth_requests.append(request)
            if self.auth_redirect and request.url.path == "/":
                return httpx.Response(302, headers={"Location": "https://auth.selcdn.ru/v1"})
            if self.auth_gate is not None:
                self.auth_gate.wait(timeout=5)
            if self.auth_error is not None:
                raise self.auth_error
            headers = {}
            if self.issue_token:
                headers["X-Auth-Token"] = next(self._tokens)
            if self.storage_url is not None:
                headers["X-Storage-Url"] = self.storage_url
            return httpx.Response(self.auth_status, headers=headers)

        self.storage_requests.append(request)
        if self.storage_error is not None:
            raise self.storage_error
        return httpx.Response(self.storage_status, json=self.storage_json)

    def factory(self, **kwargs) -> Client:
        self.factory_calls.append(kwargs)
        return Client(transport=httpx.MockTransport(self.handler), **kwargs)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def service() -> FakeStorageService:
    return FakeStorageService()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
