from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class RequestResult:
    """
    Outcome of a storage request.

    Exactly one of `response` and `error` is set: `response` whenever the
    server answered (whatever the status code), `error` when no response was
    received at all.
    """

    response: httpx.Response | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        if (self.response is None) == (self.error is None):
            raise ValueError("RequestResult needs exactly one of response or error")

    @property
    def ok(self) -> bool:
        return self.response is not None and self.response.is_success

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def status_code(self) -> int | None:
        return self.response.status_code if self.response is not None else None

    def unwrap(self) -> httpx.Response:
        """Return the response, or raise the captured error."""
        if self.error is not None:
            raise self.error
        if self.response is None:
            raise RuntimeError("RequestResult holds neither a response nor an error")
        return self.response
