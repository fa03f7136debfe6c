from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

from .http_protocol import DEFAULT_TIMEOUT_MS, HttpMethod, HttpResponse
from .url import URL


@dataclass(frozen=True)
class PreparedRequest:
    method: HttpMethod
    url: URL
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    timeout_ms: int = DEFAULT_TIMEOUT_MS

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


class Transport(Protocol):
    """
    Performs the network exchange for one request.

    Implementations open the connection (TLS for https), write the request,
    and read the status line, headers and framed body. Failures surface as
    ``TransportError`` subclasses, or ``RequestTimeoutError`` when the
    timeout budget runs out.
    """

    def send(self, request: PreparedRequest) -> HttpResponse:
        ...
