import socket
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Generator

import pytest

from fasthttppy.http_protocol import HttpResponse
from fasthttppy.transport import PreparedRequest


@dataclass
class ServerDetails:
    host: str = ""
    port: int = 0


@pytest.fixture
def server_factory() -> Callable[[Callable[[socket.socket], None]], Generator[ServerDetails, None, None]]:
    @contextmanager
    def _factory(handler: Callable[[socket.socket], None]):
        server_thread = None
        details = ServerDetails()

        def server_loop(listener: socket.socket):
            try:
                client_sock, _ = listener.accept()
                with client_sock:
                    handler(client_sock)
            except (socket.timeout, OSError):
                pass

        listener_sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener_sock.bind(("127.0.0.1", 0))
        details.host, details.port = listener_sock.getsockname()

        try:
            listener_sock.settimeout(2.0)
            listener_sock.listen()
            server_thread = threading.Thread(target=server_loop, args=(listener_sock,))
            server_thread.start()
            yield details
        finally:
            try:
                with socket.create_connection((details.host, details.port), timeout=0.1):
                    pass
            except OSError:
                pass

            if server_thread:
                server_thread.join(timeout=2.0)
            listener_sock.close()

    return _factory


def read_request(client_sock: socket.socket) -> bytes:
    """Reads one request (headers plus Content-Length body) off a socket."""
    data = bytearray()
    while b"\r\n\r\n" not in data:
        chunk = client_sock.recv(1024)
        if not chunk:
            return bytes(data)
        data.extend(chunk)

    head, _, body = bytes(data).partition(b"\r\n\r\n")
    content_length = 0
    for line in head.split(b"\r\n"):
        if line.lower().startswith(b"content-length:"):
            content_length = int(line.split(b":", 1)[1].strip())

    while len(body) < content_length:
        chunk = client_sock.recv(content_length - len(body))
        if not chunk:
            break
        body += chunk

    return head + b"\r\n\r\n" + body


@dataclass
class RecordingTransport:
    response: HttpResponse = field(default_factory=lambda: HttpResponse(status_code=200, status_message="OK"))
    requests: list[PreparedRequest] = field(default_factory=list)
    error: Exception | None = None

    def send(self, request: PreparedRequest) -> HttpResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last(self) -> PreparedRequest:
        return self.requests[-1]


@pytest.fixture
def recording_transport() -> RecordingTransport:
    return RecordingTransport()
