import logging
import socket
import ssl

from .errors import (
    TransportError,
    DnsFailureError,
    RequestTimeoutError,
    SocketConnectError,
    SocketWriteError,
    SocketReadError,
    TlsError,
)

logger = logging.getLogger(__name__)


class TcpStream:
    """A blocking TCP byte stream, optionally wrapped in TLS."""

    def __init__(self, ssl_context: ssl.SSLContext | None = None) -> None:
        self._sock: socket.socket | None = None
        self._ssl_context = ssl_context
        self._timeout: float | None = None

    @property
    def is_connected(self) -> bool:
        return self._sock is not None

    def connect(self, host: str, port: int, timeout: float | None = None, tls: bool = False) -> None:
        if self._sock is not None:
            raise TransportError("Transport is already connected.")

        self._timeout = timeout
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except socket.gaierror as e:
            raise DnsFailureError(f"DNS Failure for host '{host}'") from e
        except socket.timeout as e:
            raise RequestTimeoutError(f"Timed out connecting to {host}:{port}") from e
        except OSError as e:
            raise SocketConnectError(f"Socket connection failed: {e}") from e

        try:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            if tls:
                context = self._ssl_context or ssl.create_default_context()
                sock = context.wrap_socket(sock, server_hostname=host)
        except ssl.SSLError as e:
            sock.close()
            raise TlsError(f"TLS handshake with '{host}' failed: {e}") from e
        except socket.timeout as e:
            sock.close()
            raise RequestTimeoutError(f"Timed out during TLS handshake with '{host}'") from e
        except OSError as e:
            sock.close()
            raise SocketConnectError(f"Socket connection failed: {e}") from e

        self._sock = sock
        logger.debug("Connected to %s:%d (tls=%s)", host, port, tls)

    def write(self, data: bytes) -> None:
        if self._sock is None:
            raise TransportError("Cannot write on a disconnected transport.")

        try:
            self._sock.sendall(data)
        except socket.timeout as e:
            raise RequestTimeoutError("Timed out writing request") from e
        except OSError as e:
            raise SocketWriteError(f"Socket write failed: {e}") from e

    def read_into(self, buffer: bytearray | memoryview) -> int:
        if self._sock is None:
            raise TransportError("Cannot read from a disconnected transport.")

        try:
            return self._sock.recv_into(buffer)
        except socket.timeout as e:
            raise RequestTimeoutError("Timed out waiting for response") from e
        except OSError as e:
            raise SocketReadError(f"Socket read failed: {e}") from e

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None
                logger.debug("Connection closed")
