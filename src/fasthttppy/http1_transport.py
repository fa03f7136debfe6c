import logging
import ssl
from collections.abc import Callable

from .errors import ConnectionClosedError, HttpParseError, InvalidRequestError
from .http_protocol import HttpMethod, HttpResponse
from .tcp_transport import TcpStream
from .transport import PreparedRequest
from .url import HTTP_PORT, HTTPS_PORT

logger = logging.getLogger(__name__)


class _ResponseReader:
    """Accumulates bytes from a stream and hands out framed pieces of them."""

    _READ_CHUNK_SIZE = 4096

    def __init__(self, stream: TcpStream):
        self._stream = stream
        self._buffer = bytearray()
        self._pos = 0
        self.eof = False

    def _fill(self) -> int:
        chunk = bytearray(self._READ_CHUNK_SIZE)
        bytes_read = self._stream.read_into(chunk)
        if bytes_read == 0:
            self.eof = True
        else:
            self._buffer += memoryview(chunk)[:bytes_read]
        return bytes_read

    def read_until(self, separator: bytes) -> bytes | None:
        """Returns everything up to and including ``separator``, or None on EOF."""
        while True:
            end = self._buffer.find(separator, self._pos)
            if end != -1:
                end += len(separator)
                data = bytes(self._buffer[self._pos:end])
                self._pos = end
                return data
            if self.eof or self._fill() == 0:
                return None

    def read_exactly(self, size: int) -> bytes | None:
        while len(self._buffer) - self._pos < size:
            if self.eof or self._fill() == 0:
                return None
        data = bytes(self._buffer[self._pos:self._pos + size])
        self._pos += size
        return data

    def read_to_close(self) -> bytes:
        while not self.eof:
            self._fill()
        data = bytes(self._buffer[self._pos:])
        self._pos = len(self._buffer)
        return data

    @property
    def received_anything(self) -> bool:
        return len(self._buffer) > 0


class Http1Transport:
    """
    A ``Transport`` speaking HTTP/1.1 over a fresh socket per request.

    Each request is sent with ``Connection: close``. Response bodies are
    framed by chunked transfer coding, Content-Length, or connection close,
    in that order of preference.
    """

    _HEADER_SEPARATOR = b"\r\n\r\n"
    _LINE_SEPARATOR = b"\r\n"

    def __init__(
        self,
        verify_tls: bool = True,
        ssl_context: ssl.SSLContext | None = None,
        stream_factory: Callable[[ssl.SSLContext | None], TcpStream] = TcpStream,
    ):
        if ssl_context is None and not verify_tls:
            ssl_context = ssl.create_default_context()
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
        self._ssl_context = ssl_context
        self._stream_factory = stream_factory

    def send(self, request: PreparedRequest) -> HttpResponse:
        url = request.url
        stream = self._stream_factory(self._ssl_context)
        stream.connect(url.host, url.port, timeout=request.timeout_seconds, tls=url.is_secure)

        try:
            stream.write(self._build_request_bytes(request))
            return self._read_response(_ResponseReader(stream), request.method)
        finally:
            stream.close()

    def _build_request_bytes(self, request: PreparedRequest) -> bytes:
        url = request.url
        headers = {key.lower(): (key, value) for key, value in request.headers.items()}

        if "host" not in headers:
            default_port = HTTPS_PORT if url.is_secure else HTTP_PORT
            host = url.host if url.port == default_port else f"{url.host}:{url.port}"
            headers["host"] = ("Host", host)
        if "connection" not in headers:
            headers["connection"] = ("Connection", "close")
        if request.body and "content-length" not in headers and "transfer-encoding" not in headers:
            headers["content-length"] = ("Content-Length", str(len(request.body)))

        lines = [f"{request.method.value} {url.request_target} HTTP/1.1\r\n"]
        for key, value in headers.values():
            lines.append(f"{key}: {value}\r\n")
        lines.append("\r\n")

        try:
            head = "".join(lines).encode("latin-1")
        except UnicodeEncodeError as e:
            raise InvalidRequestError(f"Request line or headers are not encodable: {e}") from e

        return head + request.body

    def _read_response(self, reader: _ResponseReader, method: HttpMethod) -> HttpResponse:
        head = reader.read_until(self._HEADER_SEPARATOR)
        if head is None:
            if not reader.received_anything:
                raise ConnectionClosedError("Connection closed before any response was received.")
            raise HttpParseError("Could not find header separator in response.")

        response = self._parse_head(head)
        logger.debug("Received status line: %d %s", response.status_code, response.status_message)

        if self._has_no_body(response, method):
            return response

        if "chunked" in response.header("transfer-encoding").lower():
            response.body = self._read_chunked_body(reader)
        elif response.has_header("content-length"):
            response.body = self._read_sized_body(reader, response.header("content-length"))
        else:
            response.body = reader.read_to_close()

        return response

    def _parse_head(self, head: bytes) -> HttpResponse:
        status_line_end = head.find(self._LINE_SEPARATOR)

        first_space = head.find(b" ", 0, status_line_end)
        if first_space == -1:
            raise HttpParseError("Could not find space after HTTP version.")

        second_space = head.find(b" ", first_space + 1, status_line_end)
        code_end = status_line_end if second_space == -1 else second_space

        try:
            status_code = int(head[first_space + 1:code_end])
        except ValueError:
            raise HttpParseError("Invalid status code in status line.")

        status_message = ""
        if second_space != -1:
            status_message = head[second_space + 1:status_line_end].decode("latin-1")

        response = HttpResponse(status_code=status_code, status_message=status_message)

        for line in head[status_line_end + 2:].split(self._LINE_SEPARATOR):
            if not line:
                continue
            key, colon, value = line.partition(b":")
            if colon:
                response.set_header(key.strip().decode("latin-1"), value.strip(b" \t").decode("latin-1"))

        return response

    @staticmethod
    def _has_no_body(response: HttpResponse, method: HttpMethod) -> bool:
        return (
            method == HttpMethod.HEAD
            or response.is_informational()
            or response.status_code in (204, 304)
        )

    def _read_sized_body(self, reader: _ResponseReader, content_length: str) -> bytes:
        try:
            size = int(content_length.strip())
        except ValueError:
            raise HttpParseError("Invalid Content-Length value")
        if size < 0:
            raise HttpParseError("Invalid Content-Length value")

        body = reader.read_exactly(size)
        if body is None:
            logger.error("Connection closed with %d byte body still expected", size)
            raise HttpParseError("Connection closed before full content length was received.")
        return body

    def _read_chunked_body(self, reader: _ResponseReader) -> bytes:
        body = bytearray()
        while True:
            size_line = reader.read_until(self._LINE_SEPARATOR)
            if size_line is None:
                raise HttpParseError("Connection closed inside chunked body.")

            size_text = size_line[:-2].split(b";", 1)[0].strip()
            try:
                size = int(size_text, 16)
            except ValueError:
                raise HttpParseError(f"Invalid chunk size: {size_text!r}")

            if size == 0:
                self._skip_trailers(reader)
                return bytes(body)

            chunk = reader.read_exactly(size + 2)
            if chunk is None:
                raise HttpParseError("Connection closed inside chunked body.")
            if not chunk.endswith(self._LINE_SEPARATOR):
                raise HttpParseError("Chunk data is not terminated by CRLF.")
            body += chunk[:-2]

    def _skip_trailers(self, reader: _ResponseReader) -> None:
        while True:
            line = reader.read_until(self._LINE_SEPARATOR)
            if line is None or line == self._LINE_SEPARATOR:
                return
