class FastHttpError(Exception):
    """Base exception for the fasthttppy library."""
    pass

# --- Transport Errors ---

class TransportError(FastHttpError):
    """A generic error occurred in the transport layer."""
    pass

class DnsFailureError(TransportError): pass
class SocketConnectError(TransportError): pass
class SocketWriteError(TransportError): pass
class SocketReadError(TransportError): pass
class ConnectionClosedError(TransportError): pass
class TlsError(TransportError): pass

# --- Timeouts ---

class RequestTimeoutError(FastHttpError):
    """The transport gave up waiting on the server within the request's budget."""

    def __init__(self, message: str = "Request timeout", timeout_ms: int | None = None):
        super().__init__(message)
        self.timeout_ms = timeout_ms

# --- HTTP Client Errors ---

class HttpClientError(FastHttpError):
    """A generic error occurred in the HTTP client logic."""
    pass

class UrlParseError(HttpClientError): pass
class InvalidPortError(UrlParseError): pass
class HttpParseError(HttpClientError): pass
class InvalidRequestError(HttpClientError): pass
class UnsupportedSchemeError(HttpClientError): pass
