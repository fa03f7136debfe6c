import logging
from http.cookiejar import DefaultCookiePolicy

import requests
from urllib3 import HTTPHeaderDict

from .errors import (
    InvalidRequestError,
    RequestTimeoutError,
    SocketConnectError,
    SocketReadError,
    TlsError,
    TransportError,
)
from .http_protocol import HttpResponse
from .transport import PreparedRequest

logger = logging.getLogger(__name__)


class RequestsTransport:
    """
    A ``Transport`` backed by a ``requests.Session``.

    Every ``Set-Cookie`` occurrence from the wire is kept. Redirects are not
    followed unless ``allow_redirects`` is set.

    The default session stores no cookies and adds no headers of its own; a
    caller-supplied session is used as configured.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        verify_tls: bool = True,
        allow_redirects: bool = False,
    ):
        self._session = session if session is not None else self._isolated_session()
        self._verify_tls = verify_tls
        self._allow_redirects = allow_redirects

    @staticmethod
    def _isolated_session() -> requests.Session:
        # Only the headers the client merged go out: no cookie jar, no session
        # defaults, no netrc or proxy settings from the environment.
        session = requests.Session()
        session.headers.clear()
        session.trust_env = False
        session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        return session

    def close(self) -> None:
        self._session.close()

    def send(self, request: PreparedRequest) -> HttpResponse:
        url = request.url
        scheme = url.scheme or "http"
        target = f"{scheme}://{url.host}:{url.port}{url.request_target}"

        logger.debug("Dispatching %s %s via requests", request.method.value, target)
        try:
            result = self._session.request(
                request.method.value,
                target,
                headers=dict(request.headers),
                data=request.body or None,
                timeout=request.timeout_seconds,
                verify=self._verify_tls,
                allow_redirects=self._allow_redirects,
            )
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(f"Request to {target} timed out", request.timeout_ms) from e
        except requests.exceptions.SSLError as e:
            raise TlsError(f"TLS failure for {target}: {e}") from e
        except requests.exceptions.ConnectionError as e:
            raise SocketConnectError(f"Connection to {target} failed: {e}") from e
        except (requests.exceptions.ChunkedEncodingError, requests.exceptions.ContentDecodingError) as e:
            raise SocketReadError(f"Reading response from {target} failed: {e}") from e
        except (requests.exceptions.InvalidURL, requests.exceptions.InvalidHeader) as e:
            raise InvalidRequestError(str(e)) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request to {target} failed: {e}") from e

        return self._to_response(result)

    @staticmethod
    def _to_response(result: requests.Response) -> HttpResponse:
        response = HttpResponse(status_code=result.status_code, status_message=result.reason or "")

        raw_headers = getattr(result.raw, "headers", None)
        if isinstance(raw_headers, HTTPHeaderDict):
            # Keeps repeated headers such as Set-Cookie as separate entries.
            response.set_headers(raw_headers.items())
        else:
            response.set_headers(result.headers.items())

        response.body = result.content or b""
        logger.debug("Received status line: %d %s", response.status_code, response.status_message)
        return response
