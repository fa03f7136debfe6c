import logging
from collections.abc import Mapping
from typing import Any

from requests.structures import CaseInsensitiveDict

from .config import ClientConfig
from .errors import UnsupportedSchemeError
from .form_data import FormData
from .http1_transport import Http1Transport
from .http_protocol import HttpMethod, HttpRequest, HttpResponse
from .request_builder import RequestBuilder
from .transport import PreparedRequest, Transport
from .url import parse_url

logger = logging.getLogger(__name__)

SUPPORTED_SCHEMES = ("", "http", "https")


class HttpClient:
    """
    Sends requests through a ``Transport``.

    Default headers and the default timeout are the client's only mutable
    state; share one instance across threads only with external locking.
    """

    def __init__(self, transport: Transport | None = None, config: ClientConfig | None = None):
        config = config if config is not None else ClientConfig()
        self._transport: Transport = (
            transport if transport is not None else Http1Transport(verify_tls=config.verify_tls)
        )
        self._default_timeout_ms: int = config.default_timeout_ms
        self._default_headers: CaseInsensitiveDict = CaseInsensitiveDict()
        if config.user_agent:
            self._default_headers["User-Agent"] = config.user_agent
        self._default_headers.update(config.default_headers)

    # --- Configuration ---

    @property
    def default_timeout_ms(self) -> int:
        return self._default_timeout_ms

    @property
    def default_headers(self) -> dict[str, str]:
        return dict(self._default_headers)

    def set_default_timeout(self, timeout_ms: int) -> None:
        self._default_timeout_ms = timeout_ms

    def set_default_header(self, key: str, value: str) -> None:
        self._default_headers[key] = value

    # --- Execution ---

    def execute(self, request: HttpRequest) -> HttpResponse:
        url = parse_url(request.url)
        if url.scheme not in SUPPORTED_SCHEMES:
            raise UnsupportedSchemeError(f"Unsupported URL scheme '{url.scheme}' in '{request.url}'")

        headers = CaseInsensitiveDict(self._default_headers)
        headers.update(request.headers)

        logger.debug("%s %s", request.method.value, request.url)
        return self._transport.send(PreparedRequest(
            method=request.method,
            url=url,
            headers=headers,
            body=request.body,
            timeout_ms=request.timeout_ms,
        ))

    def request(self, method: HttpMethod, url: str) -> RequestBuilder:
        return RequestBuilder(method, url, timeout_ms=self._default_timeout_ms)

    # --- Shortcuts ---

    def _send(
        self,
        method: HttpMethod,
        url: str,
        headers: Mapping[str, str] | None,
        builder_setup=None,
    ) -> HttpResponse:
        builder = self.request(method, url)
        if builder_setup is not None:
            builder_setup(builder)
        builder.add_headers(headers or {})
        return self.execute(builder.build())

    def get(self, url: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self._send(HttpMethod.GET, url, headers)

    def head(self, url: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self._send(HttpMethod.HEAD, url, headers)

    def options(self, url: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self._send(HttpMethod.OPTIONS, url, headers)

    def delete(self, url: str, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self._send(HttpMethod.DELETE, url, headers)

    def post(self, url: str, data: str | bytes = b"", headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self._send(HttpMethod.POST, url, headers, lambda b: b.set_body(data))

    def put(self, url: str, data: str | bytes = b"", headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self._send(HttpMethod.PUT, url, headers, lambda b: b.set_body(data))

    def patch(self, url: str, data: str | bytes = b"", headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self._send(HttpMethod.PATCH, url, headers, lambda b: b.set_body(data))

    def post_json(self, url: str, payload: Any, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self._send(HttpMethod.POST, url, headers, lambda b: b.set_json_body(payload))

    def put_json(self, url: str, payload: Any, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self._send(HttpMethod.PUT, url, headers, lambda b: b.set_json_body(payload))

    def patch_json(self, url: str, payload: Any, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self._send(HttpMethod.PATCH, url, headers, lambda b: b.set_json_body(payload))

    def post_form(self, url: str, fields: Mapping[str, str], headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self._send(HttpMethod.POST, url, headers, lambda b: b.set_form_urlencoded(fields))

    def post_multipart(self, url: str, form_data: FormData, headers: Mapping[str, str] | None = None) -> HttpResponse:
        return self._send(HttpMethod.POST, url, headers, lambda b: b.set_form_data(form_data))
