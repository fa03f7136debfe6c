import json
from collections.abc import Mapping
from typing import Any

from requests.structures import CaseInsensitiveDict

from . import url_encoding
from .cookie import Cookie, cookie_header
from .form_data import FormData
from .http_protocol import (
    DEFAULT_TIMEOUT_MS,
    ContentType,
    HttpMethod,
    HttpRequest,
    basic_auth_value,
    bearer_auth_value,
    content_type_value,
    to_body_bytes,
)


class RequestBuilder:
    """
    Fluent staging area for an ``HttpRequest``.

    Every setter returns the builder. ``build()`` takes a snapshot, so the
    builder can keep being modified and built again without affecting
    requests it already produced.
    """

    def __init__(self, method: HttpMethod, url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS):
        self._method = method
        self._url = url
        self._headers: CaseInsensitiveDict = CaseInsensitiveDict()
        self._body: bytes = b""
        self._timeout_ms = timeout_ms
        self._cookies: list[Cookie] = []

    def add_header(self, key: str, value: str) -> "RequestBuilder":
        self._headers[key] = value
        return self

    def add_headers(self, headers: Mapping[str, str]) -> "RequestBuilder":
        self._headers.update(headers)
        return self

    def set_content_type(self, content_type: ContentType | str) -> "RequestBuilder":
        return self.add_header("Content-Type", content_type_value(content_type))

    def set_body(self, body: str | bytes, content_type: ContentType | str | None = None) -> "RequestBuilder":
        if content_type is not None:
            self.set_content_type(content_type)
        self._body = to_body_bytes(body)
        if self._body:
            self.add_header("Content-Length", str(len(self._body)))
        else:
            self._headers.pop("Content-Length", None)
        return self

    def set_json_body(self, payload: Any) -> "RequestBuilder":
        if not isinstance(payload, (str, bytes, bytearray)):
            payload = json.dumps(payload)
        return self.set_body(payload, ContentType.APPLICATION_JSON)

    def set_form_urlencoded(self, params: Mapping[str, str]) -> "RequestBuilder":
        return self.set_body(
            url_encoding.build_query_string(params),
            ContentType.APPLICATION_FORM_URLENCODED,
        )

    def set_form_data(self, form_data: FormData) -> "RequestBuilder":
        return self.set_body(form_data.encode(), form_data.content_type)

    def add_query_param(self, key: str, value: str) -> "RequestBuilder":
        separator = "&" if "?" in self._url else "?"
        self._url += f"{separator}{url_encoding.encode(key)}={url_encoding.encode(value)}"
        return self

    def add_query_params(self, params: Mapping[str, str]) -> "RequestBuilder":
        for key, value in sorted(params.items()):
            self.add_query_param(key, value)
        return self

    def set_timeout(self, timeout_ms: int) -> "RequestBuilder":
        self._timeout_ms = timeout_ms
        return self

    def add_cookie(self, cookie: Cookie | str, value: str = "") -> "RequestBuilder":
        if isinstance(cookie, str):
            cookie = Cookie(cookie, value)
        self._cookies.append(cookie)
        return self

    def set_basic_auth(self, username: str, password: str) -> "RequestBuilder":
        return self.add_header("Authorization", basic_auth_value(username, password))

    def set_bearer_token(self, token: str) -> "RequestBuilder":
        return self.add_header("Authorization", bearer_auth_value(token))

    @property
    def url(self) -> str:
        return self._url

    def build(self) -> HttpRequest:
        headers = CaseInsensitiveDict(self._headers)
        if self._cookies:
            headers["Cookie"] = cookie_header(self._cookies)

        return HttpRequest(
            method=self._method,
            url=self._url,
            headers=headers,
            body=self._body,
            timeout_ms=self._timeout_ms,
            cookies=tuple(self._cookies),
        )
