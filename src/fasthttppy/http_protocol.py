import base64
import dataclasses
import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from requests.structures import CaseInsensitiveDict

from .cookie import Cookie, cookie_header

DEFAULT_TIMEOUT_MS = 30000


class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


class ContentType(Enum):
    TEXT_PLAIN = "text/plain"
    TEXT_HTML = "text/html"
    APPLICATION_JSON = "application/json"
    APPLICATION_XML = "application/xml"
    APPLICATION_FORM_URLENCODED = "application/x-www-form-urlencoded"
    MULTIPART_FORM_DATA = "multipart/form-data"
    APPLICATION_OCTET_STREAM = "application/octet-stream"
    IMAGE_PNG = "image/png"
    IMAGE_JPEG = "image/jpeg"
    IMAGE_GIF = "image/gif"

    @classmethod
    def from_value(cls, value: str) -> "ContentType":
        """Looks up a member by MIME string; unknown types map to octet-stream."""
        try:
            return cls(value)
        except ValueError:
            return cls.APPLICATION_OCTET_STREAM


def content_type_value(content_type: "ContentType | str") -> str:
    if isinstance(content_type, ContentType):
        return content_type.value
    return content_type


def basic_auth_value(username: str, password: str) -> str:
    credentials = f"{username}:{password}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


def bearer_auth_value(token: str) -> str:
    return f"Bearer {token}"


def to_body_bytes(body: str | bytes | bytearray | memoryview) -> bytes:
    if isinstance(body, str):
        return body.encode("utf-8")
    return bytes(body)


# --- Request ---

@dataclass(frozen=True)
class HttpRequest:
    """
    An immutable request, ready to hand to a client.

    Headers are a read-only, case-insensitive view. The ``with_*`` methods return a new
    request and leave this one untouched.
    """
    method: HttpMethod = HttpMethod.GET
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    cookies: tuple[Cookie, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", MappingProxyType(CaseInsensitiveDict(self.headers)))
        object.__setattr__(self, "body", to_body_bytes(self.body))
        object.__setattr__(self, "cookies", tuple(dataclasses.replace(c) for c in self.cookies))

    def header(self, key: str, default: str = "") -> str:
        return self.headers.get(key, default)

    def has_header(self, key: str) -> bool:
        return key in self.headers

    def with_header(self, key: str, value: str) -> "HttpRequest":
        return self.with_headers({key: value})

    def with_headers(self, headers: Mapping[str, str]) -> "HttpRequest":
        merged = CaseInsensitiveDict(self.headers)
        merged.update(headers)
        return dataclasses.replace(self, headers=merged)

    def with_body(self, body: str | bytes) -> "HttpRequest":
        body = to_body_bytes(body)
        headers = CaseInsensitiveDict(self.headers)
        if not body:
            headers.pop("Content-Length", None)
        elif "Content-Length" in headers:
            headers["Content-Length"] = str(len(body))
        return dataclasses.replace(self, headers=headers, body=body)

    def with_timeout(self, timeout_ms: int) -> "HttpRequest":
        return dataclasses.replace(self, timeout_ms=timeout_ms)

    def with_cookie(self, cookie: Cookie | str, value: str = "") -> "HttpRequest":
        if isinstance(cookie, str):
            cookie = Cookie(cookie, value)
        cookies = self.cookies + (cookie,)
        headers = CaseInsensitiveDict(self.headers)
        headers["Cookie"] = cookie_header(cookies)
        return dataclasses.replace(self, headers=headers, cookies=cookies)

    def with_content_type(self, content_type: ContentType | str) -> "HttpRequest":
        return self.with_header("Content-Type", content_type_value(content_type))

    def with_json_content(self) -> "HttpRequest":
        return self.with_content_type(ContentType.APPLICATION_JSON)

    def with_form_content(self) -> "HttpRequest":
        return self.with_content_type(ContentType.APPLICATION_FORM_URLENCODED)

    def with_basic_auth(self, username: str, password: str) -> "HttpRequest":
        return self.with_header("Authorization", basic_auth_value(username, password))

    def with_bearer_token(self, token: str) -> "HttpRequest":
        return self.with_header("Authorization", bearer_auth_value(token))

    def describe(self) -> str:
        lines = [
            "HttpRequest:",
            f"Method: {self.method.value}",
            f"URL: {self.url}",
            f"Headers: {len(self.headers)}",
        ]
        lines += [f"  {key}: {value}" for key, value in self.headers.items()]
        lines.append(f"Body: {len(self.body)} bytes")
        lines.append(f"Timeout: {self.timeout_ms} ms")
        lines.append(f"Cookies: {len(self.cookies)}")
        lines += [f"  {cookie.pair}" for cookie in self.cookies]
        return "\n".join(lines) + "\n"


# --- Response ---

class StatusCategory(str, Enum):
    INFORMATIONAL = "Informational"
    SUCCESS = "Success"
    REDIRECT = "Redirect"
    CLIENT_ERROR = "Client Error"
    SERVER_ERROR = "Server Error"
    UNKNOWN = "Unknown"


@dataclass
class HttpResponse:
    """
    A response as delivered by a transport.

    Header keys are stored lowercased and the last write wins, except that
    every ``Set-Cookie`` also appends a parsed cookie to ``cookies``.
    Populate headers through ``set_header`` to get that behaviour.
    """
    status_code: int = 0
    status_message: str = ""
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)
    cookies: list[Cookie] = field(default_factory=list)

    def __post_init__(self) -> None:
        headers, self.headers = self.headers, {}
        self.set_headers(headers.items())
        self.body = to_body_bytes(self.body)

    def set_header(self, key: str, value: str) -> None:
        lower_key = key.lower()
        self.headers[lower_key] = value
        if lower_key == "set-cookie":
            self.cookies.append(Cookie.parse(value))

    def set_headers(self, headers: Iterable[tuple[str, str]]) -> None:
        for key, value in headers:
            self.set_header(key, value)

    def header(self, key: str, default: str = "") -> str:
        return self.headers.get(key.lower(), default)

    def has_header(self, key: str) -> bool:
        return key.lower() in self.headers

    # Cookie lookups

    def get_cookies_by_name(self, name: str) -> list[Cookie]:
        return [cookie for cookie in self.cookies if cookie.name == name]

    def get_cookie(self, name: str) -> Cookie | None:
        return next((cookie for cookie in self.cookies if cookie.name == name), None)

    def has_cookie(self, name: str) -> bool:
        return self.get_cookie(name) is not None

    # Status classification

    def is_informational(self) -> bool:
        return 100 <= self.status_code < 200

    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def is_redirect(self) -> bool:
        return 300 <= self.status_code < 400

    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    @property
    def status_category(self) -> StatusCategory:
        if self.is_informational():
            return StatusCategory.INFORMATIONAL
        if self.is_success():
            return StatusCategory.SUCCESS
        if self.is_redirect():
            return StatusCategory.REDIRECT
        if self.is_client_error():
            return StatusCategory.CLIENT_ERROR
        if self.is_server_error():
            return StatusCategory.SERVER_ERROR
        return StatusCategory.UNKNOWN

    # Content helpers

    @property
    def content_type(self) -> str:
        return self.header("content-type")

    @property
    def content_encoding(self) -> str:
        return self.header("content-encoding")

    @property
    def content_length(self) -> int:
        length = self.header("content-length").strip()
        if length.isascii() and length.isdigit():
            return int(length)
        return len(self.body)

    # Plain substring checks: parameters such as charset are not stripped.

    def is_json(self) -> bool:
        return "application/json" in self.content_type

    def is_xml(self) -> bool:
        content_type = self.content_type
        return "application/xml" in content_type or "text/xml" in content_type

    def is_html(self) -> bool:
        return "text/html" in self.content_type

    @property
    def text(self) -> str:
        charset = "utf-8"
        for param in self.content_type.split(";")[1:]:
            key, _, value = param.strip().partition("=")
            if key.lower() == "charset" and value:
                charset = value.strip('"')
        try:
            return self.body.decode(charset, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)

    def summary(self) -> str:
        return (
            f"HTTP {self.status_code} {self.status_message}\n"
            f"Content-Type: {self.content_type}\n"
            f"Content-Length: {self.content_length}\n"
        )

    def describe(self) -> str:
        lines = [f"HTTP {self.status_code} {self.status_message}"]
        lines += [f"{key}: {value}" for key, value in self.headers.items()]
        return "\n".join(lines) + "\n\n" + self.text
