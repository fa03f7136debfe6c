"""
Module-level shortcuts. Each call builds a throwaway ``HttpClient``; keep a
client around instead when default headers or timeouts should persist.
"""
from collections.abc import Mapping
from typing import Any

from . import url_encoding
from .fasthttppy import HttpClient
from .form_data import FormData
from .http_protocol import HttpMethod, HttpRequest, HttpResponse
from .request_builder import RequestBuilder
from .transport import Transport


def request(method: HttpMethod, url: str) -> RequestBuilder:
    return RequestBuilder(method, url)


def execute(req: HttpRequest, transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).execute(req)


def get(url: str, headers: Mapping[str, str] | None = None, transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).get(url, headers)


def head(url: str, headers: Mapping[str, str] | None = None, transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).head(url, headers)


def options(url: str, headers: Mapping[str, str] | None = None, transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).options(url, headers)


def delete(url: str, headers: Mapping[str, str] | None = None, transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).delete(url, headers)


def post(url: str, data: str | bytes = b"", headers: Mapping[str, str] | None = None,
         transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).post(url, data, headers)


def put(url: str, data: str | bytes = b"", headers: Mapping[str, str] | None = None,
        transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).put(url, data, headers)


def patch(url: str, data: str | bytes = b"", headers: Mapping[str, str] | None = None,
          transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).patch(url, data, headers)


def post_json(url: str, payload: Any, headers: Mapping[str, str] | None = None,
              transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).post_json(url, payload, headers)


def put_json(url: str, payload: Any, headers: Mapping[str, str] | None = None,
             transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).put_json(url, payload, headers)


def patch_json(url: str, payload: Any, headers: Mapping[str, str] | None = None,
               transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).patch_json(url, payload, headers)


def post_form(url: str, fields: Mapping[str, str], headers: Mapping[str, str] | None = None,
              transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).post_form(url, fields, headers)


def post_multipart(url: str, form_data: FormData, headers: Mapping[str, str] | None = None,
                   transport: Transport | None = None) -> HttpResponse:
    return HttpClient(transport).post_multipart(url, form_data, headers)


url_encode = url_encoding.encode
url_decode = url_encoding.decode
build_query_string = url_encoding.build_query_string
