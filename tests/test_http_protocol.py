import base64

import pytest

from fasthttppy.cookie import Cookie
from fasthttppy.http_protocol import (
    ContentType,
    HttpMethod,
    HttpRequest,
    HttpResponse,
    StatusCategory,
)


# --- Request ---

def test_request_defaults():
    request = HttpRequest(url="http://example.com")

    assert request.method == HttpMethod.GET
    assert request.timeout_ms == 30000
    assert request.body == b""
    assert len(request.headers) == 0
    assert request.cookies == ()


def test_request_is_immutable():
    request = HttpRequest(url="http://example.com")
    with pytest.raises(AttributeError):
        request.url = "http://other"


def test_with_header_returns_new_request():
    original = HttpRequest(url="http://example.com")
    updated = original.with_header("X-Trace", "1")

    assert updated.header("X-Trace") == "1"
    assert not original.has_header("X-Trace")


def test_request_headers_are_case_insensitive_last_write_wins():
    request = HttpRequest(headers={"Content-Type": "text/plain"}).with_header("content-type", "application/json")

    assert len(request.headers) == 1
    assert request.header("CONTENT-TYPE") == "application/json"


def test_request_copies_supplied_headers():
    headers = {"A": "1"}
    request = HttpRequest(headers=headers)
    headers["A"] = "2"

    assert request.header("A") == "1"


def test_string_body_is_utf8_encoded():
    assert HttpRequest(body="héllo").body == "héllo".encode("utf-8")
    assert HttpRequest().with_body("x").body == b"x"


def test_with_body_keeps_content_length_in_step():
    request = HttpRequest(HttpMethod.POST, headers={"Content-Length": "3"}, body=b"abc")

    assert request.with_body("abcdef").header("Content-Length") == "6"
    assert not request.with_body("").has_header("Content-Length")
    assert not HttpRequest().with_body("x").has_header("Content-Length")


def test_request_headers_are_read_only():
    request = HttpRequest().with_cookie("a", "1")

    with pytest.raises(TypeError):
        request.headers["Cookie"] = "b=2"
    assert request.header("cookie") == "a=1"
    assert request.with_header("X", "y").header("x") == "y"


def test_with_timeout():
    assert HttpRequest().with_timeout(500).timeout_ms == 500


def test_with_cookie_keeps_header_in_step():
    request = HttpRequest().with_cookie("a", "1").with_cookie(Cookie("b", "2", path="/"))

    assert [cookie.name for cookie in request.cookies] == ["a", "b"]
    assert request.header("Cookie") == "a=1; b=2"


def test_content_type_helpers():
    assert HttpRequest().with_json_content().header("Content-Type") == "application/json"
    assert HttpRequest().with_form_content().header("Content-Type") == "application/x-www-form-urlencoded"
    assert HttpRequest().with_content_type(ContentType.IMAGE_PNG).header("Content-Type") == "image/png"
    assert HttpRequest().with_content_type("text/csv").header("Content-Type") == "text/csv"


def test_unknown_content_type_maps_to_octet_stream():
    assert ContentType.from_value("application/unknown") is ContentType.APPLICATION_OCTET_STREAM
    assert ContentType.from_value("image/png") is ContentType.IMAGE_PNG


def test_content_type_lookup_by_value_is_strict():
    with pytest.raises(ValueError):
        ContentType("text/xml")


def test_auth_helpers():
    basic = HttpRequest().with_basic_auth("user", "pass")
    bearer = HttpRequest().with_bearer_token("tok")

    assert basic.header("Authorization") == "Basic " + base64.b64encode(b"user:pass").decode()
    assert bearer.header("Authorization") == "Bearer tok"


def test_describe_lists_request_state():
    text = HttpRequest(HttpMethod.PUT, "http://h/x", body=b"abc").with_cookie("s", "1").describe()

    assert "Method: PUT" in text
    assert "URL: http://h/x" in text
    assert "Body: 3 bytes" in text
    assert "Timeout: 30000 ms" in text
    assert "  s=1" in text


# --- Response ---

def test_response_header_keys_are_lowercased():
    response = HttpResponse(status_code=200)
    response.set_header("Content-Type", "text/plain")
    response.set_header("CONTENT-TYPE", "application/json")

    assert response.headers == {"content-type": "application/json"}
    assert response.header("Content-Type") == "application/json"
    assert response.has_header("content-TYPE")
    assert response.header("missing") == ""


def test_constructor_headers_are_lowercased():
    response = HttpResponse(headers={"X-Id": "1"})
    assert response.headers == {"x-id": "1"}


def test_constructor_set_cookie_header_appends_a_cookie():
    response = HttpResponse(status_code=200, headers={"Set-Cookie": "a=1; Path=/"})

    assert response.headers == {"set-cookie": "a=1; Path=/"}
    assert [cookie.name for cookie in response.cookies] == ["a"]
    assert response.get_cookie("a").path == "/"


def test_each_set_cookie_appends_a_cookie():
    response = HttpResponse(status_code=200)
    response.set_header("Set-Cookie", "a=1")
    response.set_header("set-cookie", "b=2; Path=/")

    assert [cookie.name for cookie in response.cookies] == ["a", "b"]
    assert response.header("set-cookie") == "b=2; Path=/"


def test_cookie_lookups():
    response = HttpResponse()
    response.set_headers([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2"), ("Set-Cookie", "a=3")])

    assert response.get_cookie("a").value == "1"
    assert [c.value for c in response.get_cookies_by_name("a")] == ["1", "3"]
    assert response.has_cookie("b")
    assert not response.has_cookie("c")
    assert response.get_cookie("c") is None


@pytest.mark.parametrize("status, category", [
    (100, "Informational"),
    (101, "Informational"),
    (200, "Success"),
    (299, "Success"),
    (301, "Redirect"),
    (404, "Client Error"),
    (500, "Server Error"),
    (599, "Server Error"),
    (0, "Unknown"),
    (99, "Unknown"),
    (600, "Unknown"),
    (999, "Unknown"),
])
def test_status_category(status, category):
    assert HttpResponse(status_code=status).status_category == category


def test_status_predicates():
    response = HttpResponse(status_code=302)

    assert response.is_redirect()
    assert not response.is_success()
    assert not response.is_client_error()
    assert response.status_category is StatusCategory.REDIRECT


def test_content_length_prefers_header():
    response = HttpResponse(body=b"abc", headers={"Content-Length": "10"})
    assert response.content_length == 10


@pytest.mark.parametrize("header", ["", "abc", "-1", "1.5"])
def test_content_length_falls_back_to_body_length(header):
    response = HttpResponse(body=b"abcd")
    if header:
        response.set_header("Content-Length", header)
    assert response.content_length == 4


@pytest.mark.parametrize("content_type, is_json, is_xml, is_html", [
    ("application/json", True, False, False),
    ("application/json; charset=utf-8", True, False, False),
    ("application/json-patch+json", True, False, False),
    ("text/xml", False, True, False),
    ("application/xml", False, True, False),
    ("text/html; charset=UTF-8", False, False, True),
    ("Application/JSON", False, False, False),
    ("", False, False, False),
])
def test_media_type_checks_are_substring_matches(content_type, is_json, is_xml, is_html):
    response = HttpResponse(headers={"Content-Type": content_type})

    assert response.is_json() is is_json
    assert response.is_xml() is is_xml
    assert response.is_html() is is_html


def test_text_and_json():
    response = HttpResponse(body='{"name": "é"}'.encode("utf-8"), headers={"Content-Type": "application/json"})

    assert response.text == '{"name": "é"}'
    assert response.json() == {"name": "é"}


def test_text_honours_charset():
    response = HttpResponse(body="é".encode("latin-1"), headers={"Content-Type": "text/plain; charset=latin-1"})
    assert response.text == "é"


def test_content_encoding():
    assert HttpResponse(headers={"Content-Encoding": "gzip"}).content_encoding == "gzip"


def test_summary():
    response = HttpResponse(status_code=200, status_message="OK", body=b"hi",
                            headers={"Content-Type": "text/plain"})
    assert response.summary() == "HTTP 200 OK\nContent-Type: text/plain\nContent-Length: 2\n"
