from fasthttppy.cookie import Cookie, cookie_header


def test_parse_full_set_cookie():
    cookie = Cookie.parse("sid=abc123; Domain=example.com; Path=/; Secure; HttpOnly")

    assert cookie.name == "sid"
    assert cookie.value == "abc123"
    assert cookie.domain == "example.com"
    assert cookie.path == "/"
    assert cookie.secure is True
    assert cookie.http_only is True
    assert cookie.same_site == ""


def test_parse_trims_name_and_value():
    cookie = Cookie.parse("  token =  xyz  ;SameSite=Strict")

    assert cookie.name == "token"
    assert cookie.value == "xyz"
    assert cookie.same_site == "Strict"


def test_parse_keeps_equals_in_value():
    assert Cookie.parse("data=a=b=c").value == "a=b=c"


def test_attribute_names_are_case_sensitive():
    cookie = Cookie.parse("a=1; domain=example.com; secure; HTTPONLY")

    assert cookie.domain == ""
    assert cookie.secure is False
    assert cookie.http_only is False


def test_unknown_attributes_are_ignored():
    cookie = Cookie.parse("a=1; Expires=Wed, 21 Oct 2015 07:28:00 GMT; Max-Age=60; Path=/app")

    assert cookie.name == "a"
    assert cookie.path == "/app"


def test_first_segment_without_equals_leaves_name_empty():
    cookie = Cookie.parse("garbage; Secure")

    assert cookie.name == ""
    assert cookie.value == ""
    assert cookie.secure is True


def test_to_string_uses_fixed_attribute_order():
    cookie = Cookie(
        name="sid", value="1", domain="d.com", path="/",
        secure=True, http_only=True, same_site="Lax",
    )
    assert cookie.to_string() == "sid=1; Domain=d.com; Path=/; Secure; HttpOnly; SameSite=Lax"
    assert str(cookie) == cookie.to_string()


def test_to_string_skips_unset_attributes():
    assert Cookie("a", "b").to_string() == "a=b"
    assert Cookie("a", "b", http_only=True).to_string() == "a=b; HttpOnly"


def test_round_trip_normalizes_attribute_order():
    cookie = Cookie.parse("id=7; HttpOnly; SameSite=None; Secure; Path=/x; Domain=h")
    assert cookie.to_string() == "id=7; Domain=h; Path=/x; Secure; HttpOnly; SameSite=None"
    assert Cookie.parse(cookie.to_string()) == cookie


def test_cookie_header_joins_pairs_in_order():
    cookies = [Cookie("b", "2"), Cookie("a", "1", path="/")]
    assert cookie_header(cookies) == "b=2; a=1"
