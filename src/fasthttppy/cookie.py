from dataclasses import dataclass

_WHITESPACE = " \t\r\n"


@dataclass
class Cookie:
    name: str = ""
    value: str = ""
    domain: str = ""
    path: str = ""
    secure: bool = False
    http_only: bool = False
    same_site: str = ""

    @classmethod
    def parse(cls, set_cookie_value: str) -> "Cookie":
        """
        Parses a ``Set-Cookie`` header value.

        Attribute names are matched case-sensitively; anything that is not
        Domain, Path, SameSite, Secure or HttpOnly is ignored.
        """
        cookie = cls()
        first, *attributes = set_cookie_value.split(";")

        name, equals, value = first.partition("=")
        if equals:
            cookie.name = name.strip(_WHITESPACE)
            cookie.value = value.strip(_WHITESPACE)

        for item in attributes:
            item = item.strip(_WHITESPACE)
            if item.startswith("Domain="):
                cookie.domain = item[len("Domain="):]
            elif item.startswith("Path="):
                cookie.path = item[len("Path="):]
            elif item == "Secure":
                cookie.secure = True
            elif item == "HttpOnly":
                cookie.http_only = True
            elif item.startswith("SameSite="):
                cookie.same_site = item[len("SameSite="):]

        return cookie

    @property
    def pair(self) -> str:
        return f"{self.name}={self.value}"

    def to_string(self) -> str:
        parts = [self.pair]
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.path:
            parts.append(f"Path={self.path}")
        if self.secure:
            parts.append("Secure")
        if self.http_only:
            parts.append("HttpOnly")
        if self.same_site:
            parts.append(f"SameSite={self.same_site}")
        return "; ".join(parts)

    def __str__(self) -> str:
        return self.to_string()


def cookie_header(cookies) -> str:
    """Joins cookies into a request ``Cookie`` header value, in order."""
    return "; ".join(cookie.pair for cookie in cookies)
