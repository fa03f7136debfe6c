from dataclasses import dataclass

from .errors import InvalidPortError

HTTP_PORT = 80
HTTPS_PORT = 443


@dataclass(frozen=True)
class URL:
    scheme: str = ""
    host: str = ""
    port: int = HTTP_PORT
    path: str = "/"
    query: str = ""
    fragment: str = ""

    @property
    def is_secure(self) -> bool:
        return self.scheme == "https"

    @property
    def request_target(self) -> str:
        """The path and query as they appear on an HTTP/1.1 request line."""
        if self.query:
            return f"{self.path}?{self.query}"
        return self.path

    def __str__(self) -> str:
        url = f"{self.scheme}://{self.host}" if self.scheme else self.host
        default_port = HTTPS_PORT if self.is_secure else HTTP_PORT
        if self.port != default_port:
            url += f":{self.port}"
        url += self.request_target
        if self.fragment:
            url += f"#{self.fragment}"
        return url


def parse_url(url: str) -> URL:
    """
    Splits a URL into scheme, host, port, path, query and fragment.

    The split is best-effort: host characters are not validated and IPv6
    literals are not recognised. The only failure is a port that is not a
    number.
    """
    scheme = ""
    port = HTTP_PORT
    rest = url

    scheme_end = rest.find("://")
    if scheme_end != -1:
        scheme = rest[:scheme_end]
        rest = rest[scheme_end + 3:]
        if scheme == "https":
            port = HTTPS_PORT

    path_start = rest.find("/")
    authority = rest if path_start == -1 else rest[:path_start]

    host, colon, port_text = authority.partition(":")
    if colon:
        port = _parse_port(port_text, url)

    path, query, fragment = "/", "", ""
    if path_start != -1:
        rest = rest[path_start:]
        query_pos = rest.find("?")
        fragment_pos = rest.find("#")

        if query_pos != -1:
            path = rest[:query_pos]
            if fragment_pos != -1 and fragment_pos > query_pos:
                query = rest[query_pos + 1:fragment_pos]
                fragment = rest[fragment_pos + 1:]
            else:
                query = rest[query_pos + 1:]
        elif fragment_pos != -1:
            path = rest[:fragment_pos]
            fragment = rest[fragment_pos + 1:]
        else:
            path = rest

    return URL(scheme=scheme, host=host, port=port, path=path, query=query, fragment=fragment)


def _parse_port(port_text: str, url: str) -> int:
    if not port_text.isascii() or not port_text.isdigit():
        raise InvalidPortError(f"Invalid port '{port_text}' in URL '{url}'")
    return int(port_text)
