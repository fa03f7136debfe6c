from collections.abc import Mapping

_UNRESERVED = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    b"abcdefghijklmnopqrstuvwxyz"
    b"0123456789-_.~"
)
_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")
_PERCENT = ord("%")
_PLUS = ord("+")
_SPACE = ord(" ")


def _as_bytes(value: str | bytes) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def encode(value: str | bytes) -> str:
    """Percent-encodes every byte outside ``[A-Za-z0-9-_.~]`` as ``%XX``."""
    out = []
    for byte in _as_bytes(value):
        if byte in _UNRESERVED:
            out.append(chr(byte))
        else:
            out.append(f"%{byte:02X}")
    return "".join(out)


def decode_bytes(value: str | bytes) -> bytes:
    """
    Reverses ``encode`` at the byte level.

    Decoding is lenient: a ``%`` without two hex digits after it is copied
    through as-is, and ``+`` always becomes a space.
    """
    data = _as_bytes(value)
    decoded = bytearray()
    i = 0
    length = len(data)

    while i < length:
        byte = data[i]
        if byte == _PERCENT:
            if i + 2 < length and data[i + 1] in _HEX_DIGITS and data[i + 2] in _HEX_DIGITS:
                decoded.append(int(data[i + 1:i + 3], 16))
                i += 3
                continue
            decoded.append(byte)
        elif byte == _PLUS:
            decoded.append(_SPACE)
        else:
            decoded.append(byte)
        i += 1

    return bytes(decoded)


def decode(value: str | bytes) -> str:
    # Escapes may produce bytes that are not valid UTF-8; decoding never fails.
    return decode_bytes(value).decode("utf-8", errors="replace")


def build_query_string(params: Mapping[str, str]) -> str:
    return "&".join(
        f"{encode(key)}={encode(value)}" for key, value in sorted(params.items())
    )
