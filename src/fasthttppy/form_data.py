import time

BOUNDARY_PREFIX = "----FastHTTPBoundary"


def monotonic_boundary() -> str:
    # Unique within one process only; not unpredictable.
    return BOUNDARY_PREFIX + str(time.monotonic_ns())


class FormData:
    """
    Fields for a ``multipart/form-data`` body.

    Parts are emitted in sorted field-name order.

    The boundary is fixed when the instance is created. Callers that need
    unpredictable or globally unique boundaries should pass their own.
    """

    def __init__(self, boundary: str | None = None):
        self._fields: dict[str, str] = {}
        self._boundary: str = boundary if boundary is not None else monotonic_boundary()

    def add_field(self, name: str, value: str) -> "FormData":
        self._fields[name] = value
        return self

    @property
    def fields(self) -> dict[str, str]:
        return dict(self._fields)

    @property
    def boundary(self) -> str:
        return self._boundary

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self._boundary}"

    def encode(self) -> bytes:
        parts = []
        for name, value in sorted(self._fields.items()):
            parts.append(f"--{self._boundary}\r\n")
            parts.append(f'Content-Disposition: form-data; name="{name}"\r\n\r\n')
            parts.append(f"{value}\r\n")
        parts.append(f"--{self._boundary}--\r\n")
        return "".join(parts).encode("utf-8")

    def __len__(self) -> int:
        return len(self._fields)
