import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, PositiveInt

from .http_protocol import DEFAULT_TIMEOUT_MS

DEFAULT_USER_AGENT = "FastHTTP/1.0"

_ENV_TIMEOUT = "FASTHTTPPY_TIMEOUT_MS"
_ENV_USER_AGENT = "FASTHTTPPY_USER_AGENT"
_ENV_VERIFY_TLS = "FASTHTTPPY_VERIFY_TLS"


class ClientConfig(BaseModel):
    default_timeout_ms: PositiveInt = DEFAULT_TIMEOUT_MS
    default_headers: dict[str, str] = Field(default_factory=dict)
    user_agent: str = DEFAULT_USER_AGENT
    verify_tls: bool = True

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientConfig":
        """Builds a config from FASTHTTPPY_* variables, falling back to defaults."""
        environ = os.environ if environ is None else environ
        values = {}
        if _ENV_TIMEOUT in environ:
            values["default_timeout_ms"] = environ[_ENV_TIMEOUT]
        if _ENV_USER_AGENT in environ:
            values["user_agent"] = environ[_ENV_USER_AGENT]
        if _ENV_VERIFY_TLS in environ:
            values["verify_tls"] = environ[_ENV_VERIFY_TLS]
        return cls.model_validate(values)
