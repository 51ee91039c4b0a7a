"""
Data types shared by the signer, codec, dispatcher and client.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Union

from aanbieders.errors import ConfigError

DEFAULT_HOST = "https://api.econtract.be"

Scalar = Union[str, int, float, bool]
ParamValue = Union[Scalar, Sequence[Scalar], Mapping[str, Scalar], None]
ParameterSet = Mapping[str, ParamValue]

# Keys the signer always writes; caller values under them are discarded
RESERVED_KEYS = ("key", "time", "nonce", "ip", "apikey", "abcid")


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"


class OutputMode(str, Enum):
    """
    How the dispatcher hands a response body back to the caller.

    RAW returns the body untouched. OBJECT and ARRAY both parse the body as
    JSON and differ only in representation: an attribute tree of
    SimpleNamespace objects vs. a tree of plain dicts.
    """

    RAW = "json"
    OBJECT = "object"
    ARRAY = "array"

    @property
    def parsed(self) -> bool:
        return self is not OutputMode.RAW

    @classmethod
    def parse(cls, value: Any) -> "OutputMode":
        """
        Coerce an enum member or its string value to an OutputMode.

        Raises:
            ConfigError: If value is not a recognized mode
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized == "raw":
                return cls.RAW
            for mode in cls:
                if mode.value == normalized:
                    return mode
        raise ConfigError(f"Invalid output mode: {value!r}")


@dataclass(frozen=True)
class ClientCredentials:
    """API key pair. The key is public; the secret never leaves the process."""

    key: str
    secret: str

    def __post_init__(self):
        if not self.key or not isinstance(self.key, str):
            raise ConfigError("Invalid key")
        if not self.secret or not isinstance(self.secret, str):
            raise ConfigError("Invalid secret")

    def __repr__(self) -> str:
        return f"ClientCredentials(key={self.key!r}, secret='***')"


@dataclass(frozen=True)
class ClientConfig:
    credentials: ClientCredentials
    base_host: str = DEFAULT_HOST
    output_mode: OutputMode = OutputMode.RAW
    timeout: float = 10

    def __post_init__(self):
        if not self.base_host:
            raise ConfigError("Invalid host")
        object.__setattr__(self, "base_host", self.base_host.rstrip("/"))
        object.__setattr__(self, "output_mode", OutputMode.parse(self.output_mode))


@dataclass(frozen=True)
class SignedRequest:
    """Fully prepared request. Single use: nonce and time are baked in."""

    url: str
    method: HttpMethod
    encoded_body: Optional[str] = None
    query_string: Optional[str] = None

    @property
    def full_url(self) -> str:
        if self.query_string:
            return f"{self.url}?{self.query_string}"
        return self.url


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
