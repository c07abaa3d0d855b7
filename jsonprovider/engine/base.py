from typing import Any
from typing import Optional
from typing import Protocol

from jsonprovider.interfaces import Headers


class ConfigurationRejected(ValueError):
    """
    Raised by a marshaller/unmarshaller session when a property name or
    value is not acceptable.
    """

    def __init__(self, name: str, value: Any, reason: str) -> None:
        super().__init__(f"Property '{name}'={value!r} rejected: {reason}")
        self.name = name
        self.value = value
        self.reason = reason


class UnmarshalError(ValueError):
    """Raised when a request body cannot be converted into the target type."""


class UnsupportedMediaType(Exception):
    """Raised when a type/media type pair is not handled by the provider."""

    def __init__(self, tp: Any, media_type: str) -> None:
        name = getattr(tp, "__name__", repr(tp))
        super().__init__(f"{name} is not handled for '{media_type}'")
        self.type = tp
        self.media_type = media_type


class Marshaller(Protocol):
    """A single write session: converts one object into bytes."""

    def set_property(self, name: str, value: Any) -> None: ...
    def get_property(self, name: str) -> Any: ...
    def marshal(self, obj: Any, tp: Any) -> bytes: ...


class Unmarshaller(Protocol):
    """A single read session: converts one body into an object."""

    def set_property(self, name: str, value: Any) -> None: ...
    def get_property(self, name: str) -> Any: ...
    def unmarshal(self, data: bytes, tp: Any) -> Any: ...


class Engine(Protocol):
    """
    Engine protocol: creates sessions, runs the base pre-read/pre-write
    steps and answers the base eligibility questions.
    """

    def create_marshaller(self) -> Marshaller: ...
    def create_unmarshaller(self) -> Unmarshaller: ...

    def before_read(
        self,
        tp: Any,
        media_type: str,
        headers: Optional[Headers],
        unmarshaller: Unmarshaller,
    ) -> None: ...

    def before_write(
        self,
        obj: Any,
        tp: Any,
        media_type: str,
        headers: Optional[Headers],
        marshaller: Marshaller,
    ) -> None: ...

    def is_readable(self, tp: Any, media_type: str) -> bool: ...
    def is_writable(self, tp: Any, media_type: str) -> bool: ...
