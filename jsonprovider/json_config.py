from typing import Any
from typing import Dict
from typing import Mapping
from typing import Optional
from typing import Type
from typing import TypeVar

from pydantic import BaseModel
from pydantic import Field

from jsonprovider.properties import MarshallerProperties
from jsonprovider.properties import UnmarshallerProperties

C = TypeVar("C")


class JsonConfig(BaseModel):
    """
    Marshaller and unmarshaller properties for the JSON provider.

    Used both for the memoized process-wide defaults and for per-request
    overrides supplied through a context resolver. Setters return the
    config itself so calls can be chained:

        JsonConfig().set_formatted_output(True).set_include_root(False)
    """

    marshaller_properties: Dict[str, Any] = Field(default_factory=dict)
    unmarshaller_properties: Dict[str, Any] = Field(default_factory=dict)

    def set_marshaller_properties(
        self, properties: Mapping[str, Any]
    ) -> "JsonConfig":
        self.marshaller_properties = dict(properties)
        return self

    def set_unmarshaller_properties(
        self, properties: Mapping[str, Any]
    ) -> "JsonConfig":
        self.unmarshaller_properties = dict(properties)
        return self

    def marshaller_property(self, name: str, value: Any) -> "JsonConfig":
        self.marshaller_properties[name] = value
        return self

    def unmarshaller_property(self, name: str, value: Any) -> "JsonConfig":
        self.unmarshaller_properties[name] = value
        return self

    def shared_property(self, name: str, value: Any) -> "JsonConfig":
        """Set `name` on both sides."""
        self.marshaller_property(name, value)
        self.unmarshaller_property(name, value)
        return self

    # Convenience accessors for the options of the bundled engine

    def set_formatted_output(self, formatted: bool) -> "JsonConfig":
        return self.marshaller_property(
            MarshallerProperties.FORMATTED_OUTPUT, formatted
        )

    def is_formatted_output(self) -> bool:
        return bool(
            self.marshaller_properties.get(
                MarshallerProperties.FORMATTED_OUTPUT, False
            )
        )

    def set_include_root(self, include_root: bool) -> "JsonConfig":
        self.marshaller_property(
            MarshallerProperties.INCLUDE_ROOT, include_root
        )
        return self.unmarshaller_property(
            UnmarshallerProperties.INCLUDE_ROOT, include_root
        )

    def is_include_root(self) -> bool:
        return bool(
            self.marshaller_properties.get(
                MarshallerProperties.INCLUDE_ROOT, False
            )
        )

    def set_marshal_empty_collections(self, marshal: bool) -> "JsonConfig":
        return self.marshaller_property(
            MarshallerProperties.MARSHAL_EMPTY_COLLECTIONS, marshal
        )

    def is_marshal_empty_collections(self) -> bool:
        return bool(
            self.marshaller_properties.get(
                MarshallerProperties.MARSHAL_EMPTY_COLLECTIONS, True
            )
        )

    def set_encoding(self, encoding: str) -> "JsonConfig":
        self.marshaller_property(MarshallerProperties.ENCODING, encoding)
        return self.unmarshaller_property(
            UnmarshallerProperties.ENCODING, encoding
        )

    def set_strict(self, strict: bool) -> "JsonConfig":
        return self.unmarshaller_property(
            UnmarshallerProperties.STRICT, strict
        )

    def resolver(self) -> "JsonConfigResolver":
        """A context resolver that always supplies this config."""
        return JsonConfigResolver(self)


class JsonConfigResolver:
    def __init__(self, config: JsonConfig) -> None:
        self._config = config

    def get_context(self, kind: Type[C]) -> Optional[C]:
        if kind is JsonConfig:
            return self._config  # type: ignore[return-value]
        return None
