from typing import Any
from typing import Dict
from typing import Generic
from typing import Mapping
from typing import Optional
from typing import Protocol
from typing import Type
from typing import TypeVar
from typing import runtime_checkable

# Type variable for the kind of context a resolver supplies
C = TypeVar("C")

PropertyMap = Dict[str, Any]
Headers = Mapping[str, str]


@runtime_checkable
class Configuration(Protocol):
    """Process-wide configuration source."""

    def get_property(self, name: str) -> Any: ...


class ContextResolver(Protocol, Generic[C]):
    """Supplies a context object of kind C, or None."""

    def get_context(self, kind: Type[C]) -> Optional[C]: ...


class Providers(Protocol):
    """Looks up context resolvers by context kind and media type."""

    def get_context_resolver(
        self, kind: Type[C], media_type: str
    ) -> Optional[ContextResolver[C]]: ...
