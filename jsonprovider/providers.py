from typing import Any
from typing import Dict
from typing import Optional
from typing import Tuple
from typing import Type

from jsonprovider.interfaces import C
from jsonprovider.interfaces import ContextResolver
from jsonprovider.log_config import logger


def _media_key(media_type: str) -> str:
    # strip any charset params etc.
    return media_type.split(";", 1)[0].strip().lower()


class ProviderRegistry:
    """
    A registry of context resolvers, keyed by context kind and media type.
    Lookups fall back from the exact media type to `type/*`, then `*/*`.
    """

    def __init__(self) -> None:
        self._map: Dict[Tuple[Any, str], ContextResolver[Any]] = {}

    def supported_types(self, kind: Type[Any]) -> list[str]:
        return [mt for k, mt in self._map if k is kind]

    def is_registered(self, kind: Type[Any], media_type: str) -> bool:
        return (kind, _media_key(media_type)) in self._map

    def register_context_resolver(
        self,
        kind: Type[C],
        media_type: str,
        resolver: ContextResolver[C],
    ) -> None:
        self._map[(kind, _media_key(media_type))] = resolver
        logger.info(
            "Context resolver registered for %s @ '%s'",
            getattr(kind, "__name__", repr(kind)),
            media_type,
        )

    def unregister(self, kind: Type[Any], media_type: str) -> None:
        self._map.pop((kind, _media_key(media_type)), None)

    def get_context_resolver(
        self, kind: Type[C], media_type: str
    ) -> Optional[ContextResolver[C]]:
        key = _media_key(media_type)
        main = key.split("/", 1)[0]
        for candidate in (key, f"{main}/*", "*/*"):
            resolver = self._map.get((kind, candidate))
            if resolver is not None:
                return resolver
        return None
