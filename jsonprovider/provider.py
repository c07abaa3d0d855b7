import threading
from types import MappingProxyType
from typing import AbstractSet
from typing import Any
from typing import Mapping
from typing import Optional
from typing import Tuple

from jsonprovider.config import APPLICATION_JSON
from jsonprovider.eligibility import is_excluded
from jsonprovider.engine.base import Engine
from jsonprovider.engine.base import Marshaller
from jsonprovider.engine.base import Unmarshaller
from jsonprovider.engine.base import UnsupportedMediaType
from jsonprovider.engine.json_engine import JSONEngine
from jsonprovider.interfaces import Configuration
from jsonprovider.interfaces import Headers
from jsonprovider.interfaces import PropertyMap
from jsonprovider.interfaces import Providers
from jsonprovider.json_config import JsonConfig
from jsonprovider.log_config import logger
from jsonprovider.properties import MARSHALLER_PROPERTY_NAMES
from jsonprovider.properties import UNMARSHALLER_PROPERTY_NAMES

# (marshaller defaults, unmarshaller defaults)
_Defaults = Tuple[Mapping[str, Any], Mapping[str, Any]]


class ConfigurableJSONProvider:
    """
    JSON provider whose marshaller/unmarshaller options come from two
    places, merged per operation:

      1) process-wide defaults: the recognized option names looked up in
         `config`, computed once per provider instance
      2) an optional `JsonConfig` supplied by a context resolver registered
         in `providers` for application/json; its entries win

    Scalar payload types are declined so other handlers can take them.
    The provider is shared across request threads.
    """

    def __init__(
        self,
        providers: Providers,
        config: Configuration,
        engine: Optional[Engine] = None,
        marshaller_property_names: AbstractSet[str] = (
            MARSHALLER_PROPERTY_NAMES
        ),
        unmarshaller_property_names: AbstractSet[str] = (
            UNMARSHALLER_PROPERTY_NAMES
        ),
    ) -> None:
        self._providers = providers
        self._config = config
        self._engine: Engine = engine or JSONEngine()
        self._marshaller_names = frozenset(marshaller_property_names)
        self._unmarshaller_names = frozenset(unmarshaller_property_names)
        self._defaults: Optional[_Defaults] = None
        self._defaults_lock = threading.Lock()

    @property
    def engine(self) -> Engine:
        return self._engine

    # defaults

    def marshaller_defaults(self) -> Mapping[str, Any]:
        return self._global_defaults()[0]

    def unmarshaller_defaults(self) -> Mapping[str, Any]:
        return self._global_defaults()[1]

    def global_config(self) -> JsonConfig:
        """The memoized defaults as a (fresh) JsonConfig."""
        marshaller, unmarshaller = self._global_defaults()
        return JsonConfig(
            marshaller_properties=dict(marshaller),
            unmarshaller_properties=dict(unmarshaller),
        )

    def _global_defaults(self) -> _Defaults:
        defaults = self._defaults
        if defaults is not None:
            return defaults
        with self._defaults_lock:
            # another thread may have finished while we waited
            if self._defaults is None:
                marshaller = self._config_properties(self._marshaller_names)
                unmarshaller = self._config_properties(
                    self._unmarshaller_names
                )
                self._defaults = (
                    MappingProxyType(marshaller),
                    MappingProxyType(unmarshaller),
                )
                logger.debug(
                    "Computed defaults: %d marshaller, %d unmarshaller props",
                    len(marshaller),
                    len(unmarshaller),
                )
            return self._defaults

    def _config_properties(self, names: AbstractSet[str]) -> PropertyMap:
        properties: PropertyMap = {}
        for name in names:
            value = self._config.get_property(name)
            if value is not None:
                properties[name] = value
        return properties

    # per-operation resolution

    def resolve(self, for_write: bool) -> PropertyMap:
        """
        Effective properties for one write (`for_write=True`) or read.
        Always a new dict; the cached defaults are never touched.
        """
        marshaller, unmarshaller = self._global_defaults()
        properties = dict(marshaller if for_write else unmarshaller)

        resolver = self._providers.get_context_resolver(
            JsonConfig, APPLICATION_JSON
        )
        if resolver is not None:
            json_config = resolver.get_context(JsonConfig)
            if json_config is not None:
                override = (
                    json_config.marshaller_properties
                    if for_write
                    else json_config.unmarshaller_properties
                )
                properties.update(override)
                logger.debug(
                    "Applied %d contextual %s props",
                    len(override),
                    "marshaller" if for_write else "unmarshaller",
                )
        return properties

    # hooks

    def before_read(
        self,
        tp: Any,
        media_type: str,
        headers: Optional[Headers],
        unmarshaller: Unmarshaller,
    ) -> None:
        self._engine.before_read(tp, media_type, headers, unmarshaller)
        for name, value in self.resolve(False).items():
            unmarshaller.set_property(name, value)

    def before_write(
        self,
        obj: Any,
        tp: Any,
        media_type: str,
        headers: Optional[Headers],
        marshaller: Marshaller,
    ) -> None:
        self._engine.before_write(obj, tp, media_type, headers, marshaller)
        for name, value in self.resolve(True).items():
            marshaller.set_property(name, value)

    def is_readable(self, tp: Any, media_type: str) -> bool:
        return not is_excluded(tp) and self._engine.is_readable(tp, media_type)

    def is_writable(self, tp: Any, media_type: str) -> bool:
        return not is_excluded(tp) and self._engine.is_writable(tp, media_type)

    # read/write

    def read_from(
        self,
        tp: Any,
        media_type: str,
        headers: Optional[Headers],
        body: bytes,
    ) -> Any:
        if not self.is_readable(tp, media_type):
            raise UnsupportedMediaType(tp, media_type)
        unmarshaller = self._engine.create_unmarshaller()
        self.before_read(tp, media_type, headers, unmarshaller)
        return unmarshaller.unmarshal(body, tp)

    def write_to(
        self,
        obj: Any,
        tp: Any,
        media_type: str,
        headers: Optional[Headers] = None,
    ) -> bytes:
        if not self.is_writable(tp, media_type):
            raise UnsupportedMediaType(tp, media_type)
        marshaller = self._engine.create_marshaller()
        self.before_write(obj, tp, media_type, headers, marshaller)
        return marshaller.marshal(obj, tp)

