from .config import ProviderConfig
from .eligibility import is_excluded
from .engine.base import ConfigurationRejected
from .engine.base import UnmarshalError
from .engine.base import UnsupportedMediaType
from .engine.json_engine import JSONEngine
from .interfaces import Configuration
from .interfaces import ContextResolver
from .interfaces import Providers
from .json_config import JsonConfig
from .properties import MarshallerProperties
from .properties import UnmarshallerProperties
from .provider import ConfigurableJSONProvider
from .providers import ProviderRegistry

__all__ = [
    "ConfigurableJSONProvider",
    "ProviderConfig",
    "JsonConfig",
    "ProviderRegistry",
    "JSONEngine",
    "MarshallerProperties",
    "UnmarshallerProperties",
    "Configuration",
    "ContextResolver",
    "Providers",
    "ConfigurationRejected",
    "UnmarshalError",
    "UnsupportedMediaType",
    "is_excluded",
]
