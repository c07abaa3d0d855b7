from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import pytest
from pydantic import BaseModel

from jsonprovider.config import ProviderConfig
from jsonprovider.engine.json_engine import JSONEngine
from jsonprovider.json_config import JsonConfig
from jsonprovider.provider import ConfigurableJSONProvider
from jsonprovider.providers import ProviderRegistry


class Item(BaseModel):
    name: str
    price: float
    tags: List[str] = []
    description: Optional[str] = None


class CountingConfig:
    """Configuration source that records every lookup."""

    def __init__(self, properties: Dict[str, Any]) -> None:
        self.properties = properties
        self.calls: List[str] = []

    def get_property(self, name: str) -> Any:
        self.calls.append(name)
        return self.properties.get(name)


class RecordingSession:
    def __init__(self) -> None:
        self.props: Dict[str, Any] = {}

    def set_property(self, name: str, value: Any) -> None:
        self.props[name] = value

    def get_property(self, name: str) -> Any:
        return self.props.get(name)


class RecordingEngine:
    """Engine double that records hook calls and eligibility queries."""

    def __init__(self, readable: bool = True, writable: bool = True) -> None:
        self.readable = readable
        self.writable = writable
        self.calls: List[str] = []

    def create_marshaller(self) -> RecordingSession:
        return RecordingSession()

    def create_unmarshaller(self) -> RecordingSession:
        return RecordingSession()

    def before_read(self, tp, media_type, headers, unmarshaller) -> None:
        self.calls.append("before_read")
        unmarshaller.set_property("base", "read")

    def before_write(self, obj, tp, media_type, headers, marshaller) -> None:
        self.calls.append("before_write")
        marshaller.set_property("base", "write")

    def is_readable(self, tp, media_type) -> bool:
        self.calls.append("is_readable")
        return self.readable

    def is_writable(self, tp, media_type) -> bool:
        self.calls.append("is_writable")
        return self.writable


@pytest.fixture
def registry():
    return ProviderRegistry()


@pytest.fixture
def config():
    return ProviderConfig()


@pytest.fixture
def engine():
    return JSONEngine()


@pytest.fixture
def provider(registry, config, engine):
    return ConfigurableJSONProvider(registry, config, engine)


@pytest.fixture
def make_provider(registry):
    """Build a provider over a plain property dict and optional override."""

    def _make(
        properties=None,
        override: Optional[JsonConfig] = None,
        engine=None,
        **kwargs,
    ):
        if override is not None:
            registry.register_context_resolver(
                JsonConfig, "application/json", override.resolver()
            )
        cfg = CountingConfig(properties or {})
        return ConfigurableJSONProvider(registry, cfg, engine, **kwargs)

    return _make


@pytest.fixture
def make_item():
    def _make(name="widget", price=9.5, **kwargs):
        return Item(name=name, price=price, **kwargs)

    return _make


@pytest.fixture
def recording_engine():
    return RecordingEngine()


@pytest.fixture
def item_type():
    return Item


# FastAPI app fixture for the integration tests
@pytest.fixture
def fastapi_app(registry):
    from fastapi import Depends
    from fastapi import FastAPI

    from jsonprovider.fastapi_utils import install_exception_handlers
    from jsonprovider.fastapi_utils import json_body
    from jsonprovider.fastapi_utils import lifespan_manager
    from jsonprovider.fastapi_utils import provider_response
    from jsonprovider.properties import MarshallerProperties

    cfg = ProviderConfig(
        properties={
            MarshallerProperties.COMPACT: True,
            MarshallerProperties.EXCLUDE_NONE: True,
        }
    )
    provider = ConfigurableJSONProvider(registry, cfg)
    app = FastAPI(lifespan=lifespan_manager(provider, cfg))
    install_exception_handlers(app)
    items: Dict[str, Item] = {}

    @app.post("/items/")
    async def create_item(item: Item = Depends(json_body(provider, Item))):
        items[item.name] = item
        return provider_response(provider, item, status_code=201)

    @app.get("/items/{name}")
    async def get_item(name: str):
        return provider_response(provider, items[name])

    @app.get("/items/{name}/price")
    async def get_price(name: str):
        return provider_response(provider, items[name].price)

    @app.post("/words/")
    async def create_word(word: str = Depends(json_body(provider, str))):
        return provider_response(provider, word)

    return app
