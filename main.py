import contextvars
import logging
from typing import Any
from typing import Dict
from typing import List
from typing import Optional
from typing import Type

import uvicorn
from fastapi import Depends
from fastapi import FastAPI
from fastapi import HTTPException
from fastapi import Request
from fastapi import Response
from pydantic import BaseModel
from pydantic import Field

from jsonprovider.config import APPLICATION_JSON
from jsonprovider.config import ProviderConfig
from jsonprovider.fastapi_utils import install_exception_handlers
from jsonprovider.fastapi_utils import json_body
from jsonprovider.fastapi_utils import lifespan_manager
from jsonprovider.fastapi_utils import provider_response
from jsonprovider.json_config import JsonConfig
from jsonprovider.properties import MarshallerProperties
from jsonprovider.provider import ConfigurableJSONProvider
from jsonprovider.providers import ProviderRegistry

# Configure logging level for everything outside the provider
logging.basicConfig(level=logging.INFO)

# ─────────────────────────────────────────────────────────────────────────────
# 0. Payload models
# ─────────────────────────────────────────────────────────────────────────────


class Item(BaseModel):
    name: str
    price: float
    tags: List[str] = Field(default_factory=list)
    description: Optional[str] = None


class ItemList(BaseModel):
    items: List[Item]


# ─────────────────────────────────────────────────────────────────────────────
# 1. Provider wiring
# ─────────────────────────────────────────────────────────────────────────────

cfg = ProviderConfig(
    properties={
        MarshallerProperties.EXCLUDE_NONE: True,
        MarshallerProperties.COMPACT: True,
    },
    json_logging=False,
    log_level="INFO",
)

# ?pretty=true switches formatted output on for the current request only
_pretty: contextvars.ContextVar[bool] = contextvars.ContextVar(
    "pretty", default=False
)


class PrettyPrintResolver:
    def get_context(self, kind: Type[Any]) -> Optional[JsonConfig]:
        if kind is not JsonConfig or not _pretty.get():
            return None
        return JsonConfig().set_formatted_output(True)


providers = ProviderRegistry()
providers.register_context_resolver(
    JsonConfig, APPLICATION_JSON, PrettyPrintResolver()
)
provider = ConfigurableJSONProvider(providers, cfg)

# ─────────────────────────────────────────────────────────────────────────────
# 2. FastAPI app
# ─────────────────────────────────────────────────────────────────────────────

app: FastAPI = FastAPI(lifespan=lifespan_manager(provider, cfg))
install_exception_handlers(app)

_items: Dict[str, Item] = {}


@app.middleware("http")
async def pretty_print(request: Request, call_next: Any) -> Response:
    token = _pretty.set(request.query_params.get("pretty") == "true")
    try:
        return await call_next(request)
    finally:
        _pretty.reset(token)


@app.post("/items/", status_code=201)
async def create_item(
    item: Item = Depends(json_body(provider, Item)),
) -> Response:
    _items[item.name] = item
    return provider_response(provider, item, status_code=201)


@app.get("/items/")
async def list_items() -> Response:
    return provider_response(provider, ItemList(items=list(_items.values())))


@app.get("/items/{name}")
async def get_item(name: str) -> Response:
    item = _items.get(name)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return provider_response(provider, item)


@app.get("/items/{name}/price")
async def get_price(name: str) -> Response:
    item = _items.get(name)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    # float payloads are declined by the provider and rendered as bare JSON
    return provider_response(provider, item.price)


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
