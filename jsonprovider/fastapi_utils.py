from contextlib import asynccontextmanager
from typing import Any
from typing import AsyncContextManager
from typing import AsyncGenerator
from typing import Awaitable
from typing import Callable
from typing import Optional

from fastapi import FastAPI
from fastapi import Request
from fastapi import Response
from fastapi.responses import JSONResponse

from jsonprovider.config import APPLICATION_JSON
from jsonprovider.config import ProviderConfig
from jsonprovider.eligibility import is_excluded
from jsonprovider.engine.base import ConfigurationRejected
from jsonprovider.engine.base import UnmarshalError
from jsonprovider.engine.base import UnsupportedMediaType
from jsonprovider.log_config import configure_logging
from jsonprovider.log_config import logger
from jsonprovider.log_config import stop_listener
from jsonprovider.provider import ConfigurableJSONProvider


def json_body(
    provider: ConfigurableJSONProvider, tp: Any
) -> Callable[[Request], Awaitable[Any]]:
    """
    Returns a FastAPI dependency that reads the request body as `tp`
    through the provider.
    """

    async def _read(request: Request) -> Any:
        media_type = request.headers.get("content-type", APPLICATION_JSON)
        body = await request.body()
        return provider.read_from(tp, media_type, request.headers, body)

    return _read


def provider_response(
    provider: ConfigurableJSONProvider,
    obj: Any,
    tp: Optional[Any] = None,
    status_code: int = 200,
    media_type: str = APPLICATION_JSON,
) -> Response:
    """
    Render `obj` through the provider. Scalar payloads are declined by the
    provider and rendered as bare JSON values by Starlette instead.
    """
    tp = tp if tp is not None else type(obj)
    if is_excluded(tp):
        return JSONResponse(content=obj, status_code=status_code)
    content = provider.write_to(obj, tp, media_type)
    return Response(
        content=content, status_code=status_code, media_type=media_type
    )


async def _unmarshal_error(request: Request, exc: Exception) -> Response:
    logger.warning("Unreadable body on %s: %s", request.url.path, exc)
    return JSONResponse({"detail": str(exc)}, status_code=400)


async def _unsupported(request: Request, exc: Exception) -> Response:
    logger.warning("Unsupported payload on %s: %s", request.url.path, exc)
    return JSONResponse({"detail": str(exc)}, status_code=415)


async def _rejected(request: Request, exc: Exception) -> Response:
    logger.error("Provider misconfigured on %s: %s", request.url.path, exc)
    return JSONResponse({"detail": "Internal Server Error"}, status_code=500)


def install_exception_handlers(app: FastAPI) -> None:
    """Map provider failures onto HTTP responses."""
    app.add_exception_handler(UnmarshalError, _unmarshal_error)
    app.add_exception_handler(UnsupportedMediaType, _unsupported)
    app.add_exception_handler(ConfigurationRejected, _rejected)


def lifespan_manager(
    provider: ConfigurableJSONProvider,
    config: ProviderConfig,
) -> Callable[[FastAPI], AsyncContextManager[None]]:
    """
    Returns a FastAPI lifespan function that:
      1) Applies the logging format and level from `config`
      2) Computes the provider defaults once, before the first request
      3) On shutdown, flushes queued log records and stops the listener
    """

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncGenerator[None, Any]:
        configure_logging(config.json_logging, config.log_level)
        defaults = provider.global_config()
        logger.info(
            "JSON provider ready: %d marshaller, %d unmarshaller defaults",
            len(defaults.marshaller_properties),
            len(defaults.unmarshaller_properties),
        )
        try:
            yield
        finally:
            logger.info("JSON provider shut down")
            stop_listener()

    return _lifespan
