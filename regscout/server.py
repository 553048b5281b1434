"""FastAPI application serving the aggregated plugin registry."""

from __future__ import annotations

from typing import Callable

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from regscout.__version__ import __version__
from regscout.config import load_config
from regscout.core import RegistryService
from regscout.utils.logger import get_logger

logger = get_logger("server")

ServiceFactory = Callable[[], RegistryService]


class HealthResponse(BaseModel):
    status: str


def _default_service() -> RegistryService:
    return RegistryService(load_config())


def create_app(service_factory: ServiceFactory = _default_service) -> FastAPI:
    """Create the FastAPI application exposing the registry.

    The service (and with it the snapshot cache) is created on the first
    request and kept on ``app.state`` for the lifetime of the app.
    """
    app = FastAPI(title="regscout", version=__version__)
    app.state.service = None

    def get_service(request: Request) -> RegistryService:
        state = request.app.state
        if state.service is None:
            state.service = service_factory()
            logger.debug("Registry service created")
        return state.service

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/registry")
    async def registry(request: Request) -> JSONResponse:
        response = await get_service(request).read()
        return JSONResponse(
            content=response.payload,
            status_code=response.status_code,
            headers=response.headers(),
        )

    return app
