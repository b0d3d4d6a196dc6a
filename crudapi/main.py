from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from crudapi import __version__
from crudapi.api import create_api_router
from crudapi.core.config import Settings, get_settings
from crudapi.core.container import ApplicationContainer
from crudapi.core.logging import setup_logging
from crudapi.interfaces.http.errors import register_error_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: ApplicationContainer = app.state.container
    await container.startup()
    try:
        yield
    finally:
        await container.shutdown()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.logging)

    app = FastAPI(
        title=settings.project_name,
        description="CRUD REST API with account management",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.container = ApplicationContainer.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def count_requests(request: Request, call_next):
        request.app.state.container.stats.requests += 1
        return await call_next(request)

    register_error_handlers(app)
    app.include_router(create_api_router(settings.api_prefix))
    return app


app = create_app()
