"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .web import web_router
from .middleware.headers import CallerIdentityMiddleware
from .middleware.logging import LoggingMiddleware


def create_app(
    service_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: LinkService instance (may be set later in lifespan)
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Short Links",
        description="URL shortening service with owner-scoped links",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.service = service_instance
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added last so it runs first and the identity is visible to logging
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CallerIdentityMiddleware,
        user_id_header=config.user_id_header,
        roles_header=config.user_roles_header,
    )

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Redirect"])

    return app
