from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from contributions_api.api.routes.contributions import router as contributions_router
from contributions_api.core.observability import configure_logging
from contributions_api.core.observability import init_sentry
from contributions_api.settings import Settings


def create_app() -> FastAPI:
    """Build the FastAPI application with logging, Sentry and CORS configured."""

    settings = Settings()
    configure_logging(settings)
    init_sentry(settings)

    app = FastAPI(title="GitHub Contributions API", version=settings.app_version)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(contributions_router)
    return app


app = create_app()
