from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core import config
from app.core.errors import install_error_handlers
from app.core.logging import setup_logging
from app.core.middleware import RequestLoggingMiddleware
from app.routers import health, index, recipes


def create_app() -> FastAPI:
    app = FastAPI(title="Recipe Catalog", version=config.APP_VERSION)
    app.include_router(index.router)
    app.include_router(recipes.router, prefix=config.API_PREFIX)
    app.include_router(health.router)

    setup_logging()
    install_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS or ["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    return app

app = create_app()
