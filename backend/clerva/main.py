from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clerva.api.routes import api_router
from clerva.core.config import get_settings
from clerva.core.errors import register_error_handlers
from clerva.core.middleware import RequestGateMiddleware
from clerva.core.observability import setup_logging


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Clerva API",
        version=settings.app_version,
        docs_url="/docs" if settings.environment == "development" else None,
        redoc_url="/redoc" if settings.environment == "development" else None,
    )

    app.add_middleware(RequestGateMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=r"https://.*\.vercel\.app$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(api_router)
    return app


app = create_app()
