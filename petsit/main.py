from __future__ import annotations

from fastapi import FastAPI

from petsit.api.router import api_router
from petsit.core.config import get_settings
from petsit.core.logging_config import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging()

    app = FastAPI(title=settings.app_name)
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
