"""Application entrypoint for the back office HTTP API."""

from __future__ import annotations

from fastapi import FastAPI

from backoffice.api.v1.router import get_api_router
from backoffice.core.config import get_config
from backoffice.core.logging_config import configure_logging


def create_app() -> FastAPI:
    cfg = get_config()
    configure_logging()
    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION)
    app.include_router(get_api_router())

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


# ASGI app for `uvicorn backoffice.main:app`.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    from backoffice.database.init_db import init_db

    init_db()
    uvicorn.run("backoffice.main:app", host=get_config().API_HOST, port=get_config().API_PORT)
