"""
Application factory. Run with ``uvicorn wardrobe_api.main:create_app --factory``.
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from wardrobe_api.core.config import Settings, get_settings
from wardrobe_api.core.container import build_container
from wardrobe_api.core.errors import register_exception_handlers
from wardrobe_api.remote.base import RemoteService
from wardrobe_api.routers import admin, auth, creations, item_categories, profiles, styles, wardrobe_items

logger = logging.getLogger("app.requests")


def create_app(settings: Optional[Settings] = None, remote: Optional[RemoteService] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL.upper())
    container = build_container(settings, remote)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await container.remote.aclose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.container = container

    # CORS
    origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    prefix = settings.API_PREFIX
    app.include_router(auth.router, prefix=prefix)
    app.include_router(profiles.router, prefix=prefix)
    app.include_router(wardrobe_items.router, prefix=prefix)
    app.include_router(item_categories.router, prefix=prefix)
    app.include_router(item_categories.admin_router, prefix=prefix)
    app.include_router(styles.router, prefix=prefix)
    app.include_router(styles.admin_router, prefix=prefix)
    app.include_router(creations.router, prefix=prefix)
    app.include_router(admin.router, prefix=prefix)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000
        logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, duration_ms)
        return response

    @app.get("/")
    async def root():
        return {"name": settings.APP_NAME, "env": settings.APP_ENV}

    return app
