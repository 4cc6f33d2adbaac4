from contextlib import asynccontextmanager
from fastapi import FastAPI
from nextchapter.api.routers import public_routers,admin_routers
from nextchapter.common.custom_exceptions import register_all_exceptions
from nextchapter.common.logging_setup import setup_logging, shutdown_logging
from nextchapter.middlewares.auth_middleware import AuthenticationMiddleware
from nextchapter.middlewares.request_id_middleware import RequestIdMiddleware
from nextchapter.db.connection import async_engine,async_session
from nextchapter.api import version_prefix,cur_version
from nextchapter.config.admin_config import admin_config


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    setup_logging()
    try:
        yield
    finally:
        # new requests are no longer accepted at this point
        await async_engine.dispose()
        shutdown_logging()


def create_app():
    app=FastAPI(
        title="Next Chapter",
        version=cur_version,
        lifespan=app_lifespan)

    app.include_router(public_routers)

    if admin_config.ENABLE_ADMIN:
        app.include_router(admin_routers)      # mounts /api/v1/admin

    app.add_middleware(AuthenticationMiddleware,session_maker=async_session,paths=[f"{version_prefix}/health",
                                                                                   f"{version_prefix}/books",
                                                                                   "/docs",
                                                                                   "/openapi.json"])
    app.add_middleware(RequestIdMiddleware)
    register_all_exceptions(app)

    return app

app=create_app()
