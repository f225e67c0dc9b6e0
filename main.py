import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from core.config import Settings, get_settings
from core.database import Database
from core.errors import register_exception_handlers
from core.logger import set_log_level, setup_logger
from core.sessions import SessionManager
from routers import auth_router, review_router, upload_router

logger = setup_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    logger.info("Application startup...")

    database = Database(settings)
    database.create_all()
    session_manager = SessionManager(settings)
    with database.SessionLocal() as db:
        session_manager.purge_expired(db)

    app.state.database = database
    app.state.session_manager = session_manager
    logger.info("Music review API ready.")

    yield

    logger.info("Music review API shutdown...")
    with database.SessionLocal() as db:
        session_manager.purge_expired(db)
    database.dispose()
    logger.info("Shutdown complete.")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    set_log_level(settings.LOG_LEVEL)

    app = FastAPI(title="Music Review Backend API", lifespan=lifespan)
    app.state.settings = settings

    register_exception_handlers(app)
    app.middleware("http")(upload_router.reject_oversized_upload)

    # Respect X-Forwarded-Proto/Host when behind a proxy (Docker/nginx/etc.)
    app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")

    # Reflect the caller's origin so the session cookie is accepted cross-origin
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=settings.CORS_ALLOW_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router.router)
    app.include_router(upload_router.router)
    app.include_router(review_router.router)

    # Uploaded media
    os.makedirs(settings.MEDIA_DIR, exist_ok=True)
    app.mount(
        settings.MEDIA_URL_PATH,
        StaticFiles(directory=settings.MEDIA_DIR),
        name="uploads",
    )

    @app.get("/")
    def root():
        return {"message": "Music Review Backend API Ready"}

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
