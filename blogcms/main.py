# blogcms/main.py
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from blogcms.config import Settings, settings as default_settings
from blogcms.database import Store
from blogcms.exceptions import register_exception_handlers
from blogcms.logging_config import setup_logging
from blogcms.routers import admin, auth, blogs, categories

logger = logging.getLogger("blogcms")


def create_app(settings: Settings = None, store: Store = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)

    if store is None:
        store = Store.from_url(settings.database_url, settings.DB_TIMEOUT_SECONDS)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # create tables if missing
        if settings.DB_AUTO_CREATE:
            store.create_all()
        yield
        store.dispose()

    app = FastAPI(title="Blog CMS Backend", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    register_exception_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        try:
            response = await call_next(request)
            ms = int((time.time() - start) * 1000)
            logger.info("%s %s -> %s (%dms)", request.method, request.url.path, response.status_code, ms)
            return response
        except Exception:
            ms = int((time.time() - start) * 1000)
            logger.exception("Unhandled error %s %s (%dms)", request.method, request.url.path, ms)
            raise

    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=settings.CORS_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Accept", "Authorization", "Content-Type", "X-CSRF-Token"],
        expose_headers=["Link"],
        max_age=300,
    )

    static_dir = Path(settings.STATIC_DIR)
    (static_dir / "banners").mkdir(parents=True, exist_ok=True)
    app.mount("/static", StaticFiles(directory=static_dir), name="static")

    # Routers
    app.include_router(auth.router)
    app.include_router(blogs.router)
    app.include_router(categories.router)
    app.include_router(admin.router)

    @app.get("/")
    def root():
        return {"message": "Blog backend is running!"}

    return app
