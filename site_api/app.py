import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from site_api.core.config import Settings, get_settings
from site_api.core.errors import StoreError
from site_api.core.logging_config import configure_logging, get_logger
from site_api.repositories.blob_store import BlobStore
from site_api.repositories.json_storage import JsonStorage
from site_api.repositories.record_store import SiteStore
from site_api.routers import content as content_router
from site_api.routers import events as events_router
from site_api.routers import photos as photos_router
from site_api.services.lifecycle import LifecycleCoordinator

logger = get_logger(__name__)

STATIC_MAX_AGE = 3600


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, nosniff, referrer policy)."""

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        return response


class CachedStaticFiles(StaticFiles):
    def file_response(self, *args, **kwargs):
        resp = super().file_response(*args, **kwargs)
        resp.headers["Cache-Control"] = f"public, max-age={STATIC_MAX_AGE}"
        return resp


def build_coordinator(settings: Settings) -> LifecycleCoordinator:
    """Load the snapshots and wire store, blobs and storage together.

    CorruptDataError propagates: starting on top of an unreadable snapshot would
    overwrite it on the next save.
    """
    storage = JsonStorage(settings.data_dir)
    store = SiteStore(storage.load())
    blobs = BlobStore(
        settings.uploads_dir,
        max_bytes=settings.max_upload_bytes,
        public_base=settings.public_base_url,
    )
    return LifecycleCoordinator(store, blobs, storage)


def cors_origins_for(settings: Settings) -> list[str]:
    """Allowed CORS origins; production never falls back to the "*" wildcard."""
    allowed = {settings.public_base_url, *settings.cors_origins}
    if settings.app_env == "prod":
        allowed.discard("*")
    elif not settings.cors_origins:
        allowed.add("*")
    return sorted(origin for origin in allowed if origin)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory compatible with uvicorn/gunicorn (`--factory site_api.app:create_app`)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    os.makedirs(settings.uploads_dir, exist_ok=True)
    os.makedirs(settings.data_dir, exist_ok=True)

    app = FastAPI(title="Community Site API")
    app.state.settings = settings
    app.state.coordinator = build_coordinator(settings)

    allowed_cors = cors_origins_for(settings)
    if allowed_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_cors,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": "Invalid request"}, status_code=400)

    app.include_router(photos_router.router)
    app.include_router(events_router.router)
    app.include_router(content_router.router)

    @app.get("/health")
    def health():
        svc = app.state.coordinator
        return {
            "status": "ok",
            "photos": len(svc.list_photos()),
            "events": len(svc.list_events()),
        }

    @app.get("/")
    def index():
        index_path = os.path.join(settings.site_root, "index.html")
        if not os.path.isfile(index_path):
            raise HTTPException(404, "Not Found")
        return FileResponse(index_path, media_type="text/html")

    app.mount("/uploads", CachedStaticFiles(directory=settings.uploads_dir), name="uploads")
    public_dir = os.path.join(settings.site_root, "public")
    if os.path.isdir(public_dir):
        app.mount("/public", CachedStaticFiles(directory=public_dir), name="public")

    logger.info("Serving uploads from %s, data in %s", settings.uploads_dir, settings.data_dir)
    return app
