"""
Configuration helpers for the community site backend.

Every path, limit and environment switch is read here so that routers and
services never touch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    public_base_url: str
    site_root: str
    data_dir: str
    uploads_dir: str
    max_upload_bytes: int
    cors_origins: tuple[str, ...]
    log_level: str
    host: str
    port: int


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _list(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
        if value is None:
            return default
        items = tuple(item.strip() for item in value.split(",") if item.strip())
        return items or default

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    site_root = os.path.abspath(os.getenv("SITE_ROOT") or os.getcwd())
    default_level = "DEBUG" if app_env == "dev" else "INFO"
    return Settings(
        app_env=app_env,
        public_base_url=os.getenv("PUBLIC_BASE_URL", "").rstrip("/"),
        site_root=site_root,
        data_dir=os.path.abspath(os.getenv("DATA_DIR") or os.path.join(site_root, "data")),
        uploads_dir=os.path.abspath(os.getenv("UPLOADS_DIR") or os.path.join(site_root, "uploads")),
        max_upload_bytes=_int(os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)), DEFAULT_MAX_UPLOAD_BYTES),
        cors_origins=_list(os.getenv("CORS_ORIGINS"), ()),
        log_level=(os.getenv("LOG_LEVEL") or default_level).upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT", "3000"), 3000),
    )
