"""Runtime configuration read from the environment."""

import os
from dataclasses import dataclass
from os import getenv
from pathlib import Path
from typing import Iterable, Optional, Tuple

PACKAGE_DIR = Path(__file__).parent
PROJECT_ROOT = PACKAGE_DIR.parent

DEFAULT_BOUNDARY_PATH = PACKAGE_DIR / "data" / "nwp_boundary.geojson"
# Local dev only (Docker Compose); production sets DATABASE_URL.
DEFAULT_DATABASE_URL = "postgresql+asyncpg://postgres:postgres@db:5432/wayamba"

ENV_FILE_PATHS = [
    Path("/opt/wayamba/.env"),
    PROJECT_ROOT / ".env",
]


def load_env_file(paths: Iterable[Path] = ENV_FILE_PATHS) -> int:
    """
    Fill unset environment variables from the first readable .env file.

    Lines are KEY=VALUE; blank lines and # comments are skipped, surrounding
    quotes are stripped. Variables already in the environment win.
    Returns the number of variables loaded.
    """
    for env_file in paths:
        if not env_file.is_file():
            continue
        loaded = 0
        with open(env_file, "r") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()
                if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
                    value = value[1:-1]
                if key and value and key not in os.environ:
                    os.environ[key] = value
                    loaded += 1
        return loaded
    return 0


def _flag(name: str, default: str = "false") -> bool:
    return getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _list(name: str, default: str) -> Tuple[str, ...]:
    """Comma-separated variable as a tuple; blank entries are dropped."""
    return tuple(item.strip() for item in getenv(name, default).split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Process-wide settings. Built once and passed to ``create_app``."""

    database_url: str = DEFAULT_DATABASE_URL
    debug: bool = False
    boundary_path: Path = DEFAULT_BOUNDARY_PATH
    session_ttl_seconds: int = 7 * 24 * 60 * 60
    session_cookie_secure: bool = False
    asset_upload_requires_admin: bool = False
    cloudinary_cloud_name: Optional[str] = None
    cloudinary_api_key: Optional[str] = None
    cloudinary_api_secret: Optional[str] = None
    image_upload_timeout: float = 30.0
    sendgrid_api_key: Optional[str] = None
    notify_from_email: Optional[str] = None
    notify_to_email: Optional[str] = None
    cors_allow_origins: Tuple[str, ...] = ("*",)

    @property
    def cloudinary_configured(self) -> bool:
        return bool(self.cloudinary_cloud_name and self.cloudinary_api_key and self.cloudinary_api_secret)

    @property
    def email_configured(self) -> bool:
        return bool(self.sendgrid_api_key and self.notify_from_email)

    @classmethod
    def from_env(cls) -> "Settings":
        load_env_file()
        return cls(
            database_url=getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            debug=_flag("APP_DEBUG"),
            boundary_path=Path(getenv("BOUNDARY_PATH", str(DEFAULT_BOUNDARY_PATH))),
            session_ttl_seconds=int(getenv("SESSION_TTL_SECONDS", str(7 * 24 * 60 * 60))),
            session_cookie_secure=_flag("SESSION_COOKIE_SECURE"),
            asset_upload_requires_admin=_flag("ASSET_UPLOAD_REQUIRES_ADMIN"),
            cloudinary_cloud_name=getenv("CLOUDINARY_CLOUD_NAME"),
            cloudinary_api_key=getenv("CLOUDINARY_API_KEY"),
            cloudinary_api_secret=getenv("CLOUDINARY_API_SECRET"),
            image_upload_timeout=float(getenv("IMAGE_UPLOAD_TIMEOUT", "30")),
            sendgrid_api_key=getenv("SENDGRID_API_KEY"),
            notify_from_email=getenv("NOTIFY_FROM_EMAIL"),
            # Operators get their own copy unless a separate inbox is set.
            notify_to_email=getenv("NOTIFY_TO_EMAIL") or getenv("NOTIFY_FROM_EMAIL"),
            cors_allow_origins=_list("CORS_ALLOW_ORIGINS", "*"),
        )
