# blog_admin_console/config.py
import logging
import os
from typing import NamedTuple, Optional

import dotenv

dotenv.load_dotenv()

DEFAULT_API_BASE_URL = "http://localhost:3000/api"
DEFAULT_BUCKET = "cover_image"
DEFAULT_TIMEOUT = 10.0


class ConsoleConfig(NamedTuple):
    api_base_url: str
    auth_scheme: str  # "" sends the raw token, e.g. "Bearer" prefixes it
    timeout: float
    storage_url: Optional[str]
    storage_api_key: Optional[str]
    storage_bucket: str
    access_token: Optional[str]


def load_config_from_env() -> ConsoleConfig:
    """
    Reads console settings from the environment (a .env file is honoured).

    Example .env:
    BLOG_API_BASE_URL=https://blog.example.com/api
    BLOG_API_AUTH_SCHEME=Bearer
    SUPABASE_URL=https://xyz.supabase.co
    SUPABASE_ANON_KEY=eyJ...
    COVER_IMAGE_BUCKET=cover_image
    BLOG_ADMIN_TOKEN=...
    """
    raw_timeout = os.environ.get("BLOG_API_TIMEOUT")
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError:
        raise ValueError(f"BLOG_API_TIMEOUT must be a number, got {raw_timeout!r}")

    storage_url = os.environ.get("SUPABASE_URL")

    return ConsoleConfig(
        api_base_url=os.environ.get("BLOG_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip(
            "/"
        ),
        auth_scheme=os.environ.get("BLOG_API_AUTH_SCHEME", "").strip(),
        timeout=timeout,
        storage_url=storage_url.rstrip("/") if storage_url else None,
        storage_api_key=os.environ.get("SUPABASE_ANON_KEY"),
        storage_bucket=os.environ.get("COVER_IMAGE_BUCKET", DEFAULT_BUCKET),
        access_token=os.environ.get("BLOG_ADMIN_TOKEN") or None,
    )


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig()
    logging.getLogger("blog_admin_console").setLevel(level)
