import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from .exceptions import ConfigurationError

STORAGE_BACKENDS = ("local", "s3", "memory")
DEV_ENVIRONMENTS = ("local", "testing")


class Config(BaseModel):
    # Application
    app_env: str = "production"

    # Storage backend
    storage_backend: str = "local"  # local, s3 or memory
    storage_path: Path = Path("./storage")
    storage_public_url: str = "http://localhost:8000/storage"

    # S3 / MinIO
    aws_bucket: str = ""
    aws_region: str = "us-east-1"
    aws_endpoint: Optional[str] = None
    aws_use_path_style_endpoint: bool = False
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None

    # Content prefixes
    video_prefix: str = "video-logs"
    image_prefix: str = "images/vlogs"
    illustrations_prefix: str = "images/illustrations"
    illustrations_fallback_prefixes: List[str] = ["", "images"]

    # URL generation
    cdn_host: Optional[str] = None
    signed_urls: bool = False
    url_expires_minutes: int = 60
    url_expiry_tolerance_seconds: int = 20
    default_thumbnail_url: str = ""

    # Listing
    listing_max_workers: int = 8

    @property
    def debug_file_serving_enabled(self) -> bool:
        """File passthrough is only exposed in local and testing environments"""
        return self.app_env in DEV_ENVIRONMENTS

    def boto3_client_kwargs(self) -> dict:
        """Keyword arguments for S3StorageAdapter built from this config"""
        return {
            "bucket": self.aws_bucket,
            "region": self.aws_region,
            "endpoint_url": self.aws_endpoint,
            "use_path_style": self.aws_use_path_style_endpoint,
            "access_key_id": self.aws_access_key_id,
            "secret_access_key": self.aws_secret_access_key,
        }


def _normalize(value: str) -> str:
    """Trim whitespace and a single pair of matching surrounding quotes"""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1].strip()
    return value


def lookup(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read an environment variable, treating blank values as unset"""
    raw = os.getenv(name)
    if raw is None:
        return default
    value = _normalize(raw)
    return value if value != "" else default


def _flag(name: str, default: bool = False) -> bool:
    value = lookup(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes")


def _int(name: str, default: int) -> int:
    value = lookup(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer", value=value)


def _prefix(name: str, default: str) -> str:
    return (lookup(name, default) or "").strip(" /\\")


def load_config(env_file: Optional[str] = None) -> Config:
    """Load configuration from environment variables and .env file"""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    storage_backend = (lookup("STORAGE_BACKEND", "local") or "local").lower()
    if storage_backend not in STORAGE_BACKENDS:
        raise ConfigurationError(
            f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}",
            value=storage_backend,
        )

    aws_bucket = lookup("AWS_BUCKET", "") or ""
    if storage_backend == "s3" and not aws_bucket:
        raise ConfigurationError(
            "AWS_BUCKET environment variable is required when STORAGE_BACKEND=s3. "
            "Please set it in your .env file or environment."
        )

    # Admin credentials take precedence over the read-only pair
    access_key = lookup("AWS_ACCESS_KEY_ID_ADMIN") or lookup("AWS_ACCESS_KEY_ID")
    secret_key = lookup("AWS_SECRET_ACCESS_KEY_ADMIN") or lookup("AWS_SECRET_ACCESS_KEY")

    fallback_raw = os.getenv("ILLUSTRATIONS_FALLBACK_PREFIXES")
    if fallback_raw is None:
        fallback_prefixes = ["", "images"]
    else:
        fallback_prefixes = [_normalize(p).strip(" /\\") for p in fallback_raw.split(",")]

    config_data = {
        "app_env": (lookup("APP_ENV", "production") or "production").lower(),
        "storage_backend": storage_backend,
        "storage_path": Path(lookup("STORAGE_PATH", "./storage")),
        "storage_public_url": lookup("STORAGE_PUBLIC_URL", "http://localhost:8000/storage"),
        "aws_bucket": aws_bucket,
        "aws_region": lookup("AWS_DEFAULT_REGION", "us-east-1"),
        "aws_endpoint": lookup("AWS_ENDPOINT"),
        "aws_use_path_style_endpoint": _flag("AWS_USE_PATH_STYLE_ENDPOINT"),
        "aws_access_key_id": access_key,
        "aws_secret_access_key": secret_key,
        "video_prefix": _prefix("VIDEO_LOGS_PREFIX", "video-logs"),
        "image_prefix": _prefix("VIDEO_IMAGES_PREFIX", "images/vlogs"),
        "illustrations_prefix": _prefix("ILLUSTRATIONS_PREFIX", "images/illustrations"),
        "illustrations_fallback_prefixes": fallback_prefixes,
        "cdn_host": lookup("CDN_HOST") or lookup("CLOUDFRONT_DOMAIN"),
        "signed_urls": _flag("SIGNED_URLS"),
        "url_expires_minutes": _int("VIDEO_URL_EXPIRES", 60),
        "url_expiry_tolerance_seconds": _int("VIDEO_URL_EXPIRY_TOLERANCE_SECONDS", 20),
        "default_thumbnail_url": lookup("DEFAULT_THUMBNAIL_URL", "") or "",
        "listing_max_workers": max(1, _int("LISTING_MAX_WORKERS", 8)),
    }

    return Config(**config_data)
