# Copyright 2025 Graveyard Jokes Studios
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
FastAPI application factory for the studio media catalog web server.

This module creates and configures the FastAPI application with:
- Dependency injection for services (same as CLI)
- Route registration for listing, file serving and health endpoints
- Request logging middleware
- Error handling for signing misconfiguration
- A static mount for local storage at the STORAGE_PUBLIC_URL path

Usage:
    from studiocatalog.web.app import create_app
    app = create_app()
"""

from contextlib import asynccontextmanager
from typing import Optional
from urllib.parse import urlsplit

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from ..logging import configure_structlog, get_logger
from ..services import IllustrationService, MediaListingService
from ..storage import LocalStorageAdapter, StorageAdapter, create_storage_adapter
from ..utils.config import Config, load_config
from ..utils.exceptions import SigningUnsupported
from ..utils.url_generator import StorageUrlGenerator
from .dependencies import AppState
from .middleware import LoggingMiddleware
from .routes import api_media, files, health

logger = get_logger(__name__)


def create_app(config: Optional[Config] = None, storage: Optional[StorageAdapter] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Optional Config object. If not provided, loads from environment.
        storage: Optional storage adapter. If not provided, one is created
            from config.storage_backend.

    Returns:
        Configured FastAPI application instance.
    """
    if config is None:
        config = load_config()
    if storage is None:
        storage = create_storage_adapter(config)

    url_generator = StorageUrlGenerator(
        storage,
        cdn_host=config.cdn_host,
        expiry_tolerance_seconds=config.url_expiry_tolerance_seconds,
    )

    app_state = AppState(
        config=config,
        storage=storage,
        url_generator=url_generator,
        media_service=MediaListingService(storage, url_generator, config),
        illustration_service=IllustrationService(storage, url_generator, config),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager for startup/shutdown."""
        logger.info(
            "web_server_starting",
            app_env=config.app_env,
            storage_backend=config.storage_backend,
            cdn_host=config.cdn_host,
            signed_urls=config.signed_urls,
            file_serving=config.debug_file_serving_enabled,
        )
        yield
        logger.info("web_server_stopping")

    app = FastAPI(
        title="studiocatalog",
        description="Media catalog API for the studio site",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Routes read state from app.state; set it eagerly so it exists without lifespan
    app.state.app_state = app_state

    app.add_middleware(LoggingMiddleware)

    # Add CORS middleware for frontend development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:5173",  # Vite dev server
            "http://localhost:3000",  # Alternative dev port
            "http://127.0.0.1:5173",
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.exception_handler(SigningUnsupported)
    async def signing_unsupported_handler(request: Request, exc: SigningUnsupported):
        logger.error("signed_url_unsupported", error=str(exc), path=request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Signed URLs are not supported by the storage backend"})

    app.include_router(health.router, tags=["health"])
    app.include_router(api_media.router, prefix="/api", tags=["media"])
    app.include_router(files.router, prefix="/api", tags=["files"])

    mount_path = _local_mount_path(config)
    if mount_path:
        directory = storage.base_path if isinstance(storage, LocalStorageAdapter) else config.storage_path
        app.mount(mount_path, StaticFiles(directory=str(directory), check_dir=False), name="storage")
        logger.debug("local_storage_mounted", path=mount_path, directory=str(directory))

    logger.info("fastapi_app_created", storage_backend=config.storage_backend)

    return app


def _local_mount_path(config: Config) -> Optional[str]:
    """
    Path under which local storage objects are published, if this app serves them.

    Only same-app paths qualify: STORAGE_PUBLIC_URL must have a non-root
    path and no query (the /api/video-logs/serve?path= passthrough is
    already a route).
    """
    if config.storage_backend != "local":
        return None
    parts = urlsplit(config.storage_public_url)
    path = parts.path.rstrip("/")
    if not path or parts.query or path.startswith("/api"):
        return None
    return path


def create_app_from_env() -> FastAPI:
    """
    Factory for `uvicorn --factory` and reload mode.

    Configures structlog from the environment, then builds the app from
    the environment config.
    """
    configure_structlog()
    return create_app()
