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
FastAPI dependency injection for the studio media catalog web server.

Usage:
    from fastapi import Depends
    from studiocatalog.web.dependencies import get_app_state, AppState

    @router.get("/video-logs")
    def list_video_logs(state: AppState = Depends(get_app_state)):
        return state.media_service.list_entries()
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Request

if TYPE_CHECKING:
    from ..services import IllustrationService, MediaListingService
    from ..storage.base import StorageAdapter
    from ..utils.config import Config
    from ..utils.url_generator import StorageUrlGenerator


@dataclass
class AppState:
    """
    Application state container for dependency injection.

    Mirrors the CLIContext built by cli.py so routes and commands share
    the same wiring.

    Attributes:
        config: Application configuration
        storage: Storage adapter selected by STORAGE_BACKEND
        url_generator: URL generator bound to storage and CDN settings
        media_service: Video log catalog service
        illustration_service: Illustration gallery service
    """

    config: "Config"
    storage: "StorageAdapter"
    url_generator: "StorageUrlGenerator"
    media_service: "MediaListingService"
    illustration_service: "IllustrationService"


def get_app_state(request: Request) -> AppState:
    """
    FastAPI dependency to get the application state.

    Args:
        request: FastAPI request object

    Returns:
        AppState instance with all services
    """
    return request.app.state.app_state
