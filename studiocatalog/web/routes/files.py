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
Development file passthrough.

Streams a stored object through the app so local frontends can load media
without bucket credentials or CORS setup. Enabled only in the
local and testing environments; elsewhere the endpoint answers 404.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from ...logging import get_logger
from ...utils.exceptions import CatalogError, ObjectNotFound
from ...utils.mime import guess_mime_type
from ..dependencies import AppState, get_app_state
from ..responses import bad_request, not_found, server_error

logger = get_logger(__name__)

router = APIRouter()


@router.get("/video-logs/serve")
def serve_file(
    path: Optional[str] = Query(None, description="Storage key to serve"),
    state: AppState = Depends(get_app_state),
):
    """
    Serve a stored object's bytes.

    Args:
        path: Storage key (e.g., "video-logs/testvideo.mp4")

    Returns:
        Raw object content with a Content-Type from backend metadata or the
        extension table

    Raises:
        HTTPException: 404 outside local/testing or when the object is
            missing, 400 without a path, 500 when the read fails
    """
    if not state.config.debug_file_serving_enabled:
        not_found("Endpoint", "/api/video-logs/serve")

    key = (path or "").strip().lstrip("/")
    if not key:
        bad_request("Missing path")

    storage = state.storage
    try:
        content = storage.read_bytes(key)
        media_type = guess_mime_type(key, storage.content_type(key))
    except ObjectNotFound:
        not_found("File", key)
    except ValueError as e:
        bad_request(str(e))
    except CatalogError as e:
        logger.error("file_serve_failed", path=key, error=str(e), error_type=type(e).__name__)
        server_error("Failed to read file")

    logger.debug("file_served", path=key, size=len(content), media_type=media_type)
    return Response(content=content, media_type=media_type)
