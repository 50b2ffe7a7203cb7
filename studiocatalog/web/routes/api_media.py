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
Media catalog API endpoints.

Handlers are plain functions: storage calls block, so FastAPI runs them in
its threadpool.
"""

from fastapi import APIRouter, Depends

from ..dependencies import AppState, get_app_state
from ..responses import collection_response

router = APIRouter()


@router.get("/video-logs")
def list_video_logs(state: AppState = Depends(get_app_state)):
    """
    List video log entries, newest first.

    Returns:
        {"data": [{id, title, date, thumbnail, url, description}, ...]}
    """
    return collection_response(state.media_service.list_entries())


@router.get("/illustrations")
def list_illustrations(state: AppState = Depends(get_app_state)):
    """
    List illustration images.

    Returns:
        {"data": [{url, filename, thumbnail_url?}, ...]}
    """
    return collection_response(state.illustration_service.list_illustrations(), exclude_none=True)
