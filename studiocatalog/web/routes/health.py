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
Health check endpoints for the studio media catalog web server.

Used by load balancers and container orchestrators; they never touch storage.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..dependencies import AppState, get_app_state

router = APIRouter()


@router.get("/")
async def root():
    """
    Root endpoint - basic service identification.

    Returns:
        Service name and status indicator.
    """
    return {
        "service": "studiocatalog",
        "status": "ok",
    }


@router.get("/health")
async def health_check(state: AppState = Depends(get_app_state)):
    """
    Health check endpoint for load balancers and monitoring.

    Returns:
        Health status, timestamp and the configured storage backend.
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "storage_backend": state.config.storage_backend,
    }
