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
Response helpers for the studio media catalog web API.

Collections are returned in a {"data": [...]} envelope so the frontend can
consume every listing endpoint the same way.
"""

from typing import Any, Dict, Iterable, List, NoReturn

from fastapi import HTTPException
from pydantic import BaseModel


def collection_response(items: Iterable[BaseModel], exclude_none: bool = False) -> Dict[str, List[Dict[str, Any]]]:
    """
    Wrap serialized models in the collection envelope.

    Args:
        items: Models to serialize
        exclude_none: Drop fields whose value is None (optional attributes
            that only some items carry)

    Returns:
        Dict with a single "data" key

    Example:
        >>> collection_response([Illustration(url="https://cdn/a.png", filename="a.png")], exclude_none=True)
        {"data": [{"url": "https://cdn/a.png", "filename": "a.png"}]}
    """
    return {"data": [item.model_dump(exclude_none=exclude_none) for item in items]}


# =============================================================================
# HTTP Error Helpers
# =============================================================================


def not_found(resource: str, identifier: str) -> NoReturn:
    """
    Raise 404 Not Found for a resource.

    Args:
        resource: Type of resource (e.g., "File")
        identifier: Resource identifier that was not found

    Raises:
        HTTPException: Always raises 404
    """
    raise HTTPException(status_code=404, detail=f"{resource} not found: {identifier}")


def bad_request(message: str) -> NoReturn:
    """
    Raise 400 Bad Request.

    Args:
        message: Error message describing the problem

    Raises:
        HTTPException: Always raises 400
    """
    raise HTTPException(status_code=400, detail=message)


def server_error(message: str) -> NoReturn:
    """
    Raise 500 Internal Server Error.

    Args:
        message: Error message safe to show to clients

    Raises:
        HTTPException: Always raises 500
    """
    raise HTTPException(status_code=500, detail=message)
