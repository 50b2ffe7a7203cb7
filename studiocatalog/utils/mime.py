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

"""Extension to MIME type lookup for served media files."""

from typing import Dict, Optional

from .media_names import extension

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES: Dict[str, str] = {
    "mp4": "video/mp4",
    "m4v": "video/x-m4v",
    "webm": "video/webm",
    "mov": "video/quicktime",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "json": "application/json",
    "atlas": "text/plain",
    "txt": "text/plain",
}


def guess_mime_type(key: str, backend_type: Optional[str] = None) -> str:
    """
    Pick a Content-Type for a storage key.

    Backend metadata wins unless it is missing or the generic binary type,
    then the extension table, then application/octet-stream.
    """
    if backend_type and backend_type != DEFAULT_MIME_TYPE:
        return backend_type
    return MIME_TYPES.get(extension(key), DEFAULT_MIME_TYPE)
