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

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class MediaEntry(BaseModel):
    """
    One catalog entry (a video log with its thumbnail).

    Read-only projection of storage state: built once per listing call and
    never mutated afterwards.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    date: str = ""  # YYYY-MM-DD, or empty when no date could be derived
    thumbnail: str = ""
    url: str = ""
    description: Optional[str] = None  # Only the static fallback catalog carries descriptions


class Illustration(BaseModel):
    """An illustration image with an optional GIF preview thumbnail."""

    model_config = ConfigDict(frozen=True)

    url: str
    filename: str
    thumbnail_url: Optional[str] = None


class StoredObject(BaseModel):
    """Listing record for a single object in a storage backend."""

    model_config = ConfigDict(frozen=True)

    key: str
    size: int = 0
    last_modified: Optional[datetime] = None
    content_type: Optional[str] = None
