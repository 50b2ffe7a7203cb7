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
In-memory storage adapter.

Holds objects in a dict and signs URLs with a local HMAC, so listings and
signed-URL behaviour are fully deterministic without a network. Used for
demos (STORAGE_BACKEND=memory) and throughout the test suite.
"""

import hashlib
import hmac
from datetime import datetime, timezone
from typing import Dict, List, Optional
from urllib.parse import quote, urlencode

from ..models.media import StoredObject
from ..utils.exceptions import ObjectNotFound, SigningUnsupported, StorageUnavailable


class InMemoryStorageAdapter:
    """
    Dict-backed storage.

    Set ``unavailable`` to simulate a backend outage (every call raises
    StorageUnavailable) and ``can_sign=False`` to simulate a backend with
    no signing capability.
    """

    backend_name = "memory"

    def __init__(
        self,
        base_url: str = "https://storage.invalid",
        signing_key: str = "studiocatalog-memory",
        can_sign: bool = True,
        unavailable: bool = False,
    ):
        self.base_url = base_url.rstrip("/")
        self.can_sign = can_sign
        self.unavailable = unavailable
        self._signing_key = signing_key.encode("utf-8")
        self._objects: Dict[str, StoredObject] = {}
        self._contents: Dict[str, bytes] = {}

    @staticmethod
    def _key(path: str) -> str:
        return path.replace("\\", "/").lstrip("/")

    def _check_available(self) -> None:
        if self.unavailable:
            raise StorageUnavailable("In-memory storage marked unavailable", backend=self.backend_name)

    def put(
        self,
        key: str,
        content: bytes = b"",
        last_modified: Optional[datetime] = None,
        content_type: Optional[str] = None,
    ) -> StoredObject:
        """Store an object, replacing any existing one at key."""
        key = self._key(key)
        if last_modified is not None and last_modified.tzinfo is None:
            last_modified = last_modified.replace(tzinfo=timezone.utc)
        stored = StoredObject(
            key=key,
            size=len(content),
            last_modified=last_modified,
            content_type=content_type,
        )
        self._objects[key] = stored
        self._contents[key] = content
        return stored

    def files(self, prefix: str) -> List[str]:
        self._check_available()
        normalized = self._key(prefix).rstrip("/")
        if not normalized:
            return sorted(self._objects)
        search = f"{normalized}/"
        return sorted(key for key in self._objects if key.startswith(search))

    def exists(self, key: str) -> bool:
        self._check_available()
        return self._key(key) in self._objects

    def last_modified(self, key: str) -> Optional[datetime]:
        self._check_available()
        stored = self._objects.get(self._key(key))
        return stored.last_modified if stored else None

    def url(self, path: str) -> str:
        return f"{self.base_url}/{quote(self._key(path))}"

    def temporary_url(self, path: str, expires_at: datetime) -> str:
        if not self.can_sign:
            raise SigningUnsupported("In-memory storage configured without signing", backend=self.backend_name)
        self._check_available()

        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        expires = int(expires_at.timestamp())
        key = self._key(path)
        signature = hmac.new(self._signing_key, f"{key}:{expires}".encode("utf-8"), hashlib.sha256).hexdigest()
        return f"{self.url(key)}?{urlencode({'expires': expires, 'signature': signature})}"

    def read_bytes(self, key: str) -> bytes:
        self._check_available()
        key = self._key(key)
        if key not in self._contents:
            raise ObjectNotFound(f"File not found: {key}", backend=self.backend_name)
        return self._contents[key]

    def content_type(self, key: str) -> Optional[str]:
        self._check_available()
        stored = self._objects.get(self._key(key))
        return stored.content_type if stored else None

    def write_bytes(self, key: str, content: bytes, content_type: Optional[str] = None) -> None:
        self._check_available()
        self.put(key, content, last_modified=datetime.now(timezone.utc), content_type=content_type)

    def delete(self, key: str) -> None:
        self._check_available()
        key = self._key(key)
        self._objects.pop(key, None)
        self._contents.pop(key, None)
