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
Storage adapter capability set.

The catalog services only ever talk to storage through this protocol, so
they stay unaware of whether objects live on the local filesystem, in an
S3-compatible bucket, or in memory. Adapters are structural: any object
with these methods qualifies, no base class required.

All keys are bucket-relative and use forward slashes
(e.g., "video-logs/studio-update.mp4").

Failure contract:
    - Backend connectivity or credential problems raise StorageUnavailable.
    - A prefix with no objects is an empty list, never an error.
    - temporary_url raises SigningUnsupported when the backend cannot sign.
    - Writes and deletes that the backend rejects raise StorageUnavailable.
"""

from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable


@runtime_checkable
class StorageAdapter(Protocol):
    """Uniform object-storage operations used by the catalog."""

    def files(self, prefix: str) -> List[str]:
        """
        List every object key under a prefix, in lexical order.

        Args:
            prefix: Key prefix such as "video-logs" (trailing slash optional,
                "" lists the whole bucket)

        Returns:
            Keys relative to the bucket root; empty if the prefix is missing

        Raises:
            StorageUnavailable: If the backend cannot be queried
        """
        ...

    def exists(self, key: str) -> bool:
        """Return True if an object exists at key."""
        ...

    def last_modified(self, key: str) -> Optional[datetime]:
        """Timezone-aware last-modified time, or None when unknown or missing."""
        ...

    def url(self, path: str) -> str:
        """
        Backend-native public URL.

        Not necessarily fetchable: private buckets need temporary_url.
        """
        ...

    def temporary_url(self, path: str, expires_at: datetime) -> str:
        """
        Signed URL valid until an absolute point in time.

        Raises:
            SigningUnsupported: If the backend cannot produce signed URLs
        """
        ...

    def read_bytes(self, key: str) -> bytes:
        """
        Read an object's content.

        Raises:
            ObjectNotFound: If key does not exist
        """
        ...

    def content_type(self, key: str) -> Optional[str]:
        """Content type recorded by the backend, if it tracks one."""
        ...

    def write_bytes(self, key: str, content: bytes, content_type: Optional[str] = None) -> None:
        """
        Create or replace the object at key.

        Raises:
            StorageUnavailable: If the backend rejects the write
        """
        ...

    def delete(self, key: str) -> None:
        """Remove the object at key; a missing key is not an error."""
        ...
