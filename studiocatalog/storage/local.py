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

"""Local filesystem storage adapter."""

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote

from ..logging import get_logger
from ..utils.exceptions import ObjectNotFound, SigningUnsupported, StorageUnavailable

logger = get_logger(__name__)


class LocalStorageAdapter:
    """
    Serves objects from a directory on the local filesystem.

    Keys map to files under base_path. Public URLs are built by joining the
    key onto public_base_url (typically a static route of the web server).
    The filesystem cannot sign URLs, so temporary_url always raises
    SigningUnsupported.
    """

    backend_name = "local"

    def __init__(self, base_path: str, public_base_url: str = "http://localhost:8000/storage"):
        """
        Initialize local storage.

        Args:
            base_path: Directory acting as the bucket root
            public_base_url: URL prefix under which base_path is published
        """
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")

    def _resolve_path(self, path: str) -> Path:
        """Resolve a key to an absolute path under the base directory."""
        normalized = path.replace("\\", "/").lstrip("/")
        resolved = (self.base_path / normalized).resolve()

        try:
            resolved.relative_to(self.base_path)
        except ValueError:
            raise ValueError(f"Path '{path}' escapes base directory")

        return resolved

    def _relative_key(self, file_path: Path) -> str:
        return str(file_path.relative_to(self.base_path)).replace("\\", "/")

    def files(self, prefix: str) -> List[str]:
        search_path = self._resolve_path(prefix.strip("/")) if prefix.strip("/") else self.base_path

        try:
            if not search_path.is_dir():
                return []
            keys = [self._relative_key(p) for p in search_path.rglob("*") if p.is_file()]
        except OSError as e:
            raise StorageUnavailable(f"Failed to list {prefix!r}: {e}", backend=self.backend_name) from e

        return sorted(keys)

    def exists(self, key: str) -> bool:
        try:
            return self._resolve_path(key).is_file()
        except OSError as e:
            raise StorageUnavailable(f"Failed to check {key!r}: {e}", backend=self.backend_name) from e

    def last_modified(self, key: str) -> Optional[datetime]:
        try:
            stat = self._resolve_path(key).stat()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageUnavailable(f"Failed to stat {key!r}: {e}", backend=self.backend_name) from e
        return datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)

    def url(self, path: str) -> str:
        normalized = path.replace("\\", "/").lstrip("/")
        return f"{self.public_base_url}/{quote(normalized)}"

    def temporary_url(self, path: str, expires_at: datetime) -> str:
        raise SigningUnsupported(
            "Local storage cannot generate signed URLs; disable SIGNED_URLS or use the s3 backend",
            backend=self.backend_name,
            path=path,
        )

    def read_bytes(self, key: str) -> bytes:
        file_path = self._resolve_path(key)
        try:
            return file_path.read_bytes()
        except (FileNotFoundError, IsADirectoryError):
            raise ObjectNotFound(f"File not found: {key}", backend=self.backend_name)
        except OSError as e:
            raise StorageUnavailable(f"Failed to read {key!r}: {e}", backend=self.backend_name) from e

    def content_type(self, key: str) -> Optional[str]:
        # Local filesystem doesn't track content type
        return None

    def write_bytes(self, key: str, content: bytes, content_type: Optional[str] = None) -> None:
        """Write content under key, creating parent directories."""
        file_path = self._resolve_path(key)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(content)
        except OSError as e:
            raise StorageUnavailable(f"Failed to write {key!r}: {e}", backend=self.backend_name) from e
        logger.debug("local_object_written", key=key, size=len(content))

    def delete(self, key: str) -> None:
        file_path = self._resolve_path(key)
        try:
            file_path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageUnavailable(f"Failed to delete {key!r}: {e}", backend=self.backend_name) from e
        logger.debug("local_object_deleted", key=key)
