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
Illustration service - lists gallery images from object storage
"""

from typing import TYPE_CHECKING, List, Optional, Set, Tuple

from ..logging import get_logger
from ..models.media import Illustration
from ..utils.exceptions import StorageUnavailable
from ..utils.media_names import base_name, extension, filename, is_image
from ..utils.url_generator import StorageUrlGenerator

if TYPE_CHECKING:
    from ..storage.base import StorageAdapter
    from ..utils.config import Config

logger = get_logger(__name__)

THUMBNAIL_SUFFIX = "_thumb.jpg"


def _parent(key: str) -> str:
    return key.rpartition("/")[0]


def thumbnail_key_for(key: str) -> str:
    """Preview key for an animated GIF ("a/b.gif" -> "a/b_thumb.jpg")."""
    parent = _parent(key)
    name = f"{base_name(key)}{THUMBNAIL_SUFFIX}"
    return f"{parent}/{name}" if parent else name


class IllustrationService:
    """
    Service for listing illustrations.

    The configured prefix is tried first, then each fallback prefix in order;
    the first one holding images wins. Only objects directly under the prefix
    are listed.
    """

    def __init__(
        self,
        storage: "StorageAdapter",
        url_generator: Optional[StorageUrlGenerator],
        settings: "Config",
    ) -> None:
        self.storage = storage
        self.settings = settings
        self.url_generator = url_generator or StorageUrlGenerator(
            storage,
            cdn_host=settings.cdn_host,
            expiry_tolerance_seconds=settings.url_expiry_tolerance_seconds,
        )

    def list_illustrations(self) -> List[Illustration]:
        """
        List illustrations with resolved URLs.

        Returns:
            Illustrations in listing order; empty when storage is unavailable

        Raises:
            SigningUnsupported: If signed URLs are enabled but the backend
                cannot sign
        """
        try:
            found = self._find_images()
            if found is None:
                logger.info("illustrations_empty", prefixes=self._prefixes())
                return []
            prefix, images, listed = found
            illustrations = [self._build(key, listed) for key in images]
        except StorageUnavailable as e:
            logger.warning("storage_unavailable", prefix=self.settings.illustrations_prefix, error=str(e))
            return []

        logger.info("illustrations_resolved", prefix=prefix, count=len(illustrations))
        return illustrations

    def animated_keys(self) -> List[str]:
        """
        Keys of the GIFs in the gallery prefix that would be listed.

        Raises:
            StorageUnavailable: If the backend cannot be queried
        """
        found = self._find_images()
        if found is None:
            return []
        _, images, _ = found
        return [key for key in images if extension(key) == "gif"]

    def _prefixes(self) -> List[str]:
        prefixes = [self.settings.illustrations_prefix]
        for prefix in self.settings.illustrations_fallback_prefixes:
            if prefix not in prefixes:
                prefixes.append(prefix)
        return prefixes

    def _find_images(self) -> Optional[Tuple[str, List[str], Set[str]]]:
        for prefix in self._prefixes():
            normalized = prefix.strip("/")
            direct = [key for key in self.storage.files(normalized) if _parent(key) == normalized]
            listed = set(direct)

            # GIF previews are attached to their GIF, not listed on their own
            previews = {thumbnail_key_for(key) for key in direct if extension(key) == "gif"}
            images = [key for key in direct if is_image(key) and key not in previews]

            if images:
                if normalized != self.settings.illustrations_prefix:
                    logger.debug("illustrations_fallback_prefix_used", prefix=normalized)
                return normalized, images, listed
        return None

    def _url(self, key: str) -> str:
        expires = self.settings.url_expires_minutes if self.settings.signed_urls else None
        return self.url_generator.url(key, expires)

    def _build(self, key: str, listed: Set[str]) -> Illustration:
        url = self._url(key)
        thumbnail_url = None
        if extension(key) == "gif":
            preview = thumbnail_key_for(key)
            if preview in listed:
                thumbnail_url = self._url(preview)

        return Illustration(
            url=url,
            filename=filename(key),
            thumbnail_url=thumbnail_url,
        )
