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
Media listing service - builds the video log catalog from object storage.

Lists the video prefix, pairs each video with a thumbnail of the same base
name from the image prefix, derives a title and date, and returns entries
newest first. When storage is empty or unavailable the static fallback
catalog is returned in full.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from ..logging import get_logger
from ..models.media import MediaEntry
from ..utils.exceptions import ObjectNotFound, StorageUnavailable
from ..utils.media_names import base_name, derive_title, is_image, is_video, parse_date_token
from ..utils.url_generator import StorageUrlGenerator

if TYPE_CHECKING:
    from ..storage.base import StorageAdapter
    from ..utils.config import Config

logger = get_logger(__name__)

FALLBACK_CATALOG: Tuple[MediaEntry, ...] = (
    MediaEntry(
        id=1,
        title="Studio Update — Composing Session",
        date="2025-10-10",
        thumbnail="/images/vlogs/session-thumbnail.jpg",
        url="/videos/session.mp4",
        description="A look into the music composing session with new synth textures.",
    ),
    MediaEntry(
        id=2,
        title="3D Character Concept Walkthrough",
        date="2025-09-28",
        thumbnail="/images/vlogs/3d-thumbnail.jpg",
        url="/videos/3d-concept.mp4",
        description="Discussing the 2D to 3D pipeline and collaborations.",
    ),
)


def fallback_catalog() -> List[MediaEntry]:
    """Static catalog served when storage yields nothing."""
    return list(FALLBACK_CATALOG)


@dataclass
class _MediaGroup:
    """A video and its optional thumbnail, keyed by shared base name."""

    base: str
    media_key: str
    thumbnail_key: Optional[str] = None


@dataclass
class _ResolvedGroup:
    base: str
    title: str
    date: str
    url: str
    thumbnail: str
    modified: Optional[datetime] = None


def _modified_timestamp(group: _ResolvedGroup) -> float:
    # Groups without a last-modified time sort after every dated one
    if group.modified is None:
        return float("-inf")
    return group.modified.timestamp()


class MediaListingService:
    """
    Service for resolving the video log catalog.

    Attributes:
        storage: Storage adapter holding videos and thumbnails
        url_generator: Turns storage keys into public or signed URLs
        settings: Prefixes, signing and concurrency settings
    """

    def __init__(
        self,
        storage: "StorageAdapter",
        url_generator: Optional[StorageUrlGenerator],
        settings: "Config",
    ) -> None:
        """
        Initialize media listing service.

        Args:
            storage: Storage adapter to list
            url_generator: URL generator; built from storage and settings when None
            settings: Application configuration
        """
        self.storage = storage
        self.settings = settings
        self.url_generator = url_generator or StorageUrlGenerator(
            storage,
            cdn_host=settings.cdn_host,
            expiry_tolerance_seconds=settings.url_expiry_tolerance_seconds,
        )

    def list_entries(self) -> List[MediaEntry]:
        """
        Build the ordered catalog.

        Returns:
            Entries sorted by date (newest first, undated last) then base
            name, with ids 1..n in that order; the static fallback catalog
            when storage is empty or unavailable

        Raises:
            SigningUnsupported: If signed URLs are enabled but the backend
                cannot sign
        """
        prefix = self.settings.video_prefix
        try:
            entries = self._resolve_entries()
        except StorageUnavailable as e:
            logger.warning("storage_unavailable", prefix=prefix, error=str(e), fallback=True)
            return fallback_catalog()

        if not entries:
            logger.info("media_listing_empty", prefix=prefix, fallback=True)
            return fallback_catalog()

        logger.info("media_listing_resolved", prefix=prefix, entries=len(entries))
        return entries

    def _resolve_entries(self) -> List[MediaEntry]:
        media_keys = [key for key in self.storage.files(self.settings.video_prefix) if is_video(key)]
        if not media_keys:
            return []

        image_keys = [key for key in self.storage.files(self.settings.image_prefix) if is_image(key)]
        groups = self._group(media_keys, image_keys)

        resolved = self._resolve_groups(groups)

        # Stable sort: date descending, then last-modified descending, then base name ascending
        resolved.sort(key=lambda group: group.base)
        resolved.sort(key=_modified_timestamp, reverse=True)
        resolved.sort(key=lambda group: group.date, reverse=True)

        return [
            MediaEntry(id=index, title=group.title, date=group.date, thumbnail=group.thumbnail, url=group.url)
            for index, group in enumerate(resolved, start=1)
        ]

    @staticmethod
    def _group(media_keys: List[str], image_keys: List[str]) -> List[_MediaGroup]:
        """Pair media with thumbnails by base name; first key of each kind wins."""
        groups: Dict[str, _MediaGroup] = {}
        for key in media_keys:
            base = base_name(key)
            if base in groups:
                logger.debug("duplicate_media_ignored", key=key, kept=groups[base].media_key)
                continue
            groups[base] = _MediaGroup(base=base, media_key=key)

        for key in image_keys:
            group = groups.get(base_name(key))
            # Orphan thumbnails are dropped
            if group is not None and group.thumbnail_key is None:
                group.thumbnail_key = key

        return list(groups.values())

    def _resolve_groups(self, groups: List[_MediaGroup]) -> List[_ResolvedGroup]:
        max_workers = max(1, min(self.settings.listing_max_workers, 2 * len(groups)))

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            pending: List[Tuple[_MediaGroup, Future, Optional[Future]]] = []
            for group in groups:
                media_future = executor.submit(self._resolve_media, group.media_key)
                thumb_future = None
                if group.thumbnail_key is not None:
                    thumb_future = executor.submit(self._resolve_thumbnail, group.thumbnail_key)
                pending.append((group, media_future, thumb_future))

            resolved = []
            for group, media_future, thumb_future in pending:
                modified, url = media_future.result()
                thumbnail = thumb_future.result() if thumb_future is not None else None
                resolved.append(
                    _ResolvedGroup(
                        base=group.base,
                        title=derive_title(group.base),
                        date=self._entry_date(group.base, modified),
                        url=url,
                        thumbnail=thumbnail if thumbnail is not None else self.settings.default_thumbnail_url,
                        modified=modified,
                    )
                )

        return resolved

    def _expires_minutes(self) -> Optional[int]:
        return self.settings.url_expires_minutes if self.settings.signed_urls else None

    def _resolve_media(self, key: str) -> Tuple[Optional[datetime], str]:
        modified = self.storage.last_modified(key)
        return modified, self.url_generator.url(key, self._expires_minutes())

    def _resolve_thumbnail(self, key: str) -> Optional[str]:
        try:
            if not self.storage.exists(key):
                return None
        except ObjectNotFound:
            return None
        return self.url_generator.url(key, self._expires_minutes())

    @staticmethod
    def _entry_date(base: str, modified: Optional[datetime]) -> str:
        if modified is not None:
            if modified.tzinfo is not None:
                modified = modified.astimezone(timezone.utc)
            return modified.strftime("%Y-%m-%d")
        token = parse_date_token(base)
        return token.isoformat() if token else ""
