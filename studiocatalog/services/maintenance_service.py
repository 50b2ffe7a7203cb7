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
Maintenance service - storage housekeeping behind the CLI

Generates JPEG previews for animated GIF illustrations and copies objects
from one key prefix to another.
"""

import io
from typing import TYPE_CHECKING, List, Optional, Tuple

from PIL import Image
from pydantic import BaseModel

from ..logging import get_logger
from ..utils.exceptions import ObjectNotFound
from ..utils.mime import guess_mime_type
from .illustration_service import IllustrationService, thumbnail_key_for

if TYPE_CHECKING:
    from ..storage.base import StorageAdapter

logger = get_logger(__name__)

THUMBNAIL_MAX_WIDTH = 400
THUMBNAIL_MAX_HEIGHT = 300
THUMBNAIL_QUALITY = 85


def thumbnail_size(width: int, height: int) -> Tuple[int, int]:
    """
    Preview dimensions keeping the aspect ratio.

    Landscape frames are capped at 400px wide, portrait and square frames
    at 300px high. Frames are never upscaled.

    >>> thumbnail_size(800, 600)
    (400, 300)
    >>> thumbnail_size(300, 600)
    (150, 300)
    >>> thumbnail_size(120, 80)
    (120, 80)
    """
    if width > height:
        new_width = min(width, THUMBNAIL_MAX_WIDTH)
        new_height = int(height * (new_width / width))
    else:
        new_height = min(height, THUMBNAIL_MAX_HEIGHT)
        new_width = int(width * (new_height / height))
    return max(new_width, 1), max(new_height, 1)


def render_gif_thumbnail(content: bytes) -> bytes:
    """
    Render the first frame of a GIF as a JPEG preview.

    Raises:
        OSError: If content is not a readable image
        EOFError: If a GIF ends before its first frame
    """
    with Image.open(io.BytesIO(content)) as img:
        img.seek(0)
        frame = img.convert("RGB")

    frame = frame.resize(thumbnail_size(*frame.size), Image.LANCZOS)
    buf = io.BytesIO()
    frame.save(buf, "JPEG", quality=THUMBNAIL_QUALITY)
    return buf.getvalue()


class ThumbnailResult(BaseModel):
    """Result of a GIF preview generation run"""

    gif_count: int = 0
    generated: List[str] = []
    skipped: List[str] = []
    failed: List[str] = []


class PrefixCopyResult(BaseModel):
    """Result of a prefix normalization run"""

    source: str
    target: str
    dry_run: bool = False
    copied: List[Tuple[str, str]] = []
    skipped: List[str] = []
    deleted: List[str] = []
    limit_reached: bool = False


class MaintenanceService:
    """
    Service for storage maintenance tasks.

    Handles:
    - GIF preview generation for the illustration gallery
    - Copying objects between key prefixes, optionally moving them
    """

    def __init__(self, storage: "StorageAdapter", illustration_service: IllustrationService):
        self.storage = storage
        self.illustration_service = illustration_service

    def generate_gif_thumbnails(self, force: bool = False) -> ThumbnailResult:
        """
        Write a "<name>_thumb.jpg" preview next to every gallery GIF.

        Args:
            force: Regenerate previews that already exist

        Returns:
            ThumbnailResult with the GIF keys grouped by outcome

        Raises:
            StorageUnavailable: If the backend cannot be listed or written
        """
        gifs = self.illustration_service.animated_keys()
        result = ThumbnailResult(gif_count=len(gifs))

        for key in gifs:
            preview = thumbnail_key_for(key)
            if not force and self.storage.exists(preview):
                result.skipped.append(key)
                continue

            try:
                jpeg = render_gif_thumbnail(self.storage.read_bytes(key))
            except (ObjectNotFound, OSError, EOFError) as e:
                logger.warning("gif_thumbnail_failed", key=key, error=str(e))
                result.failed.append(key)
                continue

            self.storage.write_bytes(preview, jpeg, content_type="image/jpeg")
            logger.info("gif_thumbnail_generated", key=key, preview=preview, size=len(jpeg))
            result.generated.append(key)

        return result

    def normalize_prefix(
        self,
        source: str,
        target: str,
        dry_run: bool = False,
        overwrite: bool = False,
        delete_original: bool = False,
        limit: Optional[int] = None,
    ) -> PrefixCopyResult:
        """
        Copy every object under source to the same relative key under target.

        Args:
            source: Prefix to copy from (e.g. "Video-Logs")
            target: Prefix to copy to (e.g. "video-logs")
            dry_run: Report what would be copied without writing
            overwrite: Replace objects that already exist under target
            delete_original: Remove each source object after it is copied
            limit: Stop after this many objects are processed

        Returns:
            PrefixCopyResult listing copied, skipped and deleted keys

        Raises:
            ValueError: If a prefix is empty or both prefixes are the same
            StorageUnavailable: If the backend cannot be listed or written
        """
        source = source.strip("/")
        target = target.strip("/")
        if not source or not target:
            raise ValueError("Both source and target prefixes are required")
        if source == target:
            raise ValueError(f"Source and target are the same prefix: {source}")

        result = PrefixCopyResult(source=source, target=target, dry_run=dry_run)
        search = f"{source}/"

        for key in self.storage.files(source):
            if not key.startswith(search):
                continue
            target_key = f"{target}/{key[len(search):]}"

            if not overwrite and self.storage.exists(target_key):
                result.skipped.append(target_key)
                continue

            if not dry_run:
                content_type = guess_mime_type(key, self.storage.content_type(key))
                self.storage.write_bytes(target_key, self.storage.read_bytes(key), content_type=content_type)
                logger.info("object_copied", source=key, target=target_key)
                if delete_original:
                    self.storage.delete(key)
                    result.deleted.append(key)

            result.copied.append((key, target_key))
            if limit and len(result.copied) >= limit:
                result.limit_reached = True
                break

        logger.info(
            "prefix_normalized",
            source=source,
            target=target,
            dry_run=dry_run,
            copied=len(result.copied),
            skipped=len(result.skipped),
        )
        return result
