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
URL generator for stored media.

Turns storage keys into URLs that browsers can fetch: the backend's public
URL, or a time-limited signed URL, optionally rewritten onto a CDN host.
"""

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Callable, Dict, Optional
from urllib.parse import parse_qsl, urlsplit, urlunsplit

if TYPE_CHECKING:
    from ..storage.base import StorageAdapter

AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def rewrite_host(url: str, cdn_host: str) -> str:
    """
    Move a URL onto a CDN host, keeping its path and query.

    The CDN value may be a bare host ("cdn.example.com") or carry a scheme
    ("https://cdn.example.com"); without one the original scheme is kept.

    Examples:
        >>> rewrite_host("https://bucket.s3.amazonaws.com/video-logs/a.mp4?x=1", "cdn.example.com")
        'https://cdn.example.com/video-logs/a.mp4?x=1'
    """
    original = urlsplit(url)
    target = urlsplit(cdn_host if "://" in cdn_host else f"//{cdn_host}")
    scheme = target.scheme or original.scheme
    return urlunsplit((scheme, target.netloc, original.path, original.query, original.fragment))


def embedded_expiry(url: str) -> Optional[datetime]:
    """
    Read the absolute expiry time carried by a signed URL.

    Understands SigV4 query signing (X-Amz-Date + X-Amz-Expires) and plain
    epoch parameters (Expires / expires). Returns None for unsigned URLs.
    """
    params: Dict[str, str] = {}
    for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        params.setdefault(key.lower(), value)

    try:
        if "x-amz-date" in params and "x-amz-expires" in params:
            signed_at = datetime.strptime(params["x-amz-date"], AMZ_DATE_FORMAT).replace(tzinfo=timezone.utc)
            return signed_at + timedelta(seconds=int(params["x-amz-expires"]))
        if "expires" in params:
            return datetime.fromtimestamp(int(params["expires"]), tz=timezone.utc)
    except ValueError:
        return None
    return None


class StorageUrlGenerator:
    """
    Generates fetchable URLs for storage keys.

    Usage:
        urls = StorageUrlGenerator(storage, cdn_host="cdn.example.com")
        public = urls.url("video-logs/a.mp4")
        signed = urls.url("video-logs/a.mp4", expires_minutes=60)
    """

    def __init__(
        self,
        storage: "StorageAdapter",
        cdn_host: Optional[str] = None,
        clock: Callable[[], datetime] = _utcnow,
        expiry_tolerance_seconds: int = 20,
    ):
        """
        Args:
            storage: Adapter that produces backend-native URLs
            cdn_host: Optional CDN host (with or without scheme) to serve from
            clock: Returns the current UTC time
            expiry_tolerance_seconds: Allowed clock skew when checking signed URLs
        """
        self.storage = storage
        self.cdn_host = cdn_host.strip().rstrip("/") if cdn_host and cdn_host.strip() else None
        self.clock = clock
        self.expiry_tolerance_seconds = expiry_tolerance_seconds

    def url(self, path: str, expires_minutes: Optional[int] = None) -> str:
        """
        Generate a URL for a storage path.

        Args:
            path: Storage key (e.g., "video-logs/a.mp4")
            expires_minutes: When given, produce a signed URL valid for this long

        Returns:
            Public or signed URL, on the CDN host when one is configured

        Raises:
            SigningUnsupported: If a signed URL is requested from a backend
                that cannot sign
        """
        if expires_minutes is None:
            raw = self.storage.url(path)
        else:
            expires_at = self.clock() + timedelta(minutes=expires_minutes)
            raw = self.storage.temporary_url(path, expires_at)

        if self.cdn_host:
            return rewrite_host(raw, self.cdn_host)
        return raw

    def expiry_within_tolerance(self, url: str, expires_minutes: int, now: Optional[datetime] = None) -> bool:
        """Check that a signed URL expires expires_minutes from now, give or take the skew tolerance."""
        expires_at = embedded_expiry(url)
        if expires_at is None:
            return False
        expected = (now or self.clock()) + timedelta(minutes=expires_minutes)
        return abs((expires_at - expected).total_seconds()) <= self.expiry_tolerance_seconds
