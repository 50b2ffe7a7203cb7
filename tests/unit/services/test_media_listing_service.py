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
Unit tests for MediaListingService.

Tests cover:
- Fallback catalog when storage is empty, unavailable or has no videos
- Video/thumbnail pairing by base name
- Title and date derivation
- Deterministic ordering and id assignment
- Signed URL and CDN handling
"""

from datetime import datetime, timezone
from unittest.mock import patch
from urllib.parse import parse_qs, urlsplit

import pytest

from studiocatalog.services import FALLBACK_CATALOG, MediaListingService
from studiocatalog.storage import InMemoryStorageAdapter
from studiocatalog.utils.exceptions import ObjectNotFound, SigningUnsupported, StorageUnavailable
from studiocatalog.utils.url_generator import StorageUrlGenerator


def utc(year, month, day):
    return datetime(year, month, day, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def storage():
    return InMemoryStorageAdapter(base_url="https://media.example.com")


@pytest.fixture
def make_service(storage, make_config, fixed_clock):
    def _make(storage=storage, **overrides):
        config = make_config(**overrides)
        generator = StorageUrlGenerator(storage, cdn_host=config.cdn_host, clock=fixed_clock)
        return MediaListingService(storage, generator, config)

    return _make


class TestFallback:
    """The static catalog replaces empty or unreachable storage."""

    def test_empty_storage_returns_full_fallback(self, make_service):
        entries = make_service().list_entries()

        assert entries == list(FALLBACK_CATALOG)
        assert [entry.id for entry in entries] == [1, 2]
        assert entries[0].title == "Studio Update — Composing Session"
        assert entries[1].date == "2025-09-28"

    def test_only_thumbnails_returns_fallback(self, storage, make_service):
        storage.put("images/vlogs/lonely.jpg")
        storage.put("video-logs/notes.txt")

        assert make_service().list_entries() == list(FALLBACK_CATALOG)

    def test_unavailable_storage_returns_fallback(self, make_service):
        down = InMemoryStorageAdapter(unavailable=True)

        assert make_service(storage=down).list_entries() == list(FALLBACK_CATALOG)

    def test_failure_mid_listing_returns_fallback_not_partial(self, storage, make_service):
        storage.put("video-logs/a.mp4")
        storage.put("video-logs/b.mp4")

        with patch.object(storage, "last_modified", side_effect=StorageUnavailable("timeout")):
            entries = make_service().list_entries()

        assert entries == list(FALLBACK_CATALOG)

    def test_fallback_entries_are_independent_copies(self, make_service):
        first = make_service().list_entries()
        first.clear()

        assert len(make_service().list_entries()) == 2


class TestPairing:
    """Videos pair with thumbnails sharing their base name."""

    def test_video_with_thumbnail(self, storage, make_service):
        storage.put("video-logs/testvideo.mp4", b"video")
        storage.put("images/vlogs/testvideo.jpg", b"image")

        entries = make_service().list_entries()

        assert len(entries) == 1
        entry = entries[0]
        assert entry.id == 1
        assert entry.title == "Testvideo"
        assert entry.url == "https://media.example.com/video-logs/testvideo.mp4"
        assert entry.thumbnail == "https://media.example.com/images/vlogs/testvideo.jpg"
        assert entry.description is None

    def test_orphan_thumbnail_dropped(self, storage, make_service):
        storage.put("video-logs/studio-update.mp4")
        storage.put("images/vlogs/studio-update.png")
        storage.put("images/vlogs/orphan.jpg")

        entries = make_service().list_entries()

        assert [entry.title for entry in entries] == ["Studio Update"]
        assert all("orphan" not in entry.thumbnail for entry in entries)

    def test_unpaired_video_uses_default_thumbnail(self, storage, make_service):
        storage.put("video-logs/solo.webm")

        entries = make_service(default_thumbnail_url="/images/vlogs/default.jpg").list_entries()

        assert entries[0].thumbnail == "/images/vlogs/default.jpg"

    def test_unpaired_video_default_is_empty(self, storage, make_service):
        storage.put("video-logs/solo.webm")

        assert make_service().list_entries()[0].thumbnail == ""

    def test_missing_thumbnail_object_uses_default(self, storage, make_service):
        storage.put("video-logs/clip.mp4")
        storage.put("images/vlogs/clip.jpg")
        service = make_service(default_thumbnail_url="/images/vlogs/default.jpg")

        with patch.object(storage, "exists", return_value=False):
            entries = service.list_entries()

        assert entries[0].thumbnail == "/images/vlogs/default.jpg"
        assert entries[0].url == "https://media.example.com/video-logs/clip.mp4"

    def test_thumbnail_not_found_uses_default(self, storage, make_service):
        storage.put("video-logs/clip.mp4")
        storage.put("images/vlogs/clip.jpg")
        service = make_service(default_thumbnail_url="/images/vlogs/default.jpg")

        with patch.object(storage, "exists", side_effect=ObjectNotFound("gone", key="images/vlogs/clip.jpg")):
            entries = service.list_entries()

        assert entries[0].thumbnail == "/images/vlogs/default.jpg"
        assert entries[0].url == "https://media.example.com/video-logs/clip.mp4"

    def test_duplicate_base_names_keep_first_key(self, storage, make_service):
        storage.put("video-logs/clip.mp4")
        storage.put("video-logs/nested/clip.webm")
        storage.put("images/vlogs/clip.jpg")
        storage.put("images/vlogs/clip.png")

        entries = make_service().list_entries()

        assert len(entries) == 1
        assert entries[0].url.endswith("/video-logs/clip.mp4")
        assert entries[0].thumbnail.endswith("/images/vlogs/clip.jpg")

    def test_non_media_files_ignored(self, storage, make_service):
        storage.put("video-logs/clip.mp4")
        storage.put("video-logs/clip.srt")
        storage.put("images/vlogs/clip.psd")

        entries = make_service().list_entries()

        assert len(entries) == 1
        assert entries[0].thumbnail == ""


class TestOrdering:
    """Entries sort by date descending, undated last, then last-modified time, then base name."""

    def test_sort_order_and_ids(self, storage, make_service):
        storage.put("video-logs/older.mp4", last_modified=utc(2025, 1, 1))
        storage.put("video-logs/newer.mp4", last_modified=utc(2025, 3, 1))
        storage.put("video-logs/zeta.mp4")
        storage.put("video-logs/alpha.mp4")
        storage.put("video-logs/2024-05-06-sketchbook.mp4")

        entries = make_service().list_entries()

        assert [(entry.id, entry.title, entry.date) for entry in entries] == [
            (1, "Newer", "2025-03-01"),
            (2, "Older", "2025-01-01"),
            (3, "2024 05 06 Sketchbook", "2024-05-06"),
            (4, "Alpha", ""),
            (5, "Zeta", ""),
        ]

    def test_same_date_ties_break_on_base_name(self, storage, make_service):
        storage.put("video-logs/b-side.mp4", last_modified=utc(2025, 6, 1))
        storage.put("video-logs/a-side.mp4", last_modified=utc(2025, 6, 1))

        assert [entry.title for entry in make_service().list_entries()] == ["A Side", "B Side"]

    def test_same_day_ties_break_on_last_modified_time(self, storage, make_service):
        storage.put("video-logs/morning.mp4", last_modified=datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc))
        storage.put("video-logs/zz-evening.mp4", last_modified=datetime(2025, 6, 1, 21, 30, tzinfo=timezone.utc))

        entries = make_service().list_entries()

        assert [entry.title for entry in entries] == ["Zz Evening", "Morning"]
        assert {entry.date for entry in entries} == {"2025-06-01"}

    def test_last_modified_wins_over_filename_date(self, storage, make_service):
        storage.put("video-logs/2020-01-01-retro.mp4", last_modified=utc(2025, 2, 2))

        assert make_service().list_entries()[0].date == "2025-02-02"

    def test_order_independent_of_worker_count(self, storage, make_service):
        for day in range(1, 10):
            storage.put(f"video-logs/clip-{day}.mp4", last_modified=utc(2025, 4, day % 3 + 1))
            storage.put(f"images/vlogs/clip-{day}.jpg")

        single = make_service(listing_max_workers=1).list_entries()
        many = make_service(listing_max_workers=8).list_entries()

        assert single == many
        assert [entry.id for entry in many] == list(range(1, 10))

    def test_repeated_calls_are_identical(self, storage, make_service):
        storage.put("video-logs/a.mp4", last_modified=utc(2025, 4, 1))
        storage.put("video-logs/b.mp4")
        service = make_service()

        assert service.list_entries() == service.list_entries()


class TestUrlResolution:
    """Signed URLs and CDN rewriting."""

    def test_signed_urls(self, storage, make_service, fixed_clock):
        storage.put("video-logs/a.mp4")
        storage.put("images/vlogs/a.jpg")

        entry = make_service(signed_urls=True, url_expires_minutes=30).list_entries()[0]

        expected = int(fixed_clock().timestamp()) + 30 * 60
        assert int(parse_qs(urlsplit(entry.url).query)["expires"][0]) == expected
        assert "signature" in parse_qs(urlsplit(entry.thumbnail).query)

    def test_signing_unsupported_propagates(self, make_service):
        storage = InMemoryStorageAdapter(can_sign=False)
        storage.put("video-logs/a.mp4")

        with pytest.raises(SigningUnsupported):
            make_service(storage=storage, signed_urls=True).list_entries()

    def test_cdn_host(self, storage, make_service):
        storage.put("video-logs/a.mp4")

        entry = make_service(cdn_host="cdn.example.com").list_entries()[0]

        parts = urlsplit(entry.url)
        assert parts.netloc == "cdn.example.com"
        assert parts.path == "/video-logs/a.mp4"

    def test_custom_prefixes(self, storage, make_service):
        storage.put("vlogs/a.mp4")
        storage.put("thumbs/a.jpg")

        entries = make_service(video_prefix="vlogs", image_prefix="thumbs").list_entries()

        assert entries[0].thumbnail.endswith("/thumbs/a.jpg")

    def test_generator_built_from_settings_when_missing(self, storage, make_config):
        storage.put("video-logs/a.mp4")

        service = MediaListingService(storage, None, make_config(cdn_host="cdn.example.com"))

        assert urlsplit(service.list_entries()[0].url).netloc == "cdn.example.com"
