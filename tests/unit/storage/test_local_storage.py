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

"""Unit tests for LocalStorageAdapter."""

import os
from datetime import datetime, timezone

import pytest

from studiocatalog.storage import LocalStorageAdapter, StorageAdapter
from studiocatalog.utils.exceptions import ObjectNotFound, SigningUnsupported


@pytest.fixture
def storage(tmp_path):
    storage = LocalStorageAdapter(str(tmp_path / "bucket"), public_base_url="http://localhost:8000/storage/")
    storage.write_bytes("video-logs/b.mp4", b"bbb")
    storage.write_bytes("video-logs/a.mp4", b"aaa")
    storage.write_bytes("video-logs/nested/c.webm", b"ccc")
    storage.write_bytes("images/vlogs/a.jpg", b"jpg")
    return storage


class TestLocalStorage:
    """Tests for the filesystem adapter."""

    def test_satisfies_protocol(self, storage):
        assert isinstance(storage, StorageAdapter)

    def test_files_lists_recursively_in_lexical_order(self, storage):
        assert storage.files("video-logs") == [
            "video-logs/a.mp4",
            "video-logs/b.mp4",
            "video-logs/nested/c.webm",
        ]

    def test_files_accepts_trailing_slash(self, storage):
        assert storage.files("images/vlogs/") == ["images/vlogs/a.jpg"]

    def test_missing_prefix_is_empty(self, storage):
        assert storage.files("does-not-exist") == []

    def test_root_prefix_lists_everything(self, storage):
        assert len(storage.files("")) == 4

    def test_exists(self, storage):
        assert storage.exists("video-logs/a.mp4")
        assert not storage.exists("video-logs/missing.mp4")
        assert not storage.exists("video-logs")

    def test_last_modified_is_utc(self, storage):
        path = storage.base_path / "video-logs" / "a.mp4"
        stamp = datetime(2025, 10, 10, 9, 30, tzinfo=timezone.utc).timestamp()
        os.utime(path, (stamp, stamp))

        assert storage.last_modified("video-logs/a.mp4") == datetime(2025, 10, 10, 9, 30, tzinfo=timezone.utc)

    def test_last_modified_missing(self, storage):
        assert storage.last_modified("video-logs/missing.mp4") is None

    def test_url_joins_public_base(self, storage):
        assert storage.url("video-logs/a.mp4") == "http://localhost:8000/storage/video-logs/a.mp4"

    def test_url_quotes_special_characters(self, storage):
        assert storage.url("video-logs/my clip.mp4") == "http://localhost:8000/storage/video-logs/my%20clip.mp4"

    def test_temporary_url_unsupported(self, storage):
        with pytest.raises(SigningUnsupported):
            storage.temporary_url("video-logs/a.mp4", datetime.now(timezone.utc))

    def test_read_bytes(self, storage):
        assert storage.read_bytes("video-logs/a.mp4") == b"aaa"

    def test_read_missing_raises_not_found(self, storage):
        with pytest.raises(ObjectNotFound):
            storage.read_bytes("video-logs/missing.mp4")

    def test_path_traversal_rejected(self, storage):
        with pytest.raises(ValueError, match="escapes"):
            storage.read_bytes("../outside.txt")

    def test_no_content_type_metadata(self, storage):
        assert storage.content_type("video-logs/a.mp4") is None

    def test_write_bytes_replaces_content(self, storage):
        storage.write_bytes("video-logs/a.mp4", b"new")

        assert storage.read_bytes("video-logs/a.mp4") == b"new"

    def test_write_outside_base_rejected(self, storage):
        with pytest.raises(ValueError, match="escapes"):
            storage.write_bytes("../outside.txt", b"x")

    def test_delete(self, storage):
        storage.delete("video-logs/a.mp4")

        assert not storage.exists("video-logs/a.mp4")
        assert storage.files("video-logs") == ["video-logs/b.mp4", "video-logs/nested/c.webm"]

    def test_delete_missing_is_noop(self, storage):
        storage.delete("video-logs/missing.mp4")

        assert storage.exists("video-logs/b.mp4")
