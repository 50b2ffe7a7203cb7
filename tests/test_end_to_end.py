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
End-to-end test: local storage on disk, served through the web app.

The URLs in the listing are fetched back from the same app, both through
the development passthrough and through the default /storage mount.
"""

from urllib.parse import urlsplit

import pytest
from fastapi.testclient import TestClient

from studiocatalog.storage import LocalStorageAdapter
from studiocatalog.web.app import create_app


@pytest.fixture
def client(tmp_path, make_config):
    bucket = tmp_path / "bucket"
    storage = LocalStorageAdapter(str(bucket), public_base_url="http://testserver/api/video-logs/serve?path=")
    storage.write_bytes("video-logs/testvideo.mp4", b"\x00\x00\x00\x18ftypmp42")
    storage.write_bytes("images/vlogs/testvideo.jpg", b"\xff\xd8\xff\xe0")

    config = make_config(
        storage_backend="local",
        storage_path=bucket,
        storage_public_url="http://testserver/api/video-logs/serve?path=",
    )
    return TestClient(create_app(config, storage=storage))


def test_listing_resolves_playable_entry(client):
    response = client.get("/api/video-logs")

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data) == 1

    entry = data[0]
    assert entry["id"] == 1
    assert entry["title"] == "Testvideo"
    assert len(entry["date"]) == 10
    assert entry["description"] is None

    video = client.get(entry["url"])
    assert video.status_code == 200
    assert video.headers["content-type"].startswith("video/")

    thumbnail = client.get(entry["thumbnail"])
    assert thumbnail.status_code == 200
    assert thumbnail.headers["content-type"].startswith("image/")


def test_listing_urls_point_at_passthrough(client):
    entry = client.get("/api/video-logs").json()["data"][0]

    assert urlsplit(entry["url"]).path == "/api/video-logs/serve"
    assert urlsplit(entry["thumbnail"]).query.endswith("images/vlogs/testvideo.jpg")


@pytest.fixture
def default_client(tmp_path, make_config):
    bucket = tmp_path / "storage"
    seed = LocalStorageAdapter(str(bucket))
    seed.write_bytes("video-logs/testvideo.mp4", b"\x00\x00\x00\x18ftypmp42")
    seed.write_bytes("images/vlogs/testvideo.jpg", b"\xff\xd8\xff\xe0")

    # Default STORAGE_PUBLIC_URL; the app builds its own local adapter
    config = make_config(storage_backend="local", storage_path=bucket)
    return TestClient(create_app(config))


def test_default_public_url_is_served_by_the_app(default_client):
    entry = default_client.get("/api/video-logs").json()["data"][0]

    assert entry["url"] == "http://localhost:8000/storage/video-logs/testvideo.mp4"

    video = default_client.get(entry["url"])
    assert video.status_code == 200
    assert video.headers["content-type"].startswith("video/")
    assert video.content == b"\x00\x00\x00\x18ftypmp42"

    thumbnail = default_client.get(entry["thumbnail"])
    assert thumbnail.status_code == 200
    assert thumbnail.headers["content-type"].startswith("image/")


def test_default_public_url_missing_object_is_404(default_client):
    assert default_client.get("/storage/video-logs/missing.mp4").status_code == 404
