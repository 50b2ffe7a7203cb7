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
Unit tests for the development file passthrough.

GET /api/video-logs/serve?path=... is only available in local and testing
environments.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from studiocatalog.storage import InMemoryStorageAdapter, LocalStorageAdapter
from studiocatalog.utils.exceptions import StorageUnavailable
from studiocatalog.web.app import create_app


@pytest.fixture
def storage():
    storage = InMemoryStorageAdapter()
    storage.put("video-logs/a.mp4", b"video-bytes")
    storage.put("images/vlogs/a.jpg", b"jpeg-bytes")
    storage.put("uploads/blob", b"webp-bytes", content_type="image/webp")
    return storage


@pytest.fixture
def make_client(storage, make_config):
    def _make(storage=storage, **overrides):
        return TestClient(create_app(make_config(**overrides), storage=storage))

    return _make


class TestServeFile:
    """Tests for GET /api/video-logs/serve."""

    def test_serves_video_with_extension_type(self, make_client):
        response = make_client().get("/api/video-logs/serve", params={"path": "video-logs/a.mp4"})

        assert response.status_code == 200
        assert response.content == b"video-bytes"
        assert response.headers["content-type"].startswith("video/mp4")

    def test_serves_image(self, make_client):
        response = make_client().get("/api/video-logs/serve", params={"path": "/images/vlogs/a.jpg"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/jpeg")

    def test_backend_content_type_wins(self, make_client):
        response = make_client().get("/api/video-logs/serve", params={"path": "uploads/blob"})

        assert response.headers["content-type"].startswith("image/webp")

    def test_local_environment_allowed(self, make_client):
        response = make_client(app_env="local").get("/api/video-logs/serve", params={"path": "video-logs/a.mp4"})

        assert response.status_code == 200

    def test_missing_path_is_bad_request(self, make_client):
        response = make_client().get("/api/video-logs/serve")

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing path"

    def test_blank_path_is_bad_request(self, make_client):
        assert make_client().get("/api/video-logs/serve", params={"path": "  "}).status_code == 400

    def test_missing_object_is_not_found(self, make_client):
        response = make_client().get("/api/video-logs/serve", params={"path": "video-logs/missing.mp4"})

        assert response.status_code == 404

    def test_read_failure_is_server_error(self, storage, make_client):
        with patch.object(storage, "read_bytes", side_effect=StorageUnavailable("disk gone")):
            response = make_client().get("/api/video-logs/serve", params={"path": "video-logs/a.mp4"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to read file"

    @pytest.mark.parametrize("app_env", ["production", "staging"])
    def test_disabled_outside_dev_environments(self, make_client, app_env):
        response = make_client(app_env=app_env).get("/api/video-logs/serve", params={"path": "video-logs/a.mp4"})

        assert response.status_code == 404

    def test_path_traversal_rejected(self, tmp_path, make_client):
        local = LocalStorageAdapter(str(tmp_path / "bucket"))
        (tmp_path / "secret.txt").write_text("nope")

        response = make_client(storage=local).get("/api/video-logs/serve", params={"path": "../secret.txt"})

        assert response.status_code == 400
