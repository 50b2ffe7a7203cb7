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

"""Shared fixtures for studiocatalog tests."""

from datetime import datetime, timezone

import pytest

from studiocatalog.storage import InMemoryStorageAdapter
from studiocatalog.utils.config import Config

FIXED_NOW = datetime(2025, 10, 17, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def make_config(tmp_path):
    """Factory for Config objects with test-friendly defaults."""

    def _make(**overrides):
        values = {
            "app_env": "testing",
            "storage_backend": "memory",
            "storage_path": tmp_path / "storage",
        }
        values.update(overrides)
        return Config(**values)

    return _make


@pytest.fixture
def memory_storage():
    """Empty in-memory storage."""
    return InMemoryStorageAdapter()
