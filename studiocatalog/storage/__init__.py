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
Object storage backends for the media catalog.

Usage:
    from studiocatalog.storage import create_storage_adapter

    storage = create_storage_adapter(config)
    keys = storage.files("video-logs")
"""

from typing import TYPE_CHECKING

from ..logging import get_logger
from ..utils.exceptions import ConfigurationError
from .base import StorageAdapter
from .local import LocalStorageAdapter
from .memory import InMemoryStorageAdapter
from .s3 import S3StorageAdapter

if TYPE_CHECKING:
    from ..utils.config import Config

logger = get_logger(__name__)


def create_storage_adapter(config: "Config") -> StorageAdapter:
    """
    Create the storage adapter selected by configuration.

    Args:
        config: Application configuration

    Returns:
        Adapter for config.storage_backend

    Raises:
        ConfigurationError: If the backend is unknown or misconfigured
    """
    backend = config.storage_backend.lower()

    if backend == "local":
        logger.info("storage_backend_selected", backend="local", path=str(config.storage_path))
        return LocalStorageAdapter(str(config.storage_path), public_base_url=config.storage_public_url)

    if backend == "s3":
        if not config.aws_bucket:
            raise ConfigurationError("AWS_BUCKET is required for the s3 storage backend")
        logger.info(
            "storage_backend_selected",
            backend="s3",
            bucket=config.aws_bucket,
            region=config.aws_region,
            endpoint=config.aws_endpoint,
        )
        return S3StorageAdapter(**config.boto3_client_kwargs())

    if backend == "memory":
        logger.info("storage_backend_selected", backend="memory")
        return InMemoryStorageAdapter()

    raise ConfigurationError(f"Unknown storage backend: {backend}", backend=backend)


__all__ = [
    "StorageAdapter",
    "LocalStorageAdapter",
    "S3StorageAdapter",
    "InMemoryStorageAdapter",
    "create_storage_adapter",
]
