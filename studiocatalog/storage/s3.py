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
S3 storage adapter (AWS S3 and S3-compatible services such as MinIO).

Usage:
    storage = S3StorageAdapter(
        bucket="studio-cdn",
        region="us-east-1",
        endpoint_url="http://127.0.0.1:9000",  # MinIO
        use_path_style=True,
    )
    keys = storage.files("video-logs")
"""

import math
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional
from urllib.parse import quote

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from ..logging import get_logger
from ..utils.exceptions import ObjectNotFound, SigningUnsupported, StorageUnavailable

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = get_logger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}

# SigV4 presigned URLs are capped at seven days
MAX_PRESIGN_SECONDS = 7 * 24 * 3600


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


class S3StorageAdapter:
    """
    Object storage backed by an S3 bucket.

    Every boto3 failure that is not a plain "key does not exist" is
    surfaced as StorageUnavailable so the catalog can tell an outage from
    an empty prefix. Retries are left to botocore's retry configuration.
    """

    backend_name = "s3"

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,
        use_path_style: bool = False,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        client: Optional[Any] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """
        Initialize S3 storage.

        Args:
            bucket: S3 bucket name
            region: AWS region (default: us-east-1)
            endpoint_url: Custom endpoint for S3-compatible services
            use_path_style: Address the bucket in the path instead of the host
            access_key_id: AWS access key (uses environment/IAM if not provided)
            secret_access_key: AWS secret key (uses environment/IAM if not provided)
            client: Pre-built boto3 S3 client (tests inject a mock here)
            clock: Returns the current UTC time; used to turn absolute
                expiry times into presign durations
        """
        self.bucket_name = bucket
        self._region = region
        self._endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        self._use_path_style = use_path_style
        self._clock = clock

        if client is not None:
            self._client = client
            return

        client_kwargs: Dict[str, Any] = {
            "service_name": "s3",
            "region_name": region,
            "config": BotoConfig(
                signature_version="s3v4",
                retries={"max_attempts": 3, "mode": "adaptive"},
                s3={"addressing_style": "path" if use_path_style else "auto"},
            ),
        }

        if endpoint_url:
            client_kwargs["endpoint_url"] = endpoint_url

        if access_key_id and secret_access_key:
            client_kwargs["aws_access_key_id"] = access_key_id
            client_kwargs["aws_secret_access_key"] = secret_access_key

        self._client: "S3Client" = boto3.client(**client_kwargs)

    def _unavailable(self, action: str, target: str, error: Exception) -> StorageUnavailable:
        logger.warning(
            "s3_request_failed",
            action=action,
            target=target,
            bucket=self.bucket_name,
            error=str(error),
            error_type=type(error).__name__,
        )
        return StorageUnavailable(
            f"S3 {action} failed for {target!r}: {error}",
            backend=self.backend_name,
            bucket=self.bucket_name,
        )

    @staticmethod
    def _key(path: str) -> str:
        return path.replace("\\", "/").lstrip("/")

    def _head(self, key: str) -> Optional[Dict[str, Any]]:
        """HEAD an object; None when it does not exist."""
        try:
            return self._client.head_object(Bucket=self.bucket_name, Key=self._key(key))
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return None
            raise self._unavailable("head_object", key, e) from e
        except BotoCoreError as e:
            raise self._unavailable("head_object", key, e) from e

    def files(self, prefix: str) -> List[str]:
        normalized = self._key(prefix).rstrip("/")
        search_prefix = f"{normalized}/" if normalized else ""

        keys: List[str] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket_name, Prefix=search_prefix):
                for obj in page.get("Contents", []):
                    key = obj["Key"]
                    # Skip "directory" markers
                    if key.endswith("/"):
                        continue
                    keys.append(key)
        except (ClientError, BotoCoreError) as e:
            raise self._unavailable("list_objects_v2", search_prefix, e) from e

        return sorted(keys)

    def exists(self, key: str) -> bool:
        return self._head(key) is not None

    def last_modified(self, key: str) -> Optional[datetime]:
        response = self._head(key)
        if response is None:
            return None
        modified = response.get("LastModified")
        if modified is not None and modified.tzinfo is None:
            modified = modified.replace(tzinfo=timezone.utc)
        return modified

    def url(self, path: str) -> str:
        key = quote(self._key(path))
        if self._endpoint_url:
            return f"{self._endpoint_url}/{self.bucket_name}/{key}"
        if self._use_path_style:
            return f"https://s3.{self._region}.amazonaws.com/{self.bucket_name}/{key}"
        return f"https://{self.bucket_name}.s3.{self._region}.amazonaws.com/{key}"

    def temporary_url(self, path: str, expires_at: datetime) -> str:
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        seconds = math.ceil((expires_at - self._clock()).total_seconds())
        expires_in = min(max(seconds, 1), MAX_PRESIGN_SECONDS)

        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": self._key(path)},
                ExpiresIn=expires_in,
            )
        except NoCredentialsError as e:
            raise SigningUnsupported(
                "S3 credentials are required to sign URLs",
                backend=self.backend_name,
                path=path,
            ) from e
        except (ClientError, BotoCoreError) as e:
            raise self._unavailable("generate_presigned_url", path, e) from e

    def read_bytes(self, key: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self.bucket_name, Key=self._key(key))
            return response["Body"].read()
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise ObjectNotFound(f"File not found: {key}", backend=self.backend_name) from e
            raise self._unavailable("get_object", key, e) from e
        except BotoCoreError as e:
            raise self._unavailable("get_object", key, e) from e

    def content_type(self, key: str) -> Optional[str]:
        response = self._head(key)
        if response is None:
            return None
        return response.get("ContentType")

    def write_bytes(self, key: str, content: bytes, content_type: Optional[str] = None) -> None:
        params: Dict[str, Any] = {"Bucket": self.bucket_name, "Key": self._key(key), "Body": content}
        if content_type:
            params["ContentType"] = content_type
        try:
            self._client.put_object(**params)
        except (ClientError, BotoCoreError) as e:
            raise self._unavailable("put_object", key, e) from e
        logger.debug("s3_object_written", key=key, bucket=self.bucket_name, size=len(content))

    def delete(self, key: str) -> None:
        # DeleteObject succeeds for missing keys
        try:
            self._client.delete_object(Bucket=self.bucket_name, Key=self._key(key))
        except (ClientError, BotoCoreError) as e:
            raise self._unavailable("delete_object", key, e) from e
