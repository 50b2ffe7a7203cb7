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
Custom exception classes for the studio media catalog.

The catalog distinguishes three storage failure kinds so that callers can
pick a policy deliberately instead of guessing from an empty result:

- StorageUnavailable: the backend is unreachable or misconfigured. Listing
  services recover from it by serving the static fallback catalog.
- SigningUnsupported: a temporary URL was requested from a backend that
  cannot sign. This is a configuration error and always propagates.
- ObjectNotFound: a specific key does not exist.

Example:
    try:
        keys = storage.files("video-logs")
    except StorageUnavailable as e:
        logger.warning("storage_unavailable", error=str(e))
        keys = []
"""


class CatalogError(Exception):
    """
    Base exception for all catalog application errors.

    Attributes:
        message: Human-readable error message
        context: Optional dict of additional error context (key, prefix, backend, ...)

    Example:
        raise CatalogError("Listing failed", prefix="video-logs", backend="s3")
    """

    def __init__(self, message: str, **context):
        """
        Initialize CatalogError.

        Args:
            message: Human-readable error message
            **context: Optional keyword arguments for error context
        """
        super().__init__(message)
        self.message = message
        self.context = context if context else {}

    def __str__(self):
        """Return string representation of error."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self):
        """Return detailed representation for debugging."""
        name = type(self).__name__
        if self.context:
            return f"{name}(message={self.message!r}, context={self.context!r})"
        return f"{name}(message={self.message!r})"


class StorageUnavailable(CatalogError):
    """
    Raised when the storage backend cannot be reached or used.

    Covers connection failures, bad credentials, missing buckets and
    unexpected backend errors. Never raised for a prefix that simply has
    no objects.
    """

    pass


class SigningUnsupported(CatalogError):
    """Raised when a temporary URL is requested from a backend that cannot sign."""

    pass


class ObjectNotFound(CatalogError):
    """Raised when a specific storage key does not exist."""

    pass


class ConfigurationError(CatalogError):
    """Raised when configuration values are missing or invalid."""

    pass


__all__ = [
    "CatalogError",
    "StorageUnavailable",
    "SigningUnsupported",
    "ObjectNotFound",
    "ConfigurationError",
]
