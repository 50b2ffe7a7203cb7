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
Service layer for the studio media catalog.

Both the web API and the CLI build their responses from these services.
"""

from .illustration_service import IllustrationService
from .maintenance_service import MaintenanceService, PrefixCopyResult, ThumbnailResult
from .media_listing_service import FALLBACK_CATALOG, MediaListingService, fallback_catalog

__all__ = [
    "MediaListingService",
    "IllustrationService",
    "MaintenanceService",
    "ThumbnailResult",
    "PrefixCopyResult",
    "FALLBACK_CATALOG",
    "fallback_catalog",
]
