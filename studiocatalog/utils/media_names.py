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
Best-effort metadata derived from storage keys.

Every function here is pure and total: it accepts any string and always
returns a value, never raising on odd input.
"""

import re
from datetime import date
from typing import FrozenSet, Optional

VIDEO_EXTENSIONS: FrozenSet[str] = frozenset({"mp4", "webm", "mov", "m4v"})
IMAGE_EXTENSIONS: FrozenSet[str] = frozenset({"jpg", "jpeg", "png", "webp", "gif"})

_SEPARATORS = re.compile(r"[-_\s]+")
_DATE_TOKEN = re.compile(r"(?<!\d)(\d{4})[-_](\d{2})[-_](\d{2})(?!\d)")


def filename(key: str) -> str:
    """Last path segment of a key ("video-logs/a.mp4" -> "a.mp4")."""
    return key.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]


def base_name(key: str) -> str:
    """
    Strip directory and extension from a storage key.

    Examples:
        >>> base_name("video-logs/studio-update.mp4")
        'studio-update'
        >>> base_name("images/vlogs/archive.tar.gz")
        'archive.tar'
        >>> base_name(".hidden")
        '.hidden'
    """
    name = filename(key)
    stem, dot, _ = name.rpartition(".")
    if not dot or not stem:
        return name
    return stem


def extension(key: str) -> str:
    """Lowercased extension without the dot, or "" when there is none."""
    name = filename(key)
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem:
        return ""
    return ext.lower()


def is_video(key: str) -> bool:
    return extension(key) in VIDEO_EXTENSIONS


def is_image(key: str) -> bool:
    return extension(key) in IMAGE_EXTENSIONS


def derive_title(name: str) -> str:
    """
    Turn a base name into a human-readable title.

    Hyphens, underscores and runs of whitespace become single spaces, then
    each word gets an uppercase first letter. The rest of a word keeps its
    case, so acronyms such as "3D" or "UI" survive.

    Examples:
        >>> derive_title("testvideo")
        'Testvideo'
        >>> derive_title("studio-update")
        'Studio Update'
        >>> derive_title("__3D_concept--walkthrough ")
        '3D Concept Walkthrough'
    """
    words = [w for w in _SEPARATORS.split(name) if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def parse_date_token(name: str) -> Optional[date]:
    """
    Find a YYYY-MM-DD (or YYYY_MM_DD) token in a base name.

    The first token that forms a real calendar date wins.

    Examples:
        >>> parse_date_token("2025-10-10-composing-session")
        datetime.date(2025, 10, 10)
        >>> parse_date_token("session-2025-13-40") is None
        True
    """
    for match in _DATE_TOKEN.finditer(name):
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return None
