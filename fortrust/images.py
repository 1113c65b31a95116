"""Registry of decoded page images, addressed by stable integer ids."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional


@dataclass
class DecodedImage:
    """RGBA8 pixels of one decoded image and its source URL."""

    url: str
    width: int
    height: int
    rgba: bytes = b""


@dataclass
class ImageRegistry:
    """Assigns an id to each distinct image URL and stores its pixels."""

    _entries: list[DecodedImage] = field(default_factory=list)
    _url_to_id: dict[str, int] = field(default_factory=dict)

    def insert(self, image: DecodedImage) -> int:
        """Store an image and return its id; an already known URL keeps its id."""
        existing = self._url_to_id.get(image.url)
        if existing is not None:
            return existing
        image_id = len(self._entries)
        self._url_to_id[image.url] = image_id
        self._entries.append(image)
        return image_id

    def get(self, image_id: int) -> Optional[DecodedImage]:
        if 0 <= image_id < len(self._entries):
            return self._entries[image_id]
        return None

    def find_by_url(self, url: str) -> Optional[int]:
        return self._url_to_id.get(url)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[int, DecodedImage]]:
        return iter(enumerate(self._entries))