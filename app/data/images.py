"""
Cover images and the admin image library.

Cover references come in three shapes, resolved by one function:
- FromEntity: a post; its cover_path (or a title placeholder when empty)
- FromPath: a full URL, a storage-relative path or a placeholder service name
- FromPlaceholderTemplate: a URL with a `{seed}` slot filled from the title
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import MutableMapping
from dataclasses import dataclass, replace
from typing import Optional, Union
from urllib.parse import quote

from data.models import ImageAsset, Post
from data.text import slugify


logger = logging.getLogger(__name__)

PICSUM = "https://picsum.photos/seed/{seed}/800/600"
PLACEHOLD = "https://placehold.co/800x600/random/webp?text={seed}"
UNSPLASH = "https://source.unsplash.com/random/800x600/?{seed}"
NOT_AVAILABLE = "https://placehold.co/800x600/lightgray/gray?text=Image+Not+Available"

SERVICE_NAMES = {
    "picsum": (PICSUM, "blog"),
    "placeholder": (PLACEHOLD, "Blog+Post"),
    "unsplash": (UNSPLASH, "blog"),
}


@dataclass(frozen=True)
class FromEntity:
    post: Post


@dataclass(frozen=True)
class FromPath:
    path: Optional[str]
    title: str = ""


@dataclass(frozen=True)
class FromPlaceholderTemplate:
    template: str
    title: str = ""


CoverSource = Union[FromEntity, FromPath, FromPlaceholderTemplate]


def cover_source(path: Optional[str], title: str = "") -> CoverSource:
    """Classify a stored cover_path string."""
    if path and "{seed}" in path:
        return FromPlaceholderTemplate(template=path, title=title)
    return FromPath(path=path, title=title)


def image_fallback(title: str = "") -> str:
    if title:
        return PLACEHOLD.format(seed=quote("+".join(title.split()), safe="+"))
    return NOT_AVAILABLE


def _seed_for(title: str) -> str:
    return quote(slugify(title)[:20]) if title else "blog"


def resolve_cover_url(source: CoverSource, storage_base: Optional[str] = None) -> str:
    if isinstance(source, FromEntity):
        return resolve_cover_url(cover_source(source.post.cover_path, source.post.title), storage_base)

    if isinstance(source, FromPlaceholderTemplate):
        template = source.template
        # "picsum:{seed}" is shorthand for the picsum service
        if template.startswith("picsum:"):
            template = PICSUM
        return template.replace("{seed}", _seed_for(source.title))

    path = (source.path or "").strip()
    if not path:
        return image_fallback(source.title)
    if path.startswith(("http://", "https://")):
        return path
    if path in SERVICE_NAMES:
        template, seed = SERVICE_NAMES[path]
        return template.format(seed=seed)
    if storage_base:
        return f"{storage_base.rstrip('/')}/{path.lstrip('/')}"
    return image_fallback(source.title)


#
# Admin image library
#
LIBRARY_KEY = "imageLibrary"

DEFAULT_IMAGES = (
    ImageAsset(id="1", url="https://source.unsplash.com/random/800x600?blog", title="Blog Header"),
    ImageAsset(id="2", url="https://picsum.photos/800/600", title="Generic Image"),
    ImageAsset(id="3", url="https://source.unsplash.com/random/800x600?nature", title="Nature"),
)

SAMPLE_IMAGES = (
    "https://picsum.photos/seed/tech/800/600",
    "https://picsum.photos/seed/travel/800/600",
    "https://picsum.photos/seed/programming/800/600",
    "https://picsum.photos/seed/design/800/600",
    "https://placehold.co/800x600/random/webp?text=Technology",
    "https://placehold.co/800x600/random/webp?text=Travel",
    "picsum:{seed}",
    "unsplash",
    "placeholder",
)


class ImageLibrary:
    """Reusable cover images for the admin panel, kept in the persistent local store."""

    def __init__(self, store: MutableMapping):
        self.store = store

    def images(self) -> list[ImageAsset]:
        raw = self.store.get(LIBRARY_KEY)
        if raw is None:
            return list(DEFAULT_IMAGES)
        try:
            rows = json.loads(raw)
            return [ImageAsset(id=str(r["id"]), url=r["url"], title=r.get("title") or "Untitled Image") for r in rows]
        except (TypeError, ValueError, KeyError):
            logger.warning("Malformed image library in local storage; resetting to defaults")
            return list(DEFAULT_IMAGES)

    def _save(self, images: list[ImageAsset]) -> None:
        self.store[LIBRARY_KEY] = json.dumps([{"id": i.id, "url": i.url, "title": i.title} for i in images])

    def add(self, url: str, title: str = "") -> ImageAsset:
        url = url.strip()
        if not url:
            raise ValueError("Image URL is required")
        image = ImageAsset(id=f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}", url=url, title=title.strip() or "Untitled Image")
        self._save([image] + self.images())
        return image

    def update(self, image_id: str, url: Optional[str] = None, title: Optional[str] = None) -> Optional[ImageAsset]:
        images = self.images()
        updated = None
        for idx, img in enumerate(images):
            if img.id == image_id:
                updated = replace(img, url=url if url is not None else img.url, title=title if title is not None else img.title)
                images[idx] = updated
        if updated is not None:
            self._save(images)
        return updated

    def delete(self, image_id: str) -> bool:
        images = self.images()
        kept = [i for i in images if i.id != image_id]
        if len(kept) == len(images):
            return False
        self._save(kept)
        return True
