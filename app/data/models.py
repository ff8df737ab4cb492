from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional, Union


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    slug: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Category":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            slug=row.get("slug") or "",
            created_at=parse_timestamp(row.get("created_at")),
        )


@dataclass(frozen=True)
class Post:
    id: str
    title: str
    slug: str
    content: str
    excerpt: Optional[str] = None
    cover_path: Optional[str] = None
    category_id: Optional[str] = None
    category: Optional[Category] = None
    published: bool = False
    published_at: Optional[datetime] = None
    views: int = 0
    likes: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Post":
        embedded = row.get("categories")
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            slug=row.get("slug") or "",
            content=row.get("content") or "",
            excerpt=row.get("excerpt"),
            cover_path=row.get("cover_path"),
            category_id=row.get("category_id"),
            category=Category.from_row(embedded) if embedded else None,
            published=bool(row.get("published", False)),
            published_at=parse_timestamp(row.get("published_at")),
            views=int(row.get("views") or 0),
            likes=int(row.get("likes") or 0),
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )

    def with_changes(self, **changes: Any) -> "Post":
        return replace(self, **changes)


@dataclass(frozen=True)
class ImageAsset:
    id: str
    url: str
    title: str = "Untitled Image"


#
# Write results: callers check the variant instead of guessing at bool/int returns.
#
@dataclass(frozen=True)
class Counted:
    """The remote store confirmed the write and reported the authoritative count."""

    count: int


@dataclass(frozen=True)
class Degraded:
    """
    No authoritative count.
    failed=False: the write was simulated (fallback mode) or accepted without a readable count.
    failed=True: the remote write itself failed; optimistic client state is kept.
    """

    reason: str
    failed: bool = False


CountResult = Union[Counted, Degraded]
