from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from config import AppConfig
from data import mock_data, queries
from data.cache import QueryCache, fallback_served
from data.connection import UNIQUE_VIOLATION, ConnectionStatus, RemoteStoreError, RestClient
from data.local_store import EngagementStore
from data.models import Category, Counted, CountResult, Degraded, Post


logger = logging.getLogger(__name__)

T = TypeVar("T")

NOT_CONFIGURED = "not configured"

# Every cached post read lives under this prefix; any write touching a post row drops them all
POSTS_PREFIX = "posts:"


@dataclass(frozen=True)
class DataResult(Generic[T]):
    value: Optional[T] = None
    status: str = "success"  # "pending" | "success" | "error"
    source: str = "supabase"  # "supabase" | "fallback"
    warning: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def pending(cls) -> "DataResult[T]":
        return cls(status="pending")

    @property
    def ok(self) -> bool:
        return self.status == "success"


def fetch(cfg: AppConfig, fn: Callable[..., T], *args: Any) -> DataResult[T]:
    """Run one data call and wrap it for the views (no view re-derives loading/error flags)."""
    source = "supabase" if cfg.is_configured else "fallback"
    token = fallback_served.set(False)
    try:
        value = fn(*args)
        served_fallback = fallback_served.get()
    except Exception as e:
        logger.exception("Data call %s failed", getattr(fn, "__name__", fn))
        return DataResult(status="error", source=source, error=f"{type(e).__name__}: {e}")
    finally:
        fallback_served.reset(token)

    if not cfg.is_configured:
        return DataResult(value=value, source="fallback", warning="Supabase not configured; showing sample content.")
    if served_fallback:
        return DataResult(value=value, source="fallback", warning="Supabase unreachable; showing sample content.")
    return DataResult(value=value, source=source)


class _Service:
    def __init__(self, cfg: AppConfig, client: RestClient, cache: QueryCache):
        self.cfg = cfg
        self.client = client
        self.cache = cache

    def _gate_closed(self, what: str) -> bool:
        if self.cfg.is_configured:
            return False
        logger.warning("Supabase not configured, using fallback data for %s", what)
        return True

    def _cached(self, key: str, fallback: Callable[..., Any]) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        return self.cache.cached(key, self.cfg.cache_max_age, fallback=fallback)


class CategoriesService(_Service):
    def __init__(self, cfg: AppConfig, client: RestClient, cache: QueryCache):
        super().__init__(cfg, client, cache)
        self._all = self._cached("categories:all", mock_data.categories_mock)(self._fetch_all)
        self._by_slug = self._cached("categories:slug", mock_data.category_by_slug_mock)(self._fetch_by_slug)

    def get_all(self) -> list[Category]:
        if self._gate_closed("categories"):
            return mock_data.categories_mock()
        return self._all()

    def get_by_slug(self, slug: str) -> Optional[Category]:
        if self._gate_closed(f"category {slug!r}"):
            return mock_data.category_by_slug_mock(slug)
        return self._by_slug(slug)

    def _fetch_all(self) -> list[Category]:
        rows = self.client.select("categories", queries.q_categories())
        return [Category.from_row(r) for r in rows]

    def _fetch_by_slug(self, slug: str) -> Optional[Category]:
        rows = self.client.select("categories", queries.q_category_by_slug(slug))
        return Category.from_row(rows[0]) if rows else None


class PostsService(_Service):
    def __init__(self, cfg: AppConfig, client: RestClient, cache: QueryCache):
        super().__init__(cfg, client, cache)
        self._published = self._cached("posts:published", mock_data.published_page_mock)(self._fetch_published)
        self._by_slug = self._cached("posts:slug", mock_data.post_by_slug_mock)(self._fetch_by_slug)
        self._by_category = self._cached("posts:category", mock_data.category_page_mock)(self._fetch_by_category)
        self._related = self._cached("posts:related", mock_data.related_posts_mock)(self._fetch_related)
        self._all = self._cached("posts:all", mock_data.all_posts_mock)(self._fetch_all)

    # Reads
    def get_published(self, limit: int = 10, offset: int = 0) -> list[Post]:
        if self._gate_closed("published posts"):
            return mock_data.published_page_mock(limit, offset)
        return self._published(limit, offset)

    def get_by_slug(self, slug: str) -> Optional[Post]:
        if self._gate_closed(f"post {slug!r}"):
            return mock_data.post_by_slug_mock(slug)
        return self._by_slug(slug)

    def get_by_category(self, category_slug: str, limit: int = 10, offset: int = 0) -> list[Post]:
        if self._gate_closed(f"category posts {category_slug!r}"):
            return mock_data.category_page_mock(category_slug, limit, offset)
        return self._by_category(category_slug, limit, offset)

    def get_related(self, category_id: str, exclude_post_id: str, limit: int = 3) -> list[Post]:
        if self._gate_closed("related posts"):
            return mock_data.related_posts_mock(category_id, exclude_post_id, limit)
        return self._related(category_id, exclude_post_id, limit)

    def get_all(self) -> list[Post]:
        if self._gate_closed("admin post list"):
            return mock_data.all_posts_mock()
        return self._all()

    def _fetch_published(self, limit: int, offset: int) -> list[Post]:
        rows = self.client.select("posts", queries.q_published_posts(limit, offset))
        return [Post.from_row(r) for r in rows]

    def _fetch_by_slug(self, slug: str) -> Optional[Post]:
        rows = self.client.select("posts", queries.q_post_by_slug(slug))
        return Post.from_row(rows[0]) if rows else None

    def _fetch_by_category(self, category_slug: str, limit: int, offset: int) -> list[Post]:
        cats = self.client.select("categories", queries.q_category_by_slug(category_slug))
        if not cats:
            return []
        rows = self.client.select("posts", queries.q_posts_by_category(str(cats[0]["id"]), limit, offset))
        return [Post.from_row(r) for r in rows]

    def _fetch_related(self, category_id: str, exclude_post_id: str, limit: int) -> list[Post]:
        rows = self.client.select("posts", queries.q_related_posts(category_id, exclude_post_id, limit))
        return [Post.from_row(r) for r in rows]

    def _fetch_all(self) -> list[Post]:
        rows = self.client.select("posts", queries.q_all_posts())
        return [Post.from_row(r) for r in rows]

    # Writes
    def increment_views(self, post_id: str) -> CountResult:
        """
        Read-then-write bump of posts.views. Not atomic; the view-tracking flow prefers
        the track_post_view RPC (EngagementService.record_view) and only lands here as a fallback.
        """
        if self._gate_closed("view increment"):
            return Degraded(NOT_CONFIGURED)
        try:
            rows = self.client.select("posts", queries.q_post_counter(post_id, "views"))
            if not rows:
                return Degraded(f"post {post_id} not found", failed=True)
            new_count = int(rows[0].get("views") or 0) + 1
            self.client.update("posts", {"views": new_count}, queries.q_post_by_id(post_id))
        except RemoteStoreError as e:
            logger.error("Error incrementing views for post %r: %s", post_id, e)
            return Degraded(str(e), failed=True)
        self.cache.invalidate_prefix(POSTS_PREFIX)
        return Counted(new_count)

    def update_post(self, post_id: str, changes: dict[str, Any]) -> Union[Post, Degraded]:
        """Admin edits (cover image, publish flag). Fallback mode accepts and discards them."""
        if self._gate_closed("post update"):
            return Degraded(NOT_CONFIGURED)
        try:
            rows = self.client.update("posts", changes, queries.q_post_by_id(post_id))
        except RemoteStoreError as e:
            logger.error("Error updating post %r: %s", post_id, e)
            return Degraded(str(e), failed=True)
        self.cache.invalidate_prefix(POSTS_PREFIX)
        if not rows:
            return Degraded(f"post {post_id} not found", failed=True)
        return Post.from_row(rows[0])


class EngagementService(_Service):
    def __init__(
        self,
        cfg: AppConfig,
        client: RestClient,
        cache: QueryCache,
        store: EngagementStore,
        posts: PostsService,
    ):
        super().__init__(cfg, client, cache)
        self.store = store
        self.posts = posts

    def guest_id(self) -> str:
        return self.store.guest_id()

    def toggle_like(self, post_id: str, currently_liked: bool) -> CountResult:
        if self._gate_closed("like toggle"):
            return Degraded(NOT_CONFIGURED)

        user_id = self.guest_id()
        try:
            if currently_liked:
                self.client.delete("likes", queries.q_like_match(post_id, user_id))
            else:
                self._insert_like(post_id, user_id)
        except RemoteStoreError as e:
            logger.error("Error toggling like for post %r: %s", post_id, e)
            return Degraded(str(e), failed=True)

        self.cache.invalidate_prefix(POSTS_PREFIX)
        count = self._authoritative_likes(post_id)
        if count is None:
            return Degraded("like count unavailable")
        return Counted(count)

    def _insert_like(self, post_id: str, user_id: str) -> None:
        try:
            self.client.insert("likes", [{"post_id": post_id, "user_id": user_id}])
        except RemoteStoreError as e:
            # Already liked from this browser: the row we wanted exists
            if e.code != UNIQUE_VIOLATION:
                raise

    def _authoritative_likes(self, post_id: str) -> Optional[int]:
        # posts.likes is kept in sync by a trigger; counting rows works even without it.
        # When the two disagree nothing here decides which is right: the first readable one wins.
        try:
            rows = self.client.select("posts", queries.q_post_counter(post_id, "likes"))
            if rows and rows[0].get("likes") is not None:
                return int(rows[0]["likes"])
        except RemoteStoreError as e:
            logger.warning("Could not read posts.likes for %r: %s", post_id, e)
        try:
            return self.client.count("likes", queries.q_like_count(post_id))
        except RemoteStoreError as e:
            logger.warning("Could not count likes rows for %r: %s", post_id, e)
        return None

    def get_likes(self, post_id: str) -> int:
        if self._gate_closed("like count"):
            return self._snapshot_likes(post_id)
        count = self._authoritative_likes(post_id)
        if count is None:
            logger.error("Error getting likes for post %r; using snapshot value", post_id)
            return self._snapshot_likes(post_id)
        return count

    @staticmethod
    def _snapshot_likes(post_id: str) -> int:
        post = mock_data.post_by_id_mock(post_id)
        return post.likes if post else 0

    def has_liked(self, post_id: str, user_id: Optional[str]) -> bool:
        if not self.cfg.is_configured or not post_id or not user_id:
            return self.store.has_liked(post_id)
        try:
            rows = self.client.select("likes", queries.q_like(post_id, user_id))
        except RemoteStoreError as e:
            logger.error("Error checking if %r liked post %r: %s", user_id, post_id, e)
            return self.store.has_liked(post_id)
        return bool(rows)

    def record_view(self, post_id: str) -> CountResult:
        """Count one view for this guest via the track_post_view RPC, else the plain increment."""
        if self._gate_closed("view tracking"):
            return Degraded(NOT_CONFIGURED)
        try:
            result = self.client.rpc("track_post_view", {"post_id": post_id, "user_id": self.guest_id()})
        except RemoteStoreError as e:
            logger.warning("track_post_view failed for %r, falling back to increment: %s", post_id, e)
            return self.posts.increment_views(post_id)
        self.cache.invalidate_prefix(POSTS_PREFIX)
        if isinstance(result, int):
            return Counted(result)
        return Degraded("view count unavailable")


@dataclass
class BlogServices:
    cfg: AppConfig
    cache: QueryCache
    client: RestClient
    store: EngagementStore
    categories: CategoriesService
    posts: PostsService
    engagement: EngagementService

    def check_connection(self) -> ConnectionStatus:
        return self.client.ping()

    def close(self) -> None:
        self.cache.close()
        self.client.close()


def build_services(
    cfg: AppConfig,
    store: EngagementStore,
    cache: Optional[QueryCache] = None,
    client: Optional[RestClient] = None,
) -> BlogServices:
    cache = cache if cache is not None else QueryCache()
    client = client if client is not None else RestClient(cfg)
    posts = PostsService(cfg, client, cache)
    return BlogServices(
        cfg=cfg,
        cache=cache,
        client=client,
        store=store,
        categories=CategoriesService(cfg, client, cache),
        posts=posts,
        engagement=EngagementService(cfg, client, cache, store, posts),
    )
