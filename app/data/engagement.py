from __future__ import annotations

import logging
from typing import Callable, Optional

from data.local_store import EngagementStore
from data.models import Counted, CountResult, Degraded, Post
from data.service import EngagementService


logger = logging.getLogger(__name__)

LIKE_NOT_SAVED = "Unable to save like right now. Your change may not persist."


class PostEngagement:
    """
    Views/likes bookkeeping for one post as shown to one browser.

    - a view is counted at most once per post per session (session list checked first)
    - likes are optimistic: the local list and displayed count change before the remote call,
      a Counted result then overwrites the count, a failed write keeps the optimistic state
    """

    def __init__(
        self,
        engagement: EngagementService,
        store: EngagementStore,
        record_view: Optional[Callable[[str], CountResult]] = None,
    ):
        self.engagement = engagement
        self.store = store
        self._record_view = record_view
        self.post: Optional[Post] = None
        self.view_count = 0
        self.like_count = 0
        self.liked = False
        self.viewed = False
        self.notice: Optional[str] = None

    def load(self, post: Post) -> None:
        self.post = post
        self.view_count = post.views
        self.like_count = self.engagement.get_likes(post.id)
        self.viewed = self.store.has_viewed(post.id)
        self.liked = self._initial_liked(post.id)

    def refresh(self, post: Post) -> bool:
        """Reload when the post row differs from the one loaded (cache expired or invalidated)."""
        if post == self.post:
            return False
        self.load(post)
        return True

    def _initial_liked(self, post_id: str) -> bool:
        if not self.engagement.cfg.is_configured:
            return self.store.has_liked(post_id)
        liked = self.engagement.has_liked(post_id, self.engagement.guest_id())
        # Keep the local list in step with what the store reported
        self.store.set_liked(post_id, liked)
        return liked

    def track_view(self) -> bool:
        if self.post is None:
            return False
        if self.store.has_viewed(self.post.id):
            self.viewed = True
            return False

        record_view = self._record_view or self.engagement.record_view
        result = record_view(self.post.id)
        if isinstance(result, Counted):
            self.view_count = result.count
        else:
            self.view_count += 1
        self.store.mark_viewed(self.post.id)
        self.viewed = True
        return True

    def toggle_like(self) -> CountResult:
        if self.post is None:
            raise RuntimeError("toggle_like called before load()")

        was_liked = self.liked
        if was_liked:
            self.store.remove_liked(self.post.id)
            self.liked = False
            self.like_count = max(0, self.like_count - 1)
        else:
            self.store.add_liked(self.post.id)
            self.liked = True
            self.like_count += 1

        result = self.engagement.toggle_like(self.post.id, was_liked)
        self.apply_result(result)
        return result

    def apply_result(self, result: CountResult) -> None:
        if isinstance(result, Counted):
            self.like_count = result.count
        elif isinstance(result, Degraded) and result.failed:
            logger.warning("toggle_like failed; keeping optimistic state: %s", result.reason)
            self.notice = LIKE_NOT_SAVED

    def dismiss_notice(self) -> None:
        self.notice = None
