from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

from config import AppConfig
from data.service import DataResult, fetch


logger = logging.getLogger(__name__)

T = TypeVar("T")


class Paginator(Generic[T]):
    """
    Offset pagination over a `fetch(limit, offset)` call, starting at `start_offset`.

    A short page means there is nothing more; a full page keeps `has_more` true even when
    the next page turns out empty.

    Views rebuild a Paginator on every run and `restore` the number of pages the visitor
    had opened; the page fetches go through the query cache, so rows are never older
    than the cache allows.
    """

    def __init__(
        self,
        cfg: AppConfig,
        fetch_page: Callable[[int, int], list[T]],
        page_size: int = 6,
        start_offset: int = 0,
    ):
        self.cfg = cfg
        self.fetch_page = fetch_page
        self.page_size = page_size
        self.start_offset = start_offset
        self.items: list[T] = []
        self.page = 0
        self.has_more = True
        self.state: DataResult[list[T]] = DataResult.pending()

    @property
    def pages_loaded(self) -> int:
        return self.page + 1 if self.state.ok else 0

    def _offset(self, page: int) -> int:
        return self.start_offset + page * self.page_size

    def load_first(self) -> DataResult[list[T]]:
        self.page = 0
        result = fetch(self.cfg, self.fetch_page, self.page_size, self._offset(0))
        if result.ok:
            self.items = list(result.value or [])
            self.has_more = len(self.items) == self.page_size
        self.state = result
        return result

    def load_more(self) -> DataResult[list[T]]:
        if not self.has_more:
            return self.state
        next_page = self.page + 1
        result = fetch(self.cfg, self.fetch_page, self.page_size, self._offset(next_page))
        if not result.ok:
            # Keep what is already shown; the caller can retry
            logger.error("Error loading page %d: %s", next_page, result.error)
            return result
        batch = list(result.value or [])
        self.items.extend(batch)
        self.has_more = len(batch) == self.page_size
        if batch:
            self.page = next_page
        self.state = DataResult(
            value=self.items, source=result.source, warning=result.warning
        )
        return self.state

    def restore(self, pages: int) -> DataResult[list[T]]:
        """Load the first `pages` pages (at least one), stopping early at a short page."""
        result = self.load_first()
        while result.ok and self.has_more and self.page + 1 < pages:
            result = self.load_more()
        return result

    def reset(self) -> DataResult[list[T]]:
        self.items = []
        self.has_more = True
        return self.load_first()
