"""
Client-local state.

Two key/value stores back the engagement bookkeeping:
- session store: `st.session_state` in the app (per browser session), a dict in tests
- persistent store: FileStore, a JSON file per browser (see GuestStores) that survives restarts

Values are JSON strings so a corrupted entry can be detected and treated as empty.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from collections.abc import MutableMapping
from pathlib import Path
from threading import RLock
from typing import Iterator, Optional


logger = logging.getLogger(__name__)

VIEWED_POSTS_KEY = "viewedPosts"
LIKED_POSTS_KEY = "likedPosts"
GUEST_ID_KEY = "blog_guest_id"


class FileStore(MutableMapping):
    """
    A str -> str mapping persisted to one JSON file; every write rewrites the file.
    Safe to share between sessions (threads) of one server process.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = RLock()
        self._data: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Discarding unreadable local state %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Discarding local state %s: expected an object", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def _flush(self) -> None:
        # Caller holds the lock; a unique temp file per write keeps os.replace atomic
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp", delete=False
        ) as f:
            json.dump(self._data, f, indent=2)
        try:
            os.replace(f.name, self.path)
        except OSError:
            os.unlink(f.name)
            raise

    def __getitem__(self, key: str) -> str:
        with self._lock:
            return self._data[key]

    def __setitem__(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value
            self._flush()

    def __delitem__(self, key: str) -> None:
        with self._lock:
            del self._data[key]
            self._flush()

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._data))

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class GuestStores:
    """
    One FileStore per browser, under `<root>/guests/<guest id>.json`.

    The guest id is the browser's durable identity (kept in its URL); the same id
    always maps to the same FileStore instance within a process.
    """

    def __init__(self, root: str | os.PathLike):
        self.root = Path(root) / "guests"
        self._lock = RLock()
        self._stores: dict[str, FileStore] = {}

    @staticmethod
    def new_guest_id() -> str:
        return str(uuid.uuid4())

    @staticmethod
    def is_guest_id(value: Optional[str]) -> bool:
        if not value:
            return False
        try:
            return str(uuid.UUID(value)) == value
        except ValueError:
            return False

    @classmethod
    def resolve_guest_id(cls, *candidates: Optional[str]) -> str:
        """First well-formed candidate (URL, then session), else a fresh id."""
        for value in candidates:
            if cls.is_guest_id(value):
                return value
        return cls.new_guest_id()

    def for_guest(self, guest_id: str) -> FileStore:
        if not self.is_guest_id(guest_id):
            raise ValueError(f"Not a guest id: {guest_id!r}")
        with self._lock:
            store = self._stores.get(guest_id)
            if store is None:
                store = FileStore(self.root / f"{guest_id}.json")
                if store.get(GUEST_ID_KEY) != guest_id:
                    store[GUEST_ID_KEY] = guest_id
                self._stores[guest_id] = store
            return store


def read_json_list(store: MutableMapping, key: str) -> list:
    raw = store.get(key)
    if raw is None:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Malformed JSON under %r in local storage; treating as empty", key)
        return []
    if not isinstance(value, list):
        logger.warning("Expected a list under %r in local storage; treating as empty", key)
        return []
    return value


def write_json_list(store: MutableMapping, key: str, values: list) -> None:
    store[key] = json.dumps(values)


class EngagementStore:
    """
    Which posts this browser viewed this session and which it currently likes.
    Both lists are ordered, duplicate-free mirrors of remote state.
    """

    def __init__(self, session: MutableMapping, persistent: MutableMapping):
        self.session = session
        self.persistent = persistent

    # Views (session scope)
    def viewed_posts(self) -> list[str]:
        return read_json_list(self.session, VIEWED_POSTS_KEY)

    def has_viewed(self, post_id: str) -> bool:
        return post_id in self.viewed_posts()

    def mark_viewed(self, post_id: str) -> bool:
        viewed = self.viewed_posts()
        if post_id in viewed:
            return False
        viewed.append(post_id)
        write_json_list(self.session, VIEWED_POSTS_KEY, viewed)
        return True

    # Likes (persistent)
    def liked_posts(self) -> list[str]:
        return read_json_list(self.persistent, LIKED_POSTS_KEY)

    def has_liked(self, post_id: str) -> bool:
        return post_id in self.liked_posts()

    def add_liked(self, post_id: str) -> bool:
        liked = self.liked_posts()
        if post_id in liked:
            return False
        liked.append(post_id)
        write_json_list(self.persistent, LIKED_POSTS_KEY, liked)
        return True

    def remove_liked(self, post_id: str) -> bool:
        liked = self.liked_posts()
        if post_id not in liked:
            return False
        write_json_list(self.persistent, LIKED_POSTS_KEY, [p for p in liked if p != post_id])
        return True

    def set_liked(self, post_id: str, liked: bool) -> None:
        if liked:
            self.add_liked(post_id)
        else:
            self.remove_liked(post_id)

    def guest_id(self) -> str:
        """Durable anonymous identity used as `user_id` in likes/post_views rows."""
        guest = self.persistent.get(GUEST_ID_KEY)
        if not guest:
            guest = str(uuid.uuid4())
            self.persistent[GUEST_ID_KEY] = guest
            logger.info("Created guest id %s", guest)
        return guest
