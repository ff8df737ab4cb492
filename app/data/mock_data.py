from __future__ import annotations

import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from faker import Faker

from data.models import Category, Post
from data.text import slugify


# Snapshot anchor: archive posts are dated back from here so the dataset never drifts with the wall clock
SNAPSHOT_AT = datetime(2024, 9, 10, 12, 0, tzinfo=timezone.utc)
EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


# Kept in display-name order
CATEGORIES: tuple[Category, ...] = (
    Category(id="b9b5f12d-d4a5-4e3e-a4bc-3d0e30db0c18", name="Design", slug="design", created_at=EPOCH),
    Category(id="de7e1f92-e3f1-4b91-8eb3-a5a6fba90c0d", name="Lifestyle", slug="lifestyle", created_at=EPOCH),
    Category(id="c5b8a573-ec83-4c0a-848c-ebc1c22a27a8", name="Programming", slug="programming", created_at=EPOCH),
    Category(id="1649b2bb-031b-416f-9277-a8ada9b1dfea", name="Technology", slug="technology", created_at=EPOCH),
    Category(id="d7efdb3b-6c15-42e6-9f37-5e7af86f4ff1", name="Travel", slug="travel", created_at=EPOCH),
)

_BY_SLUG = {c.slug: c for c in CATEGORIES}


def _featured(
    post_id: str,
    title: str,
    category_slug: str,
    days_back: int,
    views: int,
    likes: int,
    excerpt: str,
    content: str,
    cover_seed: str,
) -> Post:
    cat = _BY_SLUG[category_slug]
    published_at = SNAPSHOT_AT - timedelta(days=days_back)
    return Post(
        id=post_id,
        title=title,
        slug=slugify(title),
        excerpt=excerpt,
        content=content,
        cover_path=f"https://picsum.photos/seed/{cover_seed}/800/600",
        category_id=cat.id,
        category=cat,
        published=True,
        published_at=published_at,
        views=views,
        likes=likes,
        created_at=published_at,
        updated_at=published_at,
    )


FEATURED_POSTS: tuple[Post, ...] = (
    _featured(
        "1649b2bb-031b-416f-9277-a8ada9b1dfeb",
        "Getting Started with React 19",
        "technology",
        days_back=0,
        views=150,
        likes=23,
        excerpt="The compiler, the new hooks and the concurrent rendering changes that make React 19 apps faster.",
        content="""# Getting Started with React 19

React 19 ships a compiler that removes most manual memoization.

## What's new

### React Compiler
Components are optimized at build time, so `useMemo` and `useCallback` are rarely needed.

### Concurrent rendering
Transitions and suspense boundaries keep the UI responsive during heavy updates.

## Try it

```bash
npm create vite@latest my-app -- --template react
cd my-app
npm install
```
""",
        cover_seed="react19",
    ),
    _featured(
        "d7efdb3b-6c15-42e6-9f37-5e7af86f4ff2",
        "Best Travel Destinations for 2024",
        "travel",
        days_back=1,
        views=89,
        likes=12,
        excerpt="Hidden gems and popular hotspots worth the trip this year, with budget notes for each.",
        content="""# Best Travel Destinations for 2024

## Top picks

### 1. Japan
- **Best time**: March to May
- **Highlights**: Tokyo, Kyoto, Mount Fuji
- **Budget**: $150-300/day

### 2. Portugal
- **Best time**: April to October
- **Highlights**: Lisbon, Porto, the Algarve
- **Budget**: $80-150/day

Start planning early; shoulder season is the sweet spot.
""",
        cover_seed="thailand",
    ),
    _featured(
        "f9d68a5a-1a43-4d55-9eaf-e0f4337f1c0f",
        "The Art of Minimalist Web Design",
        "design",
        days_back=2,
        views=67,
        likes=8,
        excerpt="Whitespace, type and a restrained palette: the principles behind clean, focused sites.",
        content="""# The Art of Minimalist Web Design

Minimalism is purposeful, not empty.

## Core principles

1. **Whitespace** creates hierarchy and reduces cognitive load.
2. **Typography** carries the design; one or two families at most.
3. **Color** guides attention; keep the palette to two or three tones.

## Why it pays off

- Faster pages
- Clearer user journeys
- Better accessibility
""",
        cover_seed="design",
    ),
    _featured(
        "c5b8a573-ec83-4c0a-848c-ebc1c22a27a9",
        "Mastering Modern JavaScript: ES2024 Features",
        "programming",
        days_back=3,
        views=203,
        likes=34,
        excerpt="Immutable array helpers, Error.cause and the Temporal API, with practical examples.",
        content="""# Mastering Modern JavaScript: ES2024 Features

## Immutable array methods

```javascript
const sorted = [3, 1, 4].toSorted(); // [1, 3, 4]
const swapped = ['a', 'b', 'c'].with(1, 'z');
```

## Error.cause

```javascript
throw new Error('Operation failed', { cause: error });
```

## Temporal

```javascript
const today = Temporal.Now.plainDateISO();
```

Adopt gradually: array helpers first, Temporal behind a polyfill.
""",
        cover_seed="javascript",
    ),
)


def _archive_posts(n_posts: int = 10, seed: int = 7) -> tuple[Post, ...]:
    """
    Older posts generated from a fixed seed so the fallback dataset has enough rows to paginate.
    The last one is an unpublished draft.
    """
    fake = Faker()
    fake.seed_instance(seed)
    rng = random.Random(seed)
    posts = []
    for i in range(n_posts):
        cat = CATEGORIES[i % len(CATEGORIES)]
        title = fake.sentence(nb_words=5).rstrip(".")
        slug = slugify(title)
        published_at = SNAPSHOT_AT - timedelta(days=7 + 9 * i, hours=rng.randint(0, 23))
        paragraphs = fake.paragraphs(nb=3)
        content = f"# {title}\n\n" + "\n\n".join(paragraphs) + "\n\n## Notes\n\n" + "\n".join(
            f"- {fake.sentence(nb_words=8)}" for _ in range(3)
        )
        draft = i == n_posts - 1
        posts.append(
            Post(
                id=str(uuid.uuid5(uuid.NAMESPACE_URL, f"archive:{slug}")),
                title=title,
                slug=slug,
                excerpt=paragraphs[0][:160],
                content=content,
                cover_path=None if i % 3 == 0 else "picsum:{seed}",
                category_id=cat.id,
                category=cat,
                published=not draft,
                published_at=None if draft else published_at,
                views=rng.randint(5, 120),
                likes=rng.randint(0, 20),
                created_at=published_at,
                updated_at=published_at,
            )
        )
    return tuple(posts)


POSTS: tuple[Post, ...] = FEATURED_POSTS + _archive_posts()


def _published_sort_key(post: Post) -> datetime:
    return post.published_at or EPOCH


def categories_mock() -> list[Category]:
    return list(CATEGORIES)


def category_by_slug_mock(slug: str) -> Optional[Category]:
    return _BY_SLUG.get(slug)


def published_posts_mock() -> list[Post]:
    return sorted((p for p in POSTS if p.published), key=_published_sort_key, reverse=True)


def all_posts_mock() -> list[Post]:
    return sorted(POSTS, key=lambda p: p.created_at or EPOCH, reverse=True)


def post_by_slug_mock(slug: str) -> Optional[Post]:
    return next((p for p in POSTS if p.slug == slug), None)


def post_by_id_mock(post_id: str) -> Optional[Post]:
    return next((p for p in POSTS if p.id == post_id), None)


def published_page_mock(limit: int, offset: int) -> list[Post]:
    return published_posts_mock()[offset : offset + limit]


def category_page_mock(category_slug: str, limit: int, offset: int) -> list[Post]:
    rows = [p for p in published_posts_mock() if p.category and p.category.slug == category_slug]
    return rows[offset : offset + limit]


def related_posts_mock(category_id: str, exclude_post_id: str, limit: int) -> list[Post]:
    rows = [p for p in published_posts_mock() if p.category_id == category_id and p.id != exclude_post_id]
    random.shuffle(rows)
    return rows[:limit]
