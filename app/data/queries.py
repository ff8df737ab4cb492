from __future__ import annotations

from typing import Any


# Post rows always come back with their category embedded
POST_WITH_CATEGORY = "*,categories(*)"


def eq(value: Any) -> str:
    if isinstance(value, bool):
        value = "true" if value else "false"
    return f"eq.{value}"


def neq(value: Any) -> str:
    return f"neq.{value}"


def q_categories() -> dict[str, Any]:
    return {"select": "*", "order": "name.asc"}


def q_category_by_slug(slug: str) -> dict[str, Any]:
    return {"select": "*", "slug": eq(slug), "limit": 1}


def q_published_posts(limit: int, offset: int) -> dict[str, Any]:
    return {
        "select": POST_WITH_CATEGORY,
        "published": eq(True),
        "order": "published_at.desc",
        "offset": offset,
        "limit": limit,
    }


def q_post_by_slug(slug: str) -> dict[str, Any]:
    return {"select": POST_WITH_CATEGORY, "slug": eq(slug), "limit": 1}


def q_posts_by_category(category_id: str, limit: int, offset: int) -> dict[str, Any]:
    params = q_published_posts(limit, offset)
    params["category_id"] = eq(category_id)
    return params


def q_related_posts(category_id: str, exclude_post_id: str, limit: int) -> dict[str, Any]:
    return {
        "select": POST_WITH_CATEGORY,
        "published": eq(True),
        "category_id": eq(category_id),
        "id": neq(exclude_post_id),
        "order": "published_at.desc",
        "limit": limit,
    }


def q_all_posts() -> dict[str, Any]:
    """Admin listing: drafts included."""
    return {"select": POST_WITH_CATEGORY, "order": "created_at.desc"}


def q_post_counter(post_id: str, column: str) -> dict[str, Any]:
    return {"select": column, "id": eq(post_id), "limit": 1}


def q_post_by_id(post_id: str) -> dict[str, Any]:
    return {"id": eq(post_id)}


def q_like(post_id: str, user_id: str) -> dict[str, Any]:
    return {"select": "id", "post_id": eq(post_id), "user_id": eq(user_id), "limit": 1}


def q_like_match(post_id: str, user_id: str) -> dict[str, Any]:
    return {"post_id": eq(post_id), "user_id": eq(user_id)}


def q_like_count(post_id: str) -> dict[str, Any]:
    return {"select": "id", "post_id": eq(post_id)}
