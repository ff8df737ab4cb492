from __future__ import annotations

import html
from typing import Optional, Sequence

import streamlit as st

from components.routing import go
from data.images import FromEntity, image_fallback, resolve_cover_url
from data.models import Category, Post
from data.text import format_date, reading_time, truncate


# Dark tones that read well on the silver theme; a category name always maps to the same one
CATEGORY_COLORS = (
    "#111827",  # gray
    "#27272A",  # zinc
    "#292524",  # stone
    "#262626",  # neutral
    "#1E293B",  # slate
    "#7F1D1D",  # deep red
    "#78350F",  # amber
    "#064E3B",  # emerald
    "#134E4A",  # teal
    "#312E81",  # indigo
)


def category_color(name: Optional[str]) -> str:
    if not name:
        return CATEGORY_COLORS[0]
    return CATEGORY_COLORS[sum(ord(ch) for ch in name) % len(CATEGORY_COLORS)]


def category_badge_html(category: Optional[Category]) -> str:
    if category is None:
        return ""
    return f'<span class="badge" style="background:{category_color(category.name)}">{html.escape(category.name)}</span>'


def render_post_card(post: Post, storage_base: Optional[str], key: str) -> None:
    cover = resolve_cover_url(FromEntity(post), storage_base)
    excerpt = truncate(post.excerpt, 160) or ""
    st.markdown(
        f"""
<div class="post-card">
  <img src="{html.escape(cover)}" alt="{html.escape(post.title)}" onerror="this.src='{image_fallback()}'" />
  <div class="post-card-body">
    {category_badge_html(post.category)}
    <div class="post-card-title">{html.escape(post.title)}</div>
    <div class="post-card-excerpt">{html.escape(excerpt)}</div>
    <div class="post-meta">{format_date(post.published_at)} · {reading_time(post.content)} min read · 👁 {post.views} · ♥ {post.likes}</div>
  </div>
</div>
        """,
        unsafe_allow_html=True,
    )
    if st.button("Read post →", key=key):
        go("post", post.slug)


def render_post_grid(posts: Sequence[Post], storage_base: Optional[str], key_prefix: str, columns: int = 3) -> None:
    if not posts:
        st.info("No posts here yet.")
        return
    for start in range(0, len(posts), columns):
        cols = st.columns(columns)
        for col, post in zip(cols, posts[start : start + columns]):
            with col:
                render_post_card(post, storage_base, key=f"{key_prefix}-{post.id}")
