from __future__ import annotations

import html
from typing import Optional

import streamlit as st

from components.cards import category_badge_html, render_post_grid
from components.feedback import render_not_found, render_result_status, toast_notice
from components.routing import go
from config import AppConfig
from data.engagement import PostEngagement
from data.images import FromEntity, image_fallback, resolve_cover_url
from data.service import BlogServices, fetch
from data.text import format_date, reading_time


RELATED_COUNT = 3


def _engagement(services: BlogServices, post) -> PostEngagement:
    key = f"engagement-{post.id}"
    eng = st.session_state.get(key)
    if eng is None:
        eng = PostEngagement(services.engagement, services.store)
        st.session_state[key] = eng
    # Rebind to this run's services, then follow the cached post row
    eng.engagement = services.engagement
    eng.store = services.store
    eng.refresh(post)
    eng.track_view()
    return eng


def render(cfg: AppConfig, services: BlogServices, slug: Optional[str]) -> None:
    if not slug:
        render_not_found("Post Not Found", "No post was selected.")
        return

    result = fetch(cfg, services.posts.get_by_slug, slug)
    if not render_result_status(result):
        return
    post = result.value
    if post is None:
        render_not_found("Post Not Found", "The post you're looking for doesn't exist.", retry_key="post-retry")
        return

    eng = _engagement(services, post)

    if post.cover_path:
        cover = resolve_cover_url(FromEntity(post), cfg.storage_url)
        st.markdown(
            f'<img class="cover" src="{html.escape(cover)}" alt="{html.escape(post.title)}" onerror="this.src=\'{image_fallback()}\'" />',
            unsafe_allow_html=True,
        )

    st.markdown(category_badge_html(post.category), unsafe_allow_html=True)
    st.markdown(f'<div class="article-title">{html.escape(post.title)}</div>', unsafe_allow_html=True)

    meta, like_col = st.columns([4, 1])
    with meta:
        st.markdown(
            f'<div class="post-meta">{format_date(post.published_at)} · {reading_time(post.content)} min read · 👁 {eng.view_count} views</div>',
            unsafe_allow_html=True,
        )
    with like_col:
        st.button(
            f"{'♥' if eng.liked else '♡'} {eng.like_count}",
            key=f"like-{post.id}",
            on_click=eng.toggle_like,
            help="Unlike" if eng.liked else "Like this post",
            use_container_width=True,
        )

    toast_notice(eng.notice)
    eng.dismiss_notice()

    st.divider()
    st.markdown(post.content)
    st.divider()

    if post.category_id:
        related = fetch(cfg, services.posts.get_related, post.category_id, post.id, RELATED_COUNT)
        if related.ok and related.value:
            st.markdown('<div class="section-title">Related posts</div>', unsafe_allow_html=True)
            render_post_grid(related.value, cfg.storage_url, key_prefix="related", columns=RELATED_COUNT)

    if st.button("← Back to all posts", key="post-back"):
        go("home")
