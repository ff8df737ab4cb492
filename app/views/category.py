from __future__ import annotations

import html
from typing import Optional

import streamlit as st

from components.cards import category_badge_html, render_post_grid
from components.feedback import render_not_found, render_result_status
from config import AppConfig
from data.pagination import Paginator
from data.service import BlogServices, fetch


def render(cfg: AppConfig, services: BlogServices, slug: Optional[str]) -> None:
    if not slug:
        render_not_found("Category Not Found", "No category was selected.")
        return

    result = fetch(cfg, services.categories.get_by_slug, slug)
    if not render_result_status(result):
        return
    category = result.value
    if category is None:
        render_not_found("Category Not Found", f"There is no category called “{slug}”.", retry_key="category-retry")
        return

    st.markdown(category_badge_html(category), unsafe_allow_html=True)
    st.markdown(f'<div class="article-title">{html.escape(category.name)}</div>', unsafe_allow_html=True)

    def fetch_page(limit: int, offset: int):
        return services.posts.get_by_category(slug, limit, offset)

    key = f"category-pages-{slug}"
    pager = Paginator(cfg, fetch_page, page_size=cfg.page_size)
    pager.restore(st.session_state.get(key, 1))

    if not render_result_status(pager.state) and not pager.items:
        return

    render_post_grid(pager.items, cfg.storage_url, key_prefix=f"cat-{slug}")
    if pager.has_more and st.button("Load more", key=f"{key}-more"):
        if pager.load_more().ok:
            st.session_state[key] = pager.pages_loaded
            st.rerun()
        else:
            st.error("Failed to load more posts")
