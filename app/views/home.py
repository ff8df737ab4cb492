from __future__ import annotations

import streamlit as st

from components.cards import render_post_grid
from components.feedback import render_result_status
from config import AppConfig
from data.pagination import Paginator
from data.service import BlogServices, fetch


FEATURED_COUNT = 3
PAGES_KEY = "home-pages"


def _paginator(cfg: AppConfig, services: BlogServices) -> Paginator:
    # Latest posts continue after the featured strip
    pager = Paginator(
        cfg,
        services.posts.get_published,
        page_size=cfg.page_size,
        start_offset=FEATURED_COUNT,
    )
    pager.restore(st.session_state.get(PAGES_KEY, 1))
    return pager


def render(cfg: AppConfig, services: BlogServices) -> None:
    storage = cfg.storage_url

    st.markdown('<div class="section-title">Featured</div>', unsafe_allow_html=True)
    featured = fetch(cfg, services.posts.get_published, FEATURED_COUNT, 0)
    if render_result_status(featured):
        render_post_grid(featured.value or [], storage, key_prefix="featured", columns=FEATURED_COUNT)

    st.markdown('<div class="section-title">Latest posts</div>', unsafe_allow_html=True)
    pager = _paginator(cfg, services)
    if pager.state.status == "error" and not pager.items:
        render_result_status(pager.state)
        if st.button("Try again", key="home-retry"):
            st.session_state[PAGES_KEY] = 1
            st.rerun()
        return

    render_post_grid(pager.items, storage, key_prefix="latest")

    if pager.has_more:
        if st.button("Load more", key="home-more"):
            result = pager.load_more()
            if not result.ok:
                st.error("Failed to load more posts")
            else:
                st.session_state[PAGES_KEY] = pager.pages_loaded
                st.rerun()
    elif pager.items:
        st.caption("You've reached the end.")
