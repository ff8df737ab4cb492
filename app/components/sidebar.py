from __future__ import annotations

import streamlit as st

from components.cards import category_color
from components.routing import Route, go
from config import AppConfig
from data.service import BlogServices, fetch


NAV_ITEMS = [
    ("🏠 Home", "home"),
    ("🖼️ Admin", "admin"),
]


def render_sidebar(cfg: AppConfig, services: BlogServices, route: Route) -> None:
    with st.sidebar:
        st.markdown(f"### 📝 {cfg.site_name}")
        st.caption("Notes on code, design and travel")

        for label, page in NAV_ITEMS:
            if st.button(label, key=f"nav-{page}", use_container_width=True, disabled=route.page == page):
                go(page)

        st.markdown("**Categories**")
        result = fetch(cfg, services.categories.get_all)
        if not result.ok:
            st.caption("Categories unavailable")
        for cat in result.value or []:
            selected = route.page == "category" and route.slug == cat.slug
            if st.button(
                cat.name,
                key=f"cat-{cat.slug}",
                use_container_width=True,
                type="primary" if selected else "secondary",
                help=f"Posts in {cat.name}",
            ):
                go("category", cat.slug)
            st.markdown(
                f'<div style="height:3px;background:{category_color(cat.name)};border-radius:3px;margin:-6px 0 8px 0"></div>',
                unsafe_allow_html=True,
            )

        with st.expander("⚙️ Connection", expanded=False):
            if not cfg.is_configured:
                st.info("Set `SUPABASE_URL` and `SUPABASE_ANON_KEY` for live data. Sample content always works.")
            elif st.button("Check connection", key="check-connection"):
                status = services.check_connection()
                if status.connected:
                    st.success("Connected to Supabase")
                else:
                    st.error(f"Connection failed: {status.error}")
            st.caption(f"Cache entries: {len(services.cache)}")
            if st.button("Clear cache", key="clear-cache"):
                services.cache.clear()
                st.rerun()
