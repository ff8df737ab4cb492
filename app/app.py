"""
Routing only.

All page logic lives in app/views/.
All env reads happen ONLY in config.py.
"""

from __future__ import annotations

import os
import sys

# Make `app/` importable as a flat module path when running:
#   streamlit run app/app.py
APP_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(APP_DIR, ".."))
for p in [APP_DIR, REPO_ROOT]:
    if p not in sys.path:
        sys.path.insert(0, p)

import streamlit as st  # noqa: E402

from components.header import render_header  # noqa: E402
from components.routing import browser_guest_id, current_route  # noqa: E402
from components.sidebar import render_sidebar  # noqa: E402
from components.styles import apply_theme  # noqa: E402
from config import AppConfig, configure_logging, get_config  # noqa: E402
from data.cache import QueryCache  # noqa: E402
from data.connection import RestClient, get_rest_client  # noqa: E402
from data.local_store import EngagementStore, GuestStores  # noqa: E402
from data.service import BlogServices, build_services  # noqa: E402

from views import admin, category, home, post  # noqa: E402


@st.cache_resource
def _process_resources(cfg: AppConfig) -> tuple[QueryCache, RestClient, GuestStores]:
    # One cache and HTTP session per server process; persistent state is split per browser
    configure_logging(cfg.log_level)
    return QueryCache(), get_rest_client(cfg), GuestStores(cfg.local_state_dir)


def _services(cfg: AppConfig) -> BlogServices:
    cache, client, guests = _process_resources(cfg)
    persistent = guests.for_guest(browser_guest_id())
    store = EngagementStore(session=st.session_state, persistent=persistent)
    return build_services(cfg, store, cache=cache, client=client)


def main() -> None:
    cfg = get_config()
    apply_theme(cfg.site_name)
    services = _services(cfg)
    route = current_route()

    render_sidebar(cfg, services, route)
    render_header(
        site_name=cfg.site_name,
        subtitle="Notes on code, design and travel",
        live=cfg.is_configured,
    )

    # Routing only
    if route.page == "home":
        home.render(cfg, services)
    elif route.page == "category":
        category.render(cfg, services, route.slug)
    elif route.page == "post":
        post.render(cfg, services, route.slug)
    elif route.page == "admin":
        admin.render(cfg, services)
    else:
        st.error("Unknown page")


if __name__ == "__main__":
    main()
