from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import streamlit as st

from data.local_store import GuestStores


PAGES = ("home", "category", "post", "admin")

# Carries the browser's guest id across reloads and bookmarks
GUEST_PARAM = "guest"


@dataclass(frozen=True)
class Route:
    page: str
    slug: Optional[str] = None


def current_route() -> Route:
    page = st.query_params.get("page", "home")
    if page not in PAGES:
        page = "home"
    return Route(page=page, slug=st.query_params.get("slug"))


def browser_guest_id() -> str:
    """This browser's guest id; minted on first visit and pinned to the URL and session."""
    guest = GuestStores.resolve_guest_id(
        st.query_params.get(GUEST_PARAM),
        st.session_state.get(GUEST_PARAM),
    )
    st.session_state[GUEST_PARAM] = guest
    if st.query_params.get(GUEST_PARAM) != guest:
        st.query_params[GUEST_PARAM] = guest
    return guest


def go(page: str, slug: Optional[str] = None) -> None:
    """Navigate by rewriting the query string (links stay shareable) and rerun."""
    guest = st.query_params.get(GUEST_PARAM)
    st.query_params.clear()
    if guest:
        st.query_params[GUEST_PARAM] = guest
    st.query_params["page"] = page
    if slug:
        st.query_params["slug"] = slug
    st.rerun()
