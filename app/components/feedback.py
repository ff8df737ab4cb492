from __future__ import annotations

import html
from typing import Optional

import streamlit as st

from components.routing import go
from data.service import DataResult


def render_callout(title: str, body: str, kind: str = "info") -> None:
    st.markdown(
        f"""
<div class="callout callout-{kind}">
  <div class="callout-title">{html.escape(title)}</div>
  <div class="callout-body">{html.escape(body)}</div>
</div>
        """,
        unsafe_allow_html=True,
    )


def render_not_found(title: str, message: str, retry_key: Optional[str] = None) -> None:
    """Missing post/category: explain, then offer retry or a way home."""
    render_callout(title, message, kind="error")
    c1, c2, _ = st.columns([1, 1, 4])
    with c1:
        if retry_key and st.button("Try again", key=retry_key):
            st.rerun()
    with c2:
        if st.button("Back to home", key=f"{retry_key or 'nf'}-home"):
            go("home")


def render_result_status(result: DataResult) -> bool:
    """Show degraded/error state for a DataResult; returns True when the value is usable."""
    if result.status == "error":
        render_callout("Something went wrong", result.error or "Failed to load content", kind="error")
        return False
    if result.status == "pending":
        st.caption("Loading…")
        return False
    if result.warning:
        st.caption(result.warning)
    return True


def toast_notice(message: Optional[str]) -> None:
    # Non-blocking: the page keeps rendering underneath
    if message:
        st.toast(message, icon="⚠️")
