from __future__ import annotations

import html

import streamlit as st


def render_header(site_name: str, subtitle: str, live: bool) -> None:
    mode = "Live data" if live else "Sample data"
    dot = "live" if live else "fallback"
    st.markdown(
        f"""
<div class="blog-header">
  <div>
    <div class="blog-title">{html.escape(site_name)}</div>
    <div class="blog-subtitle">{html.escape(subtitle)}</div>
  </div>
  <div class="pill"><span class="dot {dot}"></span>{mode}</div>
</div>
        """,
        unsafe_allow_html=True,
    )
