from __future__ import annotations

from datetime import datetime, timezone

import streamlit as st

from components.feedback import render_result_status
from components.metrics import engagement_chart, engagement_frame, engagement_kpis, render_kpi_row
from config import AppConfig
from data.images import SAMPLE_IMAGES, FromPath, ImageLibrary, cover_source, resolve_cover_url
from data.models import Degraded, Post
from data.service import BlogServices, fetch


def _report(result, success: str) -> None:
    if isinstance(result, Degraded):
        if result.failed:
            st.error(f"Failed to update post: {result.reason}")
        else:
            st.info("Sample mode: the change was accepted but not saved.")
        return
    st.success(success)


def _image_library_tab(cfg: AppConfig, library: ImageLibrary) -> None:
    with st.form("add-image", clear_on_submit=True):
        st.markdown("**Add new image**")
        url = st.text_input("Image URL", placeholder="https://example.com/image.jpg")
        title = st.text_input("Image title", placeholder="My Image")
        if st.form_submit_button("Add image"):
            try:
                library.add(url, title)
            except ValueError as e:
                st.error(str(e))
            else:
                st.success("Image added successfully!")

    images = library.images()
    if not images:
        st.info("The library is empty.")
        return
    cols = st.columns(3)
    for idx, image in enumerate(images):
        with cols[idx % 3]:
            st.image(resolve_cover_url(FromPath(image.url, image.title), cfg.storage_url), caption=image.title)
            if st.button("Delete", key=f"img-del-{image.id}"):
                library.delete(image.id)
                st.rerun()


def _post_images_tab(cfg: AppConfig, services: BlogServices, library: ImageLibrary, posts: list[Post]) -> None:
    if not posts:
        st.info("No posts found.")
        return

    by_label = {f"{p.title} ({'published' if p.published else 'draft'})": p for p in posts}
    post = by_label[st.selectbox("Post", list(by_label))]

    st.image(resolve_cover_url(cover_source(post.cover_path, post.title), cfg.storage_url), width=320)
    st.caption(f"Current cover: `{post.cover_path or 'none'}`")

    choices = [img.url for img in library.images()] + list(SAMPLE_IMAGES)
    picked = st.selectbox("New cover", choices)
    custom = st.text_input("…or a custom URL / storage path")
    new_cover = custom.strip() or picked

    c1, c2 = st.columns(2)
    with c1:
        if st.button("Apply cover image", key=f"apply-{post.id}"):
            _report(services.posts.update_post(post.id, {"cover_path": new_cover}), "Post updated successfully!")
    with c2:
        label = "Unpublish" if post.published else "Publish"
        if st.button(label, key=f"publish-{post.id}"):
            changes = {"published": not post.published}
            if not post.published and post.published_at is None:
                changes["published_at"] = datetime.now(timezone.utc).isoformat()
            verb = "unpublished" if post.published else "published"
            _report(services.posts.update_post(post.id, changes), f"Post {verb} successfully!")


def render(cfg: AppConfig, services: BlogServices) -> None:
    st.markdown('<div class="section-title">Admin</div>', unsafe_allow_html=True)
    library = ImageLibrary(services.store.persistent)

    result = fetch(cfg, services.posts.get_all)
    if not render_result_status(result):
        return
    posts = result.value or []

    t_images, t_posts, t_stats = st.tabs(["Image Library", "Update Post Images", "Engagement"])
    with t_images:
        _image_library_tab(cfg, library)
    with t_posts:
        _post_images_tab(cfg, services, library, posts)
    with t_stats:
        df = engagement_frame(posts)
        render_kpi_row(engagement_kpis(df))
        engagement_chart(df)
        st.dataframe(df, use_container_width=True, hide_index=True)
