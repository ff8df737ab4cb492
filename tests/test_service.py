from __future__ import annotations

import logging

import pytest

from data import mock_data
from data.connection import RemoteStoreError
from data.models import Counted, Degraded
from data.service import NOT_CONFIGURED, fetch


#
# Config gate
#
def test_gate_closed_categories_serve_fallback_without_network(offline_services, client):
    cats = offline_services.categories.get_all()

    assert cats == mock_data.categories_mock()
    assert [c.name for c in cats] == sorted(c.name for c in cats)
    assert client.calls == []


def test_gate_closed_logs_one_warning_per_call(offline_services, caplog):
    with caplog.at_level(logging.WARNING, logger="data.service"):
        offline_services.categories.get_all()
        offline_services.categories.get_all()

    records = [r for r in caplog.records if r.name == "data.service" and r.levelno == logging.WARNING]
    assert len(records) == 2
    assert all("not configured" in r.getMessage() for r in records)


def test_gate_closed_results_are_not_cached(offline_services, cache):
    offline_services.posts.get_published(6, 0)
    offline_services.categories.get_by_slug("design")
    assert len(cache) == 0


def test_gate_closed_writes_are_simulated(offline_services, client):
    assert offline_services.posts.increment_views("p1") == Degraded(NOT_CONFIGURED)
    assert offline_services.engagement.toggle_like("p1", False) == Degraded(NOT_CONFIGURED)
    assert offline_services.posts.update_post("p1", {"published": False}) == Degraded(NOT_CONFIGURED)
    assert client.calls == []


def test_fetch_marks_fallback_source(offline_cfg, offline_services):
    result = fetch(offline_cfg, offline_services.posts.get_published, 6, 0)
    assert result.ok
    assert result.source == "fallback"
    assert result.warning
    assert len(result.value) == 6


def test_fetch_reports_fallback_after_remote_failure(cfg, services, client):
    assert fetch(cfg, services.posts.get_published, 6, 0).source == "supabase"

    client.fail.add("select")
    result = fetch(cfg, services.posts.get_by_slug, "post-1")

    assert result.ok
    assert result.source == "fallback"
    assert "unreachable" in result.warning


def test_fetch_source_resets_between_calls(cfg, services, client):
    client.fail.add("select")
    fetch(cfg, services.categories.get_all)
    client.fail.clear()

    result = fetch(cfg, services.categories.get_all)
    assert result.source == "supabase"
    assert result.warning is None


def test_fetch_wraps_errors(cfg):
    def boom():
        raise RemoteStoreError("nope")

    result = fetch(cfg, boom)
    assert result.status == "error"
    assert "nope" in result.error
    assert result.value is None


#
# Reads
#
def test_categories_ordered_by_name(services):
    assert [c.name for c in services.categories.get_all()] == ["Art", "Empty", "Technology"]


def test_category_by_slug(services):
    assert services.categories.get_by_slug("art").id == "c-art"
    assert services.categories.get_by_slug("nope") is None


def test_published_posts_newest_first_with_category(services):
    posts = services.posts.get_published(6, 0)

    assert [p.id for p in posts] == ["p7", "p5", "p4", "p3", "p2", "p1"]
    assert all(p.published for p in posts)
    assert posts[1].category.name == "Art"
    assert posts[0].category is None


def test_published_posts_window(services):
    assert [p.id for p in services.posts.get_published(2, 2)] == ["p4", "p3"]
    assert services.posts.get_published(6, 6) == []


def test_repeated_read_is_served_from_cache(services, client):
    services.posts.get_published(6, 0)
    services.posts.get_published(6, 0)
    assert client.calls_for("select", "posts") == 1
    assert "posts:published:[6,0]" in services.cache


def test_read_after_max_age_refetches(services, client, clock):
    services.categories.get_all()
    clock.advance(61)
    services.categories.get_all()
    assert client.calls_for("select", "categories") == 2


def test_missing_slug_is_none_not_fallback(services):
    assert services.posts.get_by_slug("does-not-exist") is None


def test_draft_is_still_reachable_by_slug(services):
    assert services.posts.get_by_slug("post-6").published is False


def test_remote_failure_serves_fallback(services, client):
    client.fail.add("select")
    posts = services.posts.get_published(6, 0)
    assert posts == mock_data.published_page_mock(6, 0)
    assert len(services.cache) == 0


def test_posts_by_category(services):
    assert [p.id for p in services.posts.get_by_category("technology", 6, 0)] == ["p4", "p3", "p1"]
    assert services.posts.get_by_category("empty", 6, 0) == []


def test_posts_by_unknown_category_is_empty(services):
    assert services.posts.get_by_category("nope", 6, 0) == []


def test_related_posts_exclude_current(services):
    related = services.posts.get_related("c-tech", "p4", 3)
    assert [p.id for p in related] == ["p3", "p1"]


def test_all_posts_include_drafts(services):
    assert {p.id for p in services.posts.get_all()} == {f"p{n}" for n in range(1, 8)}


def test_fallback_related_posts_stay_in_category():
    tech = mock_data.category_by_slug_mock("technology")
    current = mock_data.category_page_mock("technology", 1, 0)[0]
    related = mock_data.related_posts_mock(tech.id, current.id, 3)
    assert len(related) <= 3
    assert all(p.category_id == tech.id and p.id != current.id for p in related)


def test_fallback_dataset_hides_draft():
    published = mock_data.published_posts_mock()
    assert len(published) == len(mock_data.POSTS) - 1
    assert all(p.published for p in published)
    assert [p.published_at for p in published] == sorted((p.published_at for p in published), reverse=True)


#
# Writes
#
def test_increment_views_invalidates_post_reads(services, client):
    services.posts.get_published(6, 0)
    services.categories.get_all()

    assert services.posts.increment_views("p1") == Counted(11)
    assert services.cache.keys() == ["categories:all:[]"]
    assert services.posts.get_by_slug("post-1").views == 11


def test_increment_views_missing_post(services):
    result = services.posts.increment_views("p404")
    assert isinstance(result, Degraded) and result.failed


def test_increment_views_remote_error(services, client):
    client.fail.add(("update", "posts"))
    result = services.posts.increment_views("p1")
    assert isinstance(result, Degraded) and result.failed


def test_update_post_returns_new_row(services):
    services.posts.get_all()
    post = services.posts.update_post("p6", {"published": True, "published_at": "2024-09-20T00:00:00Z"})

    assert post.published is True
    assert len(services.cache) == 0
    assert "p6" in [p.id for p in services.posts.get_published(10, 0)]


#
# Engagement
#
def test_like_then_unlike_reports_counts(services, client):
    user = services.engagement.guest_id()

    assert services.engagement.toggle_like("p2", False) == Counted(3)
    assert services.engagement.has_liked("p2", user) is True
    assert services.engagement.toggle_like("p2", True) == Counted(2)
    assert services.engagement.has_liked("p2", user) is False


def test_duplicate_like_is_treated_as_success(services, client):
    user = services.engagement.guest_id()
    client.tables["likes"].append({"post_id": "p2", "user_id": user})

    assert services.engagement.toggle_like("p2", False) == Counted(2)


def test_like_count_falls_back_to_row_count(services, client):
    client.tables["posts"][1]["likes"] = None
    client.tables["likes"] += [{"post_id": "p2", "user_id": "u1"}, {"post_id": "p2", "user_id": "u2"}]

    assert services.engagement.get_likes("p2") == 2


def test_like_write_failure_is_failed_degraded(services, client):
    client.fail.add(("insert", "likes"))
    result = services.engagement.toggle_like("p2", False)
    assert isinstance(result, Degraded) and result.failed


def test_like_without_readable_count_is_soft_degraded(services, client):
    client.fail |= {("select", "posts"), ("count", "likes")}
    result = services.engagement.toggle_like("p2", False)
    assert result == Degraded("like count unavailable")


def test_get_likes_uses_snapshot_when_unreadable(services, client):
    featured = mock_data.FEATURED_POSTS[0]
    client.fail |= {("select", "posts"), ("count", "likes")}
    assert services.engagement.get_likes(featured.id) == featured.likes
    assert services.engagement.get_likes("p404") == 0


def test_has_liked_falls_back_to_local_list(services, client, store):
    store.add_liked("p3")
    client.fail.add(("select", "likes"))
    assert services.engagement.has_liked("p3", "someone") is True
    assert services.engagement.has_liked("p1", "someone") is False


@pytest.mark.parametrize("post_id,user_id", [("", "u1"), ("p3", None)])
def test_has_liked_without_ids_uses_local_list(services, client, store, post_id, user_id):
    store.add_liked("p3")
    assert services.engagement.has_liked(post_id, user_id) == (post_id == "p3")
    assert client.calls_for("select", "likes") == 0


def test_record_view_counts_once_per_guest(services):
    assert services.engagement.record_view("p1") == Counted(11)
    assert services.engagement.record_view("p1") == Counted(11)


def test_record_view_falls_back_to_increment(services, client):
    client.fail.add(("rpc", "track_post_view"))
    assert services.engagement.record_view("p1") == Counted(11)
    assert client.calls_for("update", "posts") == 1


def test_check_connection(services, client):
    assert services.check_connection().connected is True
    client.fail.add("select")
    status = services.check_connection()
    assert status.connected is False
    assert "failed" in status.error


def test_close_releases_client(services, client):
    services.close()
    assert client.closed is True
