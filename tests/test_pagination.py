from __future__ import annotations

from data.connection import RemoteStoreError
from data.pagination import Paginator


def _pages(total: int):
    calls = []

    def fetch_page(limit, offset):
        calls.append((limit, offset))
        return list(range(total))[offset : offset + limit]

    return fetch_page, calls


def test_short_first_page_has_no_more(cfg):
    fetch_page, _ = _pages(4)
    pager = Paginator(cfg, fetch_page, page_size=6)
    pager.load_first()

    assert pager.items == [0, 1, 2, 3]
    assert pager.has_more is False
    assert pager.state.ok


def test_full_page_then_empty_page(cfg):
    fetch_page, calls = _pages(6)
    pager = Paginator(cfg, fetch_page, page_size=6)
    pager.load_first()
    assert pager.has_more is True

    pager.load_more()
    assert pager.items == list(range(6))
    assert pager.has_more is False
    assert pager.page == 0
    assert calls == [(6, 0), (6, 6)]


def test_load_more_appends_pages(cfg):
    fetch_page, calls = _pages(14)
    pager = Paginator(cfg, fetch_page, page_size=6)
    pager.load_first()
    pager.load_more()
    pager.load_more()

    assert pager.items == list(range(14))
    assert pager.page == 2
    assert pager.has_more is False
    assert calls[-1] == (6, 12)

    pager.load_more()
    assert len(calls) == 3


def test_failed_page_keeps_loaded_items(cfg):
    state = {"fail": False}

    def fetch_page(limit, offset):
        if state["fail"]:
            raise RemoteStoreError("timeout")
        return list(range(offset, offset + limit))

    pager = Paginator(cfg, fetch_page, page_size=3)
    pager.load_first()
    state["fail"] = True

    result = pager.load_more()
    assert result.status == "error"
    assert pager.items == [0, 1, 2]
    assert pager.page == 0
    assert pager.has_more is True


def test_reset_starts_over(cfg):
    fetch_page, calls = _pages(10)
    pager = Paginator(cfg, fetch_page, page_size=3)
    pager.load_first()
    pager.load_more()

    pager.reset()
    assert pager.items == [0, 1, 2]
    assert pager.page == 0
    assert calls[-1] == (3, 0)


def test_fallback_pages_come_from_sample_data(offline_cfg, offline_services):
    pager = Paginator(offline_cfg, offline_services.posts.get_published, page_size=6)
    pager.load_first()
    pager.load_more()
    pager.load_more()

    assert pager.state.source == "fallback"
    assert len(pager.items) == 13
    assert pager.has_more is False


def test_start_offset_skips_leading_rows(cfg):
    fetch_page, calls = _pages(10)
    pager = Paginator(cfg, fetch_page, page_size=3, start_offset=3)
    pager.load_first()
    pager.load_more()

    assert pager.items == [3, 4, 5, 6, 7, 8]
    assert calls == [(3, 3), (3, 6)]


def test_restore_reloads_opened_pages(cfg):
    fetch_page, calls = _pages(10)
    pager = Paginator(cfg, fetch_page, page_size=3)
    pager.restore(3)

    assert pager.items == list(range(9))
    assert pager.pages_loaded == 3
    assert calls == [(3, 0), (3, 3), (3, 6)]


def test_restore_stops_at_short_page(cfg):
    fetch_page, calls = _pages(4)
    pager = Paginator(cfg, fetch_page, page_size=3)
    pager.restore(5)

    assert pager.items == [0, 1, 2, 3]
    assert pager.has_more is False
    assert len(calls) == 2


def test_rebuilt_pager_sees_writes(cfg, services):
    first = Paginator(cfg, services.posts.get_published, page_size=3)
    first.restore(1)
    assert first.items[0].views == 70

    services.posts.increment_views("p7")

    again = Paginator(cfg, services.posts.get_published, page_size=3)
    again.restore(first.pages_loaded)
    assert again.items[0].views == 71


def test_featured_and_latest_do_not_overlap(offline_cfg, offline_services):
    featured = offline_services.posts.get_published(3, 0)
    latest = Paginator(offline_cfg, offline_services.posts.get_published, page_size=6, start_offset=3)
    latest.restore(3)

    assert not {p.id for p in featured} & {p.id for p in latest.items}
    assert len(featured) + len(latest.items) == 13
