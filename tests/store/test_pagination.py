"""Tests for feed_reconciler/store/pagination.py"""

import asyncio

from feed_reconciler.store.pagination import PaginatedFeedFetcher


def pages_of(count, size):
    return [[{"id": f"{p}-{i}"} for i in range(size)] for p in range(count)]


class TestFetchAll:
    def test_collects_every_page(self, fake_store_client):
        client = fake_store_client(pages=pages_of(3, 2), page_size=2)
        fetcher = PaginatedFeedFetcher(client.query_products, page_size=2)

        items = asyncio.run(fetcher.fetch_all())

        assert len(items) == 6
        assert [i["id"] for i in items[:3]] == ["0-0", "0-1", "1-0"]
        # N full pages plus the empty terminating page
        assert fetcher.pages_requested == 4
        assert client.offsets == [0, 2, 4, 6]
        assert fetcher.truncated is False

    def test_empty_feed(self, fake_store_client):
        client = fake_store_client(pages=[], page_size=2)
        fetcher = PaginatedFeedFetcher(client.query_products, page_size=2)

        assert asyncio.run(fetcher.fetch_all()) == []
        assert fetcher.pages_requested == 1

    def test_short_last_page(self, fake_store_client):
        client = fake_store_client(pages=[[{"id": 1}, {"id": 2}], [{"id": 3}]], page_size=2)
        fetcher = PaginatedFeedFetcher(client.query_products, page_size=2)

        assert len(asyncio.run(fetcher.fetch_all())) == 3

    def test_failure_stops_with_partial_result(self, fake_store_client):
        client = fake_store_client(pages=pages_of(3, 2), page_size=2, fail_at_page=1)
        fetcher = PaginatedFeedFetcher(client.query_products, page_size=2)

        items = asyncio.run(fetcher.fetch_all())

        assert len(items) == 2
        assert fetcher.truncated is True
        assert client.offsets == [0, 2]

    def test_state_reset_between_runs(self, fake_store_client):
        client = fake_store_client(pages=pages_of(1, 2), page_size=2, fail_at_page=1)
        fetcher = PaginatedFeedFetcher(client.query_products, page_size=2)
        asyncio.run(fetcher.fetch_all())

        client.fail_at_page = None
        asyncio.run(fetcher.fetch_all())
        assert fetcher.truncated is False
        assert fetcher.pages_requested == 2
