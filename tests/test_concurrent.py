"""Tests that concurrent callers keep one record per hash and exact visit counts."""

import asyncio

import pytest


def token_from(view: dict) -> str:
    return view["removeUrl"].rsplit("/", 1)[-1]


@pytest.mark.asyncio
class TestConcurrentLifecycle:
    """Callers that all read before any of them writes."""

    async def test_concurrent_shorten_same_url(self, racing_service, yielding_store):
        """Every caller misses the lookup, one insert wins, the rest conflict."""
        concurrency = 30
        url = "https://example.com/popular"

        views = await asyncio.gather(
            *(racing_service.create_or_fetch(url) for _ in range(concurrency))
        )

        assert yielding_store.insert_calls == concurrency
        assert len(yielding_store) == 1
        assert len({v["hash"] for v in views}) == 1
        assert len({v["removeUrl"] for v in views}) == 1

    async def test_concurrent_revive_keeps_one_token(self, racing_service, yielding_store):
        url = "https://example.com/revived"
        view = await racing_service.create_or_fetch(url)
        await racing_service.disable(await racing_service.resolve(view["hash"]))

        views = await asyncio.gather(
            racing_service.create_or_fetch(url),
            racing_service.create_or_fetch(url),
        )

        stored = await racing_service.resolve(view["hash"])
        assert stored.active is True
        assert {token_from(v) for v in views} == {stored.remove_token}
        assert stored.remove_token != token_from(view)

    async def test_visit_racing_removal_is_not_counted(self, racing_service):
        view = await racing_service.create_or_fetch("https://example.com/gone")
        record = await racing_service.resolve(view["hash"])

        removed, visited = await asyncio.gather(
            racing_service.disable(record),
            racing_service.register_visit(record),
        )

        stored = await racing_service.resolve(view["hash"])
        assert removed is True
        assert stored.active is False
        assert visited is None
        assert stored.visit_counter == 1

    async def test_concurrent_removal(self, racing_service):
        view = await racing_service.create_or_fetch("https://example.com/twice")
        record = await racing_service.resolve(view["hash"])

        results = await asyncio.gather(
            racing_service.disable(record),
            racing_service.disable(record),
        )

        assert results == [True, True]
        assert (await racing_service.resolve(view["hash"])).active is False


@pytest.mark.asyncio
class TestConcurrentRequests:
    """Many simultaneous requests against one app."""

    async def test_concurrent_post_same_url(self, client, store):
        """Simultaneous POSTs of one URL all get the same record."""
        concurrency = 30
        url = "https://example.com/popular"

        responses = await asyncio.gather(
            *(client.post("/", json={"url": url}) for _ in range(concurrency)),
            return_exceptions=True,
        )

        views = []
        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 200, f"Request {i}: status {r.status_code}"
            views.append(r.json())

        assert len({v["hash"] for v in views}) == 1
        assert len({v["removeUrl"] for v in views}) == 1
        assert len(store) == 1

    async def test_concurrent_shorten_different_urls(self, client, store):
        concurrency = 30
        urls = [f"https://example.com/page_{i}" for i in range(concurrency)]

        responses = await asyncio.gather(*(client.post("/", json={"url": u}) for u in urls))

        assert all(r.status_code == 200 for r in responses)
        assert len({r.json()["hash"] for r in responses}) == concurrency
        assert len(store) == concurrency

    async def test_concurrent_visits(self, client, service):
        """Every visit is counted exactly once."""
        created = await client.post("/", json={"url": "https://example.com/visited"})
        hash = created.json()["hash"]
        visits = 25

        responses = await asyncio.gather(
            *(client.get(f"/{hash}", follow_redirects=False) for _ in range(visits))
        )

        assert all(r.status_code == 302 for r in responses)
        assert (await service.resolve(hash)).visit_counter == 1 + visits

    async def test_concurrent_dictionary_hashing(self, dictionary_service):
        """Racing first sightings of a domain share one identifier."""
        urls = [f"https://shared.example.com/p{i}" for i in range(20)]

        views = await asyncio.gather(*(dictionary_service.create_or_fetch(u) for u in urls))

        domain_ids = {v["hash"].split("-")[1] for v in views}
        assert domain_ids == {"10"}
        assert len({v["hash"] for v in views}) == len(urls)
