"""Tests for API endpoints."""

import pytest

from shortener.errors import PersistenceError
from shortener.hashing import content_hash


async def create(client, url):
    response = await client.post("/", json={"url": url})
    assert response.status_code == 200
    return response.json()


def remove_path(view: dict) -> str:
    # removeUrl is absolute, the client only needs the path
    return view["removeUrl"].split("http://sho.rt", 1)[1]


@pytest.mark.asyncio
class TestCreate:
    """Test POST /."""

    async def test_shorten_url(self, client, sample_urls):
        data = await create(client, sample_urls[0])

        assert set(data) == {"url", "shorten", "hash", "removeUrl", "visits"}
        assert data["url"] == sample_urls[0]
        assert data["hash"] == content_hash(sample_urls[0])
        assert data["shorten"] == f"http://sho.rt/{data['hash']}"
        assert data["visits"] == "1 visits recorded"

    async def test_shorten_same_url_twice(self, client, store, sample_urls):
        first = await create(client, sample_urls[1])
        second = await create(client, sample_urls[1])

        assert first == second
        assert len(store) == 1

    async def test_missing_url(self, client):
        response = await client.post("/", json={})

        assert response.status_code == 400
        assert response.json() == {"error": "Bad Request. Missing url in body parameter"}

    async def test_missing_body(self, client):
        response = await client.post("/")
        assert response.status_code == 400

    async def test_malformed_body(self, client):
        response = await client.post("/", json={"url": 42})
        assert response.status_code == 400

    async def test_invalid_url(self, client, store):
        response = await client.post("/", json={"url": "not a url"})

        assert response.status_code == 400
        assert "Invalid URL" in response.json()["error"]
        assert len(store) == 0

    async def test_persistence_failure(self, client, store, monkeypatch):
        async def fail(record):
            raise PersistenceError("Unable to persist into DB")

        monkeypatch.setattr(store, "insert", fail)

        response = await client.post("/", json={"url": "http://example.com"})

        assert response.status_code == 500
        assert response.json() == {"error": "Unable to persist into DB"}


@pytest.mark.asyncio
class TestResolve:
    """Test GET /{hash}."""

    async def test_redirect(self, client, sample_urls):
        data = await create(client, sample_urls[0])

        response = await client.get(f"/{data['hash']}", follow_redirects=False)

        assert response.status_code == 302
        assert response.headers["location"] == sample_urls[0]

    async def test_plain_text(self, client, sample_urls):
        data = await create(client, sample_urls[0])

        response = await client.get(f"/{data['hash']}", headers={"Accept": "text/plain"})

        assert response.status_code == 200
        assert response.text == sample_urls[0]

    async def test_json_counts_visit(self, client, sample_urls):
        data = await create(client, sample_urls[0])

        response = await client.get(f"/{data['hash']}", headers={"Accept": "application/json"})

        assert response.status_code == 200
        assert response.json()["visits"] == "2 visits recorded"
        assert response.json()["removeUrl"] == data["removeUrl"]

    async def test_not_found(self, client):
        response = await client.get("/nonexistent", follow_redirects=False)

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found. Provided hash does not exists"}

    async def test_removed_is_not_found(self, client, sample_urls):
        data = await create(client, sample_urls[0])
        await client.delete(remove_path(data))

        response = await client.get(f"/{data['hash']}", follow_redirects=False)

        assert response.status_code == 404

    async def test_visit_failure_still_resolves(self, client, store, sample_urls, monkeypatch):
        data = await create(client, sample_urls[0])

        async def fail(hash):
            raise PersistenceError("down")

        monkeypatch.setattr(store, "increment_visit_counter", fail)

        response = await client.get(f"/{data['hash']}", headers={"Accept": "application/json"})

        assert response.status_code == 200
        assert response.json()["visits"] == "1 visits recorded"


@pytest.mark.asyncio
class TestRemove:
    """Test DELETE /{hash}/remove/{remove_token}."""

    async def test_remove(self, client, service, sample_urls):
        data = await create(client, sample_urls[0])

        response = await client.delete(remove_path(data))

        assert response.status_code == 200
        assert response.text == "ok. Deleted"
        assert (await service.resolve(data["hash"])).active is False

    async def test_invalid_token(self, client, service, sample_urls):
        data = await create(client, sample_urls[0])

        response = await client.delete(f"/{data['hash']}/remove/not-the-token")

        assert response.status_code == 400
        assert response.json() == {"error": "Bad Request. token is invalid"}
        assert (await service.resolve(data["hash"])).active is True

    async def test_not_found(self, client):
        response = await client.delete("/nonexistent/remove/some-token")
        assert response.status_code == 404

    async def test_remove_twice(self, client, sample_urls):
        data = await create(client, sample_urls[0])

        await client.delete(remove_path(data))
        response = await client.delete(remove_path(data))

        assert response.status_code == 404

    async def test_disable_failure(self, client, service, sample_urls, monkeypatch):
        data = await create(client, sample_urls[0])

        async def nothing_updated(record):
            return False

        monkeypatch.setattr(service, "disable", nothing_updated)

        response = await client.delete(remove_path(data))

        assert response.status_code == 500
        assert response.json() == {"error": "Unable to delete url. maybe try later"}

    async def test_repost_after_remove(self, client, sample_urls):
        data = await create(client, sample_urls[0])
        await client.get(f"/{data['hash']}", follow_redirects=False)
        await client.delete(remove_path(data))

        again = await create(client, sample_urls[0])

        assert again["hash"] == data["hash"]
        assert again["visits"] == "1 visits recorded"
        assert again["removeUrl"] != data["removeUrl"]

        # Old token no longer works
        response = await client.delete(remove_path(data))
        assert response.status_code == 400


@pytest.mark.asyncio
class TestHealth:
    """Test GET /api/health."""

    async def test_health_check(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["store"] == "healthy"
        assert "timestamp" in data
