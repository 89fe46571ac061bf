"""Tests that the server handles many concurrent requests correctly.

Requests share nothing but the store handle, so concurrent creates must still
come back with distinct ids and short codes.
"""

import asyncio
import pytest


@pytest.mark.asyncio
class TestConcurrentConnections:
    """Prove the server handles many simultaneous requests."""

    async def test_concurrent_health_requests(self, client):
        """Many concurrent GET /api/health requests all succeed."""
        concurrency = 50
        tasks = [client.get("/api/health") for _ in range(concurrency)]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 200, f"Request {i}: status {r.status_code}"

    async def test_concurrent_create_requests(self, client):
        """Concurrent POST /api/url/ all succeed with unique short codes."""
        concurrency = 30
        urls = [f"https://example.com/page_{i}" for i in range(concurrency)]
        tasks = [client.post("/api/url/", json={"longUrl": url}) for url in urls]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        records = []
        for i, r in enumerate(responses):
            if isinstance(r, Exception):
                pytest.fail(f"Request {i} raised: {r}")
            assert r.status_code == 201, f"Request {i}: status {r.status_code} {r.text}"
            records.append(r.json()["data"])

        assert len({record["shortCode"] for record in records}) == concurrency
        assert len({record["id"] for record in records}) == concurrency
        assert sorted(record["longUrl"] for record in records) == sorted(urls)

    async def test_concurrent_lookups_after_create(self, client):
        """Create then fetch many codes concurrently; each maps to its own URL."""
        concurrency = 20
        created = []
        for i in range(concurrency):
            r = await client.post("/api/url/", json={"longUrl": f"https://example.org/item/{i}"})
            assert r.status_code == 201
            created.append(r.json()["data"])

        tasks = [
            client.get("/api/url/getUrl/", params={"shortCode": record["shortCode"]})
            for record in created
        ]
        responses = await asyncio.gather(*tasks, return_exceptions=True)

        for record, r in zip(created, responses):
            if isinstance(r, Exception):
                pytest.fail(f"Lookup for {record['shortCode']} raised: {r}")
            assert r.status_code == 200
            assert r.json()["data"]["longUrl"] == record["longUrl"]

    async def test_concurrent_deletes_of_same_record(self, client):
        """Exactly one of several racing deletes wins; the rest see 404."""
        r = await client.post("/api/url/", json={"longUrl": "https://example.com/race"})
        url_id = r.json()["data"]["id"]

        responses = await asyncio.gather(*[client.delete(f"/api/url/{url_id}") for _ in range(5)])

        statuses = sorted(r.status_code for r in responses)
        assert statuses == [204, 404, 404, 404, 404]
