"""
Unit tests for the ratings dataset loader.

File sources use tmp_path; HTTP sources use httpx.MockTransport so no
test touches the network.
"""

import json

import httpx
import pytest

from fifatracker.ratings.loader import DatasetLoader, DatasetLoadError
from fifatracker.ratings.models import PlayerRating
from fifatracker.ratings.store import RatingsStore


def _write(path, payload):
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return str(path)


class TestLoadFromFile:
    """Tests for local file sources."""

    @pytest.mark.asyncio
    async def test_load_success(self, ratings_file, raw_records):
        store = RatingsStore()
        ok = await DatasetLoader([str(ratings_file)]).load_into(store)

        assert ok is True
        assert store.names() == [r["name"] for r in raw_records]
        assert store.get("Kylian Mbappé").nationality == "France"

    @pytest.mark.asyncio
    async def test_first_responding_location_wins(self, tmp_path):
        first = _write(tmp_path / "first.json", [{"id": "1", "name": "First Source"}])
        second = _write(tmp_path / "second.json", [{"id": "2", "name": "Second Source"}])
        missing = str(tmp_path / "missing.json")

        store = RatingsStore()
        ok = await DatasetLoader([missing, first, second]).load_into(store)

        assert ok is True
        assert store.names() == ["First Source"]

    @pytest.mark.asyncio
    async def test_bad_records_skipped(self, tmp_path):
        location = _write(tmp_path / "players.json", [
            {"id": "1", "name": "Good Player", "overall": 80},
            "not a record",
            {"id": "2", "name": ""},
            {"id": "3", "name": "Broken Positions", "positions": 5},
            {"id": "4", "name": "Another Good", "overall": 75},
        ])

        store = RatingsStore()
        ok = await DatasetLoader([location]).load_into(store)

        assert ok is True
        assert store.names() == ["Good Player", "Another Good"]

    @pytest.mark.asyncio
    async def test_out_of_range_numbers_keep_dataset(self, tmp_path):
        path = tmp_path / "players.json"
        path.write_text(
            '[{"name": "Good Player", "overall": 80},'
            ' {"name": "Huge", "overall": 1e999, "age": 1e999,'
            '  "detailed_skills": {"attacking": {"finishing": -1e999}}},'
            ' {"name": "Nan Player", "overall": NaN}]',
            encoding="utf-8",
        )

        store = RatingsStore()
        ok = await DatasetLoader([str(path)]).load_into(store)

        assert ok is True
        assert store.names() == ["Good Player", "Huge", "Nan Player"]
        huge = store.get("Huge")
        assert huge.overall == 65
        assert huge.age is None
        assert huge.skills["finishing"] == 65
        assert store.get("Nan Player").overall == 65

    @pytest.mark.asyncio
    async def test_duplicate_names_last_wins(self, tmp_path):
        location = _write(tmp_path / "players.json", [
            {"id": "1", "name": "Pedri", "overall": 80},
            {"id": "2", "name": "Pedri", "overall": 86},
        ])

        store = RatingsStore()
        await DatasetLoader([location]).load_into(store)

        assert len(store) == 1
        assert store.get("Pedri").overall == 86

    @pytest.mark.asyncio
    async def test_reload_replaces_contents(self, ratings_file):
        store = RatingsStore({"Seeded Player": PlayerRating()})
        await DatasetLoader([str(ratings_file)]).load_into(store)

        assert "Seeded Player" not in store
        assert "Erling Haaland" in store


class TestFallback:
    """Tests for the built-in fallback dataset."""

    @pytest.mark.asyncio
    async def test_no_location_responds(self, tmp_path):
        store = RatingsStore()
        ok = await DatasetLoader([str(tmp_path / "nope.json")]).load_into(store)

        assert ok is False
        assert "Erling Haaland" in store
        assert store.get("Erling Haaland").overall == 91

    @pytest.mark.asyncio
    async def test_not_an_array(self, tmp_path):
        location = _write(tmp_path / "players.json", {"players": []})
        store = RatingsStore()

        assert await DatasetLoader([location]).load_into(store) is False
        assert store.names() == ["Erling Haaland"]

    @pytest.mark.asyncio
    async def test_invalid_json(self, tmp_path):
        path = tmp_path / "players.json"
        path.write_text("[{not json", encoding="utf-8")
        store = RatingsStore()

        assert await DatasetLoader([str(path)]).load_into(store) is False
        assert "Erling Haaland" in store

    @pytest.mark.asyncio
    async def test_no_usable_records(self, tmp_path):
        location = _write(tmp_path / "players.json", [{"overall": 90}, 42])
        store = RatingsStore()

        assert await DatasetLoader([location]).load_into(store) is False
        assert store.names() == ["Erling Haaland"]

    @pytest.mark.asyncio
    async def test_fetch_dataset_raises(self, tmp_path):
        with pytest.raises(DatasetLoadError):
            await DatasetLoader([str(tmp_path / "nope.json")]).fetch_dataset()


class TestLoadFromHttp:
    """Tests for http(s) sources."""

    @pytest.mark.asyncio
    async def test_skips_non_200_and_errors(self, raw_records):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "down.example.com":
                raise httpx.ConnectError("connection refused", request=request)
            if request.url.path == "/missing.json":
                return httpx.Response(404)
            return httpx.Response(200, json=raw_records)

        locations = [
            "https://down.example.com/players.json",
            "https://cdn.example.com/missing.json",
            "https://cdn.example.com/players.json",
        ]

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            records, location = await DatasetLoader(locations, http_client=client).fetch_dataset()

        assert location == "https://cdn.example.com/players.json"
        assert len(records) == len(raw_records)

    @pytest.mark.asyncio
    async def test_load_into_over_http(self, raw_records):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=raw_records)

        store = RatingsStore()
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            ok = await DatasetLoader(["https://cdn.example.com/players.json"], http_client=client).load_into(store)

        assert ok is True
        assert "Kevin De Bruyne" in store

    @pytest.mark.asyncio
    async def test_all_http_sources_fail(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        store = RatingsStore()
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            ok = await DatasetLoader(["https://cdn.example.com/players.json"], http_client=client).load_into(store)

        assert ok is False
        assert store.names() == ["Erling Haaland"]
