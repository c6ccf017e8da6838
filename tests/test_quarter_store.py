"""
Tests for the quarter store and its sources.
"""

import asyncio
import csv
import logging
from pathlib import Path

import httpx
import pytest

from calendar_service.quarter_store import DirectoryQuarterSource, HttpQuarterSource, QuarterStore
from calendar_service.range_resolver import InvalidQuarterKeyError

Q1_CSV = "title,start_date,game\nOpening,2024-01-05,Chess\nMidseason,2024-02-10,Go\n"
Q2_CSV = "title,start_date\nSpring Cup,2024-04-20\n"


def make_http_store(routes, calls):
    """Build a store over a mock transport; ``routes`` maps path -> (status, body)."""
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        status, body = routes.get(request.url.path, (404, ""))
        if isinstance(status, Exception):
            raise status
        return httpx.Response(status, text=body)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    source = HttpQuarterSource("https://calendar.example.org/", client=client)
    return QuarterStore(source)


class SlowSource:
    """Quarter source that can hold every fetch until released."""

    def __init__(self, text, wait=False):
        self.text = text
        self.wait = wait
        self.release = None
        self.calls = 0

    def describe(self, key):
        return f"slow://{key}"

    async def fetch_text(self, key):
        self.calls += 1
        if self.wait:
            await self.release.wait()
        return self.text


class TestHttpQuarterStore:
    """Test HTTP loading, caching and failure absorption."""

    def test_loads_and_parses_quarter(self):
        calls = []
        store = make_http_store({"/data/events-2024-Q1.csv": (200, Q1_CSV)}, calls)

        events = asyncio.run(store.get("2024-Q1"))

        assert [e.title for e in events] == ["Opening", "Midseason"]
        assert calls == ["/data/events-2024-Q1.csv"]
        assert store.is_loaded("2024-Q1")

    def test_second_get_uses_cache(self):
        calls = []
        store = make_http_store({"/data/events-2024-Q1.csv": (200, Q1_CSV)}, calls)

        async def run():
            first = await store.get("2024-Q1")
            second = await store.get("2024-Q1")
            return first, second

        first, second = asyncio.run(run())

        assert first == second
        assert len(calls) == 1
        assert store.fetch_count == 1

    def test_not_found_is_cached_as_empty_without_warning(self, caplog):
        calls = []
        store = make_http_store({}, calls)

        async def run():
            return await store.get("2024-Q3"), await store.get("2024-Q3")

        with caplog.at_level(logging.WARNING, logger="calendar_service.quarter_store"):
            first, second = asyncio.run(run())

        assert first == [] and second == []
        assert len(calls) == 1
        assert store.cached_keys() == ["2024-Q3"]
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_server_error_is_logged_and_cached_as_empty(self, caplog):
        calls = []
        store = make_http_store({"/data/events-2024-Q2.csv": (500, "boom")}, calls)

        async def run():
            return await store.get("2024-Q2"), await store.get("2024-Q2")

        with caplog.at_level(logging.WARNING, logger="calendar_service.quarter_store"):
            first, second = asyncio.run(run())

        assert first == [] and second == []
        assert len(calls) == 1
        assert any("HTTP 500" in r.getMessage() for r in caplog.records)

    def test_network_error_is_cached_and_never_retried(self, caplog):
        calls = []
        routes = {"/data/events-2024-Q2.csv": (httpx.ConnectError("offline"), "")}
        store = make_http_store(routes, calls)

        with caplog.at_level(logging.WARNING, logger="calendar_service.quarter_store"):
            assert asyncio.run(store.get("2024-Q2")) == []

        routes["/data/events-2024-Q2.csv"] = (200, Q2_CSV)
        assert asyncio.run(store.get("2024-Q2")) == []
        assert len(calls) == 1
        assert any("offline" in r.getMessage() for r in caplog.records)

    def test_get_many_loads_distinct_quarters_and_flattens(self):
        calls = []
        store = make_http_store({
            "/data/events-2024-Q1.csv": (200, Q1_CSV),
            "/data/events-2024-Q2.csv": (200, Q2_CSV),
        }, calls)

        results = asyncio.run(store.get_many(["2024-Q1", "2024-Q2", "2024-Q3"]))

        assert [len(r) for r in results] == [2, 1, 0]
        assert sorted(calls) == [
            "/data/events-2024-Q1.csv",
            "/data/events-2024-Q2.csv",
            "/data/events-2024-Q3.csv",
        ]
        assert {e.title for e in store.all_events()} == {"Opening", "Midseason", "Spring Cup"}

    def test_concurrent_requests_share_one_fetch(self):
        calls = []
        store = make_http_store({"/data/events-2024-Q1.csv": (200, Q1_CSV)}, calls)

        async def run():
            return await asyncio.gather(store.get("2024-Q1"), store.get("2024-Q1"))

        first, second = asyncio.run(run())

        assert first == second
        assert len(calls) == 1

    def test_invalid_key_is_rejected_before_fetch(self):
        calls = []
        store = make_http_store({}, calls)

        with pytest.raises(InvalidQuarterKeyError):
            asyncio.run(store.get("2024-Q9"))
        assert calls == []


class TestDirectoryQuarterStore:
    """Test loading quarter files from disk."""

    def test_reads_existing_file_and_treats_missing_as_empty(self, tmp_path: Path):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "events-2024-Q1.csv").write_text(Q1_CSV, encoding="utf-8")
        store = QuarterStore(DirectoryQuarterSource(tmp_path))

        q1, q2 = asyncio.run(store.get_many(["2024-Q1", "2024-Q2"]))

        assert len(q1) == 2
        assert q2 == []
        assert store.cached_keys() == ["2024-Q1", "2024-Q2"]

    def test_undecodable_file_is_cached_as_empty(self, tmp_path: Path, caplog):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "events-2024-Q1.csv").write_bytes(b"\xff\xfe\xfa broken")
        store = QuarterStore(DirectoryQuarterSource(tmp_path))

        with caplog.at_level(logging.WARNING, logger="calendar_service.quarter_store"):
            assert asyncio.run(store.get("2024-Q1")) == []
        assert store.is_loaded("2024-Q1")

    def test_oversized_cell_keeps_other_rows(self, tmp_path: Path):
        data_dir = tmp_path / "data"
        data_dir.mkdir()
        (data_dir / "events-2024-Q1.csv").write_text(
            "title,start_date,summary\n"
            "Big,2024-01-05," + "x" * 200_000 + "\n"
            "Small,2024-01-06,ok\n",
            encoding="utf-8",
        )
        store = QuarterStore(DirectoryQuarterSource(tmp_path))

        events = asyncio.run(store.get("2024-Q1"))

        assert [e.title for e in events] == ["Small"]
        assert store.is_loaded("2024-Q1")


class TestQuarterStoreFailures:
    """Test parse failures and cancelled callers."""

    def test_parser_error_is_logged_and_cached_as_empty(self, caplog):
        def broken_parser(text):
            raise csv.Error("field larger than field limit (131072)")

        source = SlowSource(Q1_CSV)
        store = QuarterStore(source, parser=broken_parser)

        async def run():
            return await store.get("2024-Q1"), await store.get("2024-Q1")

        with caplog.at_level(logging.WARNING, logger="calendar_service.quarter_store"):
            first, second = asyncio.run(run())

        assert first == [] and second == []
        assert store.is_loaded("2024-Q1")
        assert source.calls == 1
        assert any("field limit" in r.getMessage() for r in caplog.records)

    def test_cancelled_caller_does_not_cancel_shared_load(self):
        source = SlowSource(Q1_CSV, wait=True)
        store = QuarterStore(source)

        async def run():
            source.release = asyncio.Event()
            first = asyncio.ensure_future(store.get("2024-Q1"))
            second = asyncio.ensure_future(store.get("2024-Q1"))
            await asyncio.sleep(0)
            first.cancel()
            await asyncio.sleep(0)
            source.release.set()
            events = await second
            return first, events

        first, events = asyncio.run(run())

        assert first.cancelled()
        assert [e.title for e in events] == ["Opening", "Midseason"]
        assert store.is_loaded("2024-Q1")
        assert source.calls == 1
