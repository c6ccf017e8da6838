"""
Quarter Store Module

This module provides the session cache of parsed events keyed by calendar
quarter. Each quarter's CSV file is fetched at most once; a missing file
or a failed fetch is cached as an empty quarter and never retried.
"""

import asyncio
import csv
import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Protocol

import httpx

from .csv_parser import parse_events_csv
from .models import EventRecord
from .range_resolver import DEFAULT_PATH_TEMPLATE, parse_quarter_key, quarter_file_path

_LOG = logging.getLogger(__name__)


class QuarterSource(Protocol):
    """Where quarter CSV files come from."""

    async def fetch_text(self, key: str) -> Optional[str]:
        """Return the CSV text for a quarter, or None when the file does not exist."""
        ...

    def describe(self, key: str) -> str:
        """Human readable location of a quarter's file, for log messages."""
        ...


class HttpQuarterSource:
    """Fetch quarter files with HTTP GET below a base URL."""

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        path_template: str = DEFAULT_PATH_TEMPLATE,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.path_template = path_template
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    def describe(self, key: str) -> str:
        return f"{self.base_url}/{quarter_file_path(key, self.path_template)}"

    async def fetch_text(self, key: str) -> Optional[str]:
        url = self.describe(key)
        _LOG.debug(f"Fetching quarter file {url}")
        response = await self._client.get(url)
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.text

    async def aclose(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._owns_client:
            await self._client.aclose()


class DirectoryQuarterSource:
    """Read quarter files from a local directory tree."""

    def __init__(self, root: Path, path_template: str = DEFAULT_PATH_TEMPLATE):
        self.root = Path(root)
        self.path_template = path_template

    def describe(self, key: str) -> str:
        return str(self.root / quarter_file_path(key, self.path_template))

    async def fetch_text(self, key: str) -> Optional[str]:
        path = self.root / quarter_file_path(key, self.path_template)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None


class QuarterStore:
    """Memoizing get-or-load store of parsed events per quarter key."""

    def __init__(
        self,
        source: QuarterSource,
        parser: Callable[[str], List[EventRecord]] = parse_events_csv,
    ):
        self.source = source
        self._parser = parser
        self._cache: Dict[str, List[EventRecord]] = {}
        self._pending: Dict[str, asyncio.Task] = {}
        self.fetch_count = 0

    def is_loaded(self, key: str) -> bool:
        return key in self._cache

    def cached_keys(self) -> List[str]:
        """Resolved quarter keys in the order they were resolved."""
        return list(self._cache)

    async def get(self, key: str) -> List[EventRecord]:
        """
        Return the events of one quarter, loading them on first access.

        Args:
            key: Quarter key such as ``2024-Q1``

        Returns:
            List of EventRecord (empty for a missing or failed quarter)

        Raises:
            InvalidQuarterKeyError: If the key is malformed
        """
        if key in self._cache:
            return self._cache[key]

        parse_quarter_key(key)
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key))
            self._pending[key] = task
        # Cancelling one caller leaves the shared load running.
        return await asyncio.shield(task)

    async def get_many(self, keys: Iterable[str]) -> List[List[EventRecord]]:
        """Load several quarters concurrently and wait for all of them."""
        return list(await asyncio.gather(*(self.get(key) for key in keys)))

    def all_events(self) -> List[EventRecord]:
        """Flatten every cached quarter into one working event list."""
        events: List[EventRecord] = []
        for quarter_events in self._cache.values():
            events.extend(quarter_events)
        return events

    async def _load(self, key: str) -> List[EventRecord]:
        self.fetch_count += 1
        location = self.source.describe(key)
        try:
            text = await self.source.fetch_text(key)
        except httpx.HTTPStatusError as exc:
            _LOG.warning(f"Failed to load {location}: HTTP {exc.response.status_code}")
            events: List[EventRecord] = []
        except (httpx.HTTPError, OSError, UnicodeDecodeError) as exc:
            _LOG.warning(f"Failed to load {location}: {exc}")
            events = []
        else:
            if text is None:
                _LOG.debug(f"No events file for quarter {key} ({location})")
                events = []
            else:
                try:
                    events = self._parser(text)
                except (csv.Error, ValueError) as exc:
                    _LOG.warning(f"Failed to parse {location}: {exc}")
                    events = []
                else:
                    _LOG.debug(f"Loaded {len(events)} events for quarter {key}")
        finally:
            self._pending.pop(key, None)

        self._cache[key] = events
        return events
