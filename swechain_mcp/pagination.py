"""Accumulate paginated ``swechaind query`` results."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Protocol

from .runner import CommandError

logger = logging.getLogger(__name__)

PAGE_LIMIT = 50
MAX_PAGES = 10
REQUEST_DELAY_SECONDS = 0.5


class Runner(Protocol):
    async def run(self, *args: str) -> str: ...


class PageFetcher:
    """Fetch every page of a list query, within a fixed page ceiling.

    A failing page ends the fetch and whatever was accumulated so far is
    returned; callers show partial data rather than nothing. Overlapping pages
    are not deduplicated.
    """

    def __init__(
        self,
        runner: Runner,
        *,
        keyring_backend: str = "test",
        page_limit: int = PAGE_LIMIT,
        max_pages: int = MAX_PAGES,
        request_delay: float = REQUEST_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        if page_limit < 1 or max_pages < 1:
            raise ValueError("page_limit and max_pages must be positive")
        self.runner = runner
        self.keyring_backend = keyring_backend
        self.page_limit = page_limit
        self.max_pages = max_pages
        self.request_delay = request_delay
        self._sleep = sleep or asyncio.sleep

    async def fetch_all(self, module: str, query: str, data_key: str) -> List[Dict[str, Any]]:
        results: List[Dict[str, Any]] = []
        offset = 0

        while offset // self.page_limit < self.max_pages:
            args = [
                "query",
                module,
                query,
                "--keyring-backend",
                self.keyring_backend,
                "--output",
                "json",
                "--page-offset",
                str(offset),
                "--page-limit",
                str(self.page_limit),
            ]
            try:
                output = await self.runner.run(*args)
            except CommandError as exc:
                logger.error("Error fetching %s/%s offset %d: %s", module, query, offset, exc)
                break

            try:
                response = json.loads(output)
            except ValueError as exc:  # also integer literals past the digit limit
                logger.error("Error parsing %s/%s offset %d: %s", module, query, offset, exc)
                break
            if not isinstance(response, dict):
                logger.error(
                    "Unexpected %s/%s response at offset %d: %s",
                    module,
                    query,
                    offset,
                    type(response).__name__,
                )
                break

            page = response.get(data_key)
            if not isinstance(page, list) or not page:
                break

            results.extend(entry for entry in page if isinstance(entry, dict))
            offset += self.page_limit
            await self._sleep(self.request_delay)

        logger.debug("Fetched %d %s records from %s/%s", len(results), data_key, module, query)
        return results
