# Copyright 2026 Firefly Software Solutions Inc
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Collection engine.

Drives the fetch -> parse -> merge -> advance loop over a paginated source
until enough unique entries are collected, the source runs out of pages, or
the page budget is spent.

Per page:

1. fetch the page for the current token (``None`` for the first page)
2. parse it; if it has no entries, soft-reload it once and parse again
3. merge new entries into the state, stopping at the requested count
4. count the page as visited
5. stop if the count is met, the page was still empty, there is no
   next-page token, or the page budget is spent; otherwise advance

Navigation failures are not retried here. They propagate to the caller,
which still has the partial progress in ``CollectionEngine.state``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Set

from pagecollect.collector.parser import Entry, PageParser, PageResult
from pagecollect.collector.reporter import Outcome, report
from pagecollect.collector.source import FetchedPage, PageSource
from pagecollect.core.config import CollectorConfig
from pagecollect.utils.logger import logger


class StopReason(str, Enum):
    """Why the collection loop ended."""

    COUNT_REACHED = "count_reached"
    EMPTY_PAGE = "empty_page"
    NO_NEXT_PAGE = "no_next_page"
    PAGE_BUDGET = "page_budget"


@dataclass
class CollectionState:
    """
    Mutable bookkeeping for a single collection run.

    ``merge`` and ``mark_page_visited`` are the only mutators. ``seen_ids``
    and ``collected`` stop growing at the same moment, when ``collected``
    reaches ``requested_count``.
    """

    requested_count: int
    max_pages: int
    seen_ids: Set[str] = field(default_factory=set)
    collected: List[Entry] = field(default_factory=list)
    pages_visited: int = 0

    @property
    def is_complete(self) -> bool:
        return len(self.collected) >= self.requested_count

    @property
    def budget_spent(self) -> bool:
        return self.pages_visited >= self.max_pages

    @property
    def duplicates(self) -> int:
        return len(self.seen_ids) - len(self.collected)

    def merge(self, entries: Iterable[Entry]) -> int:
        """
        Add unseen entries in order until the requested count is reached.

        Entries after the cap are neither recorded as seen nor collected.

        Returns:
            Number of entries appended to ``collected``
        """
        added = 0
        for entry in entries:
            if self.is_complete:
                break
            if entry.id in self.seen_ids:
                continue
            self.seen_ids.add(entry.id)
            self.collected.append(entry)
            added += 1
        return added

    def mark_page_visited(self) -> None:
        self.pages_visited += 1


class CollectionEngine:
    """
    Runs one collection over a page source.

    Attributes:
        config: Run configuration (count and page budget)
        source: Where pages come from
        parser: Turns page HTML into entries
        state: Progress so far, readable after ``run`` returns or raises
        stop_reason: Why the last run ended, None until it does

    Example:
        >>> engine = CollectionEngine(config, source)
        >>> outcome = await engine.run()
        >>> outcome.ok
        True
    """

    def __init__(
        self,
        config: CollectorConfig,
        source: PageSource,
        parser: Optional[PageParser] = None,
    ) -> None:
        self.config = config
        self.source = source
        self.parser = parser or PageParser()
        self.state = CollectionState(
            requested_count=config.count,
            max_pages=config.max_pages,
        )
        self.stop_reason: Optional[StopReason] = None

    async def run(self) -> Outcome:
        """
        Collect until a stopping condition fires.

        Returns:
            Outcome with ``ok`` set when the requested count was reached

        Raises:
            PageCollectError: If the source fails to navigate or read a page
        """
        self.state = CollectionState(
            requested_count=self.config.count,
            max_pages=self.config.max_pages,
        )
        self.stop_reason = None
        token: Optional[str] = None

        while True:
            result = await self._load_page(token)
            added = self.state.merge(result.entries)
            self.state.mark_page_visited()

            logger.info(
                f"Page {self.state.pages_visited}/{self.config.max_pages}: "
                f"{len(result.entries)} entries, {added} new, "
                f"{len(self.state.collected)}/{self.config.count} collected"
            )

            self.stop_reason = self._check_stop(result)
            if self.stop_reason is not None:
                break
            token = result.next_page_token

        logger.info(f"Collection stopped: {self.stop_reason.value}")
        return report(
            self.state,
            self.config.count,
            self.config.max_pages,
            self.state.is_complete,
        )

    async def _load_page(self, token: Optional[str]) -> PageResult:
        result = self._parse(await self.source.fetch_page(token))
        if result.is_empty:
            logger.warning(
                f"No entries on page {self.state.pages_visited + 1}, reloading once"
            )
            result = self._parse(await self.source.soft_reload())
        return result

    def _parse(self, page: FetchedPage) -> PageResult:
        if not page.ready:
            logger.warning(f"Content not ready on {page.url or 'page'}, parsing anyway")
        return self.parser.parse(page.html)

    def _check_stop(self, result: PageResult) -> Optional[StopReason]:
        if self.state.is_complete:
            return StopReason.COUNT_REACHED
        if result.is_empty:
            return StopReason.EMPTY_PAGE
        if not result.next_page_token:
            return StopReason.NO_NEXT_PAGE
        if self.state.budget_spent:
            return StopReason.PAGE_BUDGET
        return None


async def collect(
    config: CollectorConfig,
    source: PageSource,
    parser: Optional[PageParser] = None,
) -> Outcome:
    """Run a single collection with a fresh engine."""
    return await CollectionEngine(config, source, parser).run()
