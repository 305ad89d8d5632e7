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
Page sources feed rendered listing pages to the collection engine.

A source knows how to load the page behind a next-page token and how to
reload the current page once. The engine only ever has one request to a
source outstanding at a time.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable
from urllib.parse import urljoin

from pagecollect.core.config import CollectorConfig
from pagecollect.core.page import ContentStatus, PageController
from pagecollect.utils.logger import logger


@dataclass(frozen=True)
class FetchedPage:
    """Rendered HTML of one page and whether its content finished rendering."""

    html: str
    status: ContentStatus = ContentStatus.READY
    url: str = ""

    @property
    def ready(self) -> bool:
        return self.status == ContentStatus.READY


@runtime_checkable
class PageSource(Protocol):
    """Interface the collection engine fetches pages through."""

    async def fetch_page(self, token: Optional[str]) -> FetchedPage:
        """Load the page for ``token``; ``None`` means the first page."""
        ...

    async def soft_reload(self) -> FetchedPage:
        """Reload the page most recently fetched."""
        ...


def resolve_token(base_url: str, token: Optional[str], start_url: str) -> str:
    """
    Turn a next-page token into an absolute URL.

    Examples:
        >>> resolve_token("https://news.ycombinator.com/newest", "newest?next=1&n=31", "")
        'https://news.ycombinator.com/newest?next=1&n=31'
        >>> resolve_token("", None, "https://news.ycombinator.com/newest")
        'https://news.ycombinator.com/newest'
    """
    if token is None:
        return start_url
    if token.startswith(("http://", "https://")):
        return token
    return urljoin(base_url or start_url, token)


class BrowserPageSource:
    """
    Page source backed by a Playwright page.

    Navigation and reload failures propagate as ``NavigationError``; a
    content wait timeout is returned as ``ContentStatus.NOT_READY``.

    Example:
        >>> async with BrowserManager() as manager:
        ...     source = BrowserPageSource(PageController(manager.page), config)
        ...     first = await source.fetch_page(None)
    """

    def __init__(self, controller: PageController, config: CollectorConfig) -> None:
        self.controller = controller
        self.config = config

    async def fetch_page(self, token: Optional[str]) -> FetchedPage:
        url = resolve_token(self.controller.url, token, self.config.start_url)
        logger.debug(f"Fetching page for token {token!r}: {url}")
        await self.controller.goto(url)
        return await self._read()

    async def soft_reload(self) -> FetchedPage:
        if self.config.soft_reload_delay_seconds:
            await asyncio.sleep(self.config.soft_reload_delay_seconds)
        await self.controller.reload()
        return await self._read()

    async def _read(self) -> FetchedPage:
        status = await self.controller.wait_for_content(
            self.config.row_selector,
            timeout=self.config.content_timeout_ms,
        )
        html = await self.controller.get_html()
        return FetchedPage(html=html, status=status, url=self.controller.url)
