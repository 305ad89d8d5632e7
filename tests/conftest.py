# Copyright 2026 Firefly Software Solutions Inc
# SPDX-License-Identifier: Apache-2.0

"""
Shared test fixtures for the pagecollect test suite.

This module provides:
- Listing HTML builders shaped like the Hacker News /newest page
- A scripted page source for driving the collection engine
- Mock Playwright page/browser objects
"""

from __future__ import annotations

import html as html_lib
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest

from pagecollect.collector.source import FetchedPage
from pagecollect.core.config import CollectorConfig
from pagecollect.core.page import ContentStatus


# ==================== Environment Setup ====================

_ENV_KEYS = (
    "PAGECOLLECT_COUNT",
    "PAGECOLLECT_MAX_PAGES",
    "PAGECOLLECT_HEADLESS",
    "PAGECOLLECT_JSON_OUTPUT",
    "PAGECOLLECT_START_URL",
    "PAGECOLLECT_BROWSER_TYPE",
    "PAGECOLLECT_SOFT_RELOAD_DELAY_SECONDS",
    "PAGECOLLECT_LOG_LEVEL",
    "PAGECOLLECT_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep PAGECOLLECT_* variables from the host out of the tests."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
    # Handlers bound to a captured stream must not outlive the test
    from pagecollect.utils.logger import setup_logger

    setup_logger()


# ==================== Listing HTML ====================

Story = Tuple[str, str, str]


def story(n: int, title: Optional[str] = None, iso: Optional[str] = None) -> Story:
    """Build a (id, title, iso) triple for story number ``n``."""
    return (
        str(41000000 + n),
        title if title is not None else f"Story number {n}",
        iso if iso is not None else f"2026-10-18T12:{n % 60:02d}:00",
    )


def row_html(entry_id: str, title: str, iso: Optional[str], age_text: str = "1 minute ago") -> str:
    """Render one story as the two table rows the parser reads."""
    title_attr = f' title="{html_lib.escape(iso)}"' if iso is not None else ""
    return (
        f'<tr class="athing submission" id="{html_lib.escape(entry_id)}">'
        f'<td class="title"><span class="rank">1.</span></td>'
        f'<td class="title"><span class="titleline">'
        f'<a href="https://example.com/{html_lib.escape(entry_id)}">{html_lib.escape(title)}</a>'
        f'<span class="sitebit comhead"> (<a href="from?site=example.com">example.com</a>)</span>'
        f"</span></td></tr>"
        f'<tr><td colspan="2"></td><td class="subtext"><span class="subline">'
        f'<span class="score">1 point</span> by <a class="hnuser">someone</a> '
        f'<span class="age"{title_attr}><a href="item?id={html_lib.escape(entry_id)}">{age_text}</a></span>'
        f"</span></td></tr>"
        f'<tr class="spacer" style="height:5px"></tr>'
    )


def listing_html(stories: Iterable[Story], more_href: Optional[str] = None, extra_rows: str = "") -> str:
    """Render a full listing page."""
    rows = "".join(row_html(*s) for s in stories)
    more = ""
    if more_href is not None:
        more = (
            '<tr class="morespace" style="height:10px"></tr>'
            f'<tr><td colspan="2"></td><td class="title">'
            f'<a href="{html_lib.escape(more_href)}" class="morelink" rel="next">More</a></td></tr>'
        )
    return (
        "<html><head><title>New Links | Hacker News</title></head><body>"
        '<center><table id="hnmain"><tr><td><table class="itemlist">'
        f"{rows}{extra_rows}{more}"
        "</table></td></tr></table></center></body></html>"
    )


def empty_listing_html() -> str:
    return listing_html([], more_href=None)


def token_for(page_index: int) -> Optional[str]:
    """Next-page token that leads to ``page_index`` (0-based); None for the first page."""
    if page_index == 0:
        return None
    return f"newest?next={42000000 - page_index}&n={page_index * 30 + 1}"


def paged_listing(page_stories: Sequence[Sequence[Story]], last_has_more: bool = False) -> Dict[Optional[str], List[str]]:
    """
    Build a token -> [html] mapping for consecutive pages.

    Every page except the last links to the next one.
    """
    pages: Dict[Optional[str], List[str]] = {}
    for i, stories in enumerate(page_stories):
        has_more = i < len(page_stories) - 1 or last_has_more
        pages[token_for(i)] = [listing_html(stories, token_for(i + 1) if has_more else None)]
    return pages


def uniform_pages(num_pages: int, per_page: int, last_has_more: bool = False) -> Dict[Optional[str], List[str]]:
    """``num_pages`` pages of ``per_page`` distinct stories each."""
    return paged_listing(
        [[story(p * per_page + i) for i in range(per_page)] for p in range(num_pages)],
        last_has_more=last_has_more,
    )


# ==================== Scripted Page Source ====================

class ScriptedPageSource:
    """
    Page source that serves pre-rendered HTML.

    ``pages`` maps a token to successive versions of that page: the first
    fetch returns version 0, each soft reload moves to the next version
    (the last version repeats).
    """

    def __init__(
        self,
        pages: Dict[Optional[str], List[str]],
        errors: Optional[Dict[Optional[str], Exception]] = None,
        not_ready: Iterable[Optional[str]] = (),
    ) -> None:
        self.pages = pages
        self.errors = errors or {}
        self.not_ready = set(not_ready)
        self.calls: List[Tuple[str, Optional[str]]] = []
        self._token: Optional[str] = None
        self._version = 0

    def _serve(self) -> FetchedPage:
        versions = self.pages.get(self._token) or [empty_listing_html()]
        html = versions[min(self._version, len(versions) - 1)]
        status = ContentStatus.NOT_READY if self._token in self.not_ready else ContentStatus.READY
        return FetchedPage(html=html, status=status, url=f"https://news.ycombinator.com/{self._token or 'newest'}")

    async def fetch_page(self, token: Optional[str]) -> FetchedPage:
        self.calls.append(("fetch", token))
        if token in self.errors:
            raise self.errors[token]
        self._token = token
        self._version = 0
        return self._serve()

    async def soft_reload(self) -> FetchedPage:
        self.calls.append(("reload", self._token))
        self._version += 1
        return self._serve()

    @property
    def fetches(self) -> List[Optional[str]]:
        return [token for kind, token in self.calls if kind == "fetch"]

    @property
    def reloads(self) -> int:
        return sum(1 for kind, _ in self.calls if kind == "reload")


@pytest.fixture
def make_config():
    """Factory for collector configs with test-friendly timings."""

    def _make(**kwargs) -> CollectorConfig:
        kwargs.setdefault("soft_reload_delay_seconds", 0)
        return CollectorConfig(**kwargs)

    return _make


# ==================== Mock Browser/Page ====================

def make_mock_page(url: str = "https://news.ycombinator.com/newest", html: str = "") -> MagicMock:
    """Create a mock Playwright page."""
    page = MagicMock()
    page.url = url
    page.goto = AsyncMock()
    page.reload = AsyncMock()
    page.wait_for_selector = AsyncMock()
    page.content = AsyncMock(return_value=html)
    page.close = AsyncMock()
    return page


class MockBrowser:
    """Mock Playwright browser for testing."""

    def __init__(self):
        self.closed = False
        self.page = make_mock_page(url="about:blank")
        self.context = MagicMock()
        self.context.new_page = AsyncMock(return_value=self.page)
        self.context.close = AsyncMock()
        self.new_context = AsyncMock(return_value=self.context)

    async def close(self) -> None:
        self.closed = True


class MockPlaywright:
    """Mock Playwright instance."""

    def __init__(self):
        self.stopped = False
        self.browser = MockBrowser()
        self.chromium = MagicMock()
        self.chromium.launch = AsyncMock(return_value=self.browser)
        self.firefox = MagicMock()
        self.firefox.launch = AsyncMock(return_value=self.browser)
        self.webkit = MagicMock()
        self.webkit.launch = AsyncMock(return_value=self.browser)

    async def stop(self) -> None:
        self.stopped = True


@pytest.fixture
def mock_playwright() -> MockPlaywright:
    return MockPlaywright()


# ==================== Markers ====================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "requires_browser: marks tests that need a real browser"
    )
