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
Page controller for listing pages.

This module provides the PageController class which wraps the handful of
Playwright Page operations a collection run needs: navigation, reload,
waiting for the listing to render, and reading the rendered DOM. Every
action is logged with its duration.

Failures to navigate raise ``NavigationError``. A content wait that times
out or fails inside the browser is not an error: it is reported as
``ContentStatus.NOT_READY`` so the caller can parse whatever is on the page.
"""

from __future__ import annotations

import time
from enum import Enum
from typing import TYPE_CHECKING, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from pagecollect.exceptions import NavigationError, PageError
from pagecollect.utils.logger import logger

if TYPE_CHECKING:
    from pagecollect.collector.parser import PageParser, PageResult


class ContentStatus(str, Enum):
    """Outcome of waiting for page content to render."""

    READY = "ready"
    NOT_READY = "not_ready"


class _PageActionLogger:
    """Consistent start/end logging for page-level browser actions."""

    def __init__(self):
        self._action_start_time: Optional[float] = None
        self._current_action: Optional[str] = None

    def start_action(self, action_type: str, description: str) -> float:
        """
        Log the start of a page action.

        Args:
            action_type: Type of action (NAVIGATE, RELOAD, WAIT, EXTRACT)
            description: What is being done

        Returns:
            Start time for calculating duration
        """
        self._action_start_time = time.time()
        self._current_action = action_type
        logger.info(f"> [BROWSER {action_type}] {description}")
        return self._action_start_time

    def end_action(self, success: bool, details: Optional[str] = None) -> None:
        """Log the end of the current page action."""
        duration_ms = 0.0
        if self._action_start_time:
            duration_ms = (time.time() - self._action_start_time) * 1000

        status_icon = "[OK]" if success else "[FAIL]"
        details_str = f" -> {details}" if details else ""
        message = f"{status_icon} [BROWSER {self._current_action}] {duration_ms:.0f}ms{details_str}"
        if success:
            logger.info(message)
        else:
            logger.warning(message)

        self._action_start_time = None
        self._current_action = None


_page_logger = _PageActionLogger()


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class PageController:
    """
    Controls one Playwright page for a collection run.

    Attributes:
        page: The underlying Playwright Page instance
        navigation_timeout_ms: Timeout applied to goto() and reload()
        wait_until: Load state that ends a navigation

    Example:
        >>> controller = PageController(page)
        >>> await controller.goto("https://news.ycombinator.com/newest")
        >>> status = await controller.wait_for_content("tr.athing")
        >>> result = await controller.extract(PageParser())
    """

    def __init__(
        self,
        page: Page,
        navigation_timeout_ms: int = 30000,
        wait_until: str = "domcontentloaded",
    ) -> None:
        self.page = page
        self.navigation_timeout_ms = navigation_timeout_ms
        self.wait_until = wait_until

    @property
    def url(self) -> str:
        """Current page URL."""
        return self.page.url

    async def goto(self, url: str) -> None:
        """
        Navigate to a URL.

        Args:
            url: Absolute URL to load

        Raises:
            NavigationError: If navigation fails or times out
        """
        _page_logger.start_action("NAVIGATE", _truncate(url, 60))
        try:
            await self.page.goto(url, wait_until=self.wait_until, timeout=self.navigation_timeout_ms)
            _page_logger.end_action(True, f"loaded ({self.wait_until})")
        except Exception as e:
            _page_logger.end_action(False, str(e)[:50])
            raise NavigationError(f"Failed to navigate to {url}: {e}") from e

    async def reload(self) -> None:
        """
        Reload the current page.

        Raises:
            NavigationError: If the reload fails or times out
        """
        _page_logger.start_action("RELOAD", _truncate(self.page.url, 60))
        try:
            await self.page.reload(wait_until=self.wait_until, timeout=self.navigation_timeout_ms)
            _page_logger.end_action(True, f"loaded ({self.wait_until})")
        except Exception as e:
            _page_logger.end_action(False, str(e)[:50])
            raise NavigationError(f"Failed to reload {self.page.url}: {e}") from e

    async def wait_for_content(
        self, selector: str, timeout: int = 20000, state: str = "attached"
    ) -> ContentStatus:
        """
        Wait until ``selector`` reaches ``state``.

        ``attached`` is the default so slow paints that never become visible
        in headless mode still count as rendered.

        Args:
            selector: CSS selector that marks rendered content
            timeout: Timeout in milliseconds
            state: Element state to wait for (attached, visible)

        Returns:
            READY, or NOT_READY when the wait timed out or the browser
            reported an error while waiting

        Raises:
            PageError: If the wait failed outside Playwright
        """
        _page_logger.start_action("WAIT", f"{state}: {_truncate(selector, 50)}")
        try:
            await self.page.wait_for_selector(selector, timeout=timeout, state=state)
        except PlaywrightTimeoutError:
            _page_logger.end_action(False, f"not {state} after {timeout}ms")
            return ContentStatus.NOT_READY
        except PlaywrightError as e:
            _page_logger.end_action(False, str(e)[:50])
            logger.warning(f"Content wait for {selector} failed, continuing: {e}")
            return ContentStatus.NOT_READY
        except Exception as e:
            _page_logger.end_action(False, str(e)[:50])
            raise PageError(f"Failed to wait for selector {selector}: {e}") from e
        _page_logger.end_action(True, f"element {state}")
        return ContentStatus.READY

    async def get_html(self) -> str:
        """
        Get the rendered HTML of the page.

        Raises:
            PageError: If the DOM could not be read
        """
        try:
            return await self.page.content()
        except Exception as e:
            logger.error(f"Failed to get HTML: {e}")
            raise PageError(f"Failed to get page HTML: {e}") from e

    async def extract(self, parser: "PageParser") -> "PageResult":
        """Read the rendered DOM and run ``parser`` over it."""
        _page_logger.start_action("EXTRACT", _truncate(self.page.url, 60))
        try:
            html = await self.get_html()
        except PageError as e:
            _page_logger.end_action(False, str(e)[:50])
            raise
        result = parser.parse(html)
        _page_logger.end_action(True, f"{len(result.entries)} entries")
        return result
