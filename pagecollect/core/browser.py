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
Browser management for pagecollect.

This module provides the BrowserManager class which handles the lifecycle
of the single Playwright browser a collection run uses: launching,
context and page creation, and cleanup. Use it as an async context manager
so the browser is closed on every exit path.
"""

from __future__ import annotations

from typing import Any, Optional

from playwright.async_api import Browser, BrowserContext, Page, async_playwright

from pagecollect.exceptions import BrowserError
from pagecollect.utils.logger import logger


class BrowserManager:
    """
    Manages a Playwright browser instance and its lifecycle.

    Attributes:
        headless: Whether browser runs in headless mode (no visible window)
        browser_type: Type of browser (chromium, firefox, webkit)
        launch_options: Additional Playwright launch options
        page: The page opened at startup

    Example:
        >>> async with BrowserManager(headless=True) as manager:
        ...     await manager.page.goto("https://news.ycombinator.com/newest")
    """

    # Launch arguments that make automated Chromium look like a regular browser
    STEALTH_ARGS = [
        "--disable-blink-features=AutomationControlled",
        "--no-first-run",
        "--no-default-browser-check",
        "--disable-dev-shm-usage",
        "--disable-infobars",
    ]

    DEFAULT_USER_AGENT = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    )

    def __init__(
        self,
        headless: bool = True,
        browser_type: str = "chromium",
        stealth: bool = True,
        **launch_options: Any,
    ) -> None:
        """
        Initialize the browser manager with configuration.

        Args:
            headless: Whether to run browser in headless mode. Default: True
            browser_type: "chromium" (default), "firefox" or "webkit"
            stealth: Add anti-automation launch arguments (Chromium only)
            **launch_options: Additional Playwright launch options (args, slow_mo, ...)
        """
        self.headless = headless
        self.browser_type = browser_type
        self.stealth = stealth
        self.launch_options = launch_options
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def start(self) -> None:
        """
        Start Playwright, launch the browser and open the initial page.

        Raises:
            BrowserError: If browser fails to start or unsupported browser type
        """
        try:
            logger.info(f"Starting {self.browser_type} browser (headless={self.headless})")
            self._playwright = await async_playwright().start()

            if self.browser_type == "chromium":
                browser_launcher = self._playwright.chromium
            elif self.browser_type == "firefox":
                browser_launcher = self._playwright.firefox
            elif self.browser_type == "webkit":
                browser_launcher = self._playwright.webkit
            else:
                raise BrowserError(f"Unsupported browser type: {self.browser_type}")

            launch_opts = dict(self.launch_options)
            if self.stealth and self.browser_type == "chromium":
                existing_args = launch_opts.get("args", [])
                launch_opts["args"] = existing_args + [
                    arg for arg in self.STEALTH_ARGS if arg not in existing_args
                ]

            self._browser = await browser_launcher.launch(
                headless=self.headless, **launch_opts
            )
            self._context = await self._browser.new_context(
                user_agent=self.DEFAULT_USER_AGENT,
                locale="en-US",
            )
            self._page = await self._context.new_page()

            logger.info("Browser started successfully")
        except BrowserError:
            await self._cleanup()
            raise
        except Exception as e:
            logger.error(f"Failed to start browser: {e}")
            await self._cleanup()
            raise BrowserError(f"Failed to start browser: {e}") from e

    async def stop(self) -> None:
        """
        Close the page, context and browser, then stop Playwright.

        Raises:
            BrowserError: If cleanup fails
        """
        try:
            logger.info("Stopping browser")
            await self._cleanup()
            logger.info("Browser stopped successfully")
        except Exception as e:
            logger.error(f"Error stopping browser: {e}")
            raise BrowserError(f"Failed to stop browser: {e}") from e

    async def _cleanup(self) -> None:
        page, context, browser, playwright = self._page, self._context, self._browser, self._playwright
        self._page = self._context = self._browser = self._playwright = None
        try:
            if page:
                await page.close()
            if context:
                await context.close()
            if browser:
                await browser.close()
        finally:
            if playwright:
                await playwright.stop()

    @property
    def page(self) -> Page:
        """Get the current page."""
        if not self._page:
            raise BrowserError("No active page. Call start() first.")
        return self._page

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def __aenter__(self) -> "BrowserManager":
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.stop()
