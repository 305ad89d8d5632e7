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
Top-level collection run.

Owns the browser for the duration of one run and guarantees two things on
every path: the browser is closed, and the caller gets an ``Outcome``. Hard
failures (browser launch, navigation, DOM access) become an outcome with
``ok=False`` and ``error`` set, carrying whatever was collected before the
failure.
"""

from __future__ import annotations

from typing import Callable, Optional

from pagecollect.collector.engine import CollectionEngine, CollectionState
from pagecollect.collector.parser import PageParser
from pagecollect.collector.reporter import Outcome, report
from pagecollect.collector.source import BrowserPageSource
from pagecollect.core.browser import BrowserManager
from pagecollect.core.config import CollectorConfig
from pagecollect.core.page import PageController
from pagecollect.exceptions import PageCollectError
from pagecollect.utils.logger import logger


async def run_collection(
    config: CollectorConfig,
    parser: Optional[PageParser] = None,
    browser_factory: Callable[..., BrowserManager] = BrowserManager,
) -> Outcome:
    """
    Launch a browser, collect entries and release the browser.

    Args:
        config: Run configuration
        parser: Page parser, defaults to the Hacker News layout
        browser_factory: Builds the BrowserManager, replaceable in tests

    Returns:
        The run outcome; never raises for pagecollect errors
    """
    outcome: Optional[Outcome] = None
    logger.info(
        f"Collecting {config.count} entries from {config.start_url} "
        f"(max {config.max_pages} pages)"
    )
    try:
        async with browser_factory(
            headless=config.headless,
            browser_type=config.browser_type,
        ) as manager:
            controller = PageController(
                manager.page,
                navigation_timeout_ms=config.navigation_timeout_ms,
                wait_until=config.wait_until,
            )
            engine = CollectionEngine(config, BrowserPageSource(controller, config), parser)
            try:
                outcome = await engine.run()
            except PageCollectError as e:
                logger.error(f"Collection aborted: {e}")
                outcome = report(
                    engine.state, config.count, config.max_pages, ok=False, error=str(e)
                )
    except PageCollectError as e:
        if outcome is not None:
            logger.warning(f"Browser cleanup failed after collection: {e}")
            return outcome
        logger.error(f"Collection aborted: {e}")
        state = CollectionState(requested_count=config.count, max_pages=config.max_pages)
        return report(state, config.count, config.max_pages, ok=False, error=str(e))
    return outcome
