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
pagecollect - Collect unique, time-ordered entries from paginated listings.

A Playwright-driven browser loads each page, a BeautifulSoup parser pulls
out the entries, and the collection engine deduplicates them until a target
count, a page budget, or the end of the listing is reached.
"""

__version__ = "26.10.0"
__license__ = "Apache-2.0"

from pagecollect.collector import (
    CollectionEngine,
    CollectionState,
    Entry,
    Outcome,
    PageParser,
    PageResult,
    collect,
    parse,
    report,
    run_collection,
)
from pagecollect.core.browser import BrowserManager
from pagecollect.core.config import CollectorConfig, load_config_from_file
from pagecollect.core.page import ContentStatus, PageController
from pagecollect.exceptions import (
    BrowserError,
    ConfigurationError,
    NavigationError,
    PageCollectError,
    PageError,
)

__all__ = [
    # Collection
    "CollectionEngine",
    "CollectionState",
    "Entry",
    "Outcome",
    "PageParser",
    "PageResult",
    "collect",
    "parse",
    "report",
    "run_collection",
    # Core
    "BrowserManager",
    "CollectorConfig",
    "ContentStatus",
    "PageController",
    "load_config_from_file",
    # Errors
    "BrowserError",
    "ConfigurationError",
    "NavigationError",
    "PageCollectError",
    "PageError",
]
