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

"""Pagination, parsing, deduplication and reporting."""

from pagecollect.collector.engine import CollectionEngine, CollectionState, StopReason, collect
from pagecollect.collector.parser import Entry, PageParser, PageResult, RowSelectors, parse
from pagecollect.collector.reporter import Outcome, render_json, render_text, report
from pagecollect.collector.runner import run_collection
from pagecollect.collector.source import BrowserPageSource, FetchedPage, PageSource

__all__ = [
    "BrowserPageSource",
    "CollectionEngine",
    "CollectionState",
    "Entry",
    "FetchedPage",
    "Outcome",
    "PageParser",
    "PageResult",
    "PageSource",
    "RowSelectors",
    "StopReason",
    "collect",
    "parse",
    "render_json",
    "render_text",
    "report",
    "run_collection",
]
