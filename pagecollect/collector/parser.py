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
Page parsing for paginated listings.

Turns the rendered HTML of one listing page into a ``PageResult``: the valid
entries in page order plus the href of the "more" link, if any. Parsing is a
pure function of the HTML, so it can be tested against static fixtures and
applied unchanged to a live page through ``PageController.extract``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from bs4 import BeautifulSoup
from bs4.element import Tag


@dataclass(frozen=True)
class Entry:
    """One collected listing row. Identity is ``id``."""

    id: str
    title: str
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON item shape."""
        return {"id": self.id, "title": self.title, "iso": self.timestamp}


@dataclass(frozen=True)
class PageResult:
    """Entries found on one page and the token of the page after it."""

    entries: Tuple[Entry, ...] = ()
    next_page_token: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.entries


@dataclass(frozen=True)
class RowSelectors:
    """
    CSS selectors describing the listing layout.

    Defaults match the Hacker News listing markup, where each story is a
    ``tr.athing`` row and its age lives in the following ``tr``.

    Attributes:
        row: Selector for one candidate row; its ``id`` attribute is the entry id
        title: Selector, relative to the row, for the title element
        age: Selector, relative to the row's next sibling, for the age element
        age_attribute: Machine-readable timestamp attribute on the age element
        more_link: Selector for the "more" pagination link
    """

    row: str = "tr.athing"
    title: str = "span.titleline a"
    age: str = "span.age"
    age_attribute: str = "title"
    more_link: str = "a.morelink"


class PageParser:
    """
    Extracts entries and the next-page token from listing HTML.

    Example:
        >>> parser = PageParser()
        >>> result = parser.parse(html)
        >>> [e.id for e in result.entries]
        ['41000001', '41000002']
    """

    def __init__(self, selectors: Optional[RowSelectors] = None, features: str = "html.parser") -> None:
        self.selectors = selectors or RowSelectors()
        self.features = features

    def parse(self, html: str) -> PageResult:
        """
        Parse one page of listing HTML.

        Rows missing an id, a title or a timestamp are skipped silently.

        Args:
            html: Rendered page HTML

        Returns:
            PageResult with entries in page order
        """
        soup = BeautifulSoup(html or "", self.features)

        entries = []
        for row in soup.select(self.selectors.row):
            entry = self._parse_row(row)
            if entry is not None:
                entries.append(entry)

        return PageResult(entries=tuple(entries), next_page_token=self._next_token(soup))

    def _parse_row(self, row: Tag) -> Optional[Entry]:
        entry_id = (row.get("id") or "").strip()

        title_el = row.select_one(self.selectors.title)
        title = title_el.get_text().strip() if title_el is not None else ""

        timestamp = ""
        companion = row.find_next_sibling()
        age_el = companion.select_one(self.selectors.age) if companion is not None else None
        if age_el is not None:
            timestamp = (age_el.get(self.selectors.age_attribute) or "").strip()
            if not timestamp:
                timestamp = age_el.get_text().strip()

        if not (entry_id and title and timestamp):
            return None
        return Entry(id=entry_id, title=title, timestamp=timestamp)

    def _next_token(self, soup: BeautifulSoup) -> Optional[str]:
        more = soup.select_one(self.selectors.more_link)
        if more is None:
            return None
        return more.get("href") or None


_default_parser = PageParser()


def parse(html: str) -> PageResult:
    """Parse ``html`` with the default Hacker News selectors."""
    return _default_parser.parse(html)
