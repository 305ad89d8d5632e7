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
Result reporting.

Builds the final ``Outcome`` of a run from the engine state and renders it
either as a JSON document or as numbered text lines.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from pagecollect.collector.parser import Entry

if TYPE_CHECKING:
    from pagecollect.collector.engine import CollectionState

TEXT_HEADER = "Timestamps (newest → oldest, raw from source):"


@dataclass(frozen=True)
class Outcome:
    """
    Immutable result of one collection run.

    Attributes:
        ok: Whether at least ``requested`` entries were collected
        requested: Requested entry count
        collected: Number of entries retained by the run
        pages: Pages visited
        max_pages: Page budget
        items: Collected entries in first-seen order, at most ``requested``
        error: Message of the failure that aborted the run, if any
        duplicates: Ids seen but not collected
    """

    ok: bool
    requested: int
    collected: int
    pages: int
    max_pages: int
    items: Tuple[Entry, ...] = ()
    error: Optional[str] = None
    duplicates: int = 0

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the machine-readable record."""
        data: Dict[str, Any] = {
            "ok": self.ok,
            "summary": {
                "requested": self.requested,
                "collected": self.collected,
                "pages": self.pages,
                "maxPages": self.max_pages,
            },
            "items": [item.to_dict() for item in self.items],
        }
        if self.error is not None:
            data["error"] = self.error
        return data


def report(
    state: "CollectionState",
    requested_count: int,
    max_pages: int,
    ok: bool,
    error: Optional[str] = None,
) -> Outcome:
    """
    Build the outcome of a run from its final state.

    Args:
        state: Final (or partial, on failure) collection state
        requested_count: Requested entry count
        max_pages: Page budget
        ok: Whether the run succeeded
        error: Failure message for runs aborted by an error

    Returns:
        Outcome with items truncated to ``requested_count``
    """
    return Outcome(
        ok=ok,
        requested=requested_count,
        collected=len(state.collected),
        pages=state.pages_visited,
        max_pages=max_pages,
        items=tuple(state.collected[:requested_count]),
        error=error,
        duplicates=len(state.seen_ids) - len(state.collected),
    )


def render_json(outcome: Outcome) -> str:
    """Render the outcome as indented JSON."""
    return json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False)


def format_item(ordinal: int, entry: Entry) -> str:
    """Format one numbered entry line, e.g. ``  1. 2024-05-01T10:00:00  4100  -  Title``."""
    return (
        f"{ordinal:>3}. {entry.timestamp or '(no-iso)'}  "
        f"{entry.id or '(no-id)'}  -  {entry.title}"
    )


def render_text(outcome: Outcome) -> List[str]:
    """
    Render the outcome as text lines.

    The last line is ``true`` on success and an advisory to raise
    ``--max-pages`` on a shortfall. A run aborted by an error renders as the
    single line ``false``; the error itself goes to stderr.
    """
    if outcome.error is not None:
        return ["false"]
    lines = [TEXT_HEADER]
    lines.extend(f"  {format_item(i, entry)}" for i, entry in enumerate(outcome.items, 1))
    lines.append(
        f"Collected: {outcome.collected} | Pages: {outcome.pages} | Dups: {outcome.duplicates}"
    )
    if outcome.ok:
        lines.append("true")
    else:
        lines.append(
            f"Only {outcome.collected}/{outcome.requested}. Consider increasing --max-pages."
        )
    return lines
