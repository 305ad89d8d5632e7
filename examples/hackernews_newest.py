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
Hacker News /newest Collector

Collects the newest Hacker News submissions across as many "More" pages as
needed, then checks how far back in time the collection reaches.

Performance strategy:
  - One browser, one page, strictly sequential navigation.
  - Entries are deduplicated by item id, because new submissions shift the
    listing while pages are being visited.

Prerequisites:
    pip install -e .
    playwright install chromium
"""

import asyncio
import json
from datetime import datetime

from pagecollect import CollectorConfig, run_collection

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
COUNT = 60
MAX_PAGES = 4


def _parse_timestamp(value: str):
    """HN age titles look like ``2026-10-18T12:00:00 1792324800``."""
    try:
        return datetime.fromisoformat(value.split()[0])
    except (ValueError, IndexError):
        return None


async def main() -> None:
    """Entry point: collect, summarize and save results."""
    config = CollectorConfig(count=COUNT, max_pages=MAX_PAGES)
    outcome = await run_collection(config)

    print(f"ok={outcome.ok} collected={outcome.collected} pages={outcome.pages}")
    if outcome.error:
        print(f"error: {outcome.error}")

    stamps = [t for t in (_parse_timestamp(e.timestamp) for e in outcome.items) if t]
    if stamps:
        print(f"Newest: {max(stamps).isoformat()}")
        print(f"Oldest: {min(stamps).isoformat()}")
        print(f"Window: {max(stamps) - min(stamps)}")

    filename = f"hn_newest_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    with open(filename, "w") as fh:
        json.dump(outcome.to_dict(), fh, indent=2, ensure_ascii=False)
    print(f"Results saved to {filename}")


if __name__ == "__main__":
    asyncio.run(main())
