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
Collector configuration for pagecollect.

A single immutable ``CollectorConfig`` is built once per run (from defaults,
environment variables, an optional config file and CLI flags) and passed
into the collection engine.

Example:
    >>> from pagecollect.core.config import CollectorConfig
    >>> config = CollectorConfig(count=30, max_pages=2)
    >>> config.count
    30
"""

from __future__ import annotations

import json
import os
import re
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagecollect.exceptions import ConfigurationError

DEFAULT_START_URL = "https://news.ycombinator.com/newest"
DEFAULT_COUNT = 100
DEFAULT_MAX_PAGES = 15

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_positive(value: Any, default: int) -> int:
    """
    Coerce a count-like value to an integer of at least 1.

    The leading integer of the value is used (``"12abc"`` -> 12). Values
    with no leading integer, or a leading zero value, fall back to
    ``default``; negative values clamp to 1.

    Examples:
        >>> coerce_positive("25", 100)
        25
        >>> coerce_positive("-3", 100)
        1
        >>> coerce_positive("abc", 100)
        100
    """
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, int):
        parsed: Optional[int] = value
    else:
        match = _LEADING_INT.match(str(value)) if value is not None else None
        parsed = int(match.group(1)) if match else None
    if not parsed:
        return default
    return max(1, parsed)


class CollectorConfig(BaseSettings):
    """Configuration for one collection run.

    Environment variables are prefixed with ``PAGECOLLECT_``, e.g.
    ``PAGECOLLECT_COUNT=50`` or ``PAGECOLLECT_MAX_PAGES=5``.

    Attributes:
        count: Number of unique entries to collect
        max_pages: Page budget, the only bound on run length
        headless: Run the browser without a visible window
        json_output: Render the outcome as JSON instead of text
        start_url: URL of the first page
        row_selector: CSS selector whose presence means the listing rendered
        content_timeout_ms: How long to wait for ``row_selector`` (non-fatal)
        navigation_timeout_ms: Navigation timeout (fatal when exceeded)
        soft_reload_delay_seconds: Pause before the single soft reload
        wait_until: Playwright load state that ends a navigation
        browser_type: chromium, firefox or webkit
    """

    count: int = Field(default=DEFAULT_COUNT, description="Target entry count")
    max_pages: int = Field(default=DEFAULT_MAX_PAGES, description="Page budget")
    headless: bool = Field(default=True, description="Run browser headless")
    json_output: bool = Field(default=False, description="Emit JSON output")
    start_url: str = Field(default=DEFAULT_START_URL, description="First page URL")
    row_selector: str = Field(default="tr.athing", description="Content readiness selector")
    content_timeout_ms: int = Field(default=20000, ge=0, description="Content wait timeout")
    navigation_timeout_ms: int = Field(default=30000, ge=0, description="Navigation timeout")
    soft_reload_delay_seconds: float = Field(default=0.5, ge=0.0, description="Delay before soft reload")
    wait_until: str = Field(default="domcontentloaded", description="Navigation wait state")
    browser_type: str = Field(default="chromium", description="Browser engine")

    model_config = SettingsConfigDict(
        env_prefix="PAGECOLLECT_",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @field_validator("count", "max_pages", mode="before")
    @classmethod
    def _coerce_counts(cls, value: Any, info: ValidationInfo) -> int:
        default = DEFAULT_COUNT if info.field_name == "count" else DEFAULT_MAX_PAGES
        return coerce_positive(value, default)

    @field_validator("browser_type")
    @classmethod
    def _check_browser_type(cls, value: str) -> str:
        value = value.lower()
        if value not in ("chromium", "firefox", "webkit"):
            raise ValueError(f"Unsupported browser type: {value}")
        return value

    def with_overrides(self, **overrides: Any) -> "CollectorConfig":
        """Return a new validated config with ``overrides`` applied.

        ``None`` values are ignored so unset CLI flags keep the current value.
        """
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return build_config(data)


def build_config(data: Optional[Dict[str, Any]] = None) -> CollectorConfig:
    """Build a config, converting validation failures to ``ConfigurationError``."""
    try:
        return CollectorConfig(**(data or {}))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def load_config_from_file(path: str) -> CollectorConfig:
    """Load configuration from a YAML or JSON file.

    Keys in the file take precedence over ``PAGECOLLECT_*`` variables.

    Args:
        path: Path to configuration file

    Returns:
        CollectorConfig instance

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    if not os.path.exists(path):
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path, "r") as f:
            if path.endswith(".yaml") or path.endswith(".yml"):
                data = yaml.safe_load(f)
            elif path.endswith(".json"):
                data = json.load(f)
            else:
                raise ConfigurationError(f"Unsupported config file format: {path}")
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not parse config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return build_config(data)
