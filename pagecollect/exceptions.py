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

"""Exception hierarchy for pagecollect."""


class PageCollectError(Exception):
    """Base class for all errors raised by pagecollect."""


class BrowserError(PageCollectError):
    """Browser could not be launched, configured or shut down."""


class NavigationError(PageCollectError):
    """Navigating to (or reloading) a page failed.

    Fatal to a collection run: the engine never retries it.
    """


class PageError(PageCollectError):
    """A page-level operation such as reading the DOM failed."""


class ConfigurationError(PageCollectError):
    """Invalid or unreadable configuration."""
