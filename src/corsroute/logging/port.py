# Copyright 2026 Firefly Software Solutions Inc.
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
"""Logging port accepted by ``create_app``."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from corsroute.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    """What ``create_app`` needs from a logging backend.

    The app calls :meth:`configure` once with its :class:`Config` before the
    filter chain is built; the router, registry and filters log through
    structlog loggers named ``corsroute.web`` and ``corsroute.web.cors``.
    """

    def configure(self, config: Config) -> None:
        """Apply the ``corsroute.logging`` section: levels, renderer."""
        ...

    def get_logger(self, name: str) -> Any: ...

    def set_level(self, name: str, level: str) -> None:
        """Change one named logger's level, e.g. ``corsroute.web.cors`` to ``DEBUG``."""
        ...
