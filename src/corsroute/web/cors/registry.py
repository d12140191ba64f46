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
"""Path-level CORS consistency.

Every CORS-enabled route sharing a path must resolve to the same policy, since
a single preflight route answers for all of them.  :class:`CorsRegistry` keeps
one :class:`PathCorsGroup` per normalized path and rejects a registration
whose policy differs from the group's.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from corsroute.kernel.exceptions import ConfigurationConflictException
from corsroute.web.cors.policy import EffectivePolicy

if TYPE_CHECKING:
    from corsroute.web.route_metadata import RouteMetadata

logger = structlog.get_logger("corsroute.web.cors")

_PARAM_RE = re.compile(r"\{[^}:]*(:[^}]+)?\}")


def normalize_path(path: str) -> str:
    """Collapse path-parameter names so ``/{id}`` and ``/{item_id}`` share a key."""
    return _PARAM_RE.sub(lambda m: "{" + (m.group(1) or "") + "}", path)


@dataclass
class PathCorsGroup:
    """CORS-enabled routes on one path and the preflight route answering for them."""

    path: str
    policy: EffectivePolicy
    methods: list[str] = field(default_factory=list)
    preflight: RouteMetadata | None = None

    def add_method(self, method: str) -> None:
        # a "*" route adds no verb of its own
        if method != "*" and method not in self.methods:
            self.methods.append(method)

    @property
    def preflight_policy(self) -> EffectivePolicy:
        return self.policy.with_route_methods([*self.methods, "OPTIONS"])


class CorsRegistry:
    """Registry of :class:`PathCorsGroup` keyed by normalized path.

    Populated while the route table is being built; read-only afterwards.
    """

    def __init__(self) -> None:
        self._groups: dict[str, PathCorsGroup] = {}

    def get(self, path: str) -> PathCorsGroup | None:
        return self._groups.get(normalize_path(path))

    def groups(self) -> list[PathCorsGroup]:
        return list(self._groups.values())

    def __len__(self) -> int:
        return len(self._groups)

    def register(self, path: str, method: str, policy: EffectivePolicy) -> PathCorsGroup | None:
        """Add a route's policy to its path group.

        Returns the group, or ``None`` for a disabled policy (such routes never
        take part in path-level checks).

        Raises:
            ConfigurationConflictException: The path already carries a
                different policy.
        """
        if not policy.enabled:
            return None

        method = method.upper()
        key = normalize_path(path)
        group = self._groups.get(key)

        if group is None:
            group = PathCorsGroup(path=path, policy=policy)
            self._groups[key] = group
            logger.debug("cors_group_created", path=path, method=method)
        elif group.policy != policy:
            logger.error("cors_conflict", path=path, method=method, existing_methods=group.methods)
            raise ConfigurationConflictException(method, path)

        group.add_method(method)
        return group
