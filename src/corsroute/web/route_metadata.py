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
"""RouteMetadata: one row of the route table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from corsroute.web.cors.policy import BASE_METHODS, DISABLED, EffectivePolicy

# Attribute set on the per-route endpoint wrapper; filters read it back from
# the ASGI scope to find the route that handled a request.
ROUTE_ATTR = "__corsroute_route__"

# Methods a "*" route serves.  OPTIONS stays with the preflight route, or the
# not-found answer, of its path.
ANY_METHODS: tuple[str, ...] = tuple(m for m in BASE_METHODS if m != "OPTIONS")


@dataclass
class RouteMetadata:
    """A registered route and its effective CORS policy.

    ``synthetic`` marks preflight routes created by the router rather than
    the application.  Their ``policy`` is updated in place as sibling routes
    join the path.
    """

    path: str
    method: str
    handler: Any
    policy: EffectivePolicy = DISABLED
    synthetic: bool = False
    name: str = ""

    def handles(self, method: str) -> bool:
        """Whether a *method* request is dispatched here rather than answered with 405."""
        method = method.upper()
        if self.method == "*":
            return method in ANY_METHODS
        return self.method == method or (self.method == "GET" and method == "HEAD")


def route_for(scope: Any) -> RouteMetadata | None:
    """Return the RouteMetadata of the endpoint the router dispatched to, if any."""
    endpoint = scope.get("endpoint") if hasattr(scope, "get") else None
    return getattr(endpoint, ROUTE_ATTR, None)
