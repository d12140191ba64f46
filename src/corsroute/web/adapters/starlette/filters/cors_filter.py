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
"""CORS filter: applies the matched route's policy to its response."""

from __future__ import annotations

from typing import cast

import structlog
from starlette.requests import Request
from starlette.responses import Response

from corsroute.web.cors.decorator import CorsResponseDecorator
from corsroute.web.filters import OncePerRequestFilter
from corsroute.web.ordering import HIGHEST_PRECEDENCE, order
from corsroute.web.ports.filter import CallNext
from corsroute.web.route_metadata import route_for

logger = structlog.get_logger("corsroute.web.cors")


@order(HIGHEST_PRECEDENCE + 300)
class CorsFilter(OncePerRequestFilter):
    """Decorates responses with CORS headers once the route handler has run.

    Requests that matched no route, only matched its path (405), or hit a
    route without CORS pass through unchanged.  If the handler raises, the
    exception propagates and nothing is decorated.
    """

    def __init__(self, decorator: CorsResponseDecorator | None = None) -> None:
        self._decorator = decorator or CorsResponseDecorator()

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        response = cast(Response, await call_next(request))

        route = route_for(request.scope)
        if route is None or not route.handles(request.method):
            return response

        if self._decorator.decorate(request, response, route.policy):
            logger.debug(
                "cors_applied",
                method=request.method,
                path=request.url.path,
                route=f"{route.method} {route.path}",
                preflight=route.synthetic,
                origin=request.headers.get("origin"),
            )
        return response
