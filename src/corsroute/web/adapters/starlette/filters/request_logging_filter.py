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
"""Request logging filter: one structured line per request."""

from __future__ import annotations

import time
from typing import cast

import structlog
from starlette.requests import Request
from starlette.responses import Response

from corsroute.web.filters import OncePerRequestFilter
from corsroute.web.ordering import HIGHEST_PRECEDENCE, order
from corsroute.web.ports.filter import CallNext
from corsroute.web.route_metadata import route_for

logger = structlog.get_logger("corsroute.web")


@order(HIGHEST_PRECEDENCE + 200)
class RequestLoggingFilter(OncePerRequestFilter):
    """Logs method, path, status, duration and the matched route."""

    async def do_filter(self, request: Request, call_next: CallNext) -> Response:
        start = time.perf_counter()

        try:
            response = cast(Response, await call_next(request))
        except Exception as exc:
            logger.error(
                "http_request_failed",
                method=request.method,
                path=request.url.path,
                duration_ms=_elapsed_ms(start),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise

        route = route_for(request.scope)
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=_elapsed_ms(start),
            route=f"{route.method} {route.path}" if route is not None else None,
            preflight=route.synthetic if route is not None else False,
        )
        return response


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
