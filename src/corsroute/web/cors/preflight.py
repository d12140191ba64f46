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
"""Synthesized ``OPTIONS`` routes answering CORS preflight requests."""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any

import structlog
from starlette.requests import Request
from starlette.responses import Response

from corsroute.web.cors.registry import PathCorsGroup
from corsroute.web.route_metadata import RouteMetadata

logger = structlog.get_logger("corsroute.web.cors")

PreflightHandler = Callable[[Request], Coroutine[Any, Any, Response]]


async def preflight_handler(request: Request) -> Response:
    """Empty 200; the CORS headers are added when the response is finalized."""
    return Response(status_code=200)


class PreflightRouteSynthesizer:
    """Creates, and keeps current, one ``OPTIONS`` route per CORS path group."""

    def __init__(self, handler: PreflightHandler = preflight_handler) -> None:
        self._handler = handler

    def ensure_preflight_route(self, path: str, group: PathCorsGroup) -> RouteMetadata:
        """Return the group's preflight route, creating it on first use.

        The route's policy is the group's canonical policy with the union of
        the member methods; it is refreshed on every call.
        """
        policy = group.preflight_policy
        if group.preflight is not None:
            group.preflight.policy = policy
            return group.preflight

        group.preflight = RouteMetadata(
            path=path,
            method="OPTIONS",
            handler=self._handler,
            policy=policy,
            synthetic=True,
            name="cors_preflight",
        )
        logger.debug("cors_preflight_route_synthesized", path=path, methods=list(policy.allowed_methods))
        return group.preflight
