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
"""CorsRouter: route table builder with per-route CORS policies.

Registration runs synchronously while the application is assembled.  For each
route the router compiles the effective policy, checks it against siblings on
the same path, and keeps a synthesized ``OPTIONS`` route per CORS path.
"""

from __future__ import annotations

import functools
from typing import Any

import structlog
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount, Route

from corsroute.core.config import Config
from corsroute.kernel.exceptions import ConflictException
from corsroute.web.cors.policy import (
    CorsConfig,
    CorsOptions,
    RouteCors,
    compile_policy,
    resolve_defaults,
)
from corsroute.web.cors.preflight import PreflightRouteSynthesizer
from corsroute.web.cors.registry import CorsRegistry, normalize_path
from corsroute.web.route_metadata import ANY_METHODS, ROUTE_ATTR, RouteMetadata

logger = structlog.get_logger("corsroute.web")

_CONFIG_KEY = "corsroute.web.cors"


class CorsRouter:
    """Collects route handlers and resolves their CORS policies at decoration time.

    Usage::

        router = CorsRouter(cors={"origin": ["https://app.example.com"]})

        @router.get("/items", cors={"credentials": True})
        async def list_items(request: Request) -> JSONResponse:
            ...

        app = create_app(router)

    ``cors`` on the router sets the connection-wide defaults: ``None`` or
    ``False`` leaves CORS off unless a route asks for it, ``True`` enables the
    built-in defaults, and a mapping enables them with overrides applied.
    """

    def __init__(
        self,
        prefix: str = "",
        cors: bool | CorsConfig | CorsOptions | dict[str, Any] | None = None,
        synthesizer: PreflightRouteSynthesizer | None = None,
    ) -> None:
        self._prefix = prefix.rstrip("/")
        self._defaults = resolve_defaults(cors)
        self._routes: list[RouteMetadata] = []
        self._keys: dict[tuple[str, str], RouteMetadata] = {}
        self._registry = CorsRegistry()
        self._synthesizer = synthesizer or PreflightRouteSynthesizer()

    @classmethod
    def from_config(cls, config: Config, prefix: str = "") -> CorsRouter:
        """Build a router whose CORS defaults come from ``corsroute.web.cors``.

        A missing section leaves CORS off; ``enabled: false`` does too.
        """
        if not config.has(_CONFIG_KEY):
            return cls(prefix=prefix)
        return cls(prefix=prefix, cors=config.bind(CorsOptions))

    @property
    def defaults(self) -> CorsConfig:
        return self._defaults

    @property
    def registry(self) -> CorsRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Public HTTP-method decorators
    # ------------------------------------------------------------------

    def get(self, path: str, **kwargs: Any):
        return self.route("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any):
        return self.route("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any):
        return self.route("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any):
        return self.route("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any):
        return self.route("DELETE", path, **kwargs)

    def options(self, path: str, **kwargs: Any):
        return self.route("OPTIONS", path, **kwargs)

    def route(self, method: str, path: str, *, cors: RouteCors = None, name: str = ""):
        """Register the decorated function as the handler for *method* *path*."""

        def decorator(func):
            self.add_route(method, path, func, cors=cors, name=name)
            return func

        return decorator

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_route(
        self,
        method: str,
        path: str,
        handler: Any,
        *,
        cors: RouteCors = None,
        name: str = "",
    ) -> RouteMetadata:
        """Register a route, compiling and validating its CORS policy.

        Raises:
            PolicyCompilationException: *cors* is malformed.
            ConfigurationConflictException: Another CORS route on the same path
                uses a different policy.
            ConflictException: *method* *path* is already registered.
        """
        method = method.upper()
        full_path = self._prefix + path
        key = (method, normalize_path(full_path))

        if key in self._keys:
            existing = self._keys[key]
            reason = "CORS preflight route" if existing.synthetic else "route"
            raise ConflictException(
                f"Cannot add route, a {reason} is already registered: {method} {full_path}",
                code="ROUTE_DUPLICATE",
                context={"method": method, "path": full_path},
            )

        policy = compile_policy(self._defaults, cors, method)
        group = self._registry.register(full_path, method, policy)

        meta = RouteMetadata(
            path=full_path,
            method=method,
            handler=handler,
            policy=policy,
            name=name or getattr(handler, "__name__", ""),
        )
        self._add(key, meta)
        logger.debug("route_registered", method=method, path=full_path, cors=policy.enabled)

        # An application OPTIONS route on the path answers preflights itself.
        options_key = ("OPTIONS", key[1])
        if group is not None and (options_key not in self._keys or self._keys[options_key].synthetic):
            created = group.preflight is None
            preflight = self._synthesizer.ensure_preflight_route(group.path, group)
            if created:
                self._add(options_key, preflight)

        return meta

    def _add(self, key: tuple[str, str], meta: RouteMetadata) -> None:
        self._keys[key] = meta
        self._routes.append(meta)

    # ------------------------------------------------------------------
    # Metadata access
    # ------------------------------------------------------------------

    def table(self) -> list[RouteMetadata]:
        """All routes in registration order, synthesized preflight routes included."""
        return list(self._routes)

    def lookup(self, method: str, path: str) -> RouteMetadata | None:
        return self._keys.get((method.upper(), normalize_path(path)))

    # ------------------------------------------------------------------
    # Starlette integration
    # ------------------------------------------------------------------

    def routes(self) -> list[Route]:
        """Starlette routes for the table.

        Each path without an ``OPTIONS`` route gets a trailing ``OPTIONS``
        route answering 404, so a preflight to a path without CORS is treated
        as an unknown path rather than a 405.
        """
        routes = [
            Route(
                meta.path,
                endpoint=_endpoint(meta),
                methods=list(ANY_METHODS) if meta.method == "*" else [meta.method],
                name=meta.name or None,
            )
            for meta in self._routes
        ]

        answered = {normalize_path(meta.path) for meta in self._routes if meta.method == "OPTIONS"}
        for meta in self._routes:
            key = normalize_path(meta.path)
            if key not in answered:
                answered.add(key)
                routes.append(
                    Route(meta.path, endpoint=_options_not_found, methods=["OPTIONS"], include_in_schema=False)
                )
        return routes

    def to_starlette_routes(self) -> Mount:
        """Convert the route table into a Starlette ``Mount``."""
        return Mount("", routes=self.routes())


def _endpoint(meta: RouteMetadata):
    """Wrap the handler so each route, even one sharing a handler, has its own endpoint."""
    func = meta.handler

    @functools.wraps(func)
    async def wrapper(request: Request):
        return await func(request)

    setattr(wrapper, ROUTE_ATTR, meta)
    return wrapper


async def _options_not_found(request: Request) -> Response:
    raise HTTPException(status_code=404)
