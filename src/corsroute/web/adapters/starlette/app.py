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
"""Application factory built on Starlette."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from corsroute.core.config import Config
from corsroute.logging.port import LoggingPort
from corsroute.logging.structlog_adapter import StructlogAdapter
from corsroute.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from corsroute.web.adapters.starlette.filters import CorsFilter, RequestLoggingFilter
from corsroute.web.ordering import get_order
from corsroute.web.ports.filter import WebFilter
from corsroute.web.router import CorsRouter


def create_app(
    router: CorsRouter,
    *,
    config: Config | None = None,
    logging_adapter: LoggingPort | None = None,
    filters: Sequence[WebFilter] | None = None,
    extra_routes: Sequence[BaseRoute] | None = None,
    debug: bool = False,
    lifespan: Any = None,
) -> Starlette:
    """Create a Starlette application serving *router*.

    The WebFilter chain holds request logging, the CORS filter and any
    caller-supplied filters, sorted by ``@order``.  When *config* is given,
    *logging_adapter* (structlog by default) is configured from its
    ``corsroute.logging`` section.

    Routes in *extra_routes* are mounted after the router's and carry no CORS
    policy.
    """
    if config is not None:
        (logging_adapter or StructlogAdapter()).configure(config)

    chain: list[WebFilter] = [RequestLoggingFilter(), CorsFilter(), *(filters or [])]
    chain.sort(key=lambda f: get_order(type(f)))

    routes: list[BaseRoute] = [*router.routes(), *(extra_routes or [])]

    app = Starlette(
        debug=debug,
        middleware=[Middleware(WebFilterChainMiddleware, filters=chain)],
        routes=routes,
        lifespan=lifespan,
    )
    app.state.corsroute_route_table = router.table()
    return app
