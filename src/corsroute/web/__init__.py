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
"""corsroute web layer: route table with CORS policies and the Starlette adapter.

Framework-agnostic types (policies, router metadata, filters) are exported
directly; the Starlette adapter is re-exported for convenience.
"""

from corsroute.web.adapters.starlette import CorsFilter, RequestLoggingFilter, create_app
from corsroute.web.cors import (
    CorsConfig,
    CorsOptions,
    CorsRegistry,
    CorsResponseDecorator,
    EffectivePolicy,
    OverrideMode,
    PathCorsGroup,
    PreflightRouteSynthesizer,
    compile_policy,
    match_origin,
)
from corsroute.web.filters import OncePerRequestFilter
from corsroute.web.ports.filter import WebFilter
from corsroute.web.route_metadata import RouteMetadata
from corsroute.web.router import CorsRouter

__all__ = [
    # Framework-agnostic
    "CorsConfig",
    "CorsOptions",
    "CorsRegistry",
    "CorsResponseDecorator",
    "CorsRouter",
    "EffectivePolicy",
    "OncePerRequestFilter",
    "OverrideMode",
    "PathCorsGroup",
    "PreflightRouteSynthesizer",
    "RouteMetadata",
    "WebFilter",
    "compile_policy",
    "match_origin",
    # Default adapter (Starlette)
    "CorsFilter",
    "RequestLoggingFilter",
    "create_app",
]
