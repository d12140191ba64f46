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
"""CORS policy resolution, preflight synthesis, and response decoration."""

from corsroute.web.cors.origin import MatchKind, OriginMatch, OriginPattern, match_origin
from corsroute.web.cors.policy import (
    BASE_METHODS,
    DISABLED,
    CorsConfig,
    CorsOptions,
    EffectivePolicy,
    OverrideMode,
    compile_policy,
    resolve_defaults,
)
from corsroute.web.cors.registry import CorsRegistry, PathCorsGroup, normalize_path
from corsroute.web.cors.decorator import CorsResponseDecorator, apply_header, append_vary
from corsroute.web.cors.preflight import PreflightRouteSynthesizer, preflight_handler

__all__ = [
    "BASE_METHODS",
    "DISABLED",
    "CorsConfig",
    "CorsOptions",
    "CorsRegistry",
    "CorsResponseDecorator",
    "EffectivePolicy",
    "MatchKind",
    "OriginMatch",
    "OriginPattern",
    "OverrideMode",
    "PathCorsGroup",
    "PreflightRouteSynthesizer",
    "append_vary",
    "apply_header",
    "compile_policy",
    "match_origin",
    "normalize_path",
    "preflight_handler",
    "resolve_defaults",
]
