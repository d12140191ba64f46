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
"""Response-time CORS header computation.

Framework-agnostic: the request needs ``method`` and ``headers.get()``, the
response needs a mutable ``headers`` mapping, ``status_code`` and ``body``.
Starlette's objects satisfy this directly.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

from corsroute.web.cors.origin import MatchKind, match_origin
from corsroute.web.cors.policy import EffectivePolicy, OverrideMode

ALLOW_ORIGIN = "access-control-allow-origin"
ALLOW_CREDENTIALS = "access-control-allow-credentials"
ALLOW_METHODS = "access-control-allow-methods"
ALLOW_HEADERS = "access-control-allow-headers"
MAX_AGE = "access-control-max-age"
EXPOSE_HEADERS = "access-control-expose-headers"
VARY = "vary"


def apply_header(headers: MutableMapping[str, str], name: str, value: str, mode: OverrideMode) -> None:
    """Set *name* on *headers* according to the override mode.

    A header the handler did not set is always written.  Otherwise REPLACE
    overwrites it, PRESERVE leaves it alone and MERGE appends ``,value``.
    """
    existing = headers.get(name)
    if existing is None or mode is OverrideMode.REPLACE:
        headers[name] = value
    elif mode is OverrideMode.MERGE:
        headers[name] = f"{existing},{value}"


def append_vary(headers: MutableMapping[str, str], token: str = "origin") -> None:
    existing = headers.get(VARY)
    if not existing:
        headers[VARY] = token
        return
    present = {t.strip().lower() for t in existing.split(",")}
    if token.lower() in present or "*" in present:
        return
    headers[VARY] = f"{existing},{token}"


class CorsResponseDecorator:
    """Applies an :class:`EffectivePolicy` to a finished response."""

    def decorate(self, request: Any, response: Any, policy: EffectivePolicy) -> bool:
        """Mutate *response* headers in place.

        Returns ``True`` if the policy was applied, ``False`` for a disabled policy.
        """
        if not policy.enabled:
            return False

        headers = response.headers
        mode = policy.override

        if policy.origins:
            self._apply_origin(request.headers.get("origin"), headers, policy)

        apply_header(headers, ALLOW_METHODS, ",".join(policy.allowed_methods), mode)

        if request.method == "OPTIONS":
            if policy.headers:
                apply_header(headers, ALLOW_HEADERS, ",".join(policy.headers), mode)
            if policy.max_age is not None:
                apply_header(headers, MAX_AGE, str(policy.max_age), mode)
            if response.status_code < 400:
                _empty_ok(response)

        if policy.exposed_headers:
            apply_header(headers, EXPOSE_HEADERS, ",".join(policy.exposed_headers), mode)

        return True

    def _apply_origin(self, request_origin: str | None, headers: Any, policy: EffectivePolicy) -> None:
        result = match_origin(policy.origins, request_origin, policy.match_origin, policy.patterns)

        if result.kind in (MatchKind.ABSENT, MatchKind.NO_MATCH):
            if not policy.is_origin_exposed:
                append_vary(headers)
                return
            value = " ".join(policy.origins)
        else:
            value = result.value or ""

        apply_header(headers, ALLOW_ORIGIN, value, policy.override)
        if result.reflected:
            append_vary(headers)
        if policy.credentials:
            apply_header(headers, ALLOW_CREDENTIALS, "true", policy.override)


def _empty_ok(response: Any) -> None:
    response.status_code = 200
    response.body = b""
    response.headers["content-length"] = "0"
