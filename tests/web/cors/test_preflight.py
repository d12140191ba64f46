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
"""Tests for preflight route synthesis."""

from __future__ import annotations

from starlette.requests import Request

from corsroute.web.cors.policy import CorsConfig, compile_policy
from corsroute.web.cors.preflight import PreflightRouteSynthesizer, preflight_handler
from corsroute.web.cors.registry import CorsRegistry


def _group(*methods: str):
    registry = CorsRegistry()
    group = None
    for method in methods:
        group = registry.register("/a", method, compile_policy(CorsConfig(), True, route_method=method))
    return group


class TestPreflightRouteSynthesizer:
    def test_creates_options_route(self):
        group = _group("GET")

        route = PreflightRouteSynthesizer().ensure_preflight_route("/a", group)

        assert route.method == "OPTIONS"
        assert route.path == "/a"
        assert route.synthetic is True
        assert route.handler is preflight_handler
        assert route.policy == group.policy
        assert group.preflight is route

    def test_updates_existing_route_in_place(self):
        registry = CorsRegistry()
        synthesizer = PreflightRouteSynthesizer()
        group = registry.register("/a", "GET", compile_policy(CorsConfig(), True, route_method="GET"))
        first = synthesizer.ensure_preflight_route("/a", group)

        registry.register("/a", "LINK", compile_policy(CorsConfig(), True, route_method="LINK"))
        second = synthesizer.ensure_preflight_route("/a", group)

        assert second is first
        assert "LINK" in first.policy.allowed_methods

    def test_methods_union_with_options(self):
        group = _group("GET", "POST", "PURGE")

        route = PreflightRouteSynthesizer().ensure_preflight_route("/a", group)

        assert route.policy.route_methods == ("GET", "POST", "PURGE", "OPTIONS")

    def test_custom_handler(self):
        async def handler(request):
            return None

        route = PreflightRouteSynthesizer(handler=handler).ensure_preflight_route("/a", _group("GET"))

        assert route.handler is handler


class TestPreflightHandler:
    async def test_returns_empty_ok(self):
        request = Request({"type": "http", "method": "OPTIONS", "path": "/a", "headers": []})

        response = await preflight_handler(request)

        assert response.status_code == 200
        assert response.body == b""
