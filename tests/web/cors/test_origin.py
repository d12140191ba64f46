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
"""Tests for origin allow-list matching."""

from __future__ import annotations

import pytest

from corsroute.web.cors.origin import (
    MatchKind,
    OriginPattern,
    match_origin,
    validate_origin_pattern,
)


class TestMatchOrigin:
    def test_absent_origin(self):
        result = match_origin(["http://a.com"], None)
        assert result.kind is MatchKind.ABSENT
        assert result.value is None

    def test_empty_origin_header_counts_as_absent(self):
        assert match_origin(["*"], "").kind is MatchKind.ABSENT

    def test_star_reflects_request_origin(self):
        result = match_origin(["*"], "http://www.example.com")
        assert result.kind is MatchKind.REFLECTED
        assert result.value == "http://www.example.com"
        assert result.reflected

    def test_star_without_matching_answers_star(self):
        result = match_origin(["*"], "http://www.example.com", match_origin=False)
        assert result.kind is MatchKind.WILDCARD
        assert result.value == "*"

    def test_list_without_matching_is_exposed(self):
        result = match_origin(["http://a.com", "http://b.com"], "http://c.com", match_origin=False)
        assert result.kind is MatchKind.EXPOSED
        assert result.value == "http://a.com http://b.com"

    def test_exact_match(self):
        result = match_origin(["http://a.com", "http://b.com"], "http://b.com")
        assert result.value == "http://b.com"

    def test_no_match(self):
        result = match_origin(["http://a.com"], "http://x.com")
        assert result.kind is MatchKind.NO_MATCH
        assert not result.reflected

    def test_case_sensitive(self):
        assert match_origin(["http://a.com"], "http://A.com").kind is MatchKind.NO_MATCH

    @pytest.mark.parametrize("origin", ["http://www.a.com", "http://x.a.com"])
    def test_wildcard_subdomain_matches(self, origin):
        assert match_origin(["http://*.a.com"], origin).value == origin

    @pytest.mark.parametrize(
        "origin",
        ["http://a.com", "https://www.a.com", "http://x.y.a.com", "http://www.a.com.evil.org", "http://wwwa.com"],
    )
    def test_wildcard_subdomain_rejects(self, origin):
        assert match_origin(["http://*.a.com"], origin).kind is MatchKind.NO_MATCH

    def test_first_structural_match_wins(self):
        origins = ["http://test.example.com", "http://*.b.com", "http://*.a.com"]
        assert match_origin(origins, "http://www.a.com").value == "http://www.a.com"
        assert match_origin(origins, "http://www.b.com").value == "http://www.b.com"

    def test_uses_precompiled_patterns(self):
        patterns = (OriginPattern.parse("http://*.a.com"),)
        result = match_origin(["http://*.a.com"], "http://m.a.com", patterns=patterns)
        assert result.value == "http://m.a.com"


class TestOriginPattern:
    def test_literal_pattern(self):
        pattern = OriginPattern.parse("http://a.com")
        assert not pattern.is_wildcard
        assert pattern.matches("http://a.com")

    def test_wildcard_pattern_split(self):
        pattern = OriginPattern.parse("https://*.a.com:8443")
        assert pattern.is_wildcard
        assert pattern.prefix == "https://"
        assert pattern.suffix == ".a.com:8443"
        assert pattern.matches("https://api.a.com:8443")
        assert not pattern.matches("https://api.a.com")

    def test_scheme_less_wildcard(self):
        assert OriginPattern.parse("*.a.com").matches("www.a.com")


class TestValidateOriginPattern:
    @pytest.mark.parametrize("pattern", ["*", "http://a.com", "http://*.a.com", "*.a.com"])
    def test_accepts(self, pattern):
        validate_origin_pattern(pattern)

    @pytest.mark.parametrize(
        "pattern",
        ["", "http://*.*.a.com", "http://a*.com", "http://www.*", "http://*", "http://a.com/*"],
    )
    def test_rejects(self, pattern):
        with pytest.raises(ValueError):
            validate_origin_pattern(pattern)
